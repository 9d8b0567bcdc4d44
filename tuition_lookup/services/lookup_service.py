"""Tuition lookup service.

Runs the data half of a lookup once the HTTP layer has passed rate limiting,
configuration and input validation:

    fetch grid (cached) → reject empty → match → reject no match → map
"""

from __future__ import annotations

import logging
from typing import Mapping

from tuition_lookup.adapters.sheets.base import AbstractGridSource
from tuition_lookup.core.errors import NoDataError, NoMatchError
from tuition_lookup.schemas.columns import ColumnSchema
from tuition_lookup.schemas.lookup import LookupResponse
from tuition_lookup.services.matcher import match_rows
from tuition_lookup.services.result_mapper import to_student_result
from tuition_lookup.utils.simple_cache import Grid, SimpleTTLCache

logger = logging.getLogger(__name__)


class LookupService:
    """Looks up tuition records in a sheet grid.

    Attributes:
        grid_source: Adapter that fetches the sheet.
        cache: Short-lived cache of fetched grids.
        schema: Column layout of the sheet.
        max_results: Cap on returned rows.
        ignore_diacritics: Fold tone marks when matching.
    """

    def __init__(
        self,
        grid_source: AbstractGridSource,
        cache: SimpleTTLCache,
        schema: ColumnSchema,
        *,
        max_results: int = 5,
        ignore_diacritics: bool = True,
    ) -> None:
        self.grid_source = grid_source
        self.cache = cache
        self.schema = schema
        self.max_results = max_results
        self.ignore_diacritics = ignore_diacritics

    async def _get_grid(self) -> Grid:
        cache_key = self.grid_source.cache_key
        grid = self.cache.get(cache_key)
        if grid is not None:
            return grid

        grid = await self.grid_source.fetch_grid()
        # Empty grids are not cached so a freshly filled sheet shows up at once
        if len(grid) >= 2:
            self.cache.set(cache_key, grid)
        return grid

    async def lookup(self, query: Mapping[str, str]) -> LookupResponse:
        """Find the records matching every field in ``query``.

        Args:
            query: Sanitized values keyed by field name; must contain each of
                ``schema.query_fields``.

        Returns:
            LookupResponse with at least one result.

        Raises:
            UpstreamUnavailableError: If the sheet cannot be fetched.
            NoDataError: If the sheet has no rows beyond the header.
            NoMatchError: If no row matches.
        """
        grid = await self._get_grid()

        if len(grid) < 2:
            logger.warning("lookup.no_data", extra={"row_count": len(grid)})
            raise NoDataError(details={"row_count": len(grid)})

        matched = match_rows(
            grid,
            query,
            self.schema,
            ignore_diacritics=self.ignore_diacritics,
        )

        if not matched:
            logger.info(
                "lookup.no_match",
                extra={"row_count": len(grid) - 1, "fields": list(query)},
            )
            raise NoMatchError(details={"row_count": len(grid) - 1, "fields": list(query)})

        results = [to_student_result(row, self.schema) for row in matched[: self.max_results]]
        logger.info(
            "lookup.success",
            extra={
                "matched": len(matched),
                "returned": len(results),
                "schema": self.schema.version,
            },
        )
        return LookupResponse(results=results)
