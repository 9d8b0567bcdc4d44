"""Google Sheets values API adapter."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from tuition_lookup.adapters.sheets.base import AbstractGridSource
from tuition_lookup.core.errors import UpstreamUnavailableError
from tuition_lookup.utils.simple_cache import build_cache_key

logger = logging.getLogger(__name__)

# Upstream error bodies are logged, truncated, and never returned to clients
_MAX_LOGGED_BODY_CHARS = 500


class GoogleSheetsClient(AbstractGridSource):
    """Reads one tab of a spreadsheet with an API key.

    Issues a single ``GET {base_url}/spreadsheets/{id}/values/{tab}?key=...``
    per call, bounded by ``timeout_seconds``. No retries.
    """

    def __init__(
        self,
        api_key: str,
        sheet_id: str,
        sheet_name: str,
        base_url: str = "https://sheets.googleapis.com/v4",
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_key: Google API key.
            sheet_id: Spreadsheet identifier.
            sheet_name: Tab name; URL-encoded when building the request.
            base_url: Sheets API base URL.
            timeout_seconds: Overall timeout for the request.
            transport: Optional httpx transport (tests use ``httpx.MockTransport``).
        """
        self._api_key = api_key
        self.sheet_id = sheet_id
        self.sheet_name = sheet_name
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    @property
    def cache_key(self) -> str:
        return build_cache_key(self.base_url, self.sheet_id, self.sheet_name)

    @property
    def values_url(self) -> str:
        return (
            f"{self.base_url}/spreadsheets/{quote(self.sheet_id, safe='')}"
            f"/values/{quote(self.sheet_name, safe='')}"
        )

    async def fetch_grid(self) -> list[list[str]]:
        """Fetch the tab's ``values`` grid.

        Returns:
            list[list[str]]: Grid with every cell coerced to ``str``; empty
                when the tab has no values.

        Raises:
            UpstreamUnavailableError: On transport failure, timeout, non-2xx
                status or an unparseable body.
        """
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.get(self.values_url, params={"key": self._api_key})
        except httpx.TimeoutException as exc:
            logger.error(
                "sheets.timeout",
                extra={"timeout_s": self.timeout_seconds, "error_type": type(exc).__name__},
            )
            raise UpstreamUnavailableError(
                details={"reason": "timeout", "error_type": type(exc).__name__}
            ) from exc
        except httpx.HTTPError as exc:
            logger.error(
                "sheets.transport_error",
                extra={"error_type": type(exc).__name__},
            )
            raise UpstreamUnavailableError(
                details={"reason": "transport_error", "error_type": type(exc).__name__}
            ) from exc

        if not response.is_success:
            logger.error(
                "sheets.upstream_error",
                extra={
                    "upstream_status": response.status_code,
                    "upstream_body": response.text[:_MAX_LOGGED_BODY_CHARS],
                },
            )
            raise UpstreamUnavailableError(
                details={"reason": "bad_status", "upstream_status": response.status_code}
            )

        try:
            payload: Any = response.json()
        except ValueError as exc:
            logger.error("sheets.invalid_json", extra={"upstream_status": response.status_code})
            raise UpstreamUnavailableError(details={"reason": "invalid_json"}) from exc

        if not isinstance(payload, dict):
            raise UpstreamUnavailableError(details={"reason": "unexpected_payload"})

        values = payload.get("values")
        if values is None:
            values = []
        if not isinstance(values, list):
            logger.error("sheets.unexpected_payload", extra={"values_type": type(values).__name__})
            raise UpstreamUnavailableError(details={"reason": "unexpected_payload"})

        grid = [
            ["" if c is None else str(c) for c in row]
            for row in values
            if isinstance(row, list)
        ]
        logger.info("sheets.fetched", extra={"row_count": len(grid)})
        return grid
