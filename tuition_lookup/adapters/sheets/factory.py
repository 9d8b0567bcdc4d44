"""Factory for the configured grid source."""

import logging

from tuition_lookup.adapters.sheets.base import AbstractGridSource
from tuition_lookup.adapters.sheets.google_sheets import GoogleSheetsClient
from tuition_lookup.core.config import SheetsSettings, settings
from tuition_lookup.core.errors import MisconfiguredError

logger = logging.getLogger(__name__)


def create_grid_source(sheets: SheetsSettings | None = None) -> AbstractGridSource:
    """Build a Google Sheets client from settings.

    Called per request so a missing credential surfaces as a 500 on every
    lookup instead of failing at import time.

    Args:
        sheets: Settings override; defaults to ``settings.sheets``.

    Returns:
        AbstractGridSource: Configured client.

    Raises:
        MisconfiguredError: If the API key, sheet id or tab name is missing.
    """
    cfg = sheets or settings.sheets

    missing = cfg.missing_fields()
    if missing:
        logger.error("sheets.misconfigured", extra={"missing": missing})
        raise MisconfiguredError(details={"missing": missing})

    return GoogleSheetsClient(
        api_key=cfg.api_key or "",
        sheet_id=cfg.sheet_id or "",
        sheet_name=cfg.sheet_name or "",
        base_url=cfg.base_url,
        timeout_seconds=cfg.timeout_seconds,
    )
