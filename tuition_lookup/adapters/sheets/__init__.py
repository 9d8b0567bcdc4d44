"""Spreadsheet data source adapters."""

from tuition_lookup.adapters.sheets.base import AbstractGridSource
from tuition_lookup.adapters.sheets.factory import create_grid_source
from tuition_lookup.adapters.sheets.google_sheets import GoogleSheetsClient

__all__ = [
    "AbstractGridSource",
    "GoogleSheetsClient",
    "create_grid_source",
]
