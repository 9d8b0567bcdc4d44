"""Pytest configuration and fixtures shared across all test modules.

Environment variables are set before anything imports the settings module,
so the global ``settings`` instance is built from these values.
"""

import os

os.environ["APP_ENV"] = "testing"

os.environ.setdefault("GOOGLE_SHEETS_API_KEY", "test-sheets-key")
os.environ.setdefault("GOOGLE_SHEET_ID", "test-sheet-id")
os.environ.setdefault("SHEET_NAME", "Học phí")
os.environ.setdefault("APP_SHEET_SCHEMA", "v2")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest  # noqa: E402

from tuition_lookup.schemas.columns import SCHEMA_V2  # noqa: E402


@pytest.fixture
def sample_grid() -> list[list[str]]:
    """Sheet values in the v2 layout, header row first."""
    return [
        ["ID", "Họ tên", "Lớp", "Số buổi", "Số tiền", "Ghi chú", "Trạng thái", "QR code"],
        ["1", "Nguyễn Văn An", "6A1", "8", "800.000", "", "Đã đóng", "https://qr.example/1.png"],
        ["2", "Trần Thị Bình", "6A1", "6", "600.000", "Nghỉ 2 buổi", "Chưa đóng", "https://qr.example/2.png"],
        ["3", "Nguyen Van A", "7B2", "4", "400.000"],
        ["4", "Lê  Hoàng   Nam", "6a1", "8", "800.000", "", "Đã đóng", ""],
    ]


@pytest.fixture
def v2_schema():
    return SCHEMA_V2
