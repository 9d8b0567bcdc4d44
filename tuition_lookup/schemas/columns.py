"""Column layouts of the tuition sheet.

The sheet has a header row and no column lookup by name: each layout version
fixes which cell index feeds which result field. A layout that does not
match the deployed sheet silently shifts every field, so the version is an
explicit setting (``APP_SHEET_SCHEMA``).
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ColumnSchema:
    """Cell index per result field; ``None`` when the sheet lacks the column."""

    version: str
    ho_ten: int
    lop: int
    so_dien_thoai: int | None
    so_buoi: int | None
    so_tien: int | None
    ndck: int | None
    ghi_chu: int | None
    trang_thai: int | None
    qr_code: int | None

    @property
    def matches_phone(self) -> bool:
        return self.so_dien_thoai is not None

    @property
    def query_fields(self) -> tuple[str, ...]:
        """Fields a lookup must supply, in matching order."""
        if self.matches_phone:
            return ("ho_ten", "lop", "so_dien_thoai")
        return ("ho_ten", "lop")

    def column_for(self, field: str) -> int | None:
        return getattr(self, field)


# ID | Họ tên | Lớp | SĐT | Số buổi | Số tiền | ND chuyển khoản | Ghi chú | Trạng thái | QR code
SCHEMA_V1 = ColumnSchema(
    version="v1",
    ho_ten=1,
    lop=2,
    so_dien_thoai=3,
    so_buoi=4,
    so_tien=5,
    ndck=6,
    ghi_chu=7,
    trang_thai=8,
    qr_code=9,
)

# ID | Họ tên | Lớp | Số buổi | Số tiền | Ghi chú | Trạng thái | QR code
SCHEMA_V2 = ColumnSchema(
    version="v2",
    ho_ten=1,
    lop=2,
    so_dien_thoai=None,
    so_buoi=3,
    so_tien=4,
    ndck=None,
    ghi_chu=5,
    trang_thai=6,
    qr_code=7,
)

SCHEMAS: dict[str, ColumnSchema] = {
    SCHEMA_V1.version: SCHEMA_V1,
    SCHEMA_V2.version: SCHEMA_V2,
}


def get_schema(version: str) -> ColumnSchema:
    """Return the layout for ``version``.

    Raises:
        KeyError: If the version is unknown.
    """
    return SCHEMAS[version]
