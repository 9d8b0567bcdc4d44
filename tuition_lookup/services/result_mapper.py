"""Projection of sheet rows into ``StudentResult`` payloads."""

from __future__ import annotations

from typing import Sequence

from tuition_lookup.schemas.columns import ColumnSchema
from tuition_lookup.schemas.lookup import StudentResult
from tuition_lookup.services.matcher import cell

MASK_CHAR = "*"
VISIBLE_PHONE_DIGITS = 4


def mask_phone(phone: str) -> str:
    """Hide all but the last four characters: ``0912345678`` → ``******5678``.

    Values of four characters or fewer are returned unchanged.
    """
    if len(phone) <= VISIBLE_PHONE_DIGITS:
        return phone
    hidden = len(phone) - VISIBLE_PHONE_DIGITS
    return MASK_CHAR * hidden + phone[-VISIBLE_PHONE_DIGITS:]


def to_student_result(row: Sequence[str], schema: ColumnSchema) -> StudentResult:
    phone = cell(row, schema.so_dien_thoai)
    return StudentResult(
        ho_ten=cell(row, schema.ho_ten),
        lop=cell(row, schema.lop),
        so_dien_thoai=mask_phone(phone) if phone else "",
        so_buoi=cell(row, schema.so_buoi),
        so_tien=cell(row, schema.so_tien),
        ndck=cell(row, schema.ndck),
        ghi_chu=cell(row, schema.ghi_chu),
        trang_thai=cell(row, schema.trang_thai),
        qr_code=cell(row, schema.qr_code),
    )
