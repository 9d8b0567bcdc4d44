"""Pydantic schemas for the tuition lookup endpoint."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class LookupRequest(BaseModel):
    """Search fields submitted by the form.

    Unknown fields are rejected. Values are raw here; sanitizing happens in
    the request dependency so the length limit can follow configuration.
    """

    ho_ten: str = Field(..., alias="hoTen", description="Student full name (or part of it).")
    lop: str = Field(..., description="Class, e.g. '6A1'.")
    so_dien_thoai: str | None = Field(
        default=None,
        alias="soDienThoai",
        description="Parent phone number; required only by the v1 sheet layout.",
    )

    model_config = ConfigDict(
        extra="forbid",
        strict=True,
    )


class StudentResult(BaseModel):
    """One tuition record as shown to the parent."""

    ho_ten: str = Field(default="", alias="hoTen", description="Student full name.")
    lop: str = Field(default="", description="Class.")
    so_dien_thoai: str = Field(
        default="",
        alias="soDienThoai",
        description="Parent phone, masked except the last 4 digits.",
    )
    so_buoi: str = Field(default="", alias="soBuoi", description="Number of sessions billed.")
    so_tien: str = Field(default="", alias="soTien", description="Amount due, as written in the sheet.")
    ndck: str = Field(default="", description="Bank transfer note to use.")
    ghi_chu: str = Field(default="", alias="ghiChu", description="Free-form remark.")
    trang_thai: str = Field(default="", alias="trangThai", description="Payment status.")
    qr_code: str = Field(default="", alias="qrCode", description="URL of the payment QR image.")

    model_config = ConfigDict(populate_by_name=True)


class LookupResponse(BaseModel):
    """Successful lookup: one or more matching records in sheet order."""

    results: list[StudentResult] = Field(..., min_length=1)


class ErrorResponse(BaseModel):
    """Error body returned with every non-2xx lookup response."""

    error: str = Field(..., description="Localized message for display.")
    code: str = Field(..., description="Stable machine-readable error code.")
    request_id: str | None = Field(default=None, description="Correlation id of the request.")
