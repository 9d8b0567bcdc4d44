"""Application-level exception types.

Every failure of a lookup maps to exactly one subclass of ``AppError``. Each
subclass carries a stable ``code``, the HTTP status it surfaces as and a fixed
Vietnamese message shown to parents. Internal detail goes to ``details`` for
logging only and is never sent to the client.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, NotRequired, TypedDict


MSG_RATE_LIMITED = "Bạn đã tra cứu quá nhiều lần. Vui lòng thử lại sau 1 phút."
MSG_MISCONFIGURED = "Hệ thống chưa được cấu hình. Vui lòng liên hệ quản trị viên."
MSG_VALIDATION = "Vui lòng nhập đầy đủ thông tin: Họ tên và Lớp."
MSG_VALIDATION_WITH_PHONE = "Vui lòng nhập đầy đủ thông tin: Họ tên, Lớp và Số điện thoại."
MSG_UPSTREAM = "Không thể kết nối đến cơ sở dữ liệu. Vui lòng thử lại sau."
MSG_NO_DATA = "Chưa có dữ liệu học phí."
MSG_NO_MATCH = "Không tìm thấy thông tin. Vui lòng kiểm tra lại Họ tên và Lớp."
MSG_UNEXPECTED = "Đã có lỗi xảy ra. Vui lòng thử lại sau."


class ErrorDetails(TypedDict, total=False):
    """Structured error context for server-side logs."""

    reason: str
    missing: list[str]
    fields: list[str]
    upstream_status: int
    row_count: int
    retry_after: int
    error_type: str
    context: NotRequired[dict[str, Any]]


@dataclass
class AppError(Exception):
    """Base error for lookup failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: User-facing message returned as ``{"error": message}``.
        details: Optional structured context, logged but not returned.
        headers: Extra response headers (e.g. ``Retry-After``).
    """

    code: str
    message: str
    details: ErrorDetails | None = None
    headers: dict[str, str] | None = None

    status_code: ClassVar[int] = 500

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


@dataclass
class RateLimitedError(AppError):
    """Client exceeded its lookup budget for the current window."""

    code: str = "rate_limited"
    message: str = MSG_RATE_LIMITED

    status_code: ClassVar[int] = 429


@dataclass
class MisconfiguredError(AppError):
    """Required data source settings are missing."""

    code: str = "misconfigured"
    message: str = MSG_MISCONFIGURED

    status_code: ClassVar[int] = 500


@dataclass
class ValidationAppError(AppError):
    """Request body is malformed, incomplete or empty after sanitizing."""

    code: str = "validation_failed"
    message: str = MSG_VALIDATION

    status_code: ClassVar[int] = 400


@dataclass
class UpstreamUnavailableError(AppError):
    """The spreadsheet API failed, timed out or answered with non-2xx."""

    code: str = "upstream_unavailable"
    message: str = MSG_UPSTREAM

    status_code: ClassVar[int] = 502


@dataclass
class NoDataError(AppError):
    """The sheet holds no data rows beyond the header."""

    code: str = "no_data"
    message: str = MSG_NO_DATA

    status_code: ClassVar[int] = 404


@dataclass
class NoMatchError(AppError):
    """No data row matched every query field."""

    code: str = "no_match"
    message: str = MSG_NO_MATCH

    status_code: ClassVar[int] = 404


@dataclass
class UnexpectedError(AppError):
    """Catch-all for failures outside the taxonomy above."""

    code: str = "internal_server_error"
    message: str = MSG_UNEXPECTED

    status_code: ClassVar[int] = 500
