import logging

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError

from tuition_lookup.adapters.sheets.base import AbstractGridSource
from tuition_lookup.adapters.sheets.factory import create_grid_source
from tuition_lookup.core.config import settings
from tuition_lookup.core.errors import (
    MSG_VALIDATION,
    MSG_VALIDATION_WITH_PHONE,
    AppError,
    UnexpectedError,
    ValidationAppError,
)
from tuition_lookup.core.rate_limit import enforce_rate_limit
from tuition_lookup.schemas.columns import ColumnSchema, get_schema
from tuition_lookup.schemas.lookup import ErrorResponse, LookupRequest, LookupResponse
from tuition_lookup.services.lookup_service import LookupService
from tuition_lookup.utils.simple_cache import SimpleTTLCache
from tuition_lookup.utils.text_normalizer import sanitize

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Lookup"])

_grid_cache = SimpleTTLCache(ttl_seconds=settings.sheets.cache_ttl_seconds)


def get_grid_cache() -> SimpleTTLCache:
    return _grid_cache


def get_column_schema() -> ColumnSchema:
    return get_schema(settings.app.sheet_schema)


def get_grid_source() -> AbstractGridSource:
    """Build the sheet client; raises MisconfiguredError when settings are missing."""
    return create_grid_source()


def get_lookup_service(
    grid_source: AbstractGridSource = Depends(get_grid_source),
    cache: SimpleTTLCache = Depends(get_grid_cache),
    schema: ColumnSchema = Depends(get_column_schema),
) -> LookupService:
    return LookupService(
        grid_source=grid_source,
        cache=cache,
        schema=schema,
        max_results=settings.app.max_results,
        ignore_diacritics=settings.app.match_ignore_diacritics,
    )


async def parse_lookup_request(
    request: Request,
    schema: ColumnSchema = Depends(get_column_schema),
) -> dict[str, str]:
    """Validate and sanitize the JSON body.

    Parsed here rather than as a body parameter so that rate limiting and the
    configuration check always run before the body is looked at.

    Returns:
        Sanitized query values keyed by ``schema.query_fields``.

    Raises:
        ValidationAppError: Malformed JSON, unknown/missing/non-string fields,
            or a required field that is empty after sanitizing.
    """
    message = MSG_VALIDATION_WITH_PHONE if schema.matches_phone else MSG_VALIDATION
    raw_body = await request.body()

    try:
        payload = LookupRequest.model_validate_json(raw_body)
    except ValidationError as exc:
        fields = sorted({".".join(str(part) for part in err["loc"]) or "body" for err in exc.errors()})
        logger.info("lookup.invalid_body", extra={"fields": fields})
        raise ValidationAppError(
            message=message,
            details={"reason": "invalid_body", "fields": fields},
        ) from exc

    max_chars = settings.app.max_input_chars
    values = {
        "ho_ten": sanitize(payload.ho_ten, max_chars),
        "lop": sanitize(payload.lop, max_chars),
        "so_dien_thoai": sanitize(payload.so_dien_thoai or "", max_chars),
    }
    query = {field: values[field] for field in schema.query_fields}

    empty = [field for field, value in query.items() if not value]
    if empty:
        raise ValidationAppError(
            message=message,
            details={"reason": "empty_fields", "fields": empty},
        )
    return query


_error_responses = {
    status: {"model": ErrorResponse}
    for status in (400, 404, 429, 500, 502)
}


@router.post(
    "/api/lookup",
    response_model=LookupResponse,
    responses=_error_responses,
    dependencies=[Depends(enforce_rate_limit)],
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": LookupRequest.model_json_schema()}},
        }
    },
)
async def lookup_tuition(
    service: LookupService = Depends(get_lookup_service),
    query: dict[str, str] = Depends(parse_lookup_request),
) -> LookupResponse:
    """Look up a student's tuition record by name and class.

    Dependencies run in order: rate limit (429), configuration (500), body
    validation (400). The service then fetches the sheet (502 on upstream
    failure), and answers 404 for an empty sheet or no match.
    """
    try:
        return await service.lookup(query)
    except AppError:
        raise
    except Exception as exc:
        logger.exception("lookup.unexpected_error", extra={"error_type": type(exc).__name__})
        raise UnexpectedError(details={"error_type": type(exc).__name__}) from exc
