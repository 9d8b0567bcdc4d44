from __future__ import annotations

from fastapi import APIRouter

from tuition_lookup.core.config import settings
from tuition_lookup.schemas.columns import get_schema

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check() -> dict:
    """Liveness check plus the two facts the search page needs.

    Always 200 while the process is up. ``sheets_configured`` is false when
    lookups would fail with a configuration error; ``phone_required`` tells
    the form whether to ask for the parent's phone number.
    """

    return {
        "status": "ok",
        "sheets_configured": not settings.sheets.missing_fields(),
        "phone_required": get_schema(settings.app.sheet_schema).matches_phone,
    }
