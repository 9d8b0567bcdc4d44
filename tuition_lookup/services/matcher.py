"""Row filtering for tuition lookups."""

from __future__ import annotations

from typing import Mapping, Sequence

from tuition_lookup.schemas.columns import ColumnSchema
from tuition_lookup.utils.text_normalizer import match_key


def cell(row: Sequence[str], index: int | None) -> str:
    """Return the cell at ``index`` or ``""`` for short rows and absent columns."""
    if index is None or index >= len(row):
        return ""
    value = row[index]
    return "" if value is None else str(value)


def match_rows(
    rows: Sequence[Sequence[str]],
    query: Mapping[str, str],
    schema: ColumnSchema,
    *,
    ignore_diacritics: bool = True,
) -> list[Sequence[str]]:
    """Return the data rows matching every query field, in sheet order.

    The first row is the header and is never considered. A row matches when,
    for each field in ``query``, the comparison form of the query value is a
    substring of the comparison form of the row's cell for that field.

    Args:
        rows: Full grid including the header row.
        query: Field name (``ho_ten``, ``lop``, ``so_dien_thoai``) to raw value.
        schema: Column layout used to locate each field.
        ignore_diacritics: Also fold Vietnamese tone marks before comparing.

    Returns:
        Matching rows, unmodified.
    """
    needles = [
        (schema.column_for(field), match_key(value, ignore_diacritics=ignore_diacritics))
        for field, value in query.items()
    ]

    matched: list[Sequence[str]] = []
    for row in rows[1:]:
        if all(
            needle in match_key(cell(row, index), ignore_diacritics=ignore_diacritics)
            for index, needle in needles
        ):
            matched.append(row)
    return matched
