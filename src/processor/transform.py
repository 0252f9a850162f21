"""Data transformation module for the affiliate leaderboard.

Orders normalized records for display.  The sort field is free text: it may
name a canonical attribute (``total_wagered``), its camelCase spelling
(``totalWagered``), or any passthrough key the API sent.

Ordering rules:
    - text compares case-insensitively
    - numbers group before text, other values compare by ``str()``
      (the grouping follows the direction, so descending puts text first)
    - equal values keep their incoming relative order
    - records missing the field (absent, None, NaN) always go last
"""

import math

from src.schema.models import AffiliateRecord, SortOrder, SortState


# ---------------------------------------------------------------------------
# Sort keys
# ---------------------------------------------------------------------------

def _is_missing(value) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return False


def sort_key(value):
    """Comparable key for a present field value."""
    if isinstance(value, (int, float)):
        return (0, value)
    if isinstance(value, str):
        return (1, value.lower())
    return (2, str(value).lower())


# ---------------------------------------------------------------------------
# Sorting
# ---------------------------------------------------------------------------

def sort_records(records: list[AffiliateRecord],
                 sort: SortState) -> list[AffiliateRecord]:
    """Return *records* ordered by ``sort.field`` in ``sort.order``.

    The input list is not modified.
    """
    present = []
    missing = []
    for record in records:
        if _is_missing(record.get(sort.field)):
            missing.append(record)
        else:
            present.append(record)

    ordered = sorted(
        present,
        key=lambda r: sort_key(r.get(sort.field)),
        reverse=sort.order is SortOrder.DESC,
    )
    return ordered + missing
