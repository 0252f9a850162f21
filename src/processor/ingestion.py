"""Data ingestion module for the affiliate leaderboard.

Turns a decoded API response body into normalized ``AffiliateRecord``
objects.  The affiliate API is not consistent about its shapes:

- The body may be a bare list, ``{"affiliates": [...]}``, ``{"data": [...]}``,
  or a single affiliate object.
- Field names come in underscore (``total_wagered``) or camelCase
  (``totalWagered``) spellings.
- Amounts may be numbers or currency strings (``"$1,234.50"``).

Raw records are plain dicts up to :func:`normalize_record`; nothing past it
handles untyped data.
"""

import logging
import re
from typing import Any

from src.schema.models import NUMERIC_FIELDS, AffiliateRecord

logger = logging.getLogger(__name__)

_LEADING_NUMBER = re.compile(r"\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


# ---------------------------------------------------------------------------
# Value parsers
# ---------------------------------------------------------------------------

def parse_number(value):
    """Coerce a numeric-ish value to a number.

    Examples:
        1234.5        -> 1234.5   (numbers pass through, NaN included)
        "$1,234.50"   -> 1234.5
        "12.5%"       -> 12.5     (leading number, trailing text ignored)
        "abc"         -> 0
        ""            -> 0
        None          -> 0
    """
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        cleaned = value.replace("$", "").replace(",", "")
        match = _LEADING_NUMBER.match(cleaned)
        if match is None:
            return 0
        return float(match.group(0))
    return 0


# ---------------------------------------------------------------------------
# Field spellings
# ---------------------------------------------------------------------------

# Canonical attribute -> accepted source keys, first present wins
FIELD_SPELLINGS: dict[str, tuple[str, ...]] = {
    "code": ("code", "affiliate_code"),
    "total_wagered": ("total_wagered", "totalWagered"),
    "total_earnings": ("total_earnings", "totalEarnings"),
    "users_registered": ("users_registered", "usersRegistered"),
    "conversion_rate": ("conversion_rate", "conversionRate"),
    "last_active": ("last_active", "lastActive"),
    "created_at": ("created_at", "createdAt"),
}

RECOGNIZED_KEYS = frozenset(
    key for spellings in FIELD_SPELLINGS.values() for key in spellings
)

_DEFAULTS = {
    "code": "Unknown",
    "total_wagered": 0,
    "total_earnings": 0,
    "users_registered": 0,
    "conversion_rate": 0,
    "last_active": None,
    "created_at": None,
}


def _first_present(raw: dict, spellings: tuple[str, ...], default):
    for key in spellings:
        value = raw.get(key)
        if value is not None:
            return value
    return default


# ---------------------------------------------------------------------------
# Record normalization
# ---------------------------------------------------------------------------

def normalize_record(raw: dict[str, Any]) -> AffiliateRecord:
    """Map one raw API record onto an ``AffiliateRecord``.

    Each canonical field takes the first non-null value among its accepted
    spellings (see ``FIELD_SPELLINGS``), else its default.  Numeric fields
    go through :func:`parse_number`.  Keys that are not a recognized spelling
    are kept verbatim in ``extra``.
    """
    values = {
        attr: _first_present(raw, spellings, _DEFAULTS[attr])
        for attr, spellings in FIELD_SPELLINGS.items()
    }
    for attr in NUMERIC_FIELDS:
        values[attr] = parse_number(values[attr])

    code = values["code"]
    if not isinstance(code, str):
        code = str(code)

    extra = {k: v for k, v in raw.items() if k not in RECOGNIZED_KEYS}

    return AffiliateRecord(
        code=code,
        total_wagered=values["total_wagered"],
        total_earnings=values["total_earnings"],
        users_registered=values["users_registered"],
        conversion_rate=values["conversion_rate"],
        last_active=values["last_active"],
        created_at=values["created_at"],
        extra=extra,
    )


# ---------------------------------------------------------------------------
# Envelope unwrapping
# ---------------------------------------------------------------------------

ENVELOPE_KEYS = ("affiliates", "data")


def unwrap_response(body) -> list:
    """Extract the list of raw records from a response body.

    Resolution order:
        [...]                   -> the list itself
        {"affiliates": [...]}   -> the affiliates list
        {"data": [...]}         -> the data list
        {...} (anything else)   -> [body]
        None / scalar           -> []
    """
    if isinstance(body, list):
        return body
    if isinstance(body, dict):
        for key in ENVELOPE_KEYS:
            if isinstance(body.get(key), list):
                return body[key]
        return [body]
    return []


def ingest_response(body) -> list[AffiliateRecord]:
    """Unwrap a response body and normalize every record in it.

    Entries that are not objects cannot be normalized and are skipped.
    """
    records = []
    for index, raw in enumerate(unwrap_response(body)):
        if not isinstance(raw, dict):
            logger.warning("Skipping non-object record at index %d (%s)",
                           index, type(raw).__name__)
            continue
        records.append(normalize_record(raw))
    return records
