"""Design system utilities — value formatting functions.

Implements the display rules for leaderboard rows:
- Currency: US dollars, thousands separators, 0-2 fraction digits ($1,234.5)
- Counts: thousands separators, up to 3 fraction digits (12,345)
- Dates: M/D/YYYY, or "Unknown" when missing or unparseable
- Tiers: gold / silver / bronze for ranks 1-3
- Text: API strings stripped of characters XML cannot carry
"""

import datetime
import math
import unicodedata

import pandas as pd

from .models import Tier

_NA = "N/A"
UNKNOWN_DATE = "Unknown"
_XML_WHITESPACE = "\t\n\r"
_XML_NONCHARACTERS = "\ufffe\uffff"


def _is_missing(value) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and (math.isnan(value) or math.isinf(value)):
        return True
    return False


def _trim_fraction(text: str) -> str:
    """Drop trailing fraction zeros: 1,234.50 -> 1,234.5, 12.00 -> 12."""
    if "." not in text:
        return text
    return text.rstrip("0").rstrip(".")


def _grouped(value: float | int, digits: int) -> str:
    # ints keep every digit
    if isinstance(value, int):
        return f"{value:,}"
    return _trim_fraction(f"{value:,.{digits}f}")


def format_currency(value: float | int | None) -> str:
    """Format a dollar amount with at most two fraction digits.

    1234.5   -> $1,234.5
    1000     -> $1,000
    -12.345  -> -$12.35
    """
    if _is_missing(value):
        return _NA
    sign = "-" if value < 0 else ""
    return f"{sign}${_grouped(abs(value), 2)}"


def format_grouped(value: float | int | None) -> str:
    """Format a count with thousands separators (up to three fraction digits)."""
    if _is_missing(value):
        return _NA
    sign = "-" if value < 0 else ""
    return f"{sign}{_grouped(abs(value), 3)}"


def format_date(value) -> str:
    """Format a raw date-like value as M/D/YYYY.

    Strings go through ``pd.to_datetime``; numbers are epoch milliseconds.
    Anything that does not parse comes back as "Unknown".
    """
    if value is None or value == "" or isinstance(value, bool):
        return UNKNOWN_DATE
    try:
        if isinstance(value, (int, float)):
            if _is_missing(value):
                return UNKNOWN_DATE
            ts = pd.to_datetime(value, unit="ms", errors="coerce")
        elif isinstance(value, (str, datetime.date)):
            ts = pd.to_datetime(value, errors="coerce")
        else:
            return UNKNOWN_DATE
    except (TypeError, ValueError, OverflowError):
        return UNKNOWN_DATE
    if pd.isna(ts):
        return UNKNOWN_DATE
    return f"{ts.month}/{ts.day}/{ts.year}"


def tier_for_rank(rank: int) -> Tier:
    """Podium tier for a 1-based rank."""
    return {1: Tier.GOLD, 2: Tier.SILVER, 3: Tier.BRONZE}.get(rank, Tier.NONE)


def display_text(value) -> str:
    """``str(value)`` with the characters XML cannot carry removed.

    Control characters (other than tab, newline and carriage return),
    lone surrogates and U+FFFE/U+FFFF are dropped.
    """
    return "".join(
        ch for ch in str(value)
        if ch in _XML_WHITESPACE
        or (unicodedata.category(ch) not in ("Cc", "Cs")
            and ch not in _XML_NONCHARACTERS)
    )
