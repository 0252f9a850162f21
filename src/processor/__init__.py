"""Data processor module for the affiliate leaderboard."""

from .ingestion import (
    FIELD_SPELLINGS,
    RECOGNIZED_KEYS,
    ingest_response,
    normalize_record,
    parse_number,
    unwrap_response,
)
from .transform import (
    sort_key,
    sort_records,
)
