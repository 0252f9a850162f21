"""Leaderboard models - the contract between client, processor, and generator.

Defines the typed structure of the data flowing through the pipeline: the
normalized affiliate record, the sort state chosen by the user, the query
configuration for a session, and the display view-model the output adapters
consume.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class SortOrder(Enum):
    """Direction of the leaderboard ordering."""
    ASC = "asc"
    DESC = "desc"

    def toggled(self) -> "SortOrder":
        return SortOrder.ASC if self is SortOrder.DESC else SortOrder.DESC


class Tier(Enum):
    """Podium styling applied to the top three ranks."""
    GOLD = "gold"
    SILVER = "silver"
    BRONZE = "bronze"
    NONE = ""


# ---------------------------------------------------------------------------
# Canonical field names
# ---------------------------------------------------------------------------

# Python attribute -> camelCase name used by the API and the host page
CANONICAL_FIELDS: dict[str, str] = {
    "code": "code",
    "total_wagered": "totalWagered",
    "total_earnings": "totalEarnings",
    "users_registered": "usersRegistered",
    "conversion_rate": "conversionRate",
    "last_active": "lastActive",
    "created_at": "createdAt",
}

NUMERIC_FIELDS = ("total_wagered", "total_earnings", "users_registered",
                  "conversion_rate")

_ALIASES = {camel: attr for attr, camel in CANONICAL_FIELDS.items()}


def canonical_name(name: str) -> str | None:
    """Return the attribute name for a canonical field spelling, else None."""
    if name in CANONICAL_FIELDS:
        return name
    return _ALIASES.get(name)


# ---------------------------------------------------------------------------
# AffiliateRecord
# ---------------------------------------------------------------------------

@dataclass
class AffiliateRecord:
    """One affiliate's statistics after normalization.

    All canonical attributes are always set.  ``last_active`` and
    ``created_at`` keep whatever the API sent; they are only parsed for
    display.  Keys the normalizer did not recognize are kept in ``extra``.
    """
    code: str = "Unknown"
    total_wagered: float = 0
    total_earnings: float = 0
    users_registered: float = 0
    conversion_rate: float = 0
    last_active: Any = None
    created_at: Any = None
    extra: dict[str, Any] = field(default_factory=dict)

    def get(self, name: str, default: Any = None) -> Any:
        """Look up a field by attribute name, camelCase name, or extra key."""
        attr = canonical_name(name)
        if attr is not None:
            return getattr(self, attr)
        return self.extra.get(name, default)

    def to_dict(self) -> dict[str, Any]:
        """Flatten to a dict: passthrough keys first, canonical values last."""
        d: dict[str, Any] = dict(self.extra)
        for attr in CANONICAL_FIELDS:
            d[attr] = getattr(self, attr)
        return d


# ---------------------------------------------------------------------------
# SortState
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SortState:
    """Field and direction the leaderboard is ordered by.

    ``field`` is free text; a name no record carries simply sorts every
    record as missing.
    """
    field: str = "total_wagered"
    order: SortOrder = SortOrder.DESC

    def to_dict(self) -> dict:
        return {"field": self.field, "order": self.order.value}

    @classmethod
    def from_dict(cls, d: dict) -> "SortState":
        return cls(
            field=d.get("field", "total_wagered"),
            order=SortOrder(d.get("order", "desc")),
        )


# ---------------------------------------------------------------------------
# QueryConfig
# ---------------------------------------------------------------------------

DEFAULT_API_URL = "https://api.luxdrop.com/external/affiliates"


@dataclass(frozen=True)
class QueryConfig:
    """What to fetch, and with which credential, for one session."""
    affiliate_code: str = "Colby"
    date_start: str = "2025-10-01"
    date_end: str = "2025-10-31"
    credential: str = ""
    api_url: str = DEFAULT_API_URL
    timeout_seconds: float = 30.0
    env_file: str = ".env"
    fallback_credential: str = ""

    @property
    def codes(self) -> list[str]:
        """Affiliate codes to request (``affiliate_code`` may be comma-separated)."""
        return [c.strip() for c in self.affiliate_code.split(",") if c.strip()]

    def to_dict(self) -> dict:
        # The resolved credential is never serialized.
        d: dict[str, Any] = {
            "affiliate_code": self.affiliate_code,
            "date_start": self.date_start,
            "date_end": self.date_end,
            "api_url": self.api_url,
            "timeout_seconds": self.timeout_seconds,
            "env_file": self.env_file,
        }
        if self.fallback_credential:
            d["fallback_credential"] = self.fallback_credential
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "QueryConfig":
        return cls(
            affiliate_code=str(d.get("affiliate_code", "Colby")),
            date_start=str(d.get("date_start", "2025-10-01")),
            date_end=str(d.get("date_end", "2025-10-31")),
            credential=d.get("credential", ""),
            api_url=d.get("api_url", DEFAULT_API_URL),
            timeout_seconds=float(d.get("timeout_seconds", 30.0)),
            env_file=d.get("env_file", ".env"),
            fallback_credential=d.get("fallback_credential", ""),
        )


# ---------------------------------------------------------------------------
# View-model
# ---------------------------------------------------------------------------

@dataclass
class LeaderboardRow:
    """A single ranked row with every display string precomputed."""
    rank: int
    tier: Tier
    code: str
    last_active: str
    total_wagered: str
    total_earnings: str
    users_registered: str


@dataclass
class EmptyState:
    """Text shown instead of the list when there is nothing to rank."""
    title: str
    message: str
    reasons: list[str] = field(default_factory=list)


@dataclass
class LeaderboardView:
    """Everything an output adapter needs to draw the leaderboard region."""
    rows: list[LeaderboardRow]
    sort: SortState
    empty_state: EmptyState | None = None
    loading: bool = False
    error_message: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.rows


# ---------------------------------------------------------------------------
# Design system
# ---------------------------------------------------------------------------

@dataclass
class DesignSystem:
    """Colors and typography shared by the HTML and PPTX adapters."""
    # Colors
    background: str = "#0F172A"
    surface: str = "#1E293B"
    text: str = "#F8FAFC"
    muted_text: str = "#94A3B8"
    accent: str = "#22C55E"
    error: str = "#DC2626"
    header_bg: str = "#190263"
    white: str = "#FFFFFF"
    dark_text: str = "#000000"
    gold: str = "#F5B301"
    silver: str = "#C0C7D1"
    bronze: str = "#CD7F32"

    # Typography
    primary_font: str = "DM Sans"
    title_size_pt: float = 28.0
    body_size_pt: float = 12.0
    caption_size_pt: float = 9.0

    def tier_color(self, tier: Tier) -> str | None:
        return {
            Tier.GOLD: self.gold,
            Tier.SILVER: self.silver,
            Tier.BRONZE: self.bronze,
        }.get(tier)
