"""Leaderboard schema package — typed models for the pipeline.

Provides the contract between the API client, the data processor,
and the output generators:

- models.py: Core dataclasses (AffiliateRecord, SortState, QueryConfig, view-model)
- design_system.py: Value formatting functions (currency, counts, dates, tiers)
- loader.py: YAML serialization/deserialization of QueryConfig
"""

from .design_system import (
    display_text,
    format_currency,
    format_date,
    format_grouped,
    tier_for_rank,
)
from .loader import load_config, save_config
from .models import (
    CANONICAL_FIELDS,
    AffiliateRecord,
    DesignSystem,
    EmptyState,
    LeaderboardRow,
    LeaderboardView,
    QueryConfig,
    SortOrder,
    SortState,
    Tier,
    canonical_name,
)

__all__ = [
    # Models
    "CANONICAL_FIELDS",
    "AffiliateRecord",
    "DesignSystem",
    "EmptyState",
    "LeaderboardRow",
    "LeaderboardView",
    "QueryConfig",
    "SortOrder",
    "SortState",
    "Tier",
    "canonical_name",
    # Loader
    "load_config",
    "save_config",
    # Formatting
    "display_text",
    "format_currency",
    "format_date",
    "format_grouped",
    "tier_for_rank",
]
