"""QA validation package for the affiliate leaderboard.

Validates rendered HTML output against its view-model — checks row
count, rank sequence, podium tier classes, displayed values, and the
empty state.
"""

from .validator import (
    Issue,
    QAResult,
    QAValidator,
    validate_leaderboard,
)

__all__ = [
    "Issue",
    "QAResult",
    "QAValidator",
    "validate_leaderboard",
]
