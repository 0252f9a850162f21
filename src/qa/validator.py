"""QA validator — inspects rendered leaderboard HTML against its view.

Validates that a rendered page matches the view it was built from: the
leaderboard container exists, the row count matches, ranks run 1..N,
podium tier classes sit on the right ranks, each row shows the expected
code and formatted values, and an empty view renders the empty state.
Uses lxml to read the markup back.

Usage::

    from src.qa.validator import QAValidator

    validator = QAValidator()
    result = validator.validate(html_text, view)
    assert result.passed, result.summary()
"""

from dataclasses import dataclass, field

from lxml import html

from src.schema.design_system import tier_for_rank
from src.schema.models import LeaderboardRow, LeaderboardView


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass
class Issue:
    """A single QA issue found during validation."""
    severity: str       # "error" or "warning"
    rank: int           # 0 for board-level issues
    category: str       # e.g. "row_count", "rank", "tier", "value"
    message: str

    def __str__(self) -> str:
        loc = f"rank {self.rank}" if self.rank else "leaderboard"
        return f"[{self.severity.upper()}] {loc}: {self.message}"


@dataclass
class QAResult:
    """Aggregated result of QA validation."""
    issues: list[Issue] = field(default_factory=list)

    @property
    def errors(self) -> list[Issue]:
        return [i for i in self.issues if i.severity == "error"]

    @property
    def warnings(self) -> list[Issue]:
        return [i for i in self.issues if i.severity == "warning"]

    @property
    def passed(self) -> bool:
        return len(self.errors) == 0

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def warning_count(self) -> int:
        return len(self.warnings)

    def summary(self) -> str:
        """One-line summary string."""
        status = "PASS" if self.passed else "FAIL"
        return (
            f"QA {status}: {self.error_count} error(s), "
            f"{self.warning_count} warning(s)"
        )

    def report(self) -> str:
        """Multi-line report of all issues."""
        lines = [self.summary()]
        for issue in self.issues:
            lines.append(f"  {issue}")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _has_class(element, name: str) -> bool:
    return name in (element.get("class") or "").split()


def _by_class(element, name: str) -> list:
    return [e for e in element.iter() if isinstance(e.tag, str)
            and _has_class(e, name)]


def _squash(text: str) -> str:
    return " ".join(text.split())


def _text(element) -> str:
    return _squash(element.text_content())


# ---------------------------------------------------------------------------
# QAValidator
# ---------------------------------------------------------------------------

class QAValidator:
    """Validates rendered leaderboard HTML against a LeaderboardView."""

    def validate(self, html_text: str, view: LeaderboardView) -> QAResult:
        """Run view checks plus markup checks.

        Parameters
        ----------
        html_text : str
            A full page or just the ``#leaderboard`` fragment.
        view : LeaderboardView
            The view the markup was rendered from.
        """
        result = self.validate_view(view)

        doc = html.fromstring(html_text)
        if doc.get("id") == "leaderboard":
            container = doc
        else:
            found = doc.xpath("//*[@id='leaderboard']")
            container = found[0] if found else None
        if container is None:
            result.issues.append(Issue(
                "error", 0, "container", "No #leaderboard container found"))
            return result

        items = _by_class(container, "leaderboard-item")
        if view.is_empty:
            self._check_empty(container, items, result)
        else:
            self._check_rows(items, view.rows, result)

        self._check_error_banner(doc, view, result)
        return result

    def validate_view(self, view: LeaderboardView) -> QAResult:
        """Check the view-model on its own (ranks, tiers, empty state)."""
        result = QAResult()
        for position, row in enumerate(view.rows, start=1):
            if row.rank != position:
                result.issues.append(Issue(
                    "error", row.rank, "rank",
                    f"Row {position} carries rank {row.rank}"))
            expected = tier_for_rank(position)
            if row.tier is not expected:
                result.issues.append(Issue(
                    "error", position, "tier",
                    f"Tier {row.tier.value!r}, expected {expected.value!r}"))
        if view.is_empty and view.empty_state is None:
            result.issues.append(Issue(
                "error", 0, "empty_state", "Empty view has no empty state"))
        return result

    # ------------------------------------------------------------------
    # Checks
    # ------------------------------------------------------------------

    def _check_empty(self, container, items: list, result: QAResult) -> None:
        if items:
            result.issues.append(Issue(
                "error", 0, "row_count",
                f"Empty view rendered {len(items)} row(s)"))
        if not _by_class(container, "empty-state"):
            result.issues.append(Issue(
                "error", 0, "empty_state", "Empty state block not rendered"))

    def _check_rows(self, items: list, rows: list[LeaderboardRow],
                    result: QAResult) -> None:
        if len(items) != len(rows):
            result.issues.append(Issue(
                "error", 0, "row_count",
                f"Rendered {len(items)} row(s), expected {len(rows)}"))

        for item, row in zip(items, rows):
            self._check_row(item, row, result)

    def _check_row(self, item, row: LeaderboardRow, result: QAResult) -> None:
        rank_elements = _by_class(item, "rank")
        if not rank_elements:
            result.issues.append(Issue(
                "error", row.rank, "rank", "Rank cell missing"))
            return
        rank_el = rank_elements[0]
        if _text(rank_el) != str(row.rank):
            result.issues.append(Issue(
                "error", row.rank, "rank",
                f"Rank shows {_text(rank_el)!r}"))
        if row.tier.value and not _has_class(rank_el, row.tier.value):
            result.issues.append(Issue(
                "error", row.rank, "tier",
                f"Missing {row.tier.value!r} tier class"))

        codes = _by_class(item, "affiliate-code")
        if not codes or _text(codes[0]) != _squash(row.code):
            result.issues.append(Issue(
                "error", row.rank, "value", f"Code {row.code!r} not shown"))

        values = [_text(e) for e in _by_class(item, "metric-value")]
        expected = [row.total_wagered, row.total_earnings, row.users_registered]
        if values != expected:
            result.issues.append(Issue(
                "error", row.rank, "value",
                f"Metrics {values} do not match {expected}"))

        meta = _by_class(item, "affiliate-meta")
        if not meta or row.last_active not in _text(meta[0]):
            result.issues.append(Issue(
                "warning", row.rank, "value",
                f"Last active {row.last_active!r} not shown"))

    def _check_error_banner(self, doc, view: LeaderboardView,
                            result: QAResult) -> None:
        banners = doc.xpath("//*[@id='error-message']")
        if not banners or not view.error_message:
            return
        if "none" in (banners[0].get("style") or ""):
            result.issues.append(Issue(
                "warning", 0, "error_banner",
                "Error message set but banner hidden"))


# ---------------------------------------------------------------------------
# Convenience function
# ---------------------------------------------------------------------------

def validate_leaderboard(html_text: str, view: LeaderboardView) -> QAResult:
    """One-shot convenience: validate rendered HTML against its view."""
    return QAValidator().validate(html_text, view)
