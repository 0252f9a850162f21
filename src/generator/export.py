"""Tabular export of the sorted leaderboard.

Flattens records into a DataFrame (``rank`` first, canonical columns next,
passthrough columns after in first-seen order) for CSV output.
"""

from pathlib import Path

import pandas as pd

from src.schema.models import CANONICAL_FIELDS, AffiliateRecord


def records_to_frame(records: list[AffiliateRecord]) -> pd.DataFrame:
    """DataFrame of *records* in their current (sorted) order."""
    columns = ["rank", *CANONICAL_FIELDS]
    for record in records:
        for key in record.extra:
            if key not in columns:
                columns.append(key)

    rows = []
    for rank, record in enumerate(records, start=1):
        row = record.to_dict()
        row["rank"] = rank
        rows.append(row)
    return pd.DataFrame(rows, columns=columns)


def export_csv(records: list[AffiliateRecord], path: str | Path) -> Path:
    """Write the sorted records to *path* as CSV and return the path."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    records_to_frame(records).to_csv(path, index=False)
    return path
