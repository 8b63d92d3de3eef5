from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

"""TabularDataset model.

A TabularDataset is the normalized output of the Tabular Parser: an ordered
header list plus one RowRecord (header -> str) per kept data row.
"""

__all__ = [
    "RowRecord",
    "TabularDataset",
]

RowRecord = dict[str, str]


@dataclass(frozen=True)
class TabularDataset:
    """Headers + rows parsed from a single spreadsheet.

    Invariants (established by spreadsheet.reader):
    - headers are unique, non-empty and in source order
    - every row has exactly one str value per header (empty cell -> "")
    - total_rows == len(rows)

    The dataset is read-only after parsing. headers / rows are plain lists;
    analysis, projection and exports only read them and return
    new objects, and callers must not mutate them in place.
    """
    headers: list[str]
    rows: list[RowRecord]
    source_name: str
    total_rows: int = field(default=-1)

    def __post_init__(self) -> None:
        # frozen dataclass なので object.__setattr__ で補完
        if self.total_rows < 0:
            object.__setattr__(self, "total_rows", len(self.rows))
        if self.total_rows != len(self.rows):
            raise ValueError(
                f"total_rows={self.total_rows} does not match row count {len(self.rows)}"
            )

    def column(self, header: str) -> list[str]:
        """Return all values of one column (in row order)."""
        return [row.get(header, "") for row in self.rows]

    def to_dict(self) -> dict[str, Any]:
        return {
            "headers": list(self.headers),
            "rows": [dict(r) for r in self.rows],
            "totalRows": self.total_rows,
            "fileName": self.source_name,
        }
