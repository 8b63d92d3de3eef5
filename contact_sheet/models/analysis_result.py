from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .tabular import RowRecord

"""AnalysisResult model (derived, recomputed on every mapping change)."""

__all__ = [
    "AnalysisSummary",
    "AnalysisResult",
]


@dataclass(frozen=True)
class AnalysisSummary:
    total_rows: int
    mapped_fields: int
    has_contact_info: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalRows": self.total_rows,
            "mappedFields": self.mapped_fields,
            "hasContactInfo": self.has_contact_info,
        }


@dataclass(frozen=True)
class AnalysisResult:
    """Output of analysis.engine.analyze.

    grouping keeps first-seen group order; display ordering (largest group
    first) is available via sorted_groups().
    """
    summary: AnalysisSummary
    duplicates: list[RowRecord]
    grouping: dict[str, list[RowRecord]]
    missing_data: list[RowRecord]
    contact_candidates: list[RowRecord]

    def sorted_groups(self) -> list[tuple[str, list[RowRecord]]]:
        """Groups ordered by descending member count (stable for ties)."""
        return sorted(self.grouping.items(), key=lambda kv: len(kv[1]), reverse=True)

    def to_dict(self) -> dict[str, Any]:
        """JSON shape used by the analysis export (camelCase keys)."""
        return {
            "summary": self.summary.to_dict(),
            "duplicates": [dict(r) for r in self.duplicates],
            "grouping": {k: [dict(r) for r in v] for k, v in self.grouping.items()},
            "missingData": [dict(r) for r in self.missing_data],
            "contactCandidates": [dict(r) for r in self.contact_candidates],
        }
