from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence

from ..models.analysis_result import AnalysisResult, AnalysisSummary
from ..models.tabular import RowRecord, TabularDataset

"""Analysis engine: dataset + column mapping -> AnalysisResult.

Pure functions of their inputs. No field of the mapping is required; an
empty mapping yields empty duplicate / grouping / missing results and no
contact candidates.
"""

__all__ = [
    "UNKNOWN_GROUP",
    "analyze",
    "detect_duplicates",
    "group_by_column",
    "find_missing_data",
    "find_contact_candidates",
    "has_contact_info",
]

logger = logging.getLogger(__name__)

UNKNOWN_GROUP = "Unknown"


def detect_duplicates(rows: Sequence[RowRecord], column: str) -> list[RowRecord]:
    """Return rows that need duplicate review, keyed on ``column``.

    Key = trimmed, lower-cased value. A row is flagged when its key is empty
    or was already seen. The first occurrence of a repeated key is never
    flagged; rows with an empty key always are.
    """
    seen: set[str] = set()
    flagged: list[RowRecord] = []
    for row in rows:
        key = (row.get(column) or "").strip().lower()
        if not key or key in seen:
            flagged.append(row)
            continue
        seen.add(key)
    return flagged


def group_by_column(rows: Sequence[RowRecord], column: str) -> dict[str, list[RowRecord]]:
    """Bucket rows by the trimmed value of ``column`` (case kept).

    Empty / absent values go to "Unknown". Groups keep first-seen order.
    """
    groups: dict[str, list[RowRecord]] = {}
    for row in rows:
        key = (row.get(column) or "").strip() or UNKNOWN_GROUP
        groups.setdefault(key, []).append(row)
    return groups


def find_missing_data(rows: Sequence[RowRecord], columns: Iterable[str]) -> list[RowRecord]:
    """Rows where ANY of ``columns`` is absent or whitespace-only."""
    cols = list(columns)
    if not cols:
        return []
    return [row for row in rows if any(not (row.get(c) or "").strip() for c in cols)]


def find_contact_candidates(rows: Sequence[RowRecord], mapping: Mapping[str, str]) -> list[RowRecord]:
    """Rows with a non-empty name and a non-empty phone or email."""
    name_col = mapping.get("name")
    if not name_col:
        return []
    reach_cols = [c for c in (mapping.get("phone"), mapping.get("email")) if c]
    return [
        row
        for row in rows
        if row.get(name_col) and any(row.get(c) for c in reach_cols)
    ]


def has_contact_info(mapping: Mapping[str, str]) -> bool:
    """True iff the mapping itself offers name + (phone or email)."""
    return bool(mapping.get("name") and (mapping.get("phone") or mapping.get("email")))


def analyze(dataset: TabularDataset, mapping: Mapping[str, str]) -> AnalysisResult:
    """Run duplicate / grouping / missing-data / contact-candidate analysis.

    Args:
        dataset: Parsed spreadsheet
        mapping: Standard field key -> header name (ColumnMapping or plain dict)

    Returns:
        A new AnalysisResult; calling twice with the same inputs yields equal results.
    """
    rows = dataset.rows
    name_col = mapping.get("name")
    school_col = mapping.get("school")

    result = AnalysisResult(
        summary=AnalysisSummary(
            total_rows=len(rows),
            mapped_fields=len(mapping),
            has_contact_info=has_contact_info(mapping),
        ),
        duplicates=detect_duplicates(rows, name_col) if name_col else [],
        grouping=group_by_column(rows, school_col) if school_col else {},
        missing_data=find_missing_data(rows, mapping.values()),
        contact_candidates=find_contact_candidates(rows, mapping),
    )
    logger.debug(
        f"analyzed {dataset.source_name} rows={len(rows)} mapped={len(mapping)} "
        f"duplicates={len(result.duplicates)} groups={len(result.grouping)} "
        f"missing={len(result.missing_data)} contacts={len(result.contact_candidates)}"
    )
    return result
