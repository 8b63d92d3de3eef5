from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

"""Batch processing result models.

FileReport tracks one source file through parse → analyze → export;
ProcessingResult aggregates the whole run for the SUMMARY line.
"""

__all__ = [
    "FileStatus",
    "FileReport",
    "ProcessingResult",
]


class FileStatus(Enum):
    """Outcome of processing a single source file."""
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class FileReport:
    """Per-file outcome.

    exported: artifact file names written for this file
    skipped_exports: export format -> reason (e.g. VCF without name mapping)
    """
    file_name: str
    status: str  # success/failed
    total_rows: int = 0
    duplicates: int = 0
    missing_data: int = 0
    contact_candidates: int = 0
    elapsed_seconds: float = 0.0
    exported: list[str] = field(default_factory=list)
    skipped_exports: dict[str, str] = field(default_factory=dict)
    error: str | None = None


@dataclass(frozen=True)
class ProcessingResult:
    """Aggregated results for the SUMMARY output line."""
    success_files: int
    failed_files: int
    total_rows: int
    total_duplicates: int
    total_missing: int
    total_contacts: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    file_reports: list[FileReport] | None = None
