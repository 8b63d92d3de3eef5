from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path

from ..analysis.engine import analyze
from ..config.loader import AnalyzeConfig
from ..errors import ContactSheetError, NoContactsFound, NoNameMapped, error_type_of
from ..export.serializers import export_csv, export_json, export_vcf, export_xlsx
from ..export.sharer import DownloadSharer, Sharer
from ..logging.error_log import ErrorLogBuffer, ErrorRecord
from ..models.analysis_result import AnalysisResult
from ..models.export_artifact import ExportArtifact
from ..models.processing_result import FileReport, FileStatus, ProcessingResult
from ..models.tabular import RowRecord, TabularDataset
from ..spreadsheet.reader import SUPPORTED_EXTENSIONS, parse_file
from .progress import ProgressTracker

"""Batch orchestration: source directory -> parse -> analyze -> exports.

Each file is processed independently. Parse / mapping / export errors are
caught here (the collaborator boundary), logged, appended to the error log
and counted as a failed file; the batch continues with the next file.
"""

__all__ = [
    "ProcessingError",
    "SharerFactory",
    "scan_source_files",
    "select_rows",
    "build_artifacts",
    "process_file",
    "process_all",
]

logger = logging.getLogger(__name__)

SharerFactory = Callable[[Path], Sharer]


class ProcessingError(Exception):
    """Fatal batch error (nothing could be processed)."""


def scan_source_files(directory: Path) -> list[Path]:
    """Return supported spreadsheet files in ``directory`` (non-recursive, sorted).

    Raises:
        ProcessingError: directory missing, not a directory, or unreadable
    """
    if not directory.exists():
        raise ProcessingError(f"Directory not found: {directory}")
    if not directory.is_dir():
        raise ProcessingError(f"Path is not a directory: {directory}")
    try:
        return sorted(
            p
            for p in directory.iterdir()
            if p.is_file() and p.suffix.lower().lstrip(".") in SUPPORTED_EXTENSIONS
        )
    except OSError as e:
        raise ProcessingError(f"Error reading directory {directory}: {e}") from e


def select_rows(dataset: TabularDataset, result: AnalysisResult, export_rows: str) -> list[RowRecord]:
    """Pick the row set written by the csv / json / xlsx exports."""
    if export_rows == "duplicates":
        return result.duplicates
    if export_rows == "missing_data":
        return result.missing_data
    if export_rows == "contact_candidates":
        return result.contact_candidates
    return dataset.rows


def build_artifacts(
    dataset: TabularDataset,
    result: AnalysisResult,
    config: AnalyzeConfig,
) -> tuple[list[ExportArtifact], dict[str, tuple[str, str]]]:
    """Serialize every configured export.

    Returns:
        (artifacts, skipped) where skipped maps export name -> (error_type, reason)
    """
    rows = select_rows(dataset, result, config.export_rows)
    artifacts: list[ExportArtifact] = []
    skipped: dict[str, tuple[str, str]] = {}
    for fmt in config.exports:
        if fmt == "csv":
            artifacts.append(export_csv(rows))
        elif fmt == "json":
            artifacts.append(export_json(rows))
        elif fmt == "xlsx":
            artifacts.append(export_xlsx(rows))
        elif fmt == "vcf":
            try:
                artifacts.append(export_vcf(dataset, config.column_mapping))
            except (NoNameMapped, NoContactsFound) as e:
                skipped["vcf"] = (error_type_of(e), str(e))
        elif fmt == "analysis":
            artifacts.append(export_json([result], "analysis_results.json"))
        elif fmt == "groups":
            if result.grouping:
                artifacts.append(export_json(result.grouping, "grouped_data.json"))
            else:
                skipped["groups"] = ("NO_GROUPS", "school column not mapped")
        else:
            skipped[fmt] = ("UNKNOWN_EXPORT", f"unknown export format '{fmt}'")
    return artifacts, skipped


def _default_sharer(directory: Path) -> Sharer:
    return DownloadSharer(directory)


def process_file(
    path: Path,
    config: AnalyzeConfig,
    error_log: ErrorLogBuffer,
    sharer_factory: SharerFactory | None = None,
) -> FileReport:
    """Run parse → mapping check → analyze → exports for one file.

    Artifacts go to ``<output_directory>/<file stem>/`` through the sharer.
    A skipped VCF export is reported (WARN + error log) but does not fail the file.
    """
    started = datetime.now(UTC)
    factory = sharer_factory or _default_sharer
    stage = "parse"
    try:
        dataset = parse_file(path)
        stage = "mapping"
        config.column_mapping.validate(dataset.headers)
        stage = "analyze"
        result = analyze(dataset, config.column_mapping)
        stage = "export"
        artifacts, skipped = build_artifacts(dataset, result, config)
        sharer = factory(Path(config.output_directory) / path.stem)
        for artifact in artifacts:
            sharer.share(artifact)
    except (ContactSheetError, OSError) as e:
        logger.error(f"{path.name}: {stage} failed: {e}")
        error_log.append(ErrorRecord.create(path.name, stage, -1, error_type_of(e), str(e)))
        return FileReport(
            file_name=path.name,
            status=FileStatus.FAILED.value,
            elapsed_seconds=(datetime.now(UTC) - started).total_seconds(),
            error=str(e),
        )

    for name, (error_type, reason) in skipped.items():
        logger.warning(f"{path.name}: {name} export skipped: {reason}")
        if name == "vcf":
            error_log.append(ErrorRecord.create(path.name, "export", -1, error_type, reason))

    logger.info(
        f"{path.name}: rows={result.summary.total_rows} duplicates={len(result.duplicates)} "
        f"groups={len(result.grouping)} missing={len(result.missing_data)} "
        f"contacts={len(result.contact_candidates)} exported={len(artifacts)}"
    )
    return FileReport(
        file_name=path.name,
        status=FileStatus.SUCCESS.value,
        total_rows=dataset.total_rows,
        duplicates=len(result.duplicates),
        missing_data=len(result.missing_data),
        contact_candidates=len(result.contact_candidates),
        elapsed_seconds=(datetime.now(UTC) - started).total_seconds(),
        exported=[a.filename for a in artifacts],
        skipped_exports={name: reason for name, (_, reason) in skipped.items()},
    )


def process_all(
    config: AnalyzeConfig,
    sharer_factory: SharerFactory | None = None,
    error_log: ErrorLogBuffer | None = None,
) -> ProcessingResult:
    """Process every supported file of ``config.source_directory``.

    Raises:
        ProcessingError: source directory cannot be scanned
    """
    start_time = datetime.now(UTC)
    error_log = error_log if error_log is not None else ErrorLogBuffer()

    file_paths = scan_source_files(Path(config.source_directory))
    if not file_paths:
        logger.info(f"no supported files in {config.source_directory}")

    reports: list[FileReport] = []
    with ProgressTracker(len(file_paths)) as progress:
        for file_path in file_paths:
            progress.start_file(file_path)
            report = process_file(file_path, config, error_log, sharer_factory)
            reports.append(report)
            progress.finish_file(
                ok=sum(r.status == FileStatus.SUCCESS.value for r in reports),
                failed=sum(r.status == FileStatus.FAILED.value for r in reports),
            )

    try:
        log_path = error_log.flush()
    except OSError as e:
        logger.warning(f"failed to write error log: {e}")
    else:
        if log_path is not None:
            logger.info(f"error log written: {log_path}")

    ok = [r for r in reports if r.status == FileStatus.SUCCESS.value]
    end_time = datetime.now(UTC)
    return ProcessingResult(
        success_files=len(ok),
        failed_files=len(reports) - len(ok),
        total_rows=sum(r.total_rows for r in ok),
        total_duplicates=sum(r.duplicates for r in ok),
        total_missing=sum(r.missing_data for r in ok),
        total_contacts=sum(r.contact_candidates for r in ok),
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
        file_reports=reports,
    )
