"""Domain models for the spreadsheet → contact pipeline."""

from .analysis_result import AnalysisResult, AnalysisSummary
from .column_mapping import STANDARD_FIELDS, ColumnMapping
from .contact_record import ContactRecord
from .error_record import ErrorRecord
from .export_artifact import ExportArtifact
from .processing_result import FileReport, FileStatus, ProcessingResult
from .tabular import RowRecord, TabularDataset

__all__ = [
    # Parsed data
    "RowRecord",
    "TabularDataset",
    # Mapping / analysis
    "STANDARD_FIELDS",
    "ColumnMapping",
    "AnalysisResult",
    "AnalysisSummary",
    "ContactRecord",
    # Export
    "ExportArtifact",
    # Batch processing
    "ErrorRecord",
    "FileReport",
    "FileStatus",
    "ProcessingResult",
]
