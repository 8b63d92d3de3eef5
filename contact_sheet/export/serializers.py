from __future__ import annotations

import csv
import io
import json
import logging
from collections.abc import Mapping, Sequence
from typing import Any

import pandas as pd
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE

from ..contacts.vcf import build_vcf
from ..errors import SerializationFailure
from ..models.export_artifact import ExportArtifact
from ..models.tabular import RowRecord, TabularDataset

"""Export serializers: records -> CSV / JSON / XLSX / VCF artifacts.

All functions are pure producers returning an ExportArtifact; delivering the
bytes (write to disk, native share) is the job of export.sharer.
"""

__all__ = [
    "CSV_MIME",
    "JSON_MIME",
    "XLSX_MIME",
    "VCF_MIME",
    "SHEET_NAME",
    "export_csv",
    "export_json",
    "export_xlsx",
    "export_vcf",
    "to_json_text",
]

logger = logging.getLogger(__name__)

CSV_MIME = "text/csv;charset=utf-8"
JSON_MIME = "application/json;charset=utf-8"
XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
VCF_MIME = "text/vcard;charset=utf-8"
SHEET_NAME = "Sheet1"


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def export_csv(records: Sequence[Mapping[str, Any]], filename: str = "export.csv") -> ExportArtifact:
    """Serialize uniform records as RFC-4180 CSV.

    Header row = keys of the first record. Fields containing a comma, quote
    or newline are quoted; records end with CRLF. No records -> empty file.
    """
    buf = io.StringIO()
    if records:
        fieldnames = list(records[0].keys())
        try:
            writer = csv.writer(buf, lineterminator="\r\n", quoting=csv.QUOTE_MINIMAL)
            writer.writerow(fieldnames)
            for record in records:
                writer.writerow([_cell_text(record.get(k)) for k in fieldnames])
        except csv.Error as e:
            raise SerializationFailure(f"CSV export failed: {e}") from e
    logger.debug(f"csv export {filename} records={len(records)}")
    return ExportArtifact(filename=filename, content=buf.getvalue().encode("utf-8"), mime_type=CSV_MIME)


def _jsonable(value: Any) -> Any:
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    if isinstance(value, Mapping):
        return dict(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def to_json_text(value: Any) -> str:
    """Render ``value`` as 2-space indented UTF-8 JSON text."""
    try:
        return json.dumps(value, indent=2, ensure_ascii=False, default=_jsonable)
    except (TypeError, ValueError) as e:
        raise SerializationFailure(f"JSON export failed: {e}") from e


def export_json(value: Any, filename: str = "export.json") -> ExportArtifact:
    """Serialize records, a mapping or a result object as 2-space indented JSON."""
    text = to_json_text(value)
    return ExportArtifact(filename=filename, content=text.encode("utf-8"), mime_type=JSON_MIME)


def _xlsx_value(value: Any) -> Any:
    """Drop control characters that cannot be stored in worksheet XML."""
    if isinstance(value, str):
        return ILLEGAL_CHARACTERS_RE.sub("", value)
    return value


def export_xlsx(records: Sequence[Mapping[str, Any]], filename: str = "export.xlsx") -> ExportArtifact:
    """Build a single-sheet (Sheet1) workbook; header row = record keys in first-seen order."""
    df = pd.DataFrame([{_xlsx_value(k): _xlsx_value(v) for k, v in r.items()} for r in records])
    buf = io.BytesIO()
    try:
        with pd.ExcelWriter(buf, engine="openpyxl") as writer:
            df.to_excel(writer, sheet_name=SHEET_NAME, index=False)
            # "=" で始まる文字列は数式ではなく文字列セルとして保存する
            for row in writer.sheets[SHEET_NAME].iter_rows():
                for cell in row:
                    if isinstance(cell.value, str) and cell.value.startswith("="):
                        cell.data_type = "s"
    except Exception as e:
        raise SerializationFailure(f"XLSX export failed: {e}") from e
    logger.debug(f"xlsx export {filename} records={len(records)} columns={len(df.columns)}")
    return ExportArtifact(filename=filename, content=buf.getvalue(), mime_type=XLSX_MIME)


def export_vcf(
    source: TabularDataset | Sequence[RowRecord],
    mapping: Mapping[str, str],
    filename: str = "contacts.vcf",
) -> ExportArtifact:
    """Project rows to contacts and render them as a .vcf artifact.

    Raises NoNameMapped / NoContactsFound (see contacts.vcf.build_vcf).
    """
    text = build_vcf(source, mapping)
    return ExportArtifact(filename=filename, content=text.encode("utf-8"), mime_type=VCF_MIME)
