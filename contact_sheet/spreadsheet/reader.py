from __future__ import annotations

import csv
import io
import logging
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any

import pandas as pd

from ..errors import EmptySource, ReadFailure, SheetHeaderError, UnsupportedFormat
from ..models.tabular import RowRecord, TabularDataset

"""Tabular parser: spreadsheet bytes -> TabularDataset.

- 1行目をヘッダ行として扱い、2行目以降をデータ行。
- CSV は標準 csv モジュール (RFC-4180 quoting)、xlsx/xls/ods は pandas で
  先頭シートのみ読み込む。
- 全セルは str に正規化し、空セル / 欠落セルは "" とする。
"""

__all__ = [
    "SUPPORTED_EXTENSIONS",
    "detect_extension",
    "parse",
    "parse_file",
    "read_csv_records",
    "read_first_sheet",
    "normalize_records",
]

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = ("csv", "xlsx", "xls", "ods")
WORKBOOK_EXTENSIONS = frozenset({"xlsx", "xls", "ods"})


def detect_extension(filename: str) -> str:
    """Return the lower-cased extension of ``filename`` or raise UnsupportedFormat."""
    ext = Path(filename).suffix.lower().lstrip(".")
    if ext not in SUPPORTED_EXTENSIONS:
        raise UnsupportedFormat(
            f"unsupported file format '{ext or filename}': use .xlsx, .xls, .csv or .ods"
        )
    return ext


def parse(data: bytes, filename: str) -> TabularDataset:
    """Parse raw spreadsheet bytes into a TabularDataset.

    Args:
        data: Fully buffered file content
        filename: Original file name; its extension selects the parser

    Raises:
        UnsupportedFormat: extension is not csv / xlsx / xls / ods
        EmptySource: no sheets, no header, or zero data rows
        ReadFailure: bytes could not be decoded / read as a workbook
    """
    ext = detect_extension(filename)
    logger.debug(f"parsing {filename} ext={ext} bytes={len(data)}")
    if ext == "csv":
        records = read_csv_records(data)
        dataset = normalize_records(records, filename, drop_empty_rows=False)
    else:
        records = read_first_sheet(data, filename)
        dataset = normalize_records(records, filename, drop_empty_rows=True)
    logger.debug(
        f"parsed {filename} headers={len(dataset.headers)} rows={dataset.total_rows}"
    )
    return dataset


def parse_file(path: Path) -> TabularDataset:
    """Read ``path`` and parse it. OSError is reported as ReadFailure."""
    path = Path(path)
    # 拡張子チェックを先に行い、未対応ファイルは読み込まない
    detect_extension(path.name)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise ReadFailure(f"failed to read {path.name}: {e}") from e
    return parse(data, path.name)


def read_csv_records(data: bytes) -> list[list[str]]:
    """Split CSV bytes into records. Blank lines are skipped entirely."""
    try:
        text = data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ReadFailure(f"CSV is not valid UTF-8: {e}") from e
    try:
        reader = csv.reader(io.StringIO(text, newline=""))
        return [record for record in reader if record]
    except csv.Error as e:
        raise ReadFailure(f"CSV parsing error: {e}") from e


def read_first_sheet(data: bytes, filename: str = "<workbook>") -> list[list[Any]]:
    """Read the first sheet of a workbook as raw cell rows (no header applied).

    The engine (openpyxl / xlrd / odf) is chosen by pandas from the content.
    ``keep_default_na=False`` keeps text such as "NA" or "null" as-is.
    """
    try:
        xls = pd.ExcelFile(io.BytesIO(data))
    except Exception as e:
        raise ReadFailure(f"Excel parsing error in {filename}: {e}") from e
    with xls:
        if not xls.sheet_names:
            raise EmptySource(f"no worksheets found in {filename}")
        first = xls.sheet_names[0]
        try:
            df = xls.parse(first, header=None, dtype=object, keep_default_na=False)
        except Exception as e:
            raise ReadFailure(f"Excel parsing error in {filename} sheet '{first}': {e}") from e
    return [list(raw) for raw in df.itertuples(index=False, name=None)]


def _cell_to_str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    try:
        if pd.isna(value):
            return ""
    except (TypeError, ValueError):
        pass
    return str(value)


def _dedupe_headers(names: Iterable[str]) -> list[str]:
    """Disambiguate repeated header names the way pandas does (A, A.1, A.2)."""
    counts: dict[str, int] = {}
    taken: set[str] = set()
    out: list[str] = []
    for name in names:
        candidate = name
        while candidate in taken:
            counts[name] = counts.get(name, 0) + 1
            candidate = f"{name}.{counts[name]}"
        taken.add(candidate)
        out.append(candidate)
    return out


def normalize_records(
    records: Sequence[Sequence[Any]],
    source_name: str,
    *,
    drop_empty_rows: bool = False,
) -> TabularDataset:
    """Build a TabularDataset from raw records using the first record as header.

    Steps:
    1. Validate at least one record exists
    2. Header cells -> str; headers that are empty after trimming are discarded
       (kept headers remember their source column position)
    3. Remaining records become rows; missing cells -> "", surplus cells dropped
    4. drop_empty_rows: skip rows whose cells are all empty (workbook path)
    """
    if not records:
        raise EmptySource(f"{source_name} is empty")

    header_cells = [_cell_to_str(c) for c in records[0]]
    positions = [i for i, text in enumerate(header_cells) if text.strip() != ""]
    if not positions:
        raise SheetHeaderError(f"{source_name}: first row has no usable header names")
    headers = _dedupe_headers(header_cells[i] for i in positions)

    rows: list[RowRecord] = []
    for raw in records[1:]:
        cells = [_cell_to_str(c) for c in raw]
        if drop_empty_rows and all(c == "" for c in cells):
            continue
        row: RowRecord = {}
        for header, pos in zip(headers, positions):
            row[header] = cells[pos] if pos < len(cells) else ""
        rows.append(row)

    if not rows:
        raise EmptySource(f"{source_name} has no data rows below the header row")

    return TabularDataset(headers=headers, rows=rows, source_name=source_name, total_rows=len(rows))
