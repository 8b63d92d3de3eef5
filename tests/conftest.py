# Shared pytest fixtures
from __future__ import annotations

import tempfile
from pathlib import Path

import pandas as pd
import pytest

from contact_sheet.logging.init import reset_logging
from contact_sheet.models.tabular import TabularDataset


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("CONTACT_SHEET_CONFIG", raising=False)
        yield p


@pytest.fixture(autouse=True)
def _clean_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def sample_config_yaml() -> str:
    return """source_directory: ./data
output_directory: ./out
column_mapping:
  name: Name
  phone: Phone
  email: Email
  school: School
exports: [csv, json, xlsx, vcf, analysis, groups]
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "analyze.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


CONTACT_ROWS: list[list[object]] = [
    ["Name", "Phone", "Email", "School"],
    ["Ann Lee", "555-0001", "ann@example.com", "North"],
    ["Bob Ray", "", "bob@example.com", " North "],
    ["ann lee", "555-0003", "", "South"],
    ["", "555-0004", "x@example.com", ""],
]


def _make_csv(directory: Path, name: str, rows: list[list[object]] = CONTACT_ROWS) -> Path:
    path = directory / name
    pd.DataFrame(rows).to_csv(path, header=False, index=False)
    return path


def _make_xlsx(directory: Path, name: str, rows: list[list[object]] = CONTACT_ROWS) -> Path:
    path = directory / name
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        pd.DataFrame(rows).to_excel(writer, sheet_name="Sheet1", header=False, index=False)
    return path


@pytest.fixture()
def make_csv():
    return _make_csv


@pytest.fixture()
def make_xlsx():
    return _make_xlsx


@pytest.fixture()
def contact_dataset() -> TabularDataset:
    headers = [str(h) for h in CONTACT_ROWS[0]]
    rows = [dict(zip(headers, [str(v) for v in r])) for r in CONTACT_ROWS[1:]]
    return TabularDataset(headers=headers, rows=rows, source_name="contacts.csv")
