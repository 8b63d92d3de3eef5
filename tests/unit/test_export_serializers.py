from __future__ import annotations

import io
import json

import openpyxl
import pandas as pd
import pytest

from contact_sheet.analysis.engine import analyze
from contact_sheet.errors import NoNameMapped, SerializationFailure
from contact_sheet.export.serializers import (
    CSV_MIME,
    JSON_MIME,
    SHEET_NAME,
    VCF_MIME,
    XLSX_MIME,
    export_csv,
    export_json,
    export_vcf,
    export_xlsx,
    to_json_text,
)
from contact_sheet.models.tabular import TabularDataset
from contact_sheet.spreadsheet.reader import parse


def test_export_csv_header_from_first_record_and_crlf():
    artifact = export_csv([{"Name": "Ann", "Phone": "555"}, {"Name": "Bob", "Phone": ""}])
    assert artifact.filename == "export.csv"
    assert artifact.mime_type == CSV_MIME
    assert artifact.text() == "Name,Phone\r\nAnn,555\r\nBob,\r\n"


def test_export_csv_quotes_special_fields():
    artifact = export_csv([{"Name": "Doe, Jane", "Note": 'said "hi"\nbye'}])
    lines = artifact.text().split("\r\n", 1)
    assert lines[0] == "Name,Note"
    assert lines[1] == '"Doe, Jane","said ""hi""\nbye"\r\n'


def test_export_csv_empty_records():
    assert export_csv([]).content == b""


def test_export_csv_renders_booleans_and_none():
    artifact = export_csv([{"a": True, "b": False, "c": None}])
    assert artifact.text() == "a,b,c\r\ntrue,false,\r\n"


def test_export_csv_reparses_to_same_rows(contact_dataset: TabularDataset):
    artifact = export_csv(contact_dataset.rows, "contacts.csv")
    again = parse(artifact.content, artifact.filename)
    assert again.headers == contact_dataset.headers
    assert again.rows == contact_dataset.rows


def test_export_json_is_two_space_indented():
    artifact = export_json([{"Name": "Zoë"}])
    assert artifact.mime_type == JSON_MIME
    assert artifact.text() == '[\n  {\n    "Name": "Zoë"\n  }\n]'


def test_export_json_uses_to_dict(contact_dataset: TabularDataset):
    result = analyze(contact_dataset, {"name": "Name", "school": "School"})
    artifact = export_json([result], "analysis_results.json")
    loaded = json.loads(artifact.text())
    assert loaded == [result.to_dict()]
    assert loaded[0]["summary"]["totalRows"] == 4


def test_export_json_mapping_of_groups(contact_dataset: TabularDataset):
    result = analyze(contact_dataset, {"school": "School"})
    loaded = json.loads(export_json(result.grouping, "grouped_data.json").text())
    assert list(loaded) == ["North", "South", "Unknown"]
    assert len(loaded["North"]) == 2


def test_to_json_text_rejects_unserializable():
    with pytest.raises(SerializationFailure):
        to_json_text({"x": object()})


def test_to_json_text_rejects_circular_reference():
    value: list = []
    value.append(value)
    with pytest.raises(SerializationFailure):
        to_json_text(value)


def test_export_xlsx_single_sheet_union_of_keys():
    artifact = export_xlsx([{"Name": "Ann"}, {"Name": "Bob", "Phone": "555"}])
    assert artifact.filename == "export.xlsx"
    assert artifact.mime_type == XLSX_MIME
    book = pd.read_excel(io.BytesIO(artifact.content), sheet_name=None, dtype=str, keep_default_na=False)
    assert list(book) == [SHEET_NAME]
    sheet = book[SHEET_NAME]
    assert list(sheet.columns) == ["Name", "Phone"]
    assert sheet.to_dict("records") == [{"Name": "Ann", "Phone": ""}, {"Name": "Bob", "Phone": "555"}]


def test_export_xlsx_reparses(contact_dataset: TabularDataset):
    artifact = export_xlsx(contact_dataset.rows)
    again = parse(artifact.content, artifact.filename)
    assert again.headers == contact_dataset.headers
    assert again.total_rows == contact_dataset.total_rows


def test_export_vcf_artifact(contact_dataset: TabularDataset):
    artifact = export_vcf(contact_dataset, {"name": "Name", "phone": "Phone"})
    assert artifact.filename == "contacts.vcf"
    assert artifact.mime_type == VCF_MIME
    assert artifact.text().count("BEGIN:VCARD") == 3


def test_export_vcf_without_name_mapping(contact_dataset: TabularDataset):
    with pytest.raises(NoNameMapped):
        export_vcf(contact_dataset, {"phone": "Phone"})


def test_export_csv_reparses_embedded_commas_and_quotes():
    records = [
        {"Name": "Doe, Jane", "Note": 'said "hi"\r\nbye'},
        {"Name": "Plain", "Note": ""},
    ]
    again = parse(export_csv(records).content, "special.csv")
    assert again.rows == records


def test_export_xlsx_keeps_equals_prefixed_text_as_string():
    records = [{"Name": "=1+1", "Link": '=HYPERLINK("http://x")'}]
    artifact = export_xlsx(records)

    sheet = openpyxl.load_workbook(io.BytesIO(artifact.content))[SHEET_NAME]
    assert sheet["A2"].data_type == "s"
    assert sheet["A2"].value == "=1+1"
    assert parse(artifact.content, artifact.filename).rows == records


def test_export_xlsx_strips_illegal_control_characters():
    artifact = export_xlsx([{"Name": "Ann\x01Lee", "Phone": "555\x0b"}])
    again = parse(artifact.content, artifact.filename)
    assert again.rows == [{"Name": "AnnLee", "Phone": "555"}]
