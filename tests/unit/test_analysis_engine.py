from __future__ import annotations

from contact_sheet.analysis.engine import (
    UNKNOWN_GROUP,
    analyze,
    detect_duplicates,
    find_contact_candidates,
    find_missing_data,
    group_by_column,
    has_contact_info,
)
from contact_sheet.models.column_mapping import ColumnMapping
from contact_sheet.models.tabular import TabularDataset


def _rows(column: str, values: list[str]) -> list[dict[str, str]]:
    return [{column: v, "idx": str(i)} for i, v in enumerate(values)]


def test_duplicates_first_occurrence_exempt_empty_always_flagged():
    rows = _rows("N", ["Ann", "Bob", "ann", "Bob", ""])
    flagged = detect_duplicates(rows, "N")
    assert [r["idx"] for r in flagged] == ["2", "3", "4"]


def test_duplicates_trim_and_casefold():
    rows = _rows("N", ["  Jane Doe", "JANE DOE  ", "jane doe"])
    assert [r["idx"] for r in detect_duplicates(rows, "N")] == ["1", "2"]


def test_duplicates_whitespace_only_counts_as_empty():
    rows = _rows("N", ["   ", "   "])
    assert len(detect_duplicates(rows, "N")) == 2


def test_grouping_trims_and_buckets_unknown():
    rows = _rows("S", ["X", " X ", "", "Y"])
    groups = group_by_column(rows, "S")
    assert list(groups.keys()) == ["X", UNKNOWN_GROUP, "Y"]
    assert {k: len(v) for k, v in groups.items()} == {"X": 2, "Unknown": 1, "Y": 1}


def test_grouping_is_case_sensitive():
    groups = group_by_column(_rows("S", ["north", "North"]), "S")
    assert set(groups) == {"north", "North"}


def test_missing_data_whitespace_counts_as_missing():
    rows = [
        {"N": "Ann", "P": "  "},
        {"N": "", "P": "555"},
        {"N": "Bob", "P": "556"},
    ]
    flagged = find_missing_data(rows, ["N", "P"])
    assert flagged == [rows[0], rows[1]]


def test_missing_data_absent_key_counts_as_missing():
    assert find_missing_data([{"N": "Ann"}], ["N", "P"]) == [{"N": "Ann"}]


def test_missing_data_empty_mapping_flags_nothing():
    assert find_missing_data([{"N": ""}], []) == []


def test_contact_candidates_rules():
    mapping = {"name": "N", "phone": "P", "email": "E"}
    jane = {"N": "Jane", "P": "", "E": "j@x.com"}
    nameless = {"N": "", "P": "555", "E": ""}
    unreachable = {"N": "Zed", "P": "", "E": ""}
    assert find_contact_candidates([jane, nameless, unreachable], mapping) == [jane]


def test_contact_candidates_require_name_mapping():
    assert find_contact_candidates([{"P": "555"}], {"phone": "P"}) == []


def test_contact_candidates_name_only_mapping_yields_none():
    assert find_contact_candidates([{"N": "Ann"}], {"name": "N"}) == []


def test_has_contact_info_checks_mapping_only():
    assert has_contact_info({"name": "N", "email": "E"}) is True
    assert has_contact_info({"name": "N", "phone": "P"}) is True
    assert has_contact_info({"name": "N"}) is False
    assert has_contact_info({"phone": "P", "email": "E"}) is False


def test_analyze_full(contact_dataset: TabularDataset):
    mapping = ColumnMapping({"name": "Name", "phone": "Phone", "email": "Email", "school": "School"})
    result = analyze(contact_dataset, mapping)

    assert result.summary.total_rows == 4
    assert result.summary.mapped_fields == 4
    assert result.summary.has_contact_info is True
    # "ann lee" repeats "Ann Lee"; the nameless row is always flagged
    assert [r["Phone"] for r in result.duplicates] == ["555-0003", "555-0004"]
    assert {k: len(v) for k, v in result.grouping.items()} == {"North": 2, "South": 1, "Unknown": 1}
    assert len(result.missing_data) == 3
    assert [r["Name"] for r in result.contact_candidates] == ["Ann Lee", "Bob Ray", "ann lee"]


def test_analyze_empty_mapping(contact_dataset: TabularDataset):
    result = analyze(contact_dataset, {})
    assert result.summary.mapped_fields == 0
    assert result.summary.has_contact_info is False
    assert result.duplicates == []
    assert result.grouping == {}
    assert result.missing_data == []
    assert result.contact_candidates == []


def test_analyze_is_idempotent(contact_dataset: TabularDataset):
    mapping = {"name": "Name", "phone": "Phone", "school": "School"}
    first = analyze(contact_dataset, mapping)
    second = analyze(contact_dataset, mapping)
    assert first == second
    assert first.to_dict() == second.to_dict()


def test_analyze_does_not_mutate_dataset(contact_dataset: TabularDataset):
    before = [dict(r) for r in contact_dataset.rows]
    analyze(contact_dataset, {"name": "Name", "school": "School"})
    assert contact_dataset.rows == before


def test_sorted_groups_largest_first(contact_dataset: TabularDataset):
    result = analyze(contact_dataset, {"school": "School"})
    assert [k for k, _ in result.sorted_groups()] == ["North", "South", "Unknown"]


def test_result_to_dict_shape(contact_dataset: TabularDataset):
    d = analyze(contact_dataset, {"name": "Name", "email": "Email"}).to_dict()
    assert set(d) == {"summary", "duplicates", "grouping", "missingData", "contactCandidates"}
    assert d["summary"] == {"totalRows": 4, "mappedFields": 2, "hasContactInfo": True}
