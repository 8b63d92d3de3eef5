from __future__ import annotations

from collections.abc import Mapping, Sequence

from ..models.contact_record import ContactRecord
from ..models.tabular import RowRecord

"""Contact projector: RowRecord + ColumnMapping -> ContactRecord."""

__all__ = [
    "FIELD_TO_CONTACT_ATTR",
    "project",
    "project_row",
]

# standard field key -> ContactRecord attribute
FIELD_TO_CONTACT_ATTR: dict[str, str] = {
    "name": "name",
    "phone": "phone",
    "email": "email",
    "school": "organization",
    "address": "address",
}


def project_row(row: RowRecord, mapping: Mapping[str, str]) -> ContactRecord:
    """Copy each mapped field verbatim; unmapped fields stay None."""
    values: dict[str, str] = {}
    for field_key, attr in FIELD_TO_CONTACT_ATTR.items():
        header = mapping.get(field_key)
        if header:
            values[attr] = row.get(header, "")
    return ContactRecord(**values)


def project(rows: Sequence[RowRecord], mapping: Mapping[str, str]) -> list[ContactRecord]:
    """Project rows into contacts, dropping rows whose mapped name is empty.

    Returns an empty list when ``name`` is not mapped.
    """
    name_col = mapping.get("name")
    if not name_col:
        return []
    return [project_row(row, mapping) for row in rows if row.get(name_col)]
