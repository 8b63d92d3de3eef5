from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import Any

from ..errors import MappingError

"""ColumnMapping model: standard contact field -> source header name.

The standard fields follow the column mapping form
(name is the only required field). The set is open: any
other key is accepted and participates in missing-data detection.
"""

__all__ = [
    "STANDARD_FIELDS",
    "ColumnMapping",
]

# (key, label, required)
STANDARD_FIELDS: tuple[tuple[str, str, bool], ...] = (
    ("name", "Name", True),
    ("phone", "Phone", False),
    ("email", "Email", False),
    ("school", "School/Organization", False),
    ("address", "Address", False),
)


class ColumnMapping(Mapping[str, str]):
    """Incrementally built mapping from field key to header name.

    At most one header per field: ``assign`` on an already mapped field
    replaces the previous header (last write wins).
    """

    def __init__(self, entries: Mapping[str, str] | Iterable[tuple[str, str]] | None = None) -> None:
        self._entries: dict[str, str] = {}
        if entries is None:
            return
        items = entries.items() if isinstance(entries, Mapping) else entries
        for key, header in items:
            self.assign(key, header)

    def assign(self, field: str, header: str | None) -> None:
        """Map ``field`` to ``header``. ``None`` / "" removes the entry ("Not mapped")."""
        if header is None or header == "":
            self.unassign(field)
            return
        self._entries[field] = header

    def unassign(self, field: str) -> None:
        self._entries.pop(field, None)

    def header_for(self, field: str) -> str | None:
        return self._entries.get(field)

    def validate(self, headers: Iterable[str]) -> None:
        """Raise MappingError if any mapped header is not in ``headers``."""
        known = set(headers)
        unknown = {f: h for f, h in self._entries.items() if h not in known}
        if unknown:
            detail = ", ".join(f"{f}->{h!r}" for f, h in sorted(unknown.items()))
            raise MappingError(f"mapping references unknown headers: {detail}")

    def to_dict(self) -> dict[str, str]:
        return dict(self._entries)

    def __getitem__(self, key: str) -> str:
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, Mapping):
            return dict(self._entries) == dict(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"ColumnMapping({self._entries!r})"
