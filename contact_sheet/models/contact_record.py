from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

__all__ = [
    "ContactRecord",
]


@dataclass(frozen=True)
class ContactRecord:
    """Normalized contact shape produced by contacts.projector (VCF export only).

    Unmapped fields stay None. Values are copied verbatim from the row.
    """
    name: str | None = None
    phone: str | None = None
    email: str | None = None
    organization: str | None = None  # fed by the `school` mapping
    address: str | None = None

    def to_dict(self) -> dict[str, Any]:
        # None (未マッピング) のキーは出力しない
        return {k: v for k, v in asdict(self).items() if v is not None}
