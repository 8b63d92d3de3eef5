from __future__ import annotations

from dataclasses import dataclass

__all__ = [
    "ExportArtifact",
]


@dataclass(frozen=True)
class ExportArtifact:
    """Serialized export output, ready to be handed to a Sharer."""
    filename: str
    content: bytes
    mime_type: str

    @property
    def size(self) -> int:
        return len(self.content)

    def text(self, encoding: str = "utf-8") -> str:
        return self.content.decode(encoding)
