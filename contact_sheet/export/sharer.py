from __future__ import annotations

import base64
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from pathlib import Path
from typing import Any

from ..models.export_artifact import ExportArtifact

"""Sharer capability: how a serialized artifact leaves the pipeline.

Two variants:
- DownloadSharer: write the artifact into a directory (download fallback)
- NativeShareSharer: hand a data: URI payload to a platform share hook,
  falling back to another sharer if the hook fails
"""

__all__ = [
    "Sharer",
    "DownloadSharer",
    "NativeShareSharer",
    "to_data_uri",
]

logger = logging.getLogger(__name__)


def to_data_uri(artifact: ExportArtifact) -> str:
    mime = artifact.mime_type.split(";", 1)[0]
    encoded = base64.b64encode(artifact.content).decode("ascii")
    return f"data:{mime};base64,{encoded}"


class Sharer(ABC):
    @abstractmethod
    def share(self, artifact: ExportArtifact) -> Path | None:
        """Deliver ``artifact``. Returns the written path, or None when handed off."""


class DownloadSharer(Sharer):
    """Write artifacts under ``directory`` (created on first use)."""

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)

    def share(self, artifact: ExportArtifact) -> Path:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.directory / artifact.filename
        path.write_bytes(artifact.content)
        logger.debug(f"wrote {path} ({artifact.size} bytes)")
        return path


class NativeShareSharer(Sharer):
    """Delegate to a native share hook; on any hook error use ``fallback``."""

    def __init__(self, share_hook: Callable[[dict[str, Any]], Any], fallback: Sharer) -> None:
        self.share_hook = share_hook
        self.fallback = fallback

    def share(self, artifact: ExportArtifact) -> Path | None:
        payload = {
            "title": "Exported Data",
            "text": f"Sharing {artifact.filename}",
            "url": to_data_uri(artifact),
        }
        try:
            self.share_hook(payload)
        except Exception as e:
            logger.warning(f"native share failed for {artifact.filename}, falling back: {e}")
            return self.fallback.share(artifact)
        return None
