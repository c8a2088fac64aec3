"""In-memory collaborators for tests and embedding without real storage."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from pdf_synthesizer.collaborators.base import (
    Base64Codec,
    FileSource,
    Persistence,
    ProbeResult,
    ViewerLauncher,
)
from pdf_synthesizer.collaborators.local import StandardBase64Codec
from pdf_synthesizer.errors import PersistenceFailure, SourceUnreadable, ViewerUnavailable


@dataclass
class InMemoryFile:
    """Payload registered under a locator."""

    data: bytes
    exists: bool = True


class InMemoryFileSource(FileSource):
    """Serves payloads from a dictionary keyed by locator."""

    def __init__(self, codec: Optional[Base64Codec] = None) -> None:
        self._codec = codec or StandardBase64Codec()
        self._files: Dict[str, InMemoryFile] = {}
        self.reads: List[str] = []

    def add(self, locator: str, data: bytes | str, *, exists: bool = True) -> None:
        """Register ``data`` (text is stored UTF-8 encoded) under ``locator``."""
        if isinstance(data, str):
            data = data.encode("utf-8")
        self._files[locator] = InMemoryFile(data=data, exists=exists)

    def _lookup(self, locator: str) -> InMemoryFile:
        self.reads.append(locator)
        entry = self._files.get(locator)
        if entry is None or not entry.exists:
            raise SourceUnreadable(f"No such source: {locator}")
        return entry

    async def read_text(self, locator: str) -> str:
        entry = self._lookup(locator)
        try:
            return entry.data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise SourceUnreadable(f"{locator} is not UTF-8 text", cause=exc) from exc

    async def read_bytes_base64(self, locator: str) -> str:
        return self._codec.encode(self._lookup(locator).data)

    async def probe_exists(self, locator: str) -> ProbeResult:
        entry = self._files.get(locator)
        if entry is None or not entry.exists:
            return ProbeResult(exists=False)
        return ProbeResult(exists=True, size_bytes=len(entry.data))


class InMemoryPersistence(Persistence):
    """Keeps written files in a dictionary keyed by destination path."""

    def __init__(self, documents_root: Path = Path("/documents"), codec: Optional[Base64Codec] = None) -> None:
        self._documents_root = Path(documents_root)
        self._codec = codec or StandardBase64Codec()
        self.files: Dict[Path, bytes] = {}

    @property
    def documents_root(self) -> Path:
        return self._documents_root

    async def write_bytes_base64(self, destination: Path, payload: str) -> None:
        try:
            self.files[Path(destination)] = self._codec.decode(payload)
        except ValueError as exc:
            raise PersistenceFailure(f"Malformed payload for {destination}", cause=exc) from exc


class RecordingViewerLauncher(ViewerLauncher):
    """Records open requests; fails for paths missing from ``persistence``."""

    def __init__(self, persistence: Optional[InMemoryPersistence] = None) -> None:
        self._persistence = persistence
        self.opened: List[Path] = []

    async def open(self, path: Path) -> None:
        path = Path(path)
        if self._persistence is not None and path not in self._persistence.files:
            raise ViewerUnavailable(f"PDF not found: {path}")
        self.opened.append(path)
