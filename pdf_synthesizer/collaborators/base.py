"""Capability interfaces injected into the synthesizer and the session."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

__all__ = ["Base64Codec", "FileSource", "Persistence", "ProbeResult", "ViewerLauncher"]


@dataclass(frozen=True, slots=True)
class ProbeResult:
    """Outcome of an existence probe on a source locator."""

    exists: bool
    size_bytes: Optional[int] = None


class FileSource(ABC):
    """Read access to the file the user picked."""

    @abstractmethod
    async def read_text(self, locator: str) -> str:
        """Return the whole payload decoded as text."""

    @abstractmethod
    async def read_bytes_base64(self, locator: str) -> str:
        """Return the whole payload as a base64 string."""

    @abstractmethod
    async def probe_exists(self, locator: str) -> ProbeResult:
        """Report whether the locator exists and, if known, its size."""


class Persistence(ABC):
    """Write access to the directory produced PDFs are stored in."""

    @property
    @abstractmethod
    def documents_root(self) -> Path:
        """Directory produced PDFs are written into."""

    @abstractmethod
    async def write_bytes_base64(self, destination: Path, payload: str) -> None:
        """Decode ``payload`` and store it at ``destination``."""


class ViewerLauncher(ABC):
    """Hands a persisted PDF to the platform's default viewer."""

    @abstractmethod
    async def open(self, path: Path) -> None:
        """Open ``path`` with the default handler."""


class Base64Codec(ABC):
    """The single base64 codec shared by reads and writes."""

    @abstractmethod
    def encode(self, data: bytes) -> str:
        """Encode raw bytes to base64 text."""

    @abstractmethod
    def decode(self, payload: str) -> bytes:
        """Decode base64 text to raw bytes; raises ``ValueError`` when malformed."""
