"""Filesystem and operating-system implementations of the collaborators."""
from __future__ import annotations

import asyncio
import base64
import binascii
import mimetypes
import os
import shutil
import sys
from pathlib import Path
from typing import Optional

from pdf_synthesizer.collaborators.base import (
    Base64Codec,
    FileSource,
    Persistence,
    ProbeResult,
    ViewerLauncher,
)
from pdf_synthesizer.errors import PersistenceFailure, SourceUnreadable, ViewerUnavailable
from pdf_synthesizer.utils.logger import get_logger

LOGGER = get_logger(__name__)

_FALLBACK_TYPES = {
    ".txt": "text/plain",
    ".md": "text/markdown",
    ".csv": "text/csv",
    ".log": "text/plain",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".bmp": "image/bmp",
    ".tiff": "image/tiff",
    ".webp": "image/webp",
    ".pdf": "application/pdf",
    ".zip": "application/zip",
}


def guess_mime_type(path: Path) -> Optional[str]:
    """Best-effort MIME type from the file extension, as a document picker reports it."""
    ext = path.suffix.lower()
    if ext in _FALLBACK_TYPES:
        return _FALLBACK_TYPES[ext]
    mime_type, _ = mimetypes.guess_type(path.name)
    return mime_type


class StandardBase64Codec(Base64Codec):
    """Strict RFC 4648 base64."""

    def encode(self, data: bytes) -> str:
        return base64.b64encode(data).decode("ascii")

    def decode(self, payload: str) -> bytes:
        try:
            return base64.b64decode(payload, validate=True)
        except (binascii.Error, UnicodeEncodeError) as exc:
            raise ValueError(f"Malformed base64 payload: {exc}") from exc


class LocalFileSource(FileSource):
    """Reads source files from the local filesystem on worker threads."""

    def __init__(self, codec: Optional[Base64Codec] = None, encoding: str = "utf-8") -> None:
        self._codec = codec or StandardBase64Codec()
        self._encoding = encoding

    async def read_text(self, locator: str) -> str:
        # Raw bytes: line endings reach the layout exactly as stored.
        try:
            data = await asyncio.to_thread(Path(locator).read_bytes)
            return data.decode(self._encoding)
        except (OSError, UnicodeDecodeError) as exc:
            raise SourceUnreadable(f"Cannot read text from {locator}: {exc}", cause=exc) from exc

    async def read_bytes_base64(self, locator: str) -> str:
        try:
            data = await asyncio.to_thread(Path(locator).read_bytes)
        except OSError as exc:
            raise SourceUnreadable(f"Cannot read bytes from {locator}: {exc}", cause=exc) from exc
        return self._codec.encode(data)

    async def probe_exists(self, locator: str) -> ProbeResult:
        try:
            info = await asyncio.to_thread(os.stat, locator)
        except (FileNotFoundError, NotADirectoryError):
            return ProbeResult(exists=False)
        except OSError as exc:
            raise SourceUnreadable(f"Cannot inspect {locator}: {exc}", cause=exc) from exc
        return ProbeResult(exists=True, size_bytes=info.st_size)


class FileSystemPersistence(Persistence):
    """Stores produced PDFs below a documents directory."""

    def __init__(self, documents_root: Path, codec: Optional[Base64Codec] = None) -> None:
        self._documents_root = Path(documents_root)
        self._codec = codec or StandardBase64Codec()

    @property
    def documents_root(self) -> Path:
        return self._documents_root

    async def write_bytes_base64(self, destination: Path, payload: str) -> None:
        try:
            data = self._codec.decode(payload)
        except ValueError as exc:
            raise PersistenceFailure(f"Refusing to persist malformed payload: {exc}", cause=exc) from exc

        try:
            await asyncio.to_thread(self._write, Path(destination), data)
        except OSError as exc:
            raise PersistenceFailure(f"Cannot write {destination}: {exc}", cause=exc) from exc
        LOGGER.info("Persisted %d bytes to %s", len(data), destination)

    @staticmethod
    def _write(destination: Path, data: bytes) -> None:
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_bytes(data)


class SystemViewerLauncher(ViewerLauncher):
    """Opens files with the operating system's default handler."""

    async def open(self, path: Path) -> None:
        path = Path(path)
        if not path.is_file():
            raise ViewerUnavailable(f"PDF not found: {path}")

        if sys.platform.startswith("win"):
            try:
                await asyncio.to_thread(os.startfile, str(path))  # type: ignore[attr-defined]
            except OSError as exc:
                raise ViewerUnavailable(f"No handler for {path.name}: {exc}", cause=exc) from exc
            return

        if sys.platform == "darwin":
            command, target = "open", str(path)
        else:
            command, target = "xdg-open", path.resolve().as_uri()

        executable = shutil.which(command)
        if executable is None:
            raise ViewerUnavailable(f"No default viewer available ({command} not found)")

        try:
            process = await asyncio.create_subprocess_exec(executable, target)
            return_code = await process.wait()
        except OSError as exc:
            raise ViewerUnavailable(f"Failed to launch {command}: {exc}", cause=exc) from exc
        if return_code != 0:
            raise ViewerUnavailable(f"{command} exited with status {return_code} for {path.name}")
        LOGGER.info("Opened %s with %s", path.name, command)
