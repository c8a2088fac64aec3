"""Helpers to persist the in-memory document graph for debugging."""
from __future__ import annotations

import json
from dataclasses import fields, is_dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from pdf_synthesizer.model.document_model import Document
from pdf_synthesizer.model.elements import EmbeddedImage


class DebugDumper:
    """Writes the document graph onto disk for inspection."""

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def dump(self, document: Document) -> Path:
        """Persist ``document`` as JSON and return the written path."""
        self.directory.mkdir(parents=True, exist_ok=True)
        target = self.directory / "document.json"
        target.write_text(json.dumps(self._serialize(document), indent=2))
        return target

    def _serialize(self, value: Any) -> Any:
        if isinstance(value, EmbeddedImage):
            return {
                "format": value.format.value,
                "width": value.width,
                "height": value.height,
                "bytes": len(value.data),
            }
        if is_dataclass(value):
            payload = {f.name: self._serialize(getattr(value, f.name)) for f in fields(value)}
            payload["kind"] = type(value).__name__
            return payload
        if isinstance(value, Enum):
            return value.value
        if isinstance(value, dict):
            return {k: self._serialize(v) for k, v in value.items()}
        if isinstance(value, (list, tuple)):
            return [self._serialize(v) for v in value]
        return value
