"""Descriptive block for payloads that are neither text nor images."""
from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional

from pdf_synthesizer.collaborators.base import FileSource, ProbeResult
from pdf_synthesizer.errors import SourceUnreadable
from pdf_synthesizer.model.document_model import PageRef
from pdf_synthesizer.model.elements import FallbackPayload, SourceFile
from pdf_synthesizer.renderer.document_builder import DocumentBuilder
from pdf_synthesizer.utils.units import format_kilobytes

HEADER_TEXT = "File Conversion Details"
HEADER_X, HEADER_Y, HEADER_SIZE = 50.0, 700.0, 16.0
BLOCK_X, BLOCK_Y, BLOCK_SIZE = 50.0, 650.0, 12.0
UNKNOWN = "unknown"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def describe_source(source: SourceFile, probe: ProbeResult, converted_on: datetime) -> str:
    """Build the multi-line details block for ``source``."""
    if probe.exists and probe.size_bytes is not None:
        size = format_kilobytes(probe.size_bytes)
    else:
        size = UNKNOWN
    return "\n".join(
        [
            f"Original File: {source.display_name}",
            f"Type: {source.declared_mime_type or UNKNOWN}",
            f"Size: {size}",
            f"Converted on: {converted_on.strftime(TIMESTAMP_FORMAT)}",
        ]
    )


class MetadataFallbackStrategy:
    """Render file name, type, size and conversion time."""

    def __init__(
        self,
        builder: DocumentBuilder,
        source: FileSource,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._builder = builder
        self._source = source
        self._clock = clock or datetime.now

    async def render(self, payload: FallbackPayload, page: PageRef) -> None:
        converted_on = self._clock()
        try:
            probe = await self._source.probe_exists(payload.source.locator)
        except OSError as exc:
            raise SourceUnreadable(f"Cannot inspect {payload.source.display_name}: {exc}", cause=exc) from exc

        self._builder.draw_text(page, HEADER_TEXT, x=HEADER_X, y=HEADER_Y, size=HEADER_SIZE)
        self._builder.draw_text(
            page,
            describe_source(payload.source, probe, converted_on),
            x=BLOCK_X,
            y=BLOCK_Y,
            size=BLOCK_SIZE,
        )
