"""Turn a selected source file into PDF bytes."""
from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional

from pdf_synthesizer.collaborators.base import Base64Codec, FileSource
from pdf_synthesizer.model.document_model import Document
from pdf_synthesizer.model.elements import SourceFile
from pdf_synthesizer.renderer.document_builder import DocumentBuilder
from pdf_synthesizer.strategies.dispatcher import Dispatcher
from pdf_synthesizer.strategies.image_embedding import ImageEmbeddingStrategy
from pdf_synthesizer.strategies.metadata_fallback import MetadataFallbackStrategy
from pdf_synthesizer.strategies.text_layout import TextLayoutStrategy
from pdf_synthesizer.utils.logger import get_logger

LOGGER = get_logger(__name__)

TITLE_X = 50.0
TITLE_Y = 800.0
TITLE_SIZE = 18.0


def title_for(source: SourceFile) -> str:
    return f"Converted from: {source.display_name}"


class PdfSynthesizer:
    """Own the whole ``(source, declared type, name) -> PDF bytes`` transformation.

    Every call works on a fresh Document, so the synthesizer keeps no
    state between conversions and may be reused once a call returns.
    """

    def __init__(
        self,
        source: FileSource,
        *,
        codec: Optional[Base64Codec] = None,
        clock: Optional[Callable[[], datetime]] = None,
        builder: Optional[DocumentBuilder] = None,
    ) -> None:
        self._builder = builder or DocumentBuilder()
        self._dispatcher = Dispatcher(
            text=TextLayoutStrategy(self._builder, source),
            image=ImageEmbeddingStrategy(self._builder, source, codec),
            fallback=MetadataFallbackStrategy(self._builder, source, clock),
        )

    async def build_document(self, selected: SourceFile) -> Document:
        """Create the document, draw the title line and run the matching strategy."""
        title = title_for(selected)
        document = self._builder.create_document(title=title)
        page = self._builder.add_page(document)
        self._builder.draw_text(page, title, x=TITLE_X, y=TITLE_Y, size=TITLE_SIZE)

        payload = self._dispatcher.resolve(selected)
        await self._dispatcher.dispatch(payload, page)
        return document

    def serialize(self, document: Document) -> bytes:
        """Freeze ``document`` and return its PDF byte stream."""
        data = self._builder.serialize(document)
        LOGGER.info(
            "Synthesized %r: %d page(s), %d bytes", document.metadata.get("title"), document.page_count, len(data)
        )
        return data

    async def synthesize(self, selected: SourceFile) -> bytes:
        """Return the finished PDF byte stream for ``selected``."""
        return self.serialize(await self.build_document(selected))
