"""Route a selected source to exactly one synthesis strategy."""
from __future__ import annotations

from pdf_synthesizer.model.document_model import PageRef
from pdf_synthesizer.model.elements import (
    FallbackPayload,
    ImagePayload,
    Payload,
    SourceFile,
    TextPayload,
)
from pdf_synthesizer.strategies.image_embedding import ImageEmbeddingStrategy
from pdf_synthesizer.strategies.metadata_fallback import MetadataFallbackStrategy
from pdf_synthesizer.strategies.text_layout import TextLayoutStrategy
from pdf_synthesizer.utils.logger import get_logger

LOGGER = get_logger(__name__)

TEXT_PREFIX = "text/"
IMAGE_PREFIX = "image/"


class Dispatcher:
    """Resolve the declared type once, then delegate to the matching strategy."""

    def __init__(
        self,
        text: TextLayoutStrategy,
        image: ImageEmbeddingStrategy,
        fallback: MetadataFallbackStrategy,
    ) -> None:
        self._text = text
        self._image = image
        self._fallback = fallback

    @staticmethod
    def resolve(source: SourceFile) -> Payload:
        """Map the declared MIME type to a payload variant; first prefix match wins."""
        mime_type = source.declared_mime_type
        if mime_type is not None and mime_type.startswith(TEXT_PREFIX):
            return TextPayload(source=source)
        if mime_type is not None and mime_type.startswith(IMAGE_PREFIX):
            return ImagePayload(source=source, mime_type=mime_type)
        return FallbackPayload(source=source)

    async def dispatch(self, payload: Payload, page: PageRef) -> None:
        LOGGER.info("Rendering %s as %s", payload.source.display_name, type(payload).__name__)
        if isinstance(payload, TextPayload):
            await self._text.render(payload, page)
        elif isinstance(payload, ImagePayload):
            await self._image.render(payload, page)
        else:
            await self._fallback.render(payload, page)
