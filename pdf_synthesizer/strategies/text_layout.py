"""Line-by-line placement of text payloads with page-break overflow."""
from __future__ import annotations

from typing import Optional

from pdf_synthesizer.collaborators.base import FileSource
from pdf_synthesizer.errors import SourceUnreadable
from pdf_synthesizer.model.document_model import PageRef
from pdf_synthesizer.model.elements import TextPayload
from pdf_synthesizer.renderer.document_builder import DocumentBuilder
from pdf_synthesizer.renderer.utils import measure_text
from pdf_synthesizer.utils.logger import get_logger
from pdf_synthesizer.utils.text_normalizer import TextNormalizer

LOGGER = get_logger(__name__)

TEXT_START_Y = 750.0
BOTTOM_MARGIN = 50.0
FONT_SIZE = 12.0
LINE_HEIGHT = 14.0
LEFT_MARGIN = 50.0
MAX_TEXT_WIDTH = 500.0


class TextLayoutStrategy:
    """Draw every line of a text payload, opening new pages as the cursor runs out."""

    def __init__(
        self,
        builder: DocumentBuilder,
        source: FileSource,
        normalizer: Optional[TextNormalizer] = None,
    ) -> None:
        self._builder = builder
        self._source = source
        self._normalizer = normalizer or TextNormalizer()

    async def render(self, payload: TextPayload, page: PageRef) -> None:
        try:
            text = await self._source.read_text(payload.source.locator)
        except (OSError, UnicodeDecodeError) as exc:
            raise SourceUnreadable(f"Cannot read {payload.source.display_name}: {exc}", cause=exc) from exc
        self.layout(text, page)

    def layout(self, text: str, page: PageRef) -> PageRef:
        """Place ``text`` starting on ``page``; return the page holding the last line."""
        cursor = TEXT_START_Y
        clipped = 0
        for line in self._normalizer.split_lines(text):
            # A baseline at the margin itself counts as a collision, so a page holds
            # 50 lines (750 down to 64) and 120 lines split 50/50/20.
            if cursor <= BOTTOM_MARGIN:
                page = self._builder.add_page(page.document)
                cursor = TEXT_START_Y
                LOGGER.debug("Text overflow; opened page %d", page.index + 1)

            self._builder.draw_text(
                page,
                line,
                x=LEFT_MARGIN,
                y=cursor,
                size=FONT_SIZE,
                max_width=MAX_TEXT_WIDTH,
            )
            if line and measure_text(line, FONT_SIZE) > MAX_TEXT_WIDTH:
                clipped += 1
            cursor -= LINE_HEIGHT

        if clipped:
            LOGGER.debug("%d line(s) exceed %.0fpt and will be clipped", clipped, MAX_TEXT_WIDTH)
        return page
