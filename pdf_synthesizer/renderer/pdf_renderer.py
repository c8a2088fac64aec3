"""Serialize a finished document into PDF bytes using ReportLab."""
from __future__ import annotations

import io

from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from pdf_synthesizer.errors import SerializationError
from pdf_synthesizer.model.document_model import Document, PageCanvas
from pdf_synthesizer.model.elements import ImageOperation, RasterFormat, TextOperation
from pdf_synthesizer.renderer.utils import STANDARD_FONT, resolve_leading
from pdf_synthesizer.utils.logger import get_logger

LOGGER = get_logger(__name__)

PRODUCER = "pdf-synthesizer"


class PdfRenderer:
    """Replay the draw operations of every page onto a ReportLab canvas."""

    def __init__(self, *, compress: bool = True) -> None:
        self._compress = compress

    def render(self, document: Document) -> bytes:
        if not document.pages:
            raise SerializationError("Cannot serialize a document without pages")

        buffer = io.BytesIO()
        first = document.pages[0]
        pdf = canvas.Canvas(
            buffer,
            pagesize=(first.width, first.height),
            pageCompression=1 if self._compress else 0,
        )
        pdf.setTitle(document.metadata.get("title", "untitled"))
        pdf.setCreator(PRODUCER)
        pdf.setAuthor(document.metadata.get("author", PRODUCER))

        try:
            for page in document.pages:
                self._render_page(pdf, page)
            pdf.save()
        except SerializationError:
            raise
        except Exception as exc:
            raise SerializationError(f"PDF serialization failed: {exc}", cause=exc) from exc

        data = buffer.getvalue()
        LOGGER.debug("Serialized %d page(s) into %d bytes", len(document.pages), len(data))
        return data

    def _render_page(self, pdf: canvas.Canvas, page: PageCanvas) -> None:
        pdf.setPageSize((page.width, page.height))
        for operation in page.operations:
            if isinstance(operation, TextOperation):
                self._draw_text(pdf, page, operation)
            elif isinstance(operation, ImageOperation):
                self._draw_image(pdf, operation)
            else:
                raise SerializationError(f"Unknown draw operation: {operation!r}")
        pdf.showPage()

    def _draw_text(self, pdf: canvas.Canvas, page: PageCanvas, operation: TextOperation) -> None:
        pdf.saveState()
        pdf.setFillColorRGB(*operation.color.as_tuple())
        if operation.max_width is not None:
            # Glyphs right of x + max_width are clipped, never reflowed.
            clip = pdf.beginPath()
            clip.rect(operation.x, 0, operation.max_width, page.height)
            pdf.clipPath(clip, stroke=0, fill=0)

        text = pdf.beginText(operation.x, operation.y)
        text.setFont(
            STANDARD_FONT,
            operation.font_size,
            leading=resolve_leading(operation.font_size, operation.line_height),
        )
        text.textLines(operation.content, trim=0)
        pdf.drawText(text)
        pdf.restoreState()

    def _draw_image(self, pdf: canvas.Canvas, operation: ImageOperation) -> None:
        image = operation.image
        mask = "auto" if image.format is RasterFormat.PNG else None
        pdf.drawImage(
            ImageReader(io.BytesIO(image.data)),
            operation.x,
            operation.y,
            width=operation.width,
            height=operation.height,
            mask=mask,
        )
