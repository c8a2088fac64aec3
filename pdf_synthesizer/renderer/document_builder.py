"""Page allocation, drawing primitives and serialization for a Document."""
from __future__ import annotations

import io
import struct
from typing import Optional, Union

from PIL import Image

from pdf_synthesizer.errors import (
    CorruptImageData,
    DocumentStateError,
    InvalidGeometry,
    UnsupportedImageFormat,
)
from pdf_synthesizer.model.document_model import A4_HEIGHT_PT, A4_WIDTH_PT, Document, PageCanvas, PageRef
from pdf_synthesizer.model.elements import (
    BLACK,
    Color,
    EmbeddedImage,
    ImageOperation,
    RasterFormat,
    TextOperation,
)
from pdf_synthesizer.renderer.pdf_renderer import PdfRenderer
from pdf_synthesizer.utils.logger import get_logger
from pdf_synthesizer.utils.units import is_finite_number

LOGGER = get_logger(__name__)

_FORMAT_ALIASES = {
    "png": RasterFormat.PNG,
    "jpeg": RasterFormat.JPEG,
    "jpg": RasterFormat.JPEG,
}

# Pillow reports multi-picture JPEGs from cameras as MPO.
_PILLOW_FORMATS = {
    RasterFormat.PNG: {"PNG"},
    RasterFormat.JPEG: {"JPEG", "MPO"},
}

_DECODE_ERRORS = (OSError, SyntaxError, ValueError, EOFError, struct.error, Image.DecompressionBombError)


class DocumentBuilder:
    """Build a Document page by page and turn it into PDF bytes.

    The builder itself is stateless; every call names the document or
    page it acts on, so one builder can serve any number of conversions.
    """

    def __init__(self, renderer: Optional[PdfRenderer] = None) -> None:
        self._renderer = renderer or PdfRenderer()

    # ------------------------------------------------------------------
    # Pages
    def create_document(self, title: Optional[str] = None) -> Document:
        """Return an empty document with zero pages."""
        document = Document()
        if title is not None:
            document.metadata["title"] = title
        return document

    def add_page(self, document: Document, width: float = A4_WIDTH_PT, height: float = A4_HEIGHT_PT) -> PageRef:
        """Append a new page and return a handle to it."""
        self._ensure_mutable(document)
        document.pages.append(PageCanvas(width=width, height=height))
        return PageRef(document=document, index=len(document.pages) - 1)

    # ------------------------------------------------------------------
    # Drawing
    def draw_text(
        self,
        page: PageRef,
        content: str,
        *,
        x: float,
        y: float,
        size: float,
        max_width: Optional[float] = None,
        color: Color = BLACK,
        line_height: Optional[float] = None,
    ) -> TextOperation:
        """Append a text operation; wrapping and overflow are the caller's concern."""
        self._ensure_mutable(page.document)
        if not (is_finite_number(x) and is_finite_number(y)):
            raise InvalidGeometry(f"Text position must be finite, got ({x!r}, {y!r})")
        if not is_finite_number(size) or size <= 0:
            raise InvalidGeometry(f"Font size must be positive, got {size!r}")
        if max_width is not None and (not is_finite_number(max_width) or max_width <= 0):
            raise InvalidGeometry(f"Max width must be positive, got {max_width!r}")

        operation = TextOperation(
            content=content,
            x=float(x),
            y=float(y),
            font_size=float(size),
            max_width=max_width,
            color=color,
            line_height=line_height,
        )
        page.canvas.operations.append(operation)
        return operation

    def embed_raster_image(
        self, document: Document, data: bytes, format: Union[RasterFormat, str]
    ) -> EmbeddedImage:
        """Decode ``data`` as PNG or JPEG and register it with ``document``."""
        self._ensure_mutable(document)
        raster_format = self._coerce_format(format)
        if not data:
            raise CorruptImageData(f"Empty {raster_format.value.upper()} payload")

        try:
            with Image.open(io.BytesIO(data)) as image:
                detected = image.format
                image.load()
                width, height = image.size
        except _DECODE_ERRORS as exc:
            raise CorruptImageData(
                f"Could not decode {raster_format.value.upper()} image: {exc}", cause=exc
            ) from exc

        if detected not in _PILLOW_FORMATS[raster_format]:
            raise CorruptImageData(
                f"Expected {raster_format.value.upper()} data but found {detected or 'unknown'}"
            )

        embedded = EmbeddedImage(format=raster_format, data=bytes(data), width=width, height=height)
        document.images.append(embedded)
        LOGGER.debug("Embedded %s image %dx%d", raster_format.value, width, height)
        return embedded

    def draw_image(
        self,
        page: PageRef,
        image: EmbeddedImage,
        *,
        x: float,
        y: float,
        width: float,
        height: float,
    ) -> ImageOperation:
        """Append an image operation for an image embedded in the same document."""
        self._ensure_mutable(page.document)
        if not page.document.owns(image):
            raise DocumentStateError("Image was embedded into a different document")
        if not all(is_finite_number(value) for value in (x, y, width, height)):
            raise InvalidGeometry(f"Image geometry must be finite, got {(x, y, width, height)!r}")
        if width <= 0 or height <= 0:
            raise InvalidGeometry(f"Image size must be positive, got {width!r}x{height!r}")

        operation = ImageOperation(image=image, x=float(x), y=float(y), width=float(width), height=float(height))
        page.canvas.operations.append(operation)
        return operation

    # ------------------------------------------------------------------
    # Output
    def serialize(self, document: Document) -> bytes:
        """Produce the PDF byte stream and freeze the document."""
        data = self._renderer.render(document)
        document.frozen = True
        return data

    # ------------------------------------------------------------------
    # Internal helpers
    @staticmethod
    def _ensure_mutable(document: Document) -> None:
        if document.frozen:
            raise DocumentStateError("Document has already been serialized")

    @staticmethod
    def _coerce_format(format: Union[RasterFormat, str]) -> RasterFormat:
        if isinstance(format, RasterFormat):
            return format
        resolved = _FORMAT_ALIASES.get(str(format).lower())
        if resolved is None:
            raise UnsupportedImageFormat(f"Unsupported raster format: {format}")
        return resolved
