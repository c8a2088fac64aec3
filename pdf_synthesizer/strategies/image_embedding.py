"""Embed a single PNG or JPEG payload, scaled to half size."""
from __future__ import annotations

from typing import Optional, Union

from pdf_synthesizer.collaborators.base import Base64Codec, FileSource
from pdf_synthesizer.collaborators.local import StandardBase64Codec
from pdf_synthesizer.errors import SourceUnreadable
from pdf_synthesizer.model.document_model import PageRef
from pdf_synthesizer.model.elements import ImagePayload, RasterFormat
from pdf_synthesizer.renderer.document_builder import DocumentBuilder
from pdf_synthesizer.utils.logger import get_logger

LOGGER = get_logger(__name__)

IMAGE_SCALE = 0.5
IMAGE_X = 50.0
IMAGE_Y = 400.0

_JPEG_SUBTYPES = {"jpeg", "jpg", "pjpeg"}
# Raster formats that are neither PNG nor JPEG; the builder rejects them by name.
_OTHER_RASTER_SUBTYPES = {"gif", "bmp", "tiff", "webp", "heic", "heif", "svg+xml", "x-icon"}


def raster_format_for(mime_type: str) -> Union[RasterFormat, str]:
    """Pick the raster format from the declared type alone, without content sniffing."""
    if mime_type == "image/png":
        return RasterFormat.PNG
    subtype = mime_type.partition("/")[2].split(";", 1)[0].strip().lower()
    if subtype in _JPEG_SUBTYPES:
        return RasterFormat.JPEG
    if subtype in _OTHER_RASTER_SUBTYPES:
        return subtype
    return RasterFormat.JPEG


class ImageEmbeddingStrategy:
    """Decode the payload, embed it once and draw it at a fixed position."""

    def __init__(
        self,
        builder: DocumentBuilder,
        source: FileSource,
        codec: Optional[Base64Codec] = None,
    ) -> None:
        self._builder = builder
        self._source = source
        self._codec = codec or StandardBase64Codec()

    async def render(self, payload: ImagePayload, page: PageRef) -> None:
        data = await self._read_bytes(payload)
        raster_format = raster_format_for(payload.mime_type)

        image = self._builder.embed_raster_image(page.document, data, raster_format)
        size = image.scale(IMAGE_SCALE)
        self._builder.draw_image(page, image, x=IMAGE_X, y=IMAGE_Y, width=size.width, height=size.height)
        LOGGER.info(
            "Placed %s image %dx%d at %.0fx%.0f",
            image.format.value,
            image.width,
            image.height,
            size.width,
            size.height,
        )

    async def _read_bytes(self, payload: ImagePayload) -> bytes:
        name = payload.source.display_name
        try:
            encoded = await self._source.read_bytes_base64(payload.source.locator)
        except OSError as exc:
            raise SourceUnreadable(f"Cannot read {name}: {exc}", cause=exc) from exc

        try:
            return self._codec.decode(encoded)
        except ValueError as exc:
            raise SourceUnreadable(f"Payload of {name} is not valid base64", cause=exc) from exc
