"""Value objects flowing through the synthesis pipeline."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


@dataclass(frozen=True, slots=True)
class SourceFile:
    """A file chosen by the user, described by the picker that selected it."""

    locator: str
    display_name: str
    declared_mime_type: Optional[str] = None


@dataclass(frozen=True, slots=True)
class Color:
    """RGB color with channels in the 0..1 range."""

    red: float = 0.0
    green: float = 0.0
    blue: float = 0.0

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.red, self.green, self.blue)


BLACK = Color(0.0, 0.0, 0.0)


class RasterFormat(str, Enum):
    """Raster encodings the document builder can embed."""

    PNG = "png"
    JPEG = "jpeg"


@dataclass(frozen=True, slots=True)
class ImageSize:
    """Width and height pair in points."""

    width: float
    height: float


@dataclass(eq=False, slots=True)
class EmbeddedImage:
    """Decoded raster resource owned by a single document.

    Equality is identity so that ownership checks never confuse two
    embeddings of the same bytes in different documents.
    """

    format: RasterFormat
    data: bytes = field(repr=False)
    width: int
    height: int

    def scale(self, factor: float) -> ImageSize:
        """Return the intrinsic dimensions multiplied by ``factor``."""
        return ImageSize(width=self.width * factor, height=self.height * factor)


@dataclass(frozen=True, slots=True)
class TextOperation:
    """Place a block of text with its baseline at ``(x, y)``."""

    content: str
    x: float
    y: float
    font_size: float
    max_width: Optional[float] = None
    color: Color = BLACK
    line_height: Optional[float] = None


@dataclass(frozen=True, slots=True)
class ImageOperation:
    """Place an embedded image with its lower-left corner at ``(x, y)``."""

    image: EmbeddedImage
    x: float
    y: float
    width: float
    height: float


DrawOperation = TextOperation | ImageOperation


@dataclass(frozen=True, slots=True)
class TextPayload:
    """Source whose declared type is ``text/*``."""

    source: SourceFile


@dataclass(frozen=True, slots=True)
class ImagePayload:
    """Source whose declared type is ``image/*``."""

    source: SourceFile
    mime_type: str


@dataclass(frozen=True, slots=True)
class FallbackPayload:
    """Source of any other (or unknown) declared type."""

    source: SourceFile


Payload = TextPayload | ImagePayload | FallbackPayload
