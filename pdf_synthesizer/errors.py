"""Exceptions raised while converting a source file into a PDF."""
from __future__ import annotations


class ConversionError(RuntimeError):
    """Base class for every failure surfaced by the conversion pipeline."""

    user_message = "Failed to convert file"
    show_detail = True

    def __init__(self, message: str, *, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.__cause__ = cause


class NoFileSelected(ConversionError):
    """Raised when a conversion is requested without a selected source."""

    user_message = "Please select a file first"
    show_detail = False


class SourceUnreadable(ConversionError):
    """Raised when the source payload cannot be read or decoded."""


class UnsupportedImageFormat(ConversionError):
    """Raised when a raster format other than PNG or JPEG is requested."""


class CorruptImageData(ConversionError):
    """Raised when raster bytes cannot be decoded in the requested format."""


class InvalidGeometry(ConversionError):
    """Raised for non-finite coordinates or non-positive sizes."""


class SerializationError(ConversionError):
    """Raised when a document cannot be turned into PDF bytes."""


class DocumentStateError(ConversionError):
    """Raised when a frozen document is mutated or resources cross documents."""


class PersistenceFailure(ConversionError):
    """Raised when the produced PDF cannot be written to its destination."""


class ViewerUnavailable(ConversionError):
    """Raised when the persisted PDF cannot be handed to a viewer."""

    user_message = "Could not open the PDF"


class ConversionInProgress(ConversionError):
    """Raised when a conversion is started while another one is running."""

    user_message = "A conversion is already running"
