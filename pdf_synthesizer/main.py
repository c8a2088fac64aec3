"""Entry-point for the file to PDF conversion flow."""
from __future__ import annotations

import asyncio
import re
from dataclasses import dataclass, replace
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from pdf_synthesizer.collaborators.base import Base64Codec, FileSource, Persistence, ViewerLauncher
from pdf_synthesizer.collaborators.local import StandardBase64Codec
from pdf_synthesizer.errors import ConversionError, ConversionInProgress, NoFileSelected, ViewerUnavailable
from pdf_synthesizer.model.document_model import Document
from pdf_synthesizer.model.elements import SourceFile
from pdf_synthesizer.strategies.synthesizer import PdfSynthesizer
from pdf_synthesizer.utils.logger import get_logger, set_verbosity

LOGGER = get_logger(__name__)

SUCCESS_MESSAGE = "File converted to PDF successfully!"
DEFAULT_STEM = "file"
_EXTENSION_RE = re.compile(r"\.[^/.]+$")


@dataclass(frozen=True, slots=True)
class ConversionOutcome:
    """Result of one conversion attempt, ready to be shown to the user."""

    success: bool
    message: str
    pdf_path: Optional[Path] = None
    error: Optional[ConversionError] = None
    document: Optional[Document] = None


def destination_for(documents_root: Path, display_name: str) -> Path:
    """Return ``{documents_root}/{display name without extension}.pdf``."""
    name = Path(display_name).name
    stem = _EXTENSION_RE.sub("", name) or DEFAULT_STEM
    return Path(documents_root) / f"{stem}.pdf"


def failure_message(error: ConversionError) -> str:
    """General user-facing wording for a failed conversion."""
    if not error.show_detail:
        return error.user_message
    detail = str(error) or "Unknown error"
    return f"{error.user_message}: {detail}"


class ConversionSession:
    """Convert one selected file at a time and open the results.

    The session holds no document state between calls; a failed attempt
    leaves nothing persisted and the session ready for another try.
    """

    def __init__(
        self,
        source: FileSource,
        persistence: Persistence,
        viewer: ViewerLauncher,
        *,
        codec: Optional[Base64Codec] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._codec = codec or StandardBase64Codec()
        self._synthesizer = PdfSynthesizer(source, codec=self._codec, clock=clock)
        self._persistence = persistence
        self._viewer = viewer
        self._converting = False

    @property
    def is_converting(self) -> bool:
        return self._converting

    async def convert(self, selected: Optional[SourceFile]) -> ConversionOutcome:
        """Synthesize and persist ``selected``; failures become an unsuccessful outcome."""
        if self._converting:
            raise ConversionInProgress("Wait for the current conversion to finish")

        self._converting = True
        try:
            return await self._convert(selected)
        except ConversionError as exc:
            LOGGER.error("Conversion failed: %s", exc)
            return ConversionOutcome(success=False, message=failure_message(exc), error=exc)
        finally:
            self._converting = False

    async def _convert(self, selected: Optional[SourceFile]) -> ConversionOutcome:
        if selected is None:
            raise NoFileSelected("No file selected")

        document = await self._synthesizer.build_document(selected)
        pdf_bytes = self._synthesizer.serialize(document)
        destination = destination_for(self._persistence.documents_root, selected.display_name)
        await self._persistence.write_bytes_base64(destination, self._codec.encode(pdf_bytes))
        LOGGER.info("Converted %s into %s", selected.display_name, destination)
        return ConversionOutcome(success=True, message=SUCCESS_MESSAGE, pdf_path=destination, document=document)

    async def open_result(self, path: Path) -> None:
        """Open a persisted PDF; raises ``ViewerUnavailable`` without touching the file."""
        await self._viewer.open(path)


async def _run(file_path: Path, output_dir: Path, *, open_after: bool, debug: bool) -> ConversionOutcome:
    from pdf_synthesizer.collaborators.local import (
        FileSystemPersistence,
        LocalFileSource,
        SystemViewerLauncher,
        guess_mime_type,
    )

    codec = StandardBase64Codec()
    selected = SourceFile(
        locator=str(file_path),
        display_name=file_path.name,
        declared_mime_type=guess_mime_type(file_path),
    )
    session = ConversionSession(
        LocalFileSource(codec), FileSystemPersistence(output_dir, codec), SystemViewerLauncher(), codec=codec
    )
    outcome = await session.convert(selected)
    if outcome.success and debug:
        from pdf_synthesizer.utils.debug import DebugDumper

        DebugDumper(output_dir / "debug").dump(outcome.document)
    if outcome.success and open_after and outcome.pdf_path is not None:
        try:
            await session.open_result(outcome.pdf_path)
        except ViewerUnavailable as exc:
            LOGGER.error("Could not open %s: %s", outcome.pdf_path, exc)
            outcome = replace(outcome, message=f"{outcome.message} {failure_message(exc)}")
    return outcome


if __name__ == "__main__":  # pragma: no cover
    import argparse

    parser = argparse.ArgumentParser(description="Convert a text or image file into a PDF document")
    parser.add_argument("file", help="Path to the file to convert")
    parser.add_argument("--output", help="Directory to write the PDF into (defaults to the file's directory)")
    parser.add_argument("--open", action="store_true", help="Open the PDF with the default viewer afterwards")
    parser.add_argument("--debug", action="store_true", help="Dump the document graph as JSON next to the PDF")
    parser.add_argument("--verbose", action="store_true", help="Log debug details of the layout")

    args = parser.parse_args()
    set_verbosity(args.verbose)
    input_path = Path(args.file).resolve()
    result = asyncio.run(
        _run(input_path, Path(args.output or input_path.parent).resolve(), open_after=args.open, debug=args.debug)
    )
    print(result.message)
    raise SystemExit(0 if result.success else 1)
