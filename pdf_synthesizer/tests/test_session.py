"""Tests for the conversion session: persistence, failures and viewer hand-off."""
import asyncio
import json
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from pdf_synthesizer.collaborators import local
from pdf_synthesizer.collaborators.local import LocalFileSource
from pdf_synthesizer.collaborators.memory import (
    InMemoryFileSource,
    InMemoryPersistence,
    RecordingViewerLauncher,
)
from pdf_synthesizer.errors import (
    ConversionInProgress,
    NoFileSelected,
    SourceUnreadable,
    UnsupportedImageFormat,
    ViewerUnavailable,
)
from pdf_synthesizer.main import SUCCESS_MESSAGE, ConversionSession, _run, destination_for
from pdf_synthesizer.model.elements import SourceFile


class DestinationTest(unittest.TestCase):

    def test_extension_is_replaced(self) -> None:
        root = Path("/docs")
        cases = [
            ("notes.txt", "notes.pdf"),
            ("archive.tar.gz", "archive.tar.pdf"),
            ("README", "README.pdf"),
            (".env", "file.pdf"),
            ("nested/dir/photo.png", "photo.pdf"),
        ]
        for name, expected in cases:
            with self.subTest(name=name):
                self.assertEqual(destination_for(root, name), root / expected)


class ConversionSessionTest(unittest.IsolatedAsyncioTestCase):

    def setUp(self) -> None:
        self.source = InMemoryFileSource()
        self.persistence = InMemoryPersistence(Path("/documents"))
        self.viewer = RecordingViewerLauncher(self.persistence)
        self.session = ConversionSession(self.source, self.persistence, self.viewer)

    async def test_successful_conversion_is_persisted(self) -> None:
        self.source.add("mem://notes.txt", "hello")
        outcome = await self.session.convert(SourceFile("mem://notes.txt", "notes.txt", "text/plain"))

        self.assertTrue(outcome.success)
        self.assertEqual(outcome.message, SUCCESS_MESSAGE)
        self.assertEqual(outcome.pdf_path, Path("/documents/notes.pdf"))
        self.assertTrue(self.persistence.files[outcome.pdf_path].startswith(b"%PDF-"))
        self.assertFalse(self.session.is_converting)

    async def test_outcome_carries_the_converted_document(self) -> None:
        self.source.add("mem://notes.txt", "hello")
        outcome = await self.session.convert(SourceFile("mem://notes.txt", "notes.txt", "text/plain"))

        self.assertEqual(self.source.reads, ["mem://notes.txt"])
        self.assertTrue(outcome.document.frozen)
        self.assertEqual(outcome.document.pages[0].operations[-1].content, "hello")

    async def test_missing_selection(self) -> None:
        outcome = await self.session.convert(None)

        self.assertFalse(outcome.success)
        self.assertIsInstance(outcome.error, NoFileSelected)
        self.assertEqual(outcome.message, "Please select a file first")
        self.assertEqual(self.persistence.files, {})

    async def test_failure_persists_nothing_and_session_recovers(self) -> None:
        self.source.add("mem://anim.gif", b"GIF89a")
        failed = await self.session.convert(SourceFile("mem://anim.gif", "anim.gif", "image/gif"))

        self.assertFalse(failed.success)
        self.assertIsInstance(failed.error, UnsupportedImageFormat)
        self.assertTrue(failed.message.startswith("Failed to convert file: "))
        self.assertEqual(self.persistence.files, {})
        self.assertFalse(self.session.is_converting)

        self.source.add("mem://notes.txt", "retry")
        retried = await self.session.convert(SourceFile("mem://notes.txt", "notes.txt", "text/plain"))
        self.assertTrue(retried.success)

    async def test_unreadable_source_reported(self) -> None:
        outcome = await self.session.convert(SourceFile("mem://absent.txt", "absent.txt", "text/plain"))
        self.assertIsInstance(outcome.error, SourceUnreadable)

    async def test_reentrant_conversion_is_rejected(self) -> None:
        release = asyncio.Event()
        source = self.source

        class SlowSource(InMemoryFileSource):
            async def read_text(self, locator: str) -> str:
                await release.wait()
                return await source.read_text(locator)

        self.source.add("mem://slow.txt", "slow")
        session = ConversionSession(SlowSource(), self.persistence, self.viewer)
        selected = SourceFile("mem://slow.txt", "slow.txt", "text/plain")

        first = asyncio.create_task(session.convert(selected))
        await asyncio.sleep(0)
        self.assertTrue(session.is_converting)
        with self.assertRaises(ConversionInProgress):
            await session.convert(selected)

        release.set()
        outcome = await first
        self.assertTrue(outcome.success)
        self.assertFalse(session.is_converting)

    async def test_open_result(self) -> None:
        self.source.add("mem://notes.txt", "hello")
        outcome = await self.session.convert(SourceFile("mem://notes.txt", "notes.txt", "text/plain"))

        await self.session.open_result(outcome.pdf_path)
        self.assertEqual(self.viewer.opened, [outcome.pdf_path])

    async def test_open_missing_result_keeps_files(self) -> None:
        self.source.add("mem://notes.txt", "hello")
        outcome = await self.session.convert(SourceFile("mem://notes.txt", "notes.txt", "text/plain"))

        with self.assertRaises(ViewerUnavailable):
            await self.session.open_result(Path("/documents/other.pdf"))
        self.assertIn(outcome.pdf_path, self.persistence.files)


class RunTest(unittest.IsolatedAsyncioTestCase):
    """The developer entry point on the real filesystem."""

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        self.input_path = self.root / "notes.txt"
        self.input_path.write_text("alpha\nbeta", encoding="utf-8")

    def tearDown(self) -> None:
        self._tmp.cleanup()

    async def test_debug_dump_reuses_the_converted_document(self) -> None:
        reads = []
        read_text = LocalFileSource.read_text

        async def counting_read_text(source, locator):
            reads.append(locator)
            return await read_text(source, locator)

        with patch.object(LocalFileSource, "read_text", counting_read_text):
            outcome = await _run(self.input_path, self.root / "out", open_after=False, debug=True)

        self.assertTrue(outcome.success)
        self.assertEqual(reads, [str(self.input_path)])
        self.assertTrue((self.root / "out" / "notes.pdf").is_file())
        dump = json.loads((self.root / "out" / "debug" / "document.json").read_text())
        self.assertEqual(len(dump["pages"]), 1)

    async def test_missing_viewer_is_reported_not_raised(self) -> None:
        with patch.object(local.sys, "platform", "linux"), patch.object(local.shutil, "which", return_value=None):
            outcome = await _run(self.input_path, self.root, open_after=True, debug=False)

        self.assertTrue(outcome.success)
        self.assertTrue(outcome.message.startswith(SUCCESS_MESSAGE))
        self.assertIn("Could not open the PDF", outcome.message)
        self.assertTrue((self.root / "notes.pdf").is_file())


if __name__ == "__main__":
    unittest.main()
