"""Tests for the descriptive block rendered for unhandled types."""
import unittest
from datetime import datetime
from unittest.mock import AsyncMock

from pdf_synthesizer.collaborators.base import FileSource
from pdf_synthesizer.collaborators.memory import InMemoryFileSource
from pdf_synthesizer.errors import SourceUnreadable
from pdf_synthesizer.model.elements import FallbackPayload, SourceFile
from pdf_synthesizer.renderer.document_builder import DocumentBuilder
from pdf_synthesizer.strategies.metadata_fallback import (
    BLOCK_Y,
    HEADER_SIZE,
    HEADER_TEXT,
    HEADER_Y,
    MetadataFallbackStrategy,
)

FIXED_NOW = datetime(2026, 10, 18, 9, 30, 5)


class MetadataFallbackTest(unittest.IsolatedAsyncioTestCase):

    def setUp(self) -> None:
        self.source = InMemoryFileSource()
        self.builder = DocumentBuilder()
        self.document = self.builder.create_document()
        self.page = self.builder.add_page(self.document)
        self.strategy = MetadataFallbackStrategy(self.builder, self.source, clock=lambda: FIXED_NOW)

    async def _render(self, source_file: SourceFile):
        await self.strategy.render(FallbackPayload(source=source_file), self.page)
        return self.document.pages[0].operations

    async def test_archive_details(self) -> None:
        self.source.add("mem://archive.zip", b"\x00" * 2048)
        header, block = await self._render(SourceFile("mem://archive.zip", "archive.zip", "application/zip"))

        self.assertEqual((header.content, header.y, header.font_size), (HEADER_TEXT, HEADER_Y, HEADER_SIZE))
        self.assertEqual(block.y, BLOCK_Y)
        self.assertIn("Original File: archive.zip", block.content)
        self.assertIn("Type: application/zip", block.content)
        self.assertIn("Size: 2.00 KB", block.content)
        self.assertIn("Converted on: 2026-10-18 09:30:05", block.content)
        self.assertEqual(len(block.content.split("\n")), 4)

    async def test_unknown_type_and_missing_source(self) -> None:
        _, block = await self._render(SourceFile("mem://gone", "gone.bin", None))

        self.assertIn("Type: unknown", block.content)
        self.assertIn("Size: unknown", block.content)

    async def test_size_is_rounded_to_two_decimals(self) -> None:
        self.source.add("mem://data.bin", b"\x01" * 1500)
        _, block = await self._render(SourceFile("mem://data.bin", "data.bin", "application/octet-stream"))
        self.assertIn("Size: 1.46 KB", block.content)

    async def test_probe_failure_is_unreadable(self) -> None:
        source = AsyncMock(spec=FileSource)
        source.probe_exists.side_effect = PermissionError("denied")
        strategy = MetadataFallbackStrategy(self.builder, source, clock=lambda: FIXED_NOW)

        with self.assertRaises(SourceUnreadable):
            await strategy.render(FallbackPayload(source=SourceFile("/x", "x.bin", None)), self.page)
        self.assertEqual(self.document.pages[0].operations, [])


if __name__ == "__main__":
    unittest.main()
