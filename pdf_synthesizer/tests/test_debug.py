"""Tests for the document graph dump."""
import io
import json
import tempfile
import unittest
from pathlib import Path

from PIL import Image

from pdf_synthesizer.model.elements import RasterFormat
from pdf_synthesizer.renderer.document_builder import DocumentBuilder
from pdf_synthesizer.utils.debug import DebugDumper


class DebugDumperTest(unittest.TestCase):

    def test_dump_describes_pages_without_image_bytes(self) -> None:
        builder = DocumentBuilder()
        document = builder.create_document(title="Converted from: x.png")
        page = builder.add_page(document)
        builder.draw_text(page, "Converted from: x.png", x=50, y=800, size=18)
        buffer = io.BytesIO()
        Image.new("RGB", (8, 4)).save(buffer, format="PNG")
        image = builder.embed_raster_image(document, buffer.getvalue(), RasterFormat.PNG)
        builder.draw_image(page, image, x=50, y=400, width=4, height=2)

        with tempfile.TemporaryDirectory() as tmp:
            target = DebugDumper(Path(tmp) / "debug").dump(document)
            payload = json.loads(target.read_text())

        self.assertEqual(payload["kind"], "Document")
        self.assertEqual(payload["metadata"]["title"], "Converted from: x.png")
        text_op, image_op = payload["pages"][0]["operations"]
        self.assertEqual(text_op["kind"], "TextOperation")
        self.assertEqual(text_op["color"], {"red": 0.0, "green": 0.0, "blue": 0.0, "kind": "Color"})
        self.assertEqual(image_op["image"], {"format": "png", "width": 8, "height": 4, "bytes": len(image.data)})


if __name__ == "__main__":
    unittest.main()
