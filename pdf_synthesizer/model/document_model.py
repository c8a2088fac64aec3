"""In-memory document graph built during synthesis."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from pdf_synthesizer.model.elements import DrawOperation, EmbeddedImage

A4_WIDTH_PT = 595.0
A4_HEIGHT_PT = 842.0


@dataclass(slots=True)
class PageCanvas:
    """One page: fixed dimensions plus an append-only list of draw operations."""

    width: float = A4_WIDTH_PT
    height: float = A4_HEIGHT_PT
    operations: List[DrawOperation] = field(default_factory=list)


@dataclass(eq=False, slots=True)
class Document:
    """Ordered pages and the images embedded into them."""

    pages: List[PageCanvas] = field(default_factory=list)
    images: List[EmbeddedImage] = field(default_factory=list)
    metadata: Dict[str, str] = field(default_factory=dict)
    frozen: bool = False

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def owns(self, image: EmbeddedImage) -> bool:
        """Return True when ``image`` was embedded into this document."""
        return any(candidate is image for candidate in self.images)


@dataclass(frozen=True, eq=False, slots=True)
class PageRef:
    """Handle to a page of a document, returned by ``DocumentBuilder.add_page``."""

    document: Document
    index: int

    @property
    def canvas(self) -> PageCanvas:
        return self.document.pages[self.index]
