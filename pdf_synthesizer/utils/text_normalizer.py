"""
Text normalization for lines drawn with the standard PDF fonts.

The built-in Helvetica face has no glyphs for control characters and
zero-width marks, so they are removed before a line reaches the canvas.
Printable text is left untouched.
"""

import re


class TextNormalizer:
    """Cleans a single line of text for drawing."""

    SPECIAL_CHARS = {
        '\u200b': '',       # Zero-width space
        '\u200c': '',       # Zero-width non-joiner
        '\u200d': '',       # Zero-width joiner
        '\u2060': '',       # Word joiner
        '\ufeff': '',       # Byte order mark
        '\u00ad': '',       # Soft hyphen
    }

    # C0 and C1 control characters, tab excluded (expanded separately)
    CONTROL_CHARS_PATTERN = re.compile(r'[\x00-\x08\x0a-\x1f\x7f-\x9f]')

    def __init__(self, tab_size: int = 4):
        self.tab_size = tab_size

    def normalize_line(self, line: str) -> str:
        """Return ``line`` without a trailing CR, invisible marks or control characters.

        Only the CR of a CRLF pair is dropped; a bare CR inside the line
        becomes a space so the text around it stays apart.
        """
        if not line:
            return line

        if line.endswith('\r'):
            line = line[:-1]

        normalized = self._replace_special_chars(line.replace('\r', ' '))
        normalized = normalized.replace('\t', ' ' * self.tab_size)
        return self._remove_control_chars(normalized)

    def split_lines(self, text: str) -> list:
        """Split ``text`` on line feeds and normalize every resulting line."""
        return [self.normalize_line(line) for line in text.split('\n')]

    def _replace_special_chars(self, text: str) -> str:
        for original, replacement in self.SPECIAL_CHARS.items():
            text = text.replace(original, replacement)
        return text

    def _remove_control_chars(self, text: str) -> str:
        return self.CONTROL_CHARS_PATTERN.sub('', text)

