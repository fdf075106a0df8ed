"""
Indentation-aware text buffer used by the generators.
"""

from contextlib import contextmanager
from typing import List


class EmitterError(Exception):
    """Raised when the writer is driven incorrectly (unbalanced indentation)."""

    pass


class Writer:
    """Accumulates generated source text line by line."""

    def __init__(self, indent: str = "    ", line_ending: str = "\n"):
        self.indent = indent
        self.line_ending = line_ending
        self._level = 0
        self._chunks: List[str] = []
        self._at_line_start = True

    @property
    def level(self) -> int:
        return self._level

    def inc_indent(self):
        self._level += 1

    def dec_indent(self):
        if self._level == 0:
            raise EmitterError("dec_indent called at indentation level 0")
        self._level -= 1

    @contextmanager
    def indented(self):
        """Indent everything written inside the ``with`` block."""
        self.inc_indent()
        try:
            yield self
        finally:
            self.dec_indent()

    def write(self, text: str):
        """Write a fragment; the indentation prefix is added at line start."""
        if not text:
            return
        if self._at_line_start:
            self._chunks.append(self.indent * self._level)
            self._at_line_start = False
        self._chunks.append(text)

    def write_line(self, text: str = ""):
        """Write ``text`` and terminate the line."""
        self.write(text)
        self._chunks.append(self.line_ending)
        self._at_line_start = True

    def get(self) -> str:
        """Return the accumulated text.

        Raises:
            EmitterError: If an indentation level is still open.
        """
        if self._level != 0:
            raise EmitterError(
                f"Writer finalized with {self._level} unclosed indentation level(s)"
            )
        return "".join(self._chunks)
