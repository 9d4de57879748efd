"""Module giving access to the source text behind spans."""
from __future__ import annotations

from typing import Optional, Tuple

from autoderef.structures.hir.span import Span, SyntaxContextTable


class SourceMap:
    """The source text of a crate together with its macro expansion contexts."""

    def __init__(self, text: str = "", contexts: Optional[SyntaxContextTable] = None):
        self.text = text
        self.contexts = SyntaxContextTable() if contexts is None else contexts

    def __len__(self) -> int:
        return len(self.text)

    def snippet_opt(self, span: Span) -> Optional[str]:
        """Return the source text of the span, or None if the span does not map to any source."""
        if span.lo > span.hi or span.hi > len(self.text) or span.lo == span.hi:
            return None
        return self.text[span.lo : span.hi]

    def walk_span_to_context(self, span: Span, outer: int) -> Optional[Span]:
        return self.contexts.walk_span_to_context(span, outer)

    def line_col(self, offset: int) -> Tuple[int, int]:
        """Return the one-based line and column of the given offset."""
        line = self.text.count("\n", 0, offset) + 1
        column = offset - (self.text.rfind("\n", 0, offset) + 1) + 1
        return line, column
