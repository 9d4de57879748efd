"""Module extracting source snippets for suggestions while tracking how reliable they are."""
from __future__ import annotations

from typing import NamedTuple, Tuple

from autoderef.diagnostics.diagnostic import Applicability
from autoderef.structures.hir.span import Span
from autoderef.structures.source_map import SourceMap


class Snippet(NamedTuple):
    """Source text for a suggestion, whether it was taken from a macro call, and the resulting applicability."""

    text: str
    is_macro_call: bool
    applicability: Applicability


def snippet_with_applicability(source_map: SourceMap, span: Span, default: str, applicability: Applicability) -> Tuple[str, Applicability]:
    """
    Return the source text of the span, or the default if there is none.

    Text of expanded code might not be what the user wrote, so it is at most maybe incorrect.
    Falling back to the default leaves a placeholder in the suggestion.
    """
    if applicability is not Applicability.UNSPECIFIED and span.from_expansion():
        applicability = Applicability.MAYBE_INCORRECT
    if (text := source_map.snippet_opt(span)) is None:
        if applicability is Applicability.MACHINE_APPLICABLE:
            applicability = Applicability.HAS_PLACEHOLDERS
        return default, applicability
    return text, applicability


def snippet_with_context(source_map: SourceMap, span: Span, outer: int, default: str, applicability: Applicability) -> Snippet:
    """
    Return the source text of the span as seen from the given syntax context.

    If the span was produced by a macro invoked in the outer context, the text of the whole macro call is returned.
    If the span can not be walked up to the outer context, e.g. because it is an argument of a macro expanded in
    the outer context, the span is used unchanged and the applicability is downgraded.
    """
    if (outer_span := source_map.walk_span_to_context(span, outer)) is None:
        if applicability is not Applicability.UNSPECIFIED:
            applicability = Applicability.MAYBE_INCORRECT
        is_macro_call = False
    else:
        is_macro_call = span.ctxt != outer
        span = outer_span
    text, applicability = snippet_with_applicability(source_map, span, default, applicability)
    return Snippet(text, is_macro_call, applicability)


def has_enclosing_paren(text: str) -> bool:
    """Check whether the whole text is wrapped in one pair of parentheses, e.g. `(a + b)` but not `(a) + (b)`."""
    if not text.startswith("("):
        return False
    depth = 0
    for index, char in enumerate(text):
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        if depth == 0:
            return index == len(text) - 1
    return False
