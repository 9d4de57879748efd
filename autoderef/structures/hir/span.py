"""Module defining source locations and the macro expansion contexts they belong to."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, Optional

ROOT_CONTEXT = 0


@dataclass(frozen=True)
class Span:
    """A half-open byte range into the source text, tagged with the syntax context it was produced in."""

    lo: int
    hi: int
    ctxt: int = ROOT_CONTEXT

    def from_expansion(self) -> bool:
        """Check whether the span belongs to code generated by a macro expansion."""
        return self.ctxt != ROOT_CONTEXT

    def with_ctxt(self, ctxt: int) -> Span:
        """Return the same range in another syntax context."""
        return Span(self.lo, self.hi, ctxt)

    def contains(self, other: Span) -> bool:
        return self.lo <= other.lo and other.hi <= self.hi

    def __str__(self) -> str:
        if self.from_expansion():
            return f"{self.lo}..{self.hi}#{self.ctxt}"
        return f"{self.lo}..{self.hi}"


DUMMY_SPAN = Span(0, 0)


@dataclass
class ExpnData:
    """Information about a single macro expansion."""

    macro_name: str
    call_site: Span = DUMMY_SPAN

    @property
    def parent(self) -> int:
        """The syntax context the macro was invoked from."""
        return self.call_site.ctxt


class SyntaxContextTable:
    """Registry of all macro expansions of a crate, indexed by syntax context."""

    def __init__(self):
        self._expansions: Dict[int, ExpnData] = {}

    def __len__(self) -> int:
        return len(self._expansions)

    def new_expansion(self, macro_name: str, call_site: Span = DUMMY_SPAN) -> int:
        """Register a new expansion and return its syntax context."""
        ctxt = len(self._expansions) + 1
        self._expansions[ctxt] = ExpnData(macro_name, call_site)
        return ctxt

    def set_call_site(self, ctxt: int, call_site: Span):
        self._expansions[ctxt].call_site = call_site

    def expn_data(self, ctxt: int) -> Optional[ExpnData]:
        return self._expansions.get(ctxt)

    def iter_call_sites(self, span: Span) -> Iterator[Span]:
        """Yield the call sites of all expansions the span is nested in, innermost first."""
        while span.from_expansion() and (data := self.expn_data(span.ctxt)) is not None:
            span = data.call_site
            yield span

    def walk_chain(self, span: Span, outer: int) -> Span:
        """Walk the expansion chain of the span up to the given context, or up to the root context."""
        if span.ctxt == outer:
            return span
        for call_site in self.iter_call_sites(span):
            if call_site.ctxt == outer:
                return call_site
            span = call_site
        return span

    def walk_span_to_context(self, span: Span, outer: int) -> Optional[Span]:
        """Return the span of the outermost node in the given context which contains the span, if any."""
        outer_span = self.walk_chain(span, outer)
        return outer_span if outer_span.ctxt == outer else None
