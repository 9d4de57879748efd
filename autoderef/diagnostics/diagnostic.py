"""Module implementing findings and the suggestions attached to them."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import TYPE_CHECKING, List, Optional, Tuple

from autoderef.diagnostics.lints import Lint
from autoderef.structures.hir.nodes import HirId
from autoderef.structures.hir.span import Span

if TYPE_CHECKING:
    from autoderef.structures.source_map import SourceMap


class Applicability(IntEnum):
    """
    Confidence that a suggestion can be applied without human review.
    Higher values are more confident, so combining two levels keeps the minimum.
    """

    UNSPECIFIED = 0
    HAS_PLACEHOLDERS = 1
    MAYBE_INCORRECT = 2
    MACHINE_APPLICABLE = 3

    def downgrade(self, other: Applicability) -> Applicability:
        """Return the weaker of both levels."""
        return min(self, other)

    @classmethod
    def from_name(cls, name: str) -> Applicability:
        return cls[name.strip().upper().replace("-", "_")]


@dataclass
class Suggestion:
    """A set of replacements which together fix a finding."""

    help: str
    edits: List[Tuple[Span, str]]
    applicability: Applicability = Applicability.MACHINE_APPLICABLE

    def apply(self, text: str) -> str:
        """Apply all edits to the given root-context source text. Edits must not overlap."""
        for span, replacement in sorted(self.edits, key=lambda edit: edit[0].lo, reverse=True):
            text = text[: span.lo] + replacement + text[span.hi :]
        return text


@dataclass
class Diagnostic:
    """A single finding of a lint."""

    lint: Lint
    hir_id: HirId
    spans: List[Span]
    message: str
    suggestions: List[Suggestion] = field(default_factory=list)

    @property
    def span(self) -> Span:
        """The primary span of the finding."""
        return self.spans[0]

    @property
    def suggestion(self) -> Optional[Suggestion]:
        return self.suggestions[0] if self.suggestions else None

    def render(self, source_map: Optional[SourceMap] = None) -> str:
        """Render the finding as human readable text."""
        lines = [f"warning: {self.message}"]
        if source_map is not None:
            line, column = source_map.line_col(self.span.lo)
            lines.append(f"  --> {line}:{column}")
            for span in self.spans:
                if (text := source_map.snippet_opt(span)) is not None:
                    lines.append(f"   | {text}")
        else:
            lines.append(f"  --> {self.span}")
        for suggestion in self.suggestions:
            replacements = ", ".join(f"`{replacement}`" for _, replacement in suggestion.edits)
            lines.append(f"   = help: {suggestion.help}: {replacements} ({suggestion.applicability.name.lower()})")
        lines.append(f"   = note: `#[warn(clippy::{self.lint})]` ({self.lint.group.value})")
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.render()
