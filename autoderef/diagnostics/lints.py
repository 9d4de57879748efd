"""Module declaring the lints reported by the dereferencing pass."""
from __future__ import annotations

from enum import Enum
from typing import Optional


class LintGroup(Enum):
    style = "style"
    complexity = "complexity"
    pedantic = "pedantic"


class Lint(Enum):
    """All lints, valued by their name as used in allow attributes and the configuration."""

    EXPLICIT_DEREF_METHODS = "explicit_deref_methods"
    NEEDLESS_BORROW = "needless_borrow"
    REF_BINDING_TO_REFERENCE = "ref_binding_to_reference"
    EXPLICIT_AUTO_DEREF = "explicit_auto_deref"

    @property
    def group(self) -> LintGroup:
        return LINT_GROUPS[self]

    @property
    def description(self) -> str:
        return LINT_DESCRIPTIONS[self]

    @classmethod
    def from_name(cls, name: str) -> Optional[Lint]:
        """Look up a lint by its name, accepting an optional tool prefix such as `clippy::`."""
        try:
            return cls(name.rsplit("::", 1)[-1].strip().lower())
        except ValueError:
            return None

    def __str__(self) -> str:
        return self.value


LINT_GROUPS = {
    Lint.EXPLICIT_DEREF_METHODS: LintGroup.pedantic,
    Lint.NEEDLESS_BORROW: LintGroup.style,
    Lint.REF_BINDING_TO_REFERENCE: LintGroup.pedantic,
    Lint.EXPLICIT_AUTO_DEREF: LintGroup.complexity,
}

LINT_DESCRIPTIONS = {
    Lint.EXPLICIT_DEREF_METHODS: "Explicit use of deref or deref_mut method while not in a method chain.",
    Lint.NEEDLESS_BORROW: "taking a reference that is going to be automatically dereferenced",
    Lint.REF_BINDING_TO_REFERENCE: "`ref` binding to a reference",
    Lint.EXPLICIT_AUTO_DEREF: "dereferencing when the compiler would automatically dereference",
}
