"""Module defining the states of a reference operation chain."""
from __future__ import annotations

from dataclasses import dataclass

from autoderef.structures.hir.nodes import HirId
from autoderef.structures.hir.span import Span
from autoderef.structures.hir.ty import Mutability


@dataclass(frozen=True)
class ChainAnchor:
    """The outermost expression of a chain. Findings are reported at and replace this expression."""

    span: Span
    hir_id: HirId


class ChainState:
    """Base class for the states of an open chain."""


@dataclass(frozen=True)
class DerefMethodChain(ChainState):
    """
    A chain of explicit deref method calls.

    ty_changed_count -- the number of calls which changed the type beyond removing a reference
    is_final_call_form -- whether the innermost call so far was written as `Deref::deref(x)`
    mutability -- the mutability of the outermost call, i.e. whether deref or deref_mut is called
    """

    ty_changed_count: int
    is_final_call_form: bool
    mutability: Mutability


@dataclass(frozen=True)
class DerefedBorrow(ChainState):
    """
    A borrow which is implicitly dereferenced again.

    remaining -- the number of nested borrows which are still not needed
    required_precedence -- the precedence the replacement needs to be used without parentheses
    message -- the message to report
    """

    remaining: int
    required_precedence: int
    message: str


@dataclass(frozen=True)
class Borrow(ChainState):
    """A borrow at a position where auto-deref is stable."""


@dataclass(frozen=True)
class Reborrow(ChainState):
    """A borrow of the dereference of a reference, e.g. `&*x` with `x: &T`."""

    deref_span: Span
    deref_hir_id: HirId


@dataclass(frozen=True)
class ExplicitDeref(ChainState):
    """A dereference which auto-deref would do implicitly. Reported at the dereference unless the operand is a reference."""

    deref_span: Span
    deref_hir_id: HirId
