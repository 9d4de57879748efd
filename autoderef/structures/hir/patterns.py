"""Module defining the pattern nodes of the typed intermediate representation."""
from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Iterator, List, Optional, TypeVar

from .nodes import HirId, HirNode
from .span import DUMMY_SPAN, Span

if TYPE_CHECKING:
    from autoderef.structures.visitors.interfaces import HirVisitorInterface

T = TypeVar("T")


class BindingAnnotation(Enum):
    """The binding mode written in front of a binding name, valued by its source representation."""

    none = ""
    ref = "ref "
    mutable = "mut "
    ref_mut = "ref mut "


class Pat(HirNode):
    """Base class for all patterns."""

    def __iter__(self) -> Iterator[HirNode]:
        yield from []


class BindingPat(Pat):
    """
    A pattern introducing a local binding.

    binding_id -- the identity of the binding. The first occurrence of a binding uses its own HirId,
                  every further occurrence in another alternative of an or-pattern refers back to it.
    name_span -- the span of the identifier, without the binding annotation.
    """

    def __init__(
        self, hir_id: HirId, name: str, annotation: BindingAnnotation, binding_id: Optional[HirId] = None, subpattern: Optional[Pat] = None
    ):
        super().__init__(hir_id)
        self.name = name
        self.annotation = annotation
        self.binding_id = hir_id if binding_id is None else binding_id
        self.subpattern = subpattern
        self.name_span: Span = DUMMY_SPAN

    def __iter__(self) -> Iterator[HirNode]:
        if self.subpattern is not None:
            yield self.subpattern

    def accept(self, visitor: HirVisitorInterface[T]) -> T:
        return visitor.visit_binding_pat(self)


class TupleStructPat(Pat):
    """A pattern such as `Some(x)`."""

    def __init__(self, hir_id: HirId, path: str, subpatterns: List[Pat]):
        super().__init__(hir_id)
        self.path = path
        self.subpatterns = subpatterns

    def __iter__(self) -> Iterator[HirNode]:
        yield from self.subpatterns

    def accept(self, visitor: HirVisitorInterface[T]) -> T:
        return visitor.visit_tuple_struct_pat(self)


class TuplePat(Pat):
    def __init__(self, hir_id: HirId, subpatterns: List[Pat]):
        super().__init__(hir_id)
        self.subpatterns = subpatterns

    def __iter__(self) -> Iterator[HirNode]:
        yield from self.subpatterns

    def accept(self, visitor: HirVisitorInterface[T]) -> T:
        return visitor.visit_tuple_pat(self)


class OrPat(Pat):
    def __init__(self, hir_id: HirId, alternatives: List[Pat]):
        super().__init__(hir_id)
        self.alternatives = alternatives

    def __iter__(self) -> Iterator[HirNode]:
        yield from self.alternatives

    def accept(self, visitor: HirVisitorInterface[T]) -> T:
        return visitor.visit_or_pat(self)


class WildPat(Pat):
    def accept(self, visitor: HirVisitorInterface[T]) -> T:
        return visitor.visit_wild_pat(self)


class LitPat(Pat):
    def __init__(self, hir_id: HirId, text: str):
        super().__init__(hir_id)
        self.text = text

    def accept(self, visitor: HirVisitorInterface[T]) -> T:
        return visitor.visit_lit_pat(self)
