"""Module describing the implicit coercions (adjustments) the type checker applies to expressions."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from .ty import Mutability, Ty


class AdjustKind(Enum):
    """Enumerator of all adjustment kinds."""

    deref = auto()
    borrow = auto()
    borrow_raw = auto()
    never_to_any = auto()
    pointer = auto()


@dataclass(frozen=True)
class Adjustment:
    """
    A single implicit coercion step.

    kind -- what the step does
    target -- the type of the expression after the step
    mutability -- the mutability of a borrow, or of the overloaded deref call for an overloaded deref
    overloaded -- whether a deref goes through a user-defined Deref implementation
    """

    kind: AdjustKind
    target: Ty
    mutability: Optional[Mutability] = None
    overloaded: bool = False

    @classmethod
    def deref(cls, target: Ty, overloaded: Optional[Mutability] = None) -> Adjustment:
        """Create a deref step, optionally going through a Deref/DerefMut implementation."""
        return cls(AdjustKind.deref, target, overloaded, overloaded is not None)

    @classmethod
    def borrow(cls, target: Ty, mutability: Mutability = Mutability.NOT) -> Adjustment:
        """Create an auto-borrow step producing a reference."""
        return cls(AdjustKind.borrow, target, mutability)

    @classmethod
    def borrow_raw(cls, target: Ty, mutability: Mutability = Mutability.NOT) -> Adjustment:
        return cls(AdjustKind.borrow_raw, target, mutability)

    @classmethod
    def never_to_any(cls, target: Ty) -> Adjustment:
        return cls(AdjustKind.never_to_any, target)

    @classmethod
    def pointer(cls, target: Ty) -> Adjustment:
        """Create an unsizing or function pointer coercion."""
        return cls(AdjustKind.pointer, target)

    @property
    def is_deref(self) -> bool:
        return self.kind is AdjustKind.deref

    @property
    def is_mut_ref_borrow(self) -> bool:
        """Check whether this is an auto-borrow producing a mutable reference."""
        return self.kind is AdjustKind.borrow and self.mutability is Mutability.MUT

    @property
    def is_ref_borrow(self) -> bool:
        return self.kind is AdjustKind.borrow

    def __str__(self) -> str:
        if self.kind is AdjustKind.deref:
            return f"Deref{'(overloaded)' if self.overloaded else ''} -> {self.target}"
        if self.kind in (AdjustKind.borrow, AdjustKind.borrow_raw):
            return f"Borrow({self.mutability.value}) -> {self.target}"
        return f"{self.kind.name} -> {self.target}"
