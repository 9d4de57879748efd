"""Module implementing types as they are written in the source, e.g. in let bindings or signatures."""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

from .ty import Mutability


@dataclass(frozen=True)
class HirTy(ABC):
    """Base interface for all written types."""

    def __iter__(self) -> Iterator[HirTy]:
        """Iterate the directly nested written types."""
        yield from []

    @abstractmethod
    def __str__(self) -> str:
        """Return the type as it would be written."""


@dataclass(frozen=True)
class HirRef(HirTy):
    ty: HirTy
    mutability: Mutability = Mutability.NOT

    def __iter__(self) -> Iterator[HirTy]:
        yield self.ty

    def __str__(self) -> str:
        return f"&{self.mutability.prefix_str}{self.ty}"


@dataclass(frozen=True)
class HirPtr(HirTy):
    ty: HirTy
    mutability: Mutability = Mutability.NOT

    def __iter__(self) -> Iterator[HirTy]:
        yield self.ty

    def __str__(self) -> str:
        return f"*{self.mutability.ptr_str} {self.ty}"


@dataclass(frozen=True)
class HirPath(HirTy):
    """A path to a named type. Only the generic type arguments of the last segment are kept."""

    name: str
    args: Tuple[HirTy, ...] = ()

    def __iter__(self) -> Iterator[HirTy]:
        yield from self.args

    def __str__(self) -> str:
        if self.args:
            return f"{self.name}<{', '.join(str(arg) for arg in self.args)}>"
        return self.name


@dataclass(frozen=True)
class HirSlice(HirTy):
    ty: HirTy

    def __iter__(self) -> Iterator[HirTy]:
        yield self.ty

    def __str__(self) -> str:
        return f"[{self.ty}]"


@dataclass(frozen=True)
class HirArray(HirTy):
    ty: HirTy
    length: str

    def __iter__(self) -> Iterator[HirTy]:
        yield self.ty

    def __str__(self) -> str:
        return f"[{self.ty}; {self.length}]"


@dataclass(frozen=True)
class HirTup(HirTy):
    tys: Tuple[HirTy, ...] = ()

    def __iter__(self) -> Iterator[HirTy]:
        yield from self.tys

    def __str__(self) -> str:
        if len(self.tys) == 1:
            return f"({self.tys[0]},)"
        return f"({', '.join(str(ty) for ty in self.tys)})"


@dataclass(frozen=True)
class HirBareFn(HirTy):
    inputs: Tuple[HirTy, ...] = ()
    output: Optional[HirTy] = None

    def __iter__(self) -> Iterator[HirTy]:
        yield from self.inputs
        if self.output is not None:
            yield self.output

    def __str__(self) -> str:
        signature = f"fn({', '.join(str(ty) for ty in self.inputs)})"
        return signature if self.output is None else f"{signature} -> {self.output}"


@dataclass(frozen=True)
class HirNever(HirTy):
    def __str__(self) -> str:
        return "!"


@dataclass(frozen=True)
class HirTraitObject(HirTy):
    trait_name: str

    def __str__(self) -> str:
        return f"dyn {self.trait_name}"


@dataclass(frozen=True)
class HirOpaqueDef(HirTy):
    """An `impl Trait` type."""

    trait_name: str

    def __str__(self) -> str:
        return f"impl {self.trait_name}"


@dataclass(frozen=True)
class HirInfer(HirTy):
    """The `_` placeholder asking the compiler to infer the type."""

    def __str__(self) -> str:
        return "_"


@dataclass(frozen=True)
class HirTypeof(HirTy):
    def __str__(self) -> str:
        return "typeof(..)"


@dataclass(frozen=True)
class HirErr(HirTy):
    def __str__(self) -> str:
        return "{error}"


def peel_hir_ty_refs(ty: HirTy) -> Tuple[HirTy, int]:
    """Remove all written references of the given type, returning the inner type and the number of removed references."""
    count = 0
    while isinstance(ty, HirRef):
        ty = ty.ty
        count += 1
    return ty, count
