"""Module implementing the resolved types produced by the type checker."""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Tuple


class Mutability(Enum):
    """Mutability of a reference, raw pointer or borrow."""

    NOT = "not"
    MUT = "mut"

    @property
    def prefix_str(self) -> str:
        """Return the keyword prefix used after a borrow operator."""
        return "mut " if self is Mutability.MUT else ""

    @property
    def ptr_str(self) -> str:
        """Return the keyword used after a raw pointer sigil."""
        return "mut" if self is Mutability.MUT else "const"


@dataclass(frozen=True)
class Ty(ABC):
    """Base interface for all resolved types."""

    def __iter__(self) -> Iterator[Ty]:
        """Iterate the directly nested types."""
        yield from []

    @abstractmethod
    def __str__(self) -> str:
        """Every type should provide a source-like string representation."""

    def walk(self) -> Iterator[Ty]:
        """Yield the type and all nested types in a depth-first manner."""
        worklist: List[Ty] = [self]
        while worklist:
            head = worklist.pop()
            yield head
            worklist.extend(head)

    @property
    def is_ref(self) -> bool:
        return False

    @property
    def is_unsafe_ptr(self) -> bool:
        return False

    def has_placeholders(self) -> bool:
        """Check whether the type mentions a placeholder anywhere."""
        return any(isinstance(t, Placeholder) for t in self.walk())

    def has_opaque_types(self) -> bool:
        """Check whether the type mentions an opaque (impl Trait) type anywhere."""
        return any(isinstance(t, Opaque) for t in self.walk())

    def has_param_types(self) -> bool:
        """Check whether the type mentions a generic parameter anywhere."""
        return any(isinstance(t, Param) for t in self.walk())


@dataclass(frozen=True)
class Primitive(Ty):
    """Scalar types and str."""

    name: str

    NAMES = frozenset(
        {"bool", "char", "str", "i8", "i16", "i32", "i64", "i128", "isize", "u8", "u16", "u32", "u64", "u128", "usize", "f32", "f64"}
    )

    @classmethod
    def bool(cls) -> Primitive:
        return cls("bool")

    @classmethod
    def char(cls) -> Primitive:
        return cls("char")

    @classmethod
    def i32(cls) -> Primitive:
        """Return the default integer type."""
        return cls("i32")

    @classmethod
    def u8(cls) -> Primitive:
        return cls("u8")

    @classmethod
    def usize(cls) -> Primitive:
        return cls("usize")

    @classmethod
    def f64(cls) -> Primitive:
        return cls("f64")

    @classmethod
    def str(cls) -> Primitive:
        """Return the unsized string slice type."""
        return cls("str")

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Adt(Ty):
    """A struct, enum or union, possibly instantiated with generic arguments."""

    name: str
    args: Tuple[Ty, ...] = ()

    def __iter__(self) -> Iterator[Ty]:
        yield from self.args

    def __str__(self) -> str:
        if self.args:
            return f"{self.name}<{', '.join(str(arg) for arg in self.args)}>"
        return self.name


@dataclass(frozen=True)
class Ref(Ty):
    """A reference to another type."""

    pointee: Ty
    mutability: Mutability = Mutability.NOT

    def __iter__(self) -> Iterator[Ty]:
        yield self.pointee

    @property
    def type(self) -> Ty:
        """Return the referenced type."""
        return self.pointee

    @property
    def is_ref(self) -> bool:
        return True

    def __str__(self) -> str:
        return f"&{self.mutability.prefix_str}{self.pointee}"


@dataclass(frozen=True)
class RawPtr(Ty):
    pointee: Ty
    mutability: Mutability = Mutability.NOT

    def __iter__(self) -> Iterator[Ty]:
        yield self.pointee

    @property
    def is_unsafe_ptr(self) -> bool:
        return True

    def __str__(self) -> str:
        return f"*{self.mutability.ptr_str} {self.pointee}"


@dataclass(frozen=True)
class Array(Ty):
    element: Ty
    length: int

    def __iter__(self) -> Iterator[Ty]:
        yield self.element

    def __str__(self) -> str:
        return f"[{self.element}; {self.length}]"


@dataclass(frozen=True)
class Slice(Ty):
    element: Ty

    def __iter__(self) -> Iterator[Ty]:
        yield self.element

    def __str__(self) -> str:
        return f"[{self.element}]"


@dataclass(frozen=True)
class Tup(Ty):
    elements: Tuple[Ty, ...] = ()

    def __iter__(self) -> Iterator[Ty]:
        yield from self.elements

    def __str__(self) -> str:
        if len(self.elements) == 1:
            return f"({self.elements[0]},)"
        return f"({', '.join(str(element) for element in self.elements)})"


@dataclass(frozen=True)
class FnDef(Ty):
    """The zero-sized type of a named function item."""

    def_id: int
    name: str = "fn"

    def __str__(self) -> str:
        return f"fn() {{{self.name}}}"


@dataclass(frozen=True)
class FnPtr(Ty):
    inputs: Tuple[Ty, ...]
    output: Ty

    def __iter__(self) -> Iterator[Ty]:
        yield from self.inputs
        yield self.output

    def __str__(self) -> str:
        return f"fn({', '.join(str(x) for x in self.inputs)}) -> {self.output}"


@dataclass(frozen=True)
class Closure(Ty):
    """The unique type of a closure expression, identified by the closure's definition."""

    def_id: int

    def __str__(self) -> str:
        return f"{{closure#{self.def_id}}}"


@dataclass(frozen=True)
class Generator(Ty):
    def_id: int

    def __str__(self) -> str:
        return f"{{generator#{self.def_id}}}"


@dataclass(frozen=True)
class Never(Ty):
    def __str__(self) -> str:
        return "!"


@dataclass(frozen=True)
class Projection(Ty):
    """An associated type projection such as <T as Trait>::Item."""

    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Foreign(Ty):
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Param(Ty):
    """A generic type parameter."""

    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Infer(Ty):
    """An inference variable which has not been resolved."""

    def __str__(self) -> str:
        return "_"


@dataclass(frozen=True)
class Error(Ty):
    def __str__(self) -> str:
        return "{type error}"


@dataclass(frozen=True)
class Bound(Ty):
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Opaque(Ty):
    """An opaque type, e.g. the hidden type behind `impl Trait`."""

    name: str

    def __str__(self) -> str:
        return f"impl {self.name}"


@dataclass(frozen=True)
class Placeholder(Ty):
    name: str

    def __str__(self) -> str:
        return f"!{self.name}"


@dataclass(frozen=True)
class Dynamic(Ty):
    """A trait object type."""

    trait_name: str

    def __str__(self) -> str:
        return f"dyn {self.trait_name}"


def peel_refs(ty: Ty) -> Tuple[Ty, int]:
    """Remove all outer references of the given type, returning the inner type and the number of removed references."""
    count = 0
    while isinstance(ty, Ref):
        ty = ty.pointee
        count += 1
    return ty, count
