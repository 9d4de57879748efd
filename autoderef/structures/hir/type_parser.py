"""Module parsing type strings into written types and lowering written types into resolved types."""
from __future__ import annotations

from typing import FrozenSet, Iterable, List

from .hir_ty import (
    HirArray,
    HirBareFn,
    HirErr,
    HirInfer,
    HirNever,
    HirOpaqueDef,
    HirPath,
    HirPtr,
    HirRef,
    HirSlice,
    HirTraitObject,
    HirTup,
    HirTy,
    HirTypeof,
)
from .ty import (
    Adt,
    Array,
    Dynamic,
    Error,
    FnPtr,
    Infer,
    Mutability,
    Never,
    Opaque,
    Param,
    Primitive,
    Projection,
    RawPtr,
    Ref,
    Slice,
    Tup,
    Ty,
)

OPENING = "<([{"
CLOSING = ">)]}"


def split_top_level(text: str, separator: str = ",") -> List[str]:
    """Split the text at every separator which is not nested in brackets. Empty trailing parts are dropped."""
    parts, depth, start = [], 0, 0
    for index, char in enumerate(text):
        if char in OPENING:
            depth += 1
        elif char in CLOSING and not (char == ">" and index > 0 and text[index - 1] == "-"):
            depth -= 1
        elif char == separator and depth == 0:
            parts.append(text[start:index].strip())
            start = index + 1
    parts.append(text[start:].strip())
    return [part for part in parts if part]


def _matching_paren(text: str, start: int) -> int:
    depth = 0
    for index in range(start, len(text)):
        if text[index] == "(":
            depth += 1
        elif text[index] == ")":
            depth -= 1
            if depth == 0:
                return index
    raise ValueError(f"Unbalanced parentheses in type {text}")


class TypeParser:
    """A type parser in charge of creating written types from their source representation."""

    def __init__(self, generics: Iterable[str] = ()):
        """Generate a new type parser treating the given names as generic parameters when lowering."""
        self._generics: FrozenSet[str] = frozenset(generics)

    def parse(self, text: str) -> HirTy:
        """Parse the given string and return a fitting written type."""
        text = text.strip()
        if not text:
            raise ValueError("Can not parse an empty type")
        if text.startswith("&"):
            rest = text[1:].lstrip()
            if rest.startswith("'"):
                rest = rest.split(maxsplit=1)[1]
            if rest.startswith("mut "):
                return HirRef(self.parse(rest[4:]), Mutability.MUT)
            return HirRef(self.parse(rest))
        if text.startswith("*const "):
            return HirPtr(self.parse(text[7:]))
        if text.startswith("*mut "):
            return HirPtr(self.parse(text[5:]), Mutability.MUT)
        if text == "!":
            return HirNever()
        if text == "_":
            return HirInfer()
        if text == "{error}":
            return HirErr()
        if text.startswith("impl "):
            return HirOpaqueDef(text[5:].strip())
        if text.startswith("dyn "):
            return HirTraitObject(text[4:].strip())
        if text.startswith("typeof("):
            return HirTypeof()
        if text.startswith("[") and text.endswith("]"):
            return self._parse_array(text[1:-1])
        if text.startswith("(") and text.endswith(")"):
            return HirTup(tuple(self.parse(part) for part in split_top_level(text[1:-1])))
        if text.startswith("fn("):
            return self._parse_bare_fn(text)
        if "<" in text and text.endswith(">"):
            name, arguments = text.split("<", 1)
            return HirPath(name.strip(), tuple(self.parse(part) for part in split_top_level(arguments[:-1])))
        return HirPath(text)

    def _parse_array(self, text: str) -> HirTy:
        parts = split_top_level(text, ";")
        if len(parts) == 2:
            return HirArray(self.parse(parts[0]), parts[1])
        return HirSlice(self.parse(text))

    def _parse_bare_fn(self, text: str) -> HirBareFn:
        end = _matching_paren(text, 2)
        inputs = tuple(self.parse(part) for part in split_top_level(text[3:end]))
        rest = text[end + 1 :].strip()
        if rest.startswith("->"):
            return HirBareFn(inputs, self.parse(rest[2:]))
        return HirBareFn(inputs)

    def lower(self, ty: HirTy) -> Ty:
        """Resolve the written type the way the type checker would for a fully annotated program."""
        if isinstance(ty, HirRef):
            return Ref(self.lower(ty.ty), ty.mutability)
        if isinstance(ty, HirPtr):
            return RawPtr(self.lower(ty.ty), ty.mutability)
        if isinstance(ty, HirPath):
            return self._lower_path(ty)
        if isinstance(ty, HirSlice):
            return Slice(self.lower(ty.ty))
        if isinstance(ty, HirArray):
            return Array(self.lower(ty.ty), int(ty.length) if ty.length.isdigit() else 0)
        if isinstance(ty, HirTup):
            return Tup(tuple(self.lower(element) for element in ty.tys))
        if isinstance(ty, HirBareFn):
            return FnPtr(tuple(self.lower(x) for x in ty.inputs), Tup() if ty.output is None else self.lower(ty.output))
        if isinstance(ty, HirNever):
            return Never()
        if isinstance(ty, HirTraitObject):
            return Dynamic(ty.trait_name)
        if isinstance(ty, HirOpaqueDef):
            return Opaque(ty.trait_name)
        if isinstance(ty, HirInfer):
            return Infer()
        return Error()

    def _lower_path(self, ty: HirPath) -> Ty:
        if not ty.args and ty.name in Primitive.NAMES:
            return Primitive(ty.name)
        if not ty.args and ty.name in self._generics:
            return Param(ty.name)
        if "::" in ty.name and ty.name.split("::", 1)[0] in self._generics:
            return Projection(ty.name)
        return Adt(ty.name, tuple(self.lower(arg) for arg in ty.args))

    def parse_ty(self, text: str) -> Ty:
        """Parse the given string directly into a resolved type."""
        return self.lower(self.parse(text))
