"""Module implementing the PatternHandler for the JSON frontend."""
from typing import Any, Dict

from autoderef.frontend.lifter import Handler
from autoderef.structures.hir.patterns import BindingAnnotation, BindingPat, LitPat, OrPat, TuplePat, TupleStructPat, WildPat


class PatternHandler(Handler):
    """Handler for patterns. Bindings are declared under their id label, which defaults to their name."""

    def register(self):
        """Register the handler at its parent lifter."""
        self._lifter.HANDLERS.update(
            {
                "bind": self.lift_binding,
                "tuple_struct_pat": self.lift_tuple_struct,
                "tuple_pat": self.lift_tuple,
                "or_pat": self.lift_or,
                "wild": self.lift_wildcard,
                "lit_pat": self.lift_literal,
            }
        )

    def lift_binding(self, data: Dict[str, Any], **kwargs) -> BindingPat:
        """
        Lift a binding. Another occurrence of a binding in an or-pattern names the first one in same_as.
        ref and mut select the binding annotation.
        """
        annotation = _annotation(bool(data.get("ref", False)), bool(data.get("mut", False)))
        subpattern = self._lifter.lift_optional(data.get("subpattern"))
        if (first := data.get("same_as")) is not None:
            return self._lifter.builder.bind(data["name"], self._lifter.ty(data.get("ty")), annotation, self._lifter.binding(first), subpattern)
        binding = self._lifter.builder.bind(data["name"], self._lifter.ty(data.get("ty")), annotation, subpattern=subpattern)
        self._lifter.declare_binding(data.get("id", data["name"]), binding)
        return binding

    def lift_tuple_struct(self, data: Dict[str, Any], **kwargs) -> TupleStructPat:
        subpatterns = self._lifter.lift_all(data.get("subpatterns", []))
        return self._lifter.builder.tuple_struct_pat(data["path"], subpatterns, self._lifter.ty(data["ty"]))

    def lift_tuple(self, data: Dict[str, Any], **kwargs) -> TuplePat:
        return self._lifter.builder.tuple_pat(*self._lifter.lift_all(data.get("subpatterns", [])))

    def lift_or(self, data: Dict[str, Any], **kwargs) -> OrPat:
        alternatives = self._lifter.lift_all(data["alternatives"])
        if not alternatives:
            raise ValueError("An or-pattern needs at least one alternative")
        return self._lifter.builder.or_pat(alternatives, self._lifter.ty(data.get("ty")))

    def lift_wildcard(self, data: Dict[str, Any], **kwargs) -> WildPat:
        return self._lifter.builder.wild(self._lifter.ty(data.get("ty")))

    def lift_literal(self, data: Dict[str, Any], **kwargs) -> LitPat:
        return self._lifter.builder.lit_pat(str(data["value"]), self._lifter.ty(data.get("ty", "i32")))


def _annotation(is_ref: bool, is_mut: bool) -> BindingAnnotation:
    if is_ref:
        return BindingAnnotation.ref_mut if is_mut else BindingAnnotation.ref
    return BindingAnnotation.mutable if is_mut else BindingAnnotation.none
