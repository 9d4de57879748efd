"""Module implementing the OperationHandler for the JSON frontend."""
from typing import Any, Dict

from autoderef.frontend.lifter import Handler
from autoderef.structures.hir.expressions import (
    AddrOf,
    ArrayExpr,
    Assign,
    AssignOp,
    Binary,
    Cast,
    ErrExpr,
    Field,
    Index,
    Lit,
    PathExpr,
    Range,
    Struct,
    TupExpr,
    Unary,
    UnOp,
)


class OperationHandler(Handler):
    """Handler for literals, paths, operators and aggregate expressions."""

    def register(self):
        """Register the handler at its parent lifter."""
        self._lifter.HANDLERS.update(
            {
                "lit": self.lift_literal,
                "local": self.lift_local,
                "path": self.lift_path,
                "unary": self.lift_unary,
                "deref": self.lift_deref,
                "addr_of": self.lift_addr_of,
                "field": self.lift_field,
                "index": self.lift_index,
                "binary": self.lift_binary,
                "cast": self.lift_cast,
                "assign": self.lift_assign,
                "assign_op": self.lift_assign_op,
                "struct": self.lift_struct,
                "tup": self.lift_tuple,
                "array": self.lift_array,
                "range": self.lift_range,
                "err": self.lift_error,
            }
        )

    def lift_literal(self, data: Dict[str, Any], **kwargs) -> Lit:
        return self._lifter.builder.lit(str(data["value"]), self._lifter.ty(data.get("ty", "i32")))

    def lift_local(self, data: Dict[str, Any], **kwargs) -> PathExpr:
        """Lift a use of a binding, referred to by its label."""
        return self._lifter.builder.local(self._lifter.binding(data["binding"]), self._lifter.ty(data.get("ty")))

    def lift_path(self, data: Dict[str, Any], **kwargs) -> PathExpr:
        """Lift a path to a definition, e.g. a function. The definition defaults to the written name."""
        def_id = self._lifter.def_id(data.get("def", data["name"]))
        return self._lifter.builder.path(data["name"], def_id, self._lifter.ty(data.get("ty")))

    def lift_unary(self, data: Dict[str, Any], **kwargs) -> Unary:
        operand = self._lifter.lift(data["operand"])
        return self._lifter.builder.unary(UnOp(data["op"]), operand, self._lifter.ty(data.get("ty")))

    def lift_deref(self, data: Dict[str, Any], **kwargs) -> Unary:
        return self._lifter.builder.deref(self._lifter.lift(data["operand"]), self._lifter.ty(data.get("ty")))

    def lift_addr_of(self, data: Dict[str, Any], **kwargs) -> AddrOf:
        """Lift a borrow. Raw borrows (&raw const x) are flagged by raw."""
        operand = self._lifter.lift(data["operand"])
        expr = self._lifter.builder.addr_of(operand, self._lifter.mutability(data), self._lifter.ty(data.get("ty")))
        expr.raw = bool(data.get("raw", False))
        return expr

    def lift_field(self, data: Dict[str, Any], **kwargs) -> Field:
        return self._lifter.builder.field(self._lifter.lift(data["base"]), data["name"], self._lifter.ty(data["ty"]))

    def lift_index(self, data: Dict[str, Any], **kwargs) -> Index:
        base, index = self._lifter.lift(data["base"]), self._lifter.lift(data["index"])
        return self._lifter.builder.index(base, index, self._lifter.ty(data["ty"]))

    def lift_binary(self, data: Dict[str, Any], **kwargs) -> Binary:
        lhs, rhs = self._lifter.lift(data["lhs"]), self._lifter.lift(data["rhs"])
        return self._lifter.builder.binary(data["op"], lhs, rhs, self._lifter.ty(data.get("ty")))

    def lift_cast(self, data: Dict[str, Any], **kwargs) -> Cast:
        return self._lifter.builder.cast(self._lifter.lift(data["operand"]), data["ty"])

    def lift_assign(self, data: Dict[str, Any], **kwargs) -> Assign:
        return self._lifter.builder.assign(self._lifter.lift(data["lhs"]), self._lifter.lift(data["rhs"]))

    def lift_assign_op(self, data: Dict[str, Any], **kwargs) -> AssignOp:
        return self._lifter.builder.assign_op(data["op"], self._lifter.lift(data["lhs"]), self._lifter.lift(data["rhs"]))

    def lift_struct(self, data: Dict[str, Any], **kwargs) -> Struct:
        """Lift a struct literal. Its fields are checked against the definition named by def, which defaults to the name."""
        fields = {name: self._lifter.lift(value) for name, value in data.get("fields", {}).items()}
        def_id = self._lifter.def_id(data.get("def", data["name"]))
        return self._lifter.builder.struct(data["name"], fields, def_id, self._lifter.ty(data.get("ty")))

    def lift_tuple(self, data: Dict[str, Any], **kwargs) -> TupExpr:
        return self._lifter.builder.tup(*self._lifter.lift_all(data.get("items", [])))

    def lift_array(self, data: Dict[str, Any], **kwargs) -> ArrayExpr:
        return self._lifter.builder.array(self._lifter.lift_all(data.get("items", [])), self._lifter.ty(data.get("ty")))

    def lift_range(self, data: Dict[str, Any], **kwargs) -> Range:
        start, end = self._lifter.lift_optional(data.get("start")), self._lifter.lift_optional(data.get("end"))
        return self._lifter.builder.range(start, end, bool(data.get("inclusive", False)), self._lifter.ty(data.get("ty")))

    def lift_error(self, data: Dict[str, Any], **kwargs) -> ErrExpr:
        return self._lifter.builder.err()
