"""Module implementing the ItemHandler for the JSON frontend."""
from typing import Any, Dict

from autoderef.frontend.lifter import Handler
from autoderef.structures.crate import DefKind
from autoderef.structures.hir.nodes import DefId, ExprStmt, Item, ItemContainer, Local


class ItemHandler(Handler):
    """Handler for items, statements and the definitions items refer to."""

    def register(self):
        """Register the handler at its parent lifter."""
        self._lifter.HANDLERS.update(
            {
                "fn": self.lift_function,
                "static": self.lift_static,
                "const": self.lift_const,
                "let": self.lift_local,
                "stmt": self.lift_statement,
                "fn_def": self.lift_function_definition,
                "struct_def": self.lift_struct_definition,
            }
        )

    def lift_function(self, data: Dict[str, Any], **kwargs) -> Item:
        """Lift a function item. Its generic parameters apply to all types written in it."""
        generics = data.get("generics", [])
        self._lifter.reset_scope(generics)
        params = [(self._lifter.lift(param["pat"]), param["ty"]) for param in data.get("params", [])]
        body = self._lifter.lift(data["body"])
        container = ItemContainer[data.get("container", "free")]
        item = self._lifter.builder.fn(data["name"], params, body, data.get("output"), generics, container)
        self._lifter.declare_def(data["name"], item.def_id)
        return item

    def lift_static(self, data: Dict[str, Any], **kwargs) -> Item:
        self._lifter.reset_scope()
        item = self._lifter.builder.static(data["name"], data["ty"], self._lifter.lift(data["value"]), ItemContainer[data.get("container", "free")])
        self._lifter.declare_def(data["name"], item.def_id)
        return item

    def lift_const(self, data: Dict[str, Any], **kwargs) -> Item:
        self._lifter.reset_scope()
        item = self._lifter.builder.const(data["name"], data["ty"], self._lifter.lift(data["value"]), ItemContainer[data.get("container", "free")])
        self._lifter.declare_def(data["name"], item.def_id)
        return item

    def lift_local(self, data: Dict[str, Any], **kwargs) -> Local:
        """Lift `let pat: ty = init;`. The initializer is lifted first, it can not use the bindings of the pattern."""
        init = self._lifter.lift_optional(data.get("init"))
        return self._lifter.builder.let(self._lifter.lift(data["pat"]), init, data.get("ty"))

    def lift_statement(self, data: Dict[str, Any], **kwargs) -> ExprStmt:
        return self._lifter.builder.stmt(self._lifter.lift(data["expr"]), bool(data.get("semi", True)))

    def lift_function_definition(self, data: Dict[str, Any], **kwargs) -> DefId:
        """Declare a function defined elsewhere, e.g. in a dependency. Associated functions name their trait."""
        def_id = self._lifter.builder.fn_def(
            data["path"],
            data.get("inputs", []),
            data.get("output", "()"),
            data.get("generics", []),
            DefKind[data.get("def_kind", "fn")],
            data.get("trait"),
        )
        self._lifter.declare_def(data["path"], def_id)
        return def_id

    def lift_struct_definition(self, data: Dict[str, Any], **kwargs) -> DefId:
        def_id = self._lifter.builder.struct_def(data["path"], data.get("fields", {}), data.get("generics", []), DefKind[data.get("def_kind", "struct")])
        self._lifter.declare_def(data["path"], def_id)
        return def_id
