"""Module implementing the CallHandler for the JSON frontend."""
from typing import Any, Dict

from autoderef.frontend.lifter import Handler
from autoderef.structures.hir.expressions import Call, ClosureExpr, MethodCall


class CallHandler(Handler):
    """Handler for calls, method calls and closures."""

    def register(self):
        """Register the handler at its parent lifter."""
        self._lifter.HANDLERS.update(
            {
                "call": self.lift_call,
                "method_call": self.lift_method_call,
                "deref_call": self.lift_deref_call,
                "ufcs_deref": self.lift_ufcs_deref,
                "closure": self.lift_closure,
            }
        )

    def lift_call(self, data: Dict[str, Any], **kwargs) -> Call:
        """Lift a call. The type defaults to the output of the callee's signature."""
        func = self._lifter.lift(data["func"])
        return self._lifter.builder.call(func, self._lifter.lift_all(data.get("args", [])), self._lifter.ty(data.get("ty")))

    def lift_method_call(self, data: Dict[str, Any], **kwargs) -> MethodCall:
        """Lift a method call, resolved to the definition named by def."""
        receiver = self._lifter.lift(data["receiver"])
        args = self._lifter.lift_all(data.get("args", []))
        return self._lifter.builder.method_call(data["name"], receiver, args, self._lifter.def_id(data.get("def")), self._lifter.ty(data.get("ty")))

    def lift_deref_call(self, data: Dict[str, Any], **kwargs) -> MethodCall:
        """Lift `x.deref()`, or `x.deref_mut()` if mut is set."""
        receiver = self._lifter.lift(data["receiver"])
        return self._lifter.builder.deref_call(receiver, self._lifter.ty(data["ty"]), self._lifter.mutability(data))

    def lift_ufcs_deref(self, data: Dict[str, Any], **kwargs) -> Call:
        """Lift `Deref::deref(x)`, or `DerefMut::deref_mut(x)` if mut is set."""
        arg = self._lifter.lift(data["arg"])
        return self._lifter.builder.ufcs_deref(arg, self._lifter.ty(data["ty"]), self._lifter.mutability(data))

    def lift_closure(self, data: Dict[str, Any], **kwargs) -> ClosureExpr:
        """Lift a closure. Parameters without a written type are inferred."""
        params = [(self._lifter.lift(param["pat"]), param.get("ty")) for param in data.get("params", [])]
        return self._lifter.builder.closure(params, self._lifter.lift(data["body"]), data.get("output"))
