"""Module implementing the FlowHandler for the JSON frontend."""
from typing import Any, Dict

from autoderef.frontend.lifter import Handler
from autoderef.structures.hir.expressions import BlockExpr, Break, Continue, If, Loop, Match, MatchSource, Ret
from autoderef.structures.hir.nodes import Arm


class FlowHandler(Handler):
    """Handler for blocks, loops, branches and jumps. Blocks and loops are targeted by breaks through their id label."""

    def register(self):
        """Register the handler at its parent lifter."""
        self._lifter.HANDLERS.update(
            {
                "block": self.lift_block,
                "loop": self.lift_loop,
                "break": self.lift_break,
                "continue": self.lift_continue,
                "if": self.lift_if,
                "match": self.lift_match,
                "arm": self.lift_arm,
                "try": self.lift_try,
                "await": self.lift_await,
                "ret": self.lift_return,
            }
        )

    def lift_block(self, data: Dict[str, Any], **kwargs) -> BlockExpr:
        stmts = self._lifter.lift_all(data.get("stmts", []))
        expr = self._lifter.lift_optional(data.get("expr"))
        hir_id = self._lifter.target(data.get("id"))
        return self._lifter.builder.block(stmts, expr, data.get("label"), hir_id, self._lifter.ty(data.get("ty")))

    def lift_loop(self, data: Dict[str, Any], **kwargs) -> Loop:
        stmts = self._lifter.lift_all(data.get("stmts", []))
        hir_id = self._lifter.target(data.get("id"))
        return self._lifter.builder.loop(stmts, data.get("label"), hir_id, self._lifter.ty(data.get("ty", "()")))

    def lift_break(self, data: Dict[str, Any], **kwargs) -> Break:
        value = self._lifter.lift_optional(data.get("value"))
        return self._lifter.builder.break_(self._lifter.target(data.get("target")), value, data.get("label"))

    def lift_continue(self, data: Dict[str, Any], **kwargs) -> Continue:
        return self._lifter.builder.continue_(data.get("label"))

    def lift_if(self, data: Dict[str, Any], **kwargs) -> If:
        cond = self._lifter.lift(data["cond"])
        then = self._lifter.lift(data["then"])
        els = self._lifter.lift_optional(data.get("else"))
        return self._lifter.builder.if_(cond, then, els, self._lifter.ty(data.get("ty")))

    def lift_match(self, data: Dict[str, Any], **kwargs) -> Match:
        scrutinee = self._lifter.lift(data["scrutinee"])
        arms = [self._lifter.lift({"kind": "arm", **arm}) for arm in data.get("arms", [])]
        return self._lifter.builder.match(scrutinee, arms, ty=self._lifter.ty(data.get("ty")))

    def lift_arm(self, data: Dict[str, Any], **kwargs) -> Arm:
        """Lift a match arm. The pattern is lifted first, so the arm can use its bindings."""
        pat = self._lifter.lift(data["pat"])
        guard = self._lifter.lift_optional(data.get("guard"))
        return self._lifter.builder.arm(pat, self._lifter.lift(data["body"]), guard)

    def lift_try(self, data: Dict[str, Any], **kwargs) -> Match:
        return self._lifter.builder.match(self._lifter.lift(data["operand"]), [], MatchSource.try_desugar, self._lifter.ty(data["ty"]))

    def lift_await(self, data: Dict[str, Any], **kwargs) -> Match:
        return self._lifter.builder.match(self._lifter.lift(data["operand"]), [], MatchSource.await_desugar, self._lifter.ty(data["ty"]))

    def lift_return(self, data: Dict[str, Any], **kwargs) -> Ret:
        return self._lifter.builder.ret(self._lifter.lift_optional(data.get("value")))
