"""Module for visitor ABCs."""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

import autoderef.structures.hir.expressions as expressions
import autoderef.structures.hir.nodes as nodes
import autoderef.structures.hir.patterns as patterns

T = TypeVar("T")


class HirVisitorInterface(ABC, Generic[T]):
    """Interface for visiting all nodes of the intermediate representation."""

    def visit(self, node: nodes.HirNode) -> T:
        """Visit a node, dispatching to the correct handler."""
        return node.accept(self)

    @abstractmethod
    def visit_item(self, node: nodes.Item) -> T:
        """Visit an Item."""

    @abstractmethod
    def visit_param(self, node: nodes.Param) -> T:
        """Visit a Param."""

    @abstractmethod
    def visit_block(self, node: nodes.Block) -> T:
        """Visit a Block."""

    @abstractmethod
    def visit_local(self, node: nodes.Local) -> T:
        """Visit a Local."""

    @abstractmethod
    def visit_expr_stmt(self, node: nodes.ExprStmt) -> T:
        """Visit an ExprStmt."""

    @abstractmethod
    def visit_arm(self, node: nodes.Arm) -> T:
        """Visit an Arm."""

    @abstractmethod
    def visit_lit(self, node: expressions.Lit) -> T:
        """Visit a Lit."""

    @abstractmethod
    def visit_path(self, node: expressions.PathExpr) -> T:
        """Visit a PathExpr."""

    @abstractmethod
    def visit_unary(self, node: expressions.Unary) -> T:
        """Visit a Unary."""

    @abstractmethod
    def visit_addr_of(self, node: expressions.AddrOf) -> T:
        """Visit an AddrOf."""

    @abstractmethod
    def visit_call(self, node: expressions.Call) -> T:
        """Visit a Call."""

    @abstractmethod
    def visit_method_call(self, node: expressions.MethodCall) -> T:
        """Visit a MethodCall."""

    @abstractmethod
    def visit_field(self, node: expressions.Field) -> T:
        """Visit a Field."""

    @abstractmethod
    def visit_index(self, node: expressions.Index) -> T:
        """Visit an Index."""

    @abstractmethod
    def visit_binary(self, node: expressions.Binary) -> T:
        """Visit a Binary."""

    @abstractmethod
    def visit_cast(self, node: expressions.Cast) -> T:
        """Visit a Cast."""

    @abstractmethod
    def visit_block_expr(self, node: expressions.BlockExpr) -> T:
        """Visit a BlockExpr."""

    @abstractmethod
    def visit_loop(self, node: expressions.Loop) -> T:
        """Visit a Loop."""

    @abstractmethod
    def visit_break(self, node: expressions.Break) -> T:
        """Visit a Break."""

    @abstractmethod
    def visit_continue(self, node: expressions.Continue) -> T:
        """Visit a Continue."""

    @abstractmethod
    def visit_if(self, node: expressions.If) -> T:
        """Visit an If."""

    @abstractmethod
    def visit_match(self, node: expressions.Match) -> T:
        """Visit a Match."""

    @abstractmethod
    def visit_assign(self, node: expressions.Assign) -> T:
        """Visit an Assign."""

    @abstractmethod
    def visit_assign_op(self, node: expressions.AssignOp) -> T:
        """Visit an AssignOp."""

    @abstractmethod
    def visit_ret(self, node: expressions.Ret) -> T:
        """Visit a Ret."""

    @abstractmethod
    def visit_struct(self, node: expressions.Struct) -> T:
        """Visit a Struct."""

    @abstractmethod
    def visit_tup(self, node: expressions.TupExpr) -> T:
        """Visit a TupExpr."""

    @abstractmethod
    def visit_array(self, node: expressions.ArrayExpr) -> T:
        """Visit an ArrayExpr."""

    @abstractmethod
    def visit_closure(self, node: expressions.ClosureExpr) -> T:
        """Visit a ClosureExpr."""

    @abstractmethod
    def visit_range(self, node: expressions.Range) -> T:
        """Visit a Range."""

    @abstractmethod
    def visit_err(self, node: expressions.ErrExpr) -> T:
        """Visit an ErrExpr."""

    @abstractmethod
    def visit_binding_pat(self, node: patterns.BindingPat) -> T:
        """Visit a BindingPat."""

    @abstractmethod
    def visit_tuple_struct_pat(self, node: patterns.TupleStructPat) -> T:
        """Visit a TupleStructPat."""

    @abstractmethod
    def visit_tuple_pat(self, node: patterns.TuplePat) -> T:
        """Visit a TuplePat."""

    @abstractmethod
    def visit_or_pat(self, node: patterns.OrPat) -> T:
        """Visit an OrPat."""

    @abstractmethod
    def visit_wild_pat(self, node: patterns.WildPat) -> T:
        """Visit a WildPat."""

    @abstractmethod
    def visit_lit_pat(self, node: patterns.LitPat) -> T:
        """Visit a LitPat."""
