"""Module rendering the intermediate representation as source text while assigning the span of every node."""
from __future__ import annotations

from typing import Iterable, Iterator, List

from autoderef.structures.hir import expressions, nodes, patterns
from autoderef.structures.hir.hir_ty import HirInfer, HirTy
from autoderef.structures.hir.precedence import PREC_CAST, PREC_POSTFIX, PREC_PREFIX
from autoderef.structures.hir.span import ROOT_CONTEXT, Span, SyntaxContextTable
from autoderef.structures.visitors.interfaces import HirVisitorInterface

INDENT = "    "


class SourcePrinter(HirVisitorInterface[None]):
    """
    Prints nodes as source code, recording the span of each node on the node itself.

    Operands binding looser than their parent requires are wrapped in parentheses, which become part of the operand's span.
    A node with a macro_name is printed as a macro call `name!(args)`: the call and all nodes it expands to share a new
    syntax context, except for the nodes marked as macro arguments, which are printed inside the call in the caller's context.
    """

    def __init__(self, contexts: SyntaxContextTable):
        self._contexts = contexts
        self._chunks: List[str] = []
        self._position = 0
        self._indent = 0
        self._ctxt = ROOT_CONTEXT

    @property
    def text(self) -> str:
        return "".join(self._chunks)

    def print_items(self, items: Iterable[nodes.Item]) -> str:
        """Print all items separated by blank lines and return the complete text."""
        for index, item in enumerate(items):
            if index:
                self._write("\n\n")
            self.print_node(item)
        self._write("\n")
        return self.text

    def print_node(self, node: nodes.HirNode):
        if node.macro_name is not None:
            self._print_macro_call(node)
            return
        start = self._position
        self.visit(node)
        node.span = Span(start, self._position, self._ctxt)

    def _write(self, text: str):
        self._chunks.append(text)
        self._position += len(text)

    def _newline(self):
        self._write("\n" + INDENT * self._indent)

    def _print_operand(self, expr: expressions.Expr, required_precedence: int):
        if expr.macro_name is not None or expr.precedence() >= required_precedence:
            self.print_node(expr)
            return
        start = self._position
        self._write("(")
        self.print_node(expr)
        self._write(")")
        expr.span = Span(start, self._position, self._ctxt)

    def _print_list(self, elements: Iterable[nodes.HirNode], separator: str = ", "):
        for index, element in enumerate(elements):
            if index:
                self._write(separator)
            self.print_node(element)

    def _print_macro_call(self, root: nodes.HirNode):
        start, caller = self._position, self._ctxt
        expansion = self._contexts.new_expansion(root.macro_name)
        self._write(f"{root.macro_name}!(")
        self._print_list(_macro_arguments(root))
        self._write(")")
        call_site = Span(start, self._position, caller)
        self._contexts.set_call_site(expansion, call_site)
        _assign_expanded_span(root, call_site.with_ctxt(expansion))

    def visit_item(self, node: nodes.Item):
        if node.kind is nodes.ItemKind.fn:
            self._write(f"fn {node.name}(")
            if node.body is not None:
                self._print_params(node.body.params, node.decl.inputs if node.decl else [])
            self._write(")")
            if node.decl is not None and node.decl.output is not None:
                self._write(f" -> {node.decl.output}")
            self._write(" ")
        else:
            self._write(f"{node.kind.name} {node.name}: {node.ty} = ")
        if node.body is not None:
            self.print_node(node.body.value)
        if node.kind is not nodes.ItemKind.fn:
            self._write(";")

    def _print_params(self, params: List[nodes.Param], tys: List[HirTy]):
        for index, param in enumerate(params):
            if index:
                self._write(", ")
            self.print_node(param)
            if index < len(tys) and not isinstance(tys[index], HirInfer):
                self._write(f": {tys[index]}")

    def visit_param(self, node: nodes.Param):
        self.print_node(node.pat)

    def visit_block(self, node: nodes.Block):
        if not node.stmts and node.expr is None:
            self._write("{}")
            return
        self._write("{")
        self._indent += 1
        for stmt in node:
            self._newline()
            self.print_node(stmt)
        self._indent -= 1
        self._newline()
        self._write("}")

    def visit_local(self, node: nodes.Local):
        self._write("let ")
        self.print_node(node.pat)
        if node.ty is not None:
            self._write(f": {node.ty}")
        if node.init is not None:
            self._write(" = ")
            self.print_node(node.init)
        self._write(";")

    def visit_expr_stmt(self, node: nodes.ExprStmt):
        self.print_node(node.expr)
        if node.semi:
            self._write(";")

    def visit_arm(self, node: nodes.Arm):
        self.print_node(node.pat)
        if node.guard is not None:
            self._write(" if ")
            self.print_node(node.guard)
        self._write(" => ")
        self.print_node(node.body)
        self._write(",")

    def visit_lit(self, node: expressions.Lit):
        self._write(node.text)

    def visit_path(self, node: expressions.PathExpr):
        self._write(node.name)

    def visit_unary(self, node: expressions.Unary):
        self._write(node.op.value)
        self._print_operand(node.operand, PREC_PREFIX)

    def visit_addr_of(self, node: expressions.AddrOf):
        if node.raw:
            self._write(f"&raw {node.mutability.ptr_str} ")
        else:
            self._write(f"&{node.mutability.prefix_str}")
        self._print_operand(node.operand, PREC_PREFIX)

    def visit_call(self, node: expressions.Call):
        self._print_operand(node.func, PREC_POSTFIX)
        self._write("(")
        self._print_list(node.args)
        self._write(")")

    def visit_method_call(self, node: expressions.MethodCall):
        self._print_operand(node.receiver, PREC_POSTFIX)
        self._write(f".{node.name}(")
        self._print_list(node.args)
        self._write(")")

    def visit_field(self, node: expressions.Field):
        self._print_operand(node.base, PREC_POSTFIX)
        self._write(f".{node.name}")

    def visit_index(self, node: expressions.Index):
        self._print_operand(node.base, PREC_POSTFIX)
        self._write("[")
        self.print_node(node.index)
        self._write("]")

    def visit_binary(self, node: expressions.Binary):
        # binary operators are left associative
        self._print_operand(node.lhs, node.precedence())
        self._write(f" {node.op.value} ")
        self._print_operand(node.rhs, node.precedence() + 1)

    def visit_cast(self, node: expressions.Cast):
        self._print_operand(node.operand, PREC_CAST)
        self._write(f" as {node.ty}")

    def visit_block_expr(self, node: expressions.BlockExpr):
        if node.label is not None:
            self._write(f"{node.label}: ")
        self.print_node(node.block)

    def visit_loop(self, node: expressions.Loop):
        if node.label is not None:
            self._write(f"{node.label}: ")
        self._write("loop ")
        self.print_node(node.block)

    def visit_break(self, node: expressions.Break):
        self._write("break")
        if node.label is not None:
            self._write(f" {node.label}")
        if node.value is not None:
            self._write(" ")
            self.print_node(node.value)

    def visit_continue(self, node: expressions.Continue):
        self._write("continue" if node.label is None else f"continue {node.label}")

    def visit_if(self, node: expressions.If):
        self._write("if ")
        self.print_node(node.cond)
        self._write(" ")
        self.print_node(node.then)
        if node.els is not None:
            self._write(" else ")
            self.print_node(node.els)

    def visit_match(self, node: expressions.Match):
        if node.source is not expressions.MatchSource.normal:
            self._print_operand(node.scrutinee, PREC_POSTFIX)
            start = self._position
            self._write("?" if node.source is expressions.MatchSource.try_desugar else ".await")
            # the arms are generated by the desugaring
            desugaring = self._contexts.new_expansion(node.source.name, Span(start, self._position, self._ctxt))
            for arm in node.arms:
                _assign_expanded_span(arm, Span(start, self._position, desugaring))
            return
        self._write("match ")
        self.print_node(node.scrutinee)
        self._write(" {")
        self._indent += 1
        for arm in node.arms:
            self._newline()
            self.print_node(arm)
        self._indent -= 1
        self._newline()
        self._write("}")

    def visit_assign(self, node: expressions.Assign):
        self.print_node(node.lhs)
        self._write(" = ")
        self.print_node(node.rhs)

    def visit_assign_op(self, node: expressions.AssignOp):
        self.print_node(node.lhs)
        self._write(f" {node.op.value}= ")
        self.print_node(node.rhs)

    def visit_ret(self, node: expressions.Ret):
        self._write("return")
        if node.value is not None:
            self._write(" ")
            self.print_node(node.value)

    def visit_struct(self, node: expressions.Struct):
        self._write(f"{node.name} {{ ")
        for index, expr_field in enumerate(node.fields):
            if index:
                self._write(", ")
            self._write(f"{expr_field.name}: ")
            self.print_node(expr_field.expr)
        self._write(" }")

    def visit_tup(self, node: expressions.TupExpr):
        self._write("(")
        self._print_list(node.items)
        self._write(",)" if len(node.items) == 1 else ")")

    def visit_array(self, node: expressions.ArrayExpr):
        self._write("[")
        self._print_list(node.items)
        self._write("]")

    def visit_closure(self, node: expressions.ClosureExpr):
        self._write("|")
        if node.body is not None:
            self._print_params(node.body.params, node.decl.inputs)
        self._write("| ")
        if node.body is not None:
            self.print_node(node.body.value)

    def visit_range(self, node: expressions.Range):
        if node.start is not None:
            self._print_operand(node.start, node.precedence() + 1)
        self._write("..=" if node.inclusive else "..")
        if node.end is not None:
            self._print_operand(node.end, node.precedence() + 1)

    def visit_err(self, node: expressions.ErrExpr):
        self._write("<error>")

    def visit_binding_pat(self, node: patterns.BindingPat):
        self._write(node.annotation.value)
        start = self._position
        self._write(node.name)
        node.name_span = Span(start, self._position, self._ctxt)
        if node.subpattern is not None:
            self._write(" @ ")
            self.print_node(node.subpattern)

    def visit_tuple_struct_pat(self, node: patterns.TupleStructPat):
        self._write(f"{node.path}(")
        self._print_list(node.subpatterns)
        self._write(")")

    def visit_tuple_pat(self, node: patterns.TuplePat):
        self._write("(")
        self._print_list(node.subpatterns)
        self._write(",)" if len(node.subpatterns) == 1 else ")")

    def visit_or_pat(self, node: patterns.OrPat):
        self._print_list(node.alternatives, " | ")

    def visit_wild_pat(self, node: patterns.WildPat):
        self._write("_")

    def visit_lit_pat(self, node: patterns.LitPat):
        self._write(node.text)


def _macro_arguments(root: nodes.HirNode) -> Iterator[nodes.HirNode]:
    """Yield the outermost nodes below the macro root which were passed in as arguments."""
    for child in root:
        if child.is_macro_arg:
            yield child
        else:
            yield from _macro_arguments(child)


def _assign_expanded_span(node: nodes.HirNode, span: Span):
    """Give the node and every nested node not passed in as an argument the span of the expansion."""
    node.span = span
    if isinstance(node, patterns.BindingPat):
        node.name_span = span
    for child in node:
        if not child.is_macro_arg:
            _assign_expanded_span(child, span)
