"""Module implementing a programmatic constructor for type checked programs."""
from __future__ import annotations

from itertools import count
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, TypeVar, Union

from autoderef.diagnostics.lints import Lint
from autoderef.structures.crate import Crate, DefInfo, DefKind, FnSig
from autoderef.structures.hir.adjustment import Adjustment
from autoderef.structures.hir.expressions import (
    AddrOf,
    ArrayExpr,
    Assign,
    AssignOp,
    Binary,
    BlockExpr,
    Break,
    Call,
    Cast,
    ClosureExpr,
    Continue,
    ErrExpr,
    Expr,
    ExprField,
    Field,
    If,
    Index,
    Lit,
    Loop,
    Match,
    MatchSource,
    MethodCall,
    PathExpr,
    Range,
    Ret,
    Struct,
    TupExpr,
    Unary,
    UnOp,
)
from autoderef.structures.hir.hir_ty import HirInfer, HirTy
from autoderef.structures.hir.nodes import Arm, Block, Body, DefId, ExprStmt, FnDecl, HirId, HirNode, Item, ItemContainer, ItemKind, Local, Param
from autoderef.structures.hir.patterns import BindingAnnotation, BindingPat, LitPat, OrPat, Pat, TuplePat, TupleStructPat, WildPat
from autoderef.structures.hir.precedence import BinOpKind
from autoderef.structures.hir.ty import Adt, Array, Closure, Error, FnDef, Mutability, Never, Param as ParamTy, Primitive, Projection, RawPtr, Ref, Tup, Ty
from autoderef.structures.hir.type_parser import TypeParser
from autoderef.structures.visitors.source_printer import SourcePrinter

N = TypeVar("N", bound=HirNode)
TyLike = Union[str, Ty]
HirTyLike = Union[str, HirTy]

COMPARISONS = frozenset({BinOpKind.eq, BinOpKind.ne, BinOpKind.lt, BinOpKind.le, BinOpKind.gt, BinOpKind.ge})
LOGICAL = frozenset({BinOpKind.logical_and, BinOpKind.logical_or})


class HirBuilder:
    """
    Builds the nodes of a crate bottom-up, recording their types on the way.

    Types can be given as resolved types or as strings, which are parsed and lowered; names listed in generics
    become generic parameters. When no type is given, it is derived from the operands where this is unambiguous.
    Calling finish() renders the source text of all items, which assigns the span of every node, and returns the crate.
    """

    def __init__(self, name: str = "crate"):
        self.crate = Crate(name)
        self._ids = count(1)
        self._items: List[Item] = []
        self._deref_method: Optional[DefId] = None
        self._deref_mut_method: Optional[DefId] = None
        self._finished = False

    def new_id(self) -> int:
        """Allocate a fresh identity, e.g. for a loop or block which is the target of a break built before it."""
        return next(self._ids)

    def ty(self, text: TyLike, generics: Iterable[str] = ()) -> Ty:
        if isinstance(text, Ty):
            return text
        return TypeParser(generics).parse_ty(text)

    def hir_ty(self, text: HirTyLike) -> HirTy:
        if isinstance(text, HirTy):
            return text
        return TypeParser().parse(text)

    def type_of(self, node: HirNode) -> Ty:
        return self.crate.typeck.node_type(node.hir_id)

    def _typed(self, node: N, ty: Optional[TyLike]) -> N:
        if ty is not None:
            self.crate.typeck.record_type(node.hir_id, self.ty(ty))
        return node

    def adjust(self, expr: Expr, *adjustments: Adjustment) -> Expr:
        """Record the implicit coercions applied to the expression."""
        self.crate.typeck.record_adjustments(expr.hir_id, adjustments)
        return expr

    def auto_deref(self, expr: Expr, *targets: TyLike, reborrow: Optional[Mutability] = None) -> Expr:
        """Record implicit dereferences producing the given types, optionally followed by a borrow of the last one."""
        adjustments = [Adjustment.deref(self.ty(target)) for target in targets]
        if reborrow is not None:
            adjustments.append(Adjustment.borrow(Ref(adjustments[-1].target, reborrow), reborrow))
        return self.adjust(expr, *adjustments)

    def allow(self, node: N, *lints: Lint) -> N:
        """Attach an allow attribute for the given lints to the node."""
        for lint in lints:
            self.crate.allow_lint(node.hir_id, lint)
        return node

    def expand(self, node: N, macro_name: str) -> N:
        """Mark the node as the result of expanding the given macro."""
        node.macro_name = macro_name
        return node

    def macro_arg(self, node: N) -> N:
        """Mark the node as an argument passed into the enclosing macro expansion."""
        node.is_macro_arg = True
        return node

    # definitions

    def fn_def(
        self,
        path: str,
        inputs: Sequence[TyLike],
        output: TyLike = "()",
        generics: Iterable[str] = (),
        kind: DefKind = DefKind.fn,
        trait_path: Optional[str] = None,
    ) -> DefId:
        """Declare a function without a body, e.g. one from another crate."""
        generics = tuple(generics)
        sig = FnSig(tuple(self.ty(ty, generics) for ty in inputs), self.ty(output, generics))
        def_id = self.new_id()
        self.crate.add_def(DefInfo(def_id, path, kind, trait_path=trait_path, sig=sig))
        return def_id

    def struct_def(self, path: str, fields: Dict[str, TyLike], generics: Iterable[str] = (), kind: DefKind = DefKind.struct) -> DefId:
        generics = tuple(generics)
        def_id = self.new_id()
        self.crate.add_def(DefInfo(def_id, path, kind, fields={name: self.ty(ty, generics) for name, ty in fields.items()}))
        return def_id

    @property
    def deref_method(self) -> DefId:
        """The definition of Deref::deref."""
        if self._deref_method is None:
            self._deref_method = self.fn_def(
                "core::ops::Deref::deref",
                [Ref(ParamTy("Self"))],
                Ref(Projection("Self::Target")),
                kind=DefKind.assoc_fn,
                trait_path="core::ops::Deref",
            )
        return self._deref_method

    @property
    def deref_mut_method(self) -> DefId:
        """The definition of DerefMut::deref_mut."""
        if self._deref_mut_method is None:
            self._deref_mut_method = self.fn_def(
                "core::ops::DerefMut::deref_mut",
                [Ref(ParamTy("Self"), Mutability.MUT)],
                Ref(Projection("Self::Target"), Mutability.MUT),
                kind=DefKind.assoc_fn,
                trait_path="core::ops::DerefMut",
            )
        return self._deref_mut_method

    # expressions

    def lit(self, text: str, ty: TyLike = "i32") -> Lit:
        return self._typed(Lit(self.new_id(), text), ty)

    def local(self, binding: BindingPat, ty: Optional[TyLike] = None) -> PathExpr:
        """Refer to a local binding. The type defaults to the type of the binding."""
        expr = PathExpr(self.new_id(), binding.name, local_id=binding.binding_id)
        return self._typed(expr, ty if ty is not None else self.type_of(binding))

    def path(self, name: str, def_id: Optional[DefId] = None, ty: Optional[TyLike] = None) -> PathExpr:
        """Refer to a definition. Paths to functions get the function item type by default."""
        expr = PathExpr(self.new_id(), name, def_id=def_id)
        if ty is None and (info := self.crate.def_info(def_id)) is not None and info.kind.is_fn_like:
            ty = FnDef(info.def_id, name)
        return self._typed(expr, ty)

    def unary(self, op: UnOp, operand: Expr, ty: Optional[TyLike] = None) -> Unary:
        return self._typed(Unary(self.new_id(), op, operand), ty if ty is not None else self.type_of(operand))

    def deref(self, operand: Expr, ty: Optional[TyLike] = None) -> Unary:
        """Build `*operand`. The type defaults to the pointee of a reference or raw pointer operand."""
        if ty is None and isinstance(operand_ty := self.type_of(operand), (Ref, RawPtr)):
            ty = operand_ty.pointee
        return self._typed(Unary(self.new_id(), UnOp.deref, operand), ty)

    def addr_of(self, operand: Expr, mutability: Mutability = Mutability.NOT, ty: Optional[TyLike] = None) -> AddrOf:
        """Build `&operand` or `&mut operand`."""
        return self._typed(AddrOf(self.new_id(), mutability, operand), ty if ty is not None else Ref(self.type_of(operand), mutability))

    def borrows(self, operand: Expr, count: int, mutability: Mutability = Mutability.NOT) -> AddrOf:
        """Build count nested borrows of the operand."""
        for _ in range(count):
            operand = self.addr_of(operand, mutability)
        return operand

    def call(self, func: Expr, args: Sequence[Expr], ty: Optional[TyLike] = None) -> Call:
        expr = Call(self.new_id(), func, list(args))
        if ty is None and (sig := self.crate.expr_sig(func)) is not None:
            ty = sig.sig.output
        return self._typed(expr, ty)

    def method_call(self, name: str, receiver: Expr, args: Sequence[Expr] = (), def_id: Optional[DefId] = None, ty: Optional[TyLike] = None) -> MethodCall:
        """Build `receiver.name(args)`, resolved to the given definition."""
        expr = MethodCall(self.new_id(), name, receiver, list(args))
        if def_id is not None:
            self.crate.typeck.record_type_dependent_def(expr.hir_id, def_id)
            if ty is None and (sig := self.crate.fn_sig(def_id)) is not None:
                ty = sig.output
        return self._typed(expr, ty)

    def deref_call(self, receiver: Expr, ty: TyLike, mutability: Mutability = Mutability.NOT) -> MethodCall:
        """Build `receiver.deref()` or `receiver.deref_mut()` returning the given type."""
        if mutability is Mutability.MUT:
            return self.method_call("deref_mut", receiver, def_id=self.deref_mut_method, ty=ty)
        return self.method_call("deref", receiver, def_id=self.deref_method, ty=ty)

    def ufcs_deref(self, arg: Expr, ty: TyLike, mutability: Mutability = Mutability.NOT) -> Call:
        """Build `Deref::deref(arg)` or `DerefMut::deref_mut(arg)` returning the given type."""
        if mutability is Mutability.MUT:
            func = self.path("DerefMut::deref_mut", self.deref_mut_method)
        else:
            func = self.path("Deref::deref", self.deref_method)
        return self._typed(Call(self.new_id(), func, [arg]), ty)

    def field(self, base: Expr, name: str, ty: TyLike) -> Field:
        return self._typed(Field(self.new_id(), base, name), ty)

    def index(self, base: Expr, index: Expr, ty: TyLike) -> Index:
        return self._typed(Index(self.new_id(), base, index), ty)

    def binary(self, op: Union[BinOpKind, str], lhs: Expr, rhs: Expr, ty: Optional[TyLike] = None) -> Binary:
        op = BinOpKind(op)
        if ty is None:
            ty = Primitive.bool() if op in COMPARISONS or op in LOGICAL else self.type_of(lhs)
        return self._typed(Binary(self.new_id(), op, lhs, rhs), ty)

    def cast(self, operand: Expr, ty: HirTyLike) -> Cast:
        hir_ty = self.hir_ty(ty)
        return self._typed(Cast(self.new_id(), operand, hir_ty), TypeParser().lower(hir_ty))

    def block(
        self, stmts: Sequence[HirNode] = (), expr: Optional[Expr] = None, label: Optional[str] = None, hir_id: Optional[HirId] = None, ty: Optional[TyLike] = None
    ) -> BlockExpr:
        """Build a block expression. The type defaults to the type of the tail expression."""
        block = Block(self.new_id(), list(stmts), expr)
        if ty is None:
            ty = self.type_of(expr) if expr is not None else Tup()
        return self._typed(BlockExpr(self.new_id() if hir_id is None else hir_id, block, label), ty)

    def loop(self, stmts: Sequence[HirNode], label: Optional[str] = None, hir_id: Optional[HirId] = None, ty: TyLike = "()") -> Loop:
        block = Block(self.new_id(), list(stmts))
        return self._typed(Loop(self.new_id() if hir_id is None else hir_id, block, label), ty)

    def break_(self, target: Union[HirId, Expr, None], value: Optional[Expr] = None, label: Optional[str] = None) -> Break:
        """Build a break to the given target, given either as expression or as identity reserved with new_id()."""
        target_id = target.hir_id if isinstance(target, Expr) else target
        return self._typed(Break(self.new_id(), target_id, value, label), Never())

    def continue_(self, label: Optional[str] = None) -> Continue:
        return self._typed(Continue(self.new_id(), label), Never())

    def if_(self, cond: Expr, then: Expr, els: Optional[Expr] = None, ty: Optional[TyLike] = None) -> If:
        return self._typed(If(self.new_id(), cond, then, els), ty if ty is not None else self.type_of(then))

    def arm(self, pat: Pat, body: Expr, guard: Optional[Expr] = None) -> Arm:
        return Arm(self.new_id(), pat, body, guard)

    def match(self, scrutinee: Expr, arms: Sequence[Arm], source: MatchSource = MatchSource.normal, ty: Optional[TyLike] = None) -> Match:
        if ty is None:
            ty = self.type_of(arms[0].body) if arms else Never()
        return self._typed(Match(self.new_id(), scrutinee, list(arms), source), ty)

    def try_(self, scrutinee: Expr, ty: TyLike) -> Match:
        """Build `scrutinee?`."""
        return self.match(scrutinee, [], MatchSource.try_desugar, ty)

    def await_(self, scrutinee: Expr, ty: TyLike) -> Match:
        """Build `scrutinee.await`."""
        return self.match(scrutinee, [], MatchSource.await_desugar, ty)

    def assign(self, lhs: Expr, rhs: Expr) -> Assign:
        return self._typed(Assign(self.new_id(), lhs, rhs), Tup())

    def assign_op(self, op: Union[BinOpKind, str], lhs: Expr, rhs: Expr) -> AssignOp:
        return self._typed(AssignOp(self.new_id(), BinOpKind(op), lhs, rhs), Tup())

    def ret(self, value: Optional[Expr] = None) -> Ret:
        return self._typed(Ret(self.new_id(), value), Never())

    def struct(self, name: str, fields: Dict[str, Expr], def_id: Optional[DefId] = None, ty: Optional[TyLike] = None) -> Struct:
        expr_fields = [ExprField(field_name, expr) for field_name, expr in fields.items()]
        return self._typed(Struct(self.new_id(), name, def_id, expr_fields), ty if ty is not None else Adt(name))

    def tup(self, *items: Expr) -> TupExpr:
        return self._typed(TupExpr(self.new_id(), list(items)), Tup(tuple(self.type_of(item) for item in items)))

    def array(self, items: Sequence[Expr], ty: Optional[TyLike] = None) -> ArrayExpr:
        if ty is None and items:
            ty = Array(self.type_of(items[0]), len(items))
        return self._typed(ArrayExpr(self.new_id(), list(items)), ty)

    def closure(self, params: Sequence[Tuple[Pat, Optional[HirTyLike]]], value: Expr, output: Optional[HirTyLike] = None) -> ClosureExpr:
        """Build a closure. Parameters without a written type are inferred."""
        decl = FnDecl([HirInfer() if ty is None else self.hir_ty(ty) for _, ty in params], None if output is None else self.hir_ty(output))
        closure = ClosureExpr(self.new_id(), self.new_id(), decl)
        closure.body = Body(self.new_id(), closure, [Param(self.new_id(), pat) for pat, _ in params], value)
        sig = FnSig(tuple(self.type_of(pat) for pat, _ in params), self.type_of(value))
        self.crate.add_def(DefInfo(closure.def_id, f"{{closure#{closure.def_id}}}", DefKind.closure, sig=sig, decl=decl))
        return self._typed(closure, Closure(closure.def_id))

    def range(self, start: Optional[Expr], end: Optional[Expr], inclusive: bool = False, ty: Optional[TyLike] = None) -> Range:
        if ty is None:
            bound = start if start is not None else end
            ty = Adt("core::ops::Range", (self.type_of(bound),) if bound is not None else ())
        return self._typed(Range(self.new_id(), start, end, inclusive), ty)

    def err(self) -> ErrExpr:
        return self._typed(ErrExpr(self.new_id()), Error())

    # statements

    def let(self, pat: Pat, init: Optional[Expr] = None, ty: Optional[HirTyLike] = None) -> Local:
        """Build `let pat: ty = init;`."""
        return Local(self.new_id(), pat, None if ty is None else self.hir_ty(ty), init)

    def stmt(self, expr: Expr, semi: bool = True) -> ExprStmt:
        return ExprStmt(self.new_id(), expr, semi)

    # patterns

    def bind(
        self,
        name: str,
        ty: Optional[TyLike] = None,
        annotation: BindingAnnotation = BindingAnnotation.none,
        binding: Optional[BindingPat] = None,
        subpattern: Optional[Pat] = None,
        hir_id: Optional[HirId] = None,
    ) -> BindingPat:
        """
        Build a binding pattern of the given type.
        Passing the first occurrence as binding declares another occurrence of the same binding, e.g. in an or-pattern.
        """
        binding_id = None if binding is None else binding.binding_id
        pat = BindingPat(self.new_id() if hir_id is None else hir_id, name, annotation, binding_id, subpattern)
        if ty is None and binding is not None:
            ty = self.type_of(binding)
        return self._typed(pat, ty)

    def ref_bind(self, name: str, ty: Optional[TyLike] = None, binding: Optional[BindingPat] = None) -> BindingPat:
        """Build a `ref name` binding. The type is the type of the binding, i.e. a reference."""
        return self.bind(name, ty, BindingAnnotation.ref, binding)

    def tuple_struct_pat(self, path: str, subpatterns: Sequence[Pat], ty: TyLike) -> TupleStructPat:
        return self._typed(TupleStructPat(self.new_id(), path, list(subpatterns)), ty)

    def tuple_pat(self, *subpatterns: Pat) -> TuplePat:
        return self._typed(TuplePat(self.new_id(), list(subpatterns)), Tup(tuple(self.type_of(pat) for pat in subpatterns)))

    def or_pat(self, alternatives: Sequence[Pat], ty: Optional[TyLike] = None) -> OrPat:
        return self._typed(OrPat(self.new_id(), list(alternatives)), ty if ty is not None else self.type_of(alternatives[0]))

    def wild(self, ty: Optional[TyLike] = None) -> WildPat:
        return self._typed(WildPat(self.new_id()), ty)

    def lit_pat(self, text: str, ty: TyLike = "i32") -> LitPat:
        return self._typed(LitPat(self.new_id(), text), ty)

    # items

    def fn(
        self,
        name: str,
        params: Sequence[Tuple[Pat, HirTyLike]],
        body: Expr,
        output: Optional[HirTyLike] = None,
        generics: Iterable[str] = (),
        container: ItemContainer = ItemContainer.free,
        hir_id: Optional[HirId] = None,
    ) -> Item:
        """Build a function item. Its signature is resolved from the written parameter and return types."""
        parser = TypeParser(generics)
        decl = FnDecl([self.hir_ty(ty) for _, ty in params], None if output is None else self.hir_ty(output))
        item = Item(self.new_id() if hir_id is None else hir_id, self.new_id(), name, ItemKind.fn, container, decl=decl)
        item.body = Body(self.new_id(), item, [Param(self.new_id(), pat) for pat, _ in params], body)
        sig = FnSig(tuple(parser.lower(ty) for ty in decl.inputs), Tup() if decl.output is None else parser.lower(decl.output))
        kind = DefKind.fn if container is ItemContainer.free else DefKind.assoc_fn
        self.crate.add_def(DefInfo(item.def_id, name, kind, sig=sig))
        self._items.append(item)
        return item

    def static(self, name: str, ty: HirTyLike, value: Expr, container: ItemContainer = ItemContainer.free) -> Item:
        return self._value_item(ItemKind.static, name, ty, value, container)

    def const(self, name: str, ty: HirTyLike, value: Expr, container: ItemContainer = ItemContainer.free) -> Item:
        return self._value_item(ItemKind.const, name, ty, value, container)

    def _value_item(self, kind: ItemKind, name: str, ty: HirTyLike, value: Expr, container: ItemContainer) -> Item:
        item = Item(self.new_id(), self.new_id(), name, kind, container, ty=self.hir_ty(ty))
        item.body = Body(self.new_id(), item, [], value)
        self.crate.add_def(DefInfo(item.def_id, name, DefKind[kind.name]))
        self._items.append(item)
        return item

    def finish(self) -> Crate:
        """Render the source text of all items and register them in the crate."""
        if self._finished:
            raise RuntimeError("The crate has already been built")
        self._finished = True
        printer = SourcePrinter(self.crate.source_map.contexts)
        self.crate.source_map.text = printer.print_items(self._items)
        for item in self._items:
            self.crate.add_item(item)
        return self.crate
