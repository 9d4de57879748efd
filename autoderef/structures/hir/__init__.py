from .adjustment import AdjustKind, Adjustment
from .expressions import (
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
    path_to_local,
)
from .hir_ty import HirTy, peel_hir_ty_refs
from .nodes import Arm, Block, Body, BodyId, DefId, ExprStmt, FnDecl, HirId, HirNode, Item, ItemContainer, ItemKind, Local, Param
from .patterns import BindingAnnotation, BindingPat, LitPat, OrPat, Pat, TuplePat, TupleStructPat, WildPat
from .precedence import PREC_POSTFIX, PREC_PREFIX, BinOpKind
from .span import ROOT_CONTEXT, Span, SyntaxContextTable
from .ty import Mutability, Ty, peel_refs
from .type_parser import TypeParser
