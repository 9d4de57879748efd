"""Module holding the results of type checking consumed by the lint passes."""
from __future__ import annotations

import logging
from typing import Dict, Optional, Sequence, Tuple

from autoderef.structures.hir.adjustment import Adjustment
from autoderef.structures.hir.expressions import Expr
from autoderef.structures.hir.nodes import DefId, HirId
from autoderef.structures.hir.patterns import Pat
from autoderef.structures.hir.ty import Error, Ty


class TypeckResults:
    """Types, adjustments and method resolutions recorded for the nodes of a crate."""

    def __init__(self):
        self._node_types: Dict[HirId, Ty] = {}
        self._adjustments: Dict[HirId, Tuple[Adjustment, ...]] = {}
        self._type_dependent_defs: Dict[HirId, DefId] = {}

    def record_type(self, hir_id: HirId, ty: Ty):
        self._node_types[hir_id] = ty

    def record_adjustments(self, hir_id: HirId, adjustments: Sequence[Adjustment]):
        self._adjustments[hir_id] = tuple(adjustments)

    def record_type_dependent_def(self, hir_id: HirId, def_id: DefId):
        """Record which definition a method call resolved to."""
        self._type_dependent_defs[hir_id] = def_id

    def node_type(self, hir_id: HirId) -> Ty:
        """Return the type of the node, or the error type if it was never recorded."""
        if (ty := self._node_types.get(hir_id)) is None:
            logging.debug(f"no type recorded for node {hir_id}")
            return Error()
        return ty

    def expr_ty(self, expr: Expr) -> Ty:
        """Return the type of the expression before any adjustment."""
        return self.node_type(expr.hir_id)

    def pat_ty(self, pat: Pat) -> Ty:
        return self.node_type(pat.hir_id)

    def expr_adjustments(self, expr: Expr) -> Tuple[Adjustment, ...]:
        return self._adjustments.get(expr.hir_id, ())

    def expr_ty_adjusted(self, expr: Expr) -> Ty:
        """Return the type of the expression after all adjustments."""
        if adjustments := self.expr_adjustments(expr):
            return adjustments[-1].target
        return self.expr_ty(expr)

    def type_dependent_def_id(self, hir_id: HirId) -> Optional[DefId]:
        return self._type_dependent_defs.get(hir_id)
