"""Module implementing the parent map of the intermediate representation on top of networkx."""
from __future__ import annotations

from typing import Dict, Iterator, Optional, Tuple

from networkx import DiGraph, dfs_preorder_nodes  # type: ignore

from autoderef.structures.hir.expressions import Expr
from autoderef.structures.hir.nodes import HirId, HirNode


class HirMap:
    """
    A tree of all nodes of a crate, stored as a directed graph from parent to child HirId.

    Each node has at most one parent. Items are roots; the parameters and the value of a body are
    children of the node owning the body.
    """

    def __init__(self, graph: Optional[DiGraph] = None):
        self._graph = DiGraph() if graph is None else graph
        self._nodes: Dict[HirId, HirNode] = {}

    def __len__(self) -> int:
        return len(self._graph)

    def __contains__(self, hir_id: HirId) -> bool:
        return hir_id in self._nodes

    def __iter__(self) -> Iterator[HirNode]:
        yield from self._nodes.values()

    def insert_tree(self, root: HirNode):
        """Register the given node and all of its descendants."""
        worklist = [root]
        self._add_node(root)
        while worklist:
            parent = worklist.pop()
            for child in parent:
                self._add_node(child)
                self._add_edge(parent, child)
                worklist.append(child)

    def _add_node(self, node: HirNode):
        self._nodes[node.hir_id] = node
        self._graph.add_node(node.hir_id)

    def _add_edge(self, parent: HirNode, child: HirNode):
        if (existing := self.parent_id(child.hir_id)) is not None and existing != parent.hir_id:
            raise ValueError(f"{child!r} can not be nested in both {self._nodes[existing]!r} and {parent!r}")
        self._graph.add_edge(parent.hir_id, child.hir_id)

    def find(self, hir_id: HirId) -> Optional[HirNode]:
        """Return the node with the given id, if it exists."""
        return self._nodes.get(hir_id)

    def parent_id(self, hir_id: HirId) -> Optional[HirId]:
        if hir_id not in self._graph:
            return None
        for predecessor in self._graph.predecessors(hir_id):
            return predecessor
        return None

    def parent(self, hir_id: HirId) -> Optional[HirNode]:
        """Return the parent node of the node with the given id."""
        if (parent_id := self.parent_id(hir_id)) is not None:
            return self._nodes[parent_id]
        return None

    def parent_iter(self, hir_id: HirId) -> Iterator[Tuple[HirId, HirNode]]:
        """Iterate all ancestors of the node with the given id, innermost first."""
        while (parent_id := self.parent_id(hir_id)) is not None:
            yield parent_id, self._nodes[parent_id]
            hir_id = parent_id

    def get_parent_expr(self, hir_id: HirId) -> Optional[Expr]:
        """Return the parent node if it is an expression."""
        parent = self.parent(hir_id)
        return parent if isinstance(parent, Expr) else None

    def iter_descendants(self, hir_id: HirId) -> Iterator[HirNode]:
        """Iterate the node and all of its descendants in pre-order."""
        for node_id in dfs_preorder_nodes(self._graph, source=hir_id):
            yield self._nodes[node_id]
