from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from bnstruct.data.attribute import Attribute
from bnstruct.errors import InvalidRelationError


class BNNode:
    """
    One variable of a Bayesian network.

    Parents and children are held as node ids into the owning
    BNNodeManager's arena, in insertion order. The relation mutators are
    structural primitives: they neither check for cycles nor rebuild the
    CPD. Adding a present relation or removing an absent one raises
    InvalidRelationError.
    """

    def __init__(self, attribute: Attribute) -> None:
        self._attribute = attribute
        self.node_id: Optional[int] = None

        # dicts used as insertion-ordered sets
        self._parents: Dict[int, None] = {}
        self._children: Dict[int, None] = {}

        self._cpd: Any = None

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    @property
    def attribute(self) -> Attribute:
        return self._attribute

    @property
    def name(self) -> str:
        return self._attribute.name

    # ------------------------------------------------------------------
    # Relations
    # ------------------------------------------------------------------

    @property
    def parents(self) -> Tuple[int, ...]:
        return tuple(self._parents)

    @property
    def children(self) -> Tuple[int, ...]:
        return tuple(self._children)

    def has_parent(self, node_id: int) -> bool:
        return node_id in self._parents

    def has_child(self, node_id: int) -> bool:
        return node_id in self._children

    def add_parent(self, node_id: int) -> None:
        if node_id in self._parents:
            raise InvalidRelationError(
                f"Node {node_id} is already a parent of '{self.name}'"
            )
        self._parents[node_id] = None

    def remove_parent(self, node_id: int) -> None:
        if node_id not in self._parents:
            raise InvalidRelationError(
                f"Node {node_id} is not a parent of '{self.name}'"
            )
        del self._parents[node_id]

    def add_child(self, node_id: int) -> None:
        if node_id in self._children:
            raise InvalidRelationError(
                f"Node {node_id} is already a child of '{self.name}'"
            )
        self._children[node_id] = None

    def remove_child(self, node_id: int) -> None:
        if node_id not in self._children:
            raise InvalidRelationError(
                f"Node {node_id} is not a child of '{self.name}'"
            )
        del self._children[node_id]

    def _replace_relations(
        self,
        parents: Tuple[int, ...],
        children: Tuple[int, ...],
    ) -> None:
        # commit path of the node manager; relations are pre-validated
        self._parents = dict.fromkeys(parents)
        self._children = dict.fromkeys(children)

    # ------------------------------------------------------------------
    # Distribution
    # ------------------------------------------------------------------

    @property
    def cpd(self) -> Any:
        return self._cpd

    def set_cpd(self, cpd: Any) -> None:
        self._cpd = cpd

    def __repr__(self) -> str:
        return f"BNNode({self.name}, id={self.node_id})"
