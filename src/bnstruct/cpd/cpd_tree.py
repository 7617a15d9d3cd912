from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Mapping, Sequence, Tuple, Union

import numpy as np

from bnstruct.data.attribute import Attribute


@dataclass(frozen=True)
class CPDLeaf:
    """
    Smoothed distribution of the target under one parent configuration.
    """

    distribution: np.ndarray
    num_instances: int


@dataclass(frozen=True)
class CPDBranch:
    """
    Split on one parent attribute, one child per nominal value.
    """

    attribute: Attribute
    children: Dict[Any, "CPDNode"]


CPDNode = Union[CPDLeaf, CPDBranch]


class CPDTree:
    """
    Conditional probability distribution of a target attribute given
    its parent attributes, stored as a tree of value splits.

    The tree is immutable once built; a structural change produces a
    new tree rather than editing this one.
    """

    def __init__(
        self,
        attributes: Sequence[Attribute],
        root: CPDNode,
        laplace_count: int,
    ) -> None:
        if not attributes:
            raise ValueError("A CPD tree needs at least its target attribute")

        self._attributes: Tuple[Attribute, ...] = tuple(attributes)
        self._root = root
        self.laplace_count = laplace_count

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    @property
    def attributes(self) -> List[Attribute]:
        """
        Attributes the tree was built from: parents in split order,
        target last.
        """
        return list(self._attributes)

    @property
    def target(self) -> Attribute:
        return self._attributes[-1]

    @property
    def parents(self) -> List[Attribute]:
        return list(self._attributes[:-1])

    @property
    def root(self) -> CPDNode:
        return self._root

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def distribution(
        self,
        assignment: Mapping[Union[Attribute, str], Any] | None = None,
    ) -> np.ndarray:
        """
        Distribution over the target's values for a parent assignment.

        The assignment maps parent attributes (or their names) to values.
        """
        values = self._normalize(assignment or {})
        node = self._root

        while isinstance(node, CPDBranch):
            if node.attribute.name not in values:
                raise KeyError(f"No value given for parent '{node.attribute.name}'")
            value = values[node.attribute.name]
            if value not in node.children:
                raise KeyError(
                    f"Value {value!r} is not a value of parent '{node.attribute.name}'"
                )
            node = node.children[value]

        return node.distribution.copy()

    def probability(
        self,
        value: Any,
        assignment: Mapping[Union[Attribute, str], Any] | None = None,
    ) -> float:
        dist = self.distribution(assignment)
        return float(dist[self.target.index_of(value)])

    def leaves(self) -> Iterator[Tuple[Tuple[Any, ...], CPDLeaf]]:
        """
        Yield (parent value tuple, leaf) pairs in split order.
        """
        stack: List[Tuple[Tuple[Any, ...], CPDNode]] = [((), self._root)]

        while stack:
            path, node = stack.pop()
            if isinstance(node, CPDLeaf):
                yield path, node
                continue
            for value in reversed(list(node.children)):
                stack.append((path + (value,), node.children[value]))

    @property
    def num_leaves(self) -> int:
        return sum(1 for _ in self.leaves())

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _normalize(
        self,
        assignment: Mapping[Union[Attribute, str], Any],
    ) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        for key, value in assignment.items():
            name = key.name if isinstance(key, Attribute) else str(key)
            out[name] = value
        return out

    def __repr__(self) -> str:
        parents = ", ".join(a.name for a in self.parents)
        return f"CPDTree({self.target.name} | {parents})"
