from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping, Sequence, Tuple

import numpy as np

from bnstruct.cpd.cpd_tree import CPDBranch, CPDLeaf, CPDNode, CPDTree
from bnstruct.data.attribute import Attribute
from bnstruct.data.dataset import DataSet


class CPDBuilder(ABC):
    """
    Abstract CPD builder.

    Given a dataset and an ordered attribute list whose last entry is
    the target, produce a new distribution model. The node manager
    stores whatever is returned without inspecting it.
    """

    @abstractmethod
    def build(
        self,
        data: DataSet,
        attributes: Sequence[Attribute],
        laplace_count: int,
    ) -> CPDTree:
        raise NotImplementedError


class CPDTreeBuilder(CPDBuilder):
    """
    Builds a full CPD tree by Laplace-smoothed counting.

    Splits on the parents in the order given, one branch per nominal
    value, and estimates at every leaf

        P(x | cfg) = (count(x, cfg) + k) / (count(cfg) + k * |values(x)|)
    """

    def build(
        self,
        data: DataSet,
        attributes: Sequence[Attribute],
        laplace_count: int,
    ) -> CPDTree:
        attributes = list(attributes)
        self._validate(data, attributes, laplace_count)

        target = attributes[-1]
        parents = attributes[:-1]

        counts = data.counts(attributes)
        root = self._grow(counts, (), parents, target, laplace_count)
        return CPDTree(attributes, root, laplace_count)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _validate(
        self,
        data: DataSet,
        attributes: Sequence[Attribute],
        laplace_count: int,
    ) -> None:
        if not attributes:
            raise ValueError("Attribute list must contain at least the target")
        if laplace_count < 0:
            raise ValueError("Laplace count must be non-negative")

        names = [a.name for a in attributes]
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate attributes in CPD request: {names}")

        missing = [a.name for a in attributes if not data.has_attribute(a)]
        if missing:
            raise ValueError(f"Attributes missing from dataset: {missing}")

        if attributes[-1].num_values == 0:
            raise ValueError(f"Target '{attributes[-1].name}' has no values")

    def _grow(
        self,
        counts: Mapping[Tuple[Any, ...], int],
        path: Tuple[Any, ...],
        parents: Sequence[Attribute],
        target: Attribute,
        laplace_count: int,
    ) -> CPDNode:
        if not parents:
            return self._leaf(counts, path, target, laplace_count)

        split = parents[0]
        children = {
            value: self._grow(counts, path + (value,), parents[1:], target, laplace_count)
            for value in split.values
        }
        return CPDBranch(attribute=split, children=children)

    def _leaf(
        self,
        counts: Mapping[Tuple[Any, ...], int],
        path: Tuple[Any, ...],
        target: Attribute,
        laplace_count: int,
    ) -> CPDLeaf:
        # joint counts are keyed by (parent values..., target value)
        cells = np.array(
            [counts.get(path + (value,), 0) for value in target.values],
            dtype=np.float64,
        )
        total = float(cells.sum())
        denom = total + laplace_count * target.num_values

        if denom == 0:
            # no data and no smoothing: fall back to uniform
            dist = np.full(target.num_values, 1.0 / target.num_values)
        else:
            dist = (cells + laplace_count) / denom

        return CPDLeaf(distribution=dist, num_instances=int(total))
