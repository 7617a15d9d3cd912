from __future__ import annotations

from typing import List

import networkx as nx
import numpy as np

from bnstruct.errors import CycleError


def _as_digraph(matrix: np.ndarray) -> nx.DiGraph:
    matrix = np.asarray(matrix)
    if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
        raise ValueError(f"Adjacency matrix must be square, got {matrix.shape}")

    # nonzero cells are edges; diagonal cells become self-loops
    return nx.from_numpy_array(
        (matrix != 0).astype(np.int8),
        create_using=nx.DiGraph,
    )


def has_cycle(matrix: np.ndarray) -> bool:
    """
    True iff the directed graph described by the adjacency matrix has a
    cycle. A self-loop is a cycle; the empty and single-node graphs are
    acyclic unless the node loops on itself.
    """
    graph = _as_digraph(matrix)
    return not nx.is_directed_acyclic_graph(graph)


def topological_sort(matrix: np.ndarray) -> List[int]:
    """
    Permutation of node indices such that i precedes j for every edge
    i -> j. Ties are broken by lowest index, so the result is
    deterministic for a given matrix.

    Raises CycleError if the graph is cyclic.
    """
    graph = _as_digraph(matrix)
    try:
        return [int(i) for i in nx.lexicographical_topological_sort(graph)]
    except nx.NetworkXUnfeasible as exc:
        raise CycleError("Cannot sort a cyclic graph topologically") from exc
