from __future__ import annotations

from typing import Callable, Iterable, Sequence

import numpy as np

from bnstruct.graph.node import BNNode


def adjacency_matrix(
    node_ids: Sequence[int],
    children_of: Callable[[int], Iterable[int]],
) -> np.ndarray:
    """
    N x N matrix where cell (i, j) is 1 iff node_ids[i] is a parent of
    node_ids[j].

    Row and column i both refer to node_ids[i]. Children outside
    node_ids are ignored.
    """
    index = {node_id: i for i, node_id in enumerate(node_ids)}
    n = len(node_ids)
    matrix = np.zeros((n, n), dtype=np.int8)

    for i, node_id in enumerate(node_ids):
        for child in children_of(node_id):
            j = index.get(child)
            if j is not None:
                matrix[i, j] = 1

    return matrix


def convert_to_adjacency_matrix(nodes: Sequence[BNNode]) -> np.ndarray:
    """
    Adjacency matrix of an ordered node collection, indexed by position.
    """
    by_id = {node.node_id: node for node in nodes}
    return adjacency_matrix(
        [node.node_id for node in nodes],
        lambda node_id: by_id[node_id].children,
    )
