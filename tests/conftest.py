from __future__ import annotations

from typing import Any, List, Sequence, Tuple

import pandas as pd
import pytest

from bnstruct.data.dataset import DataSet
from bnstruct.graph.dag import has_cycle
from bnstruct.graph.node import BNNode
from bnstruct.graph.node_manager import BNNodeManager
from bnstruct.graph.observer import (
    CompositeObserver,
    LoggingObserver,
    StructureObserver,
)


class RecordingObserver(StructureObserver):
    def __init__(self) -> None:
        self.events: List[Tuple[Any, ...]] = []

    def on_node_added(self, node: BNNode) -> None:
        self.events.append(("node_added", node.name))

    def on_node_removed(self, node: BNNode) -> None:
        self.events.append(("node_removed", node.name))

    def on_edge_added(self, parent: BNNode, child: BNNode) -> None:
        self.events.append(("edge_added", parent.name, child.name))

    def on_edge_removed(self, parent: BNNode, child: BNNode) -> None:
        self.events.append(("edge_removed", parent.name, child.name))

    def on_edge_reversed(self, parent: BNNode, child: BNNode) -> None:
        self.events.append(("edge_reversed", parent.name, child.name))

    def on_cpd_built(self, node: BNNode) -> None:
        self.events.append(("cpd_built", node.name))

    def on_order_recomputed(self, order: Sequence[BNNode]) -> None:
        self.events.append(("order", [n.name for n in order]))

    def on_rejected(self, operation: str, error: Exception) -> None:
        self.events.append(("rejected", operation, type(error).__name__))

    def clear(self) -> None:
        self.events.clear()


def snapshot(manager: BNNodeManager):
    """
    Everything a rejected or speculative call must leave untouched.
    """
    return (
        manager.order,
        {
            n.name: (n.node_id, n.parents, n.children, id(n.cpd))
            for n in manager.nodes
        },
    )


def assert_consistent(manager: BNNodeManager) -> None:
    order = manager.topologically_sorted()
    position = {n.node_id: i for i, n in enumerate(order)}

    assert sorted(position) == sorted(n.node_id for n in manager.nodes)
    assert not has_cycle(manager.adjacency_matrix())

    for node in manager.nodes:
        parents = manager.parents_of(node)
        for parent in parents:
            assert parent.has_child(node.node_id)
            assert manager.edge_exists(parent, node)
            assert position[parent.node_id] < position[node.node_id]
        for child in manager.children_of(node):
            assert child.has_parent(node.node_id)

        assert node.cpd is not None
        assert node.cpd.attributes == [p.attribute for p in parents] + [node.attribute]


@pytest.fixture()
def frame() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "A": ["t", "t", "f", "f", "t", "f", "t", "t"],
            "B": ["t", "f", "f", "f", "t", "t", "t", "f"],
            "C": ["f", "f", "t", "t", "t", "f", "t", "f"],
            "D": ["t", "t", "t", "f", "f", "f", "t", "t"],
        }
    )


@pytest.fixture()
def data(frame: pd.DataFrame) -> DataSet:
    return DataSet.from_frame(frame)


@pytest.fixture()
def attrs(data: DataSet):
    return {name: data.attribute(name) for name in "ABCD"}


@pytest.fixture()
def recorder() -> RecordingObserver:
    return RecordingObserver()


@pytest.fixture()
def manager(recorder: RecordingObserver) -> BNNodeManager:
    return BNNodeManager(
        observer=CompositeObserver([LoggingObserver(), recorder]),
    )


@pytest.fixture()
def network(manager: BNNodeManager, data: DataSet, attrs, recorder) -> BNNodeManager:
    for name in "ABCD":
        manager.add_node(attrs[name], data)
    recorder.clear()
    return manager
