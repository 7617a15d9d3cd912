from __future__ import annotations

from abc import ABC
import logging
from typing import Iterable, List, Sequence

from bnstruct.graph.node import BNNode


class StructureObserver(ABC):
    """
    Observability hook for structural edits.

    Hooks are invoked by the node manager after a change has been
    committed, never while a mutation is in progress. Every hook is a
    no-op by default; subclasses override what they need.
    """

    def on_node_added(self, node: BNNode) -> None:
        return

    def on_node_removed(self, node: BNNode) -> None:
        return

    def on_edge_added(self, parent: BNNode, child: BNNode) -> None:
        return

    def on_edge_removed(self, parent: BNNode, child: BNNode) -> None:
        return

    def on_edge_reversed(self, parent: BNNode, child: BNNode) -> None:
        """
        The former edge parent -> child is now child -> parent.
        """
        return

    def on_cpd_built(self, node: BNNode) -> None:
        return

    def on_order_recomputed(self, order: Sequence[BNNode]) -> None:
        return

    def on_rejected(self, operation: str, error: Exception) -> None:
        return


class NullObserver(StructureObserver):
    """
    Observer that ignores every event.
    """


class LoggingObserver(StructureObserver):
    """
    Routes structural events to the standard logging module.
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or logging.getLogger("bnstruct.structure")

    def on_node_added(self, node: BNNode) -> None:
        self.logger.info("node added: %s (id=%s)", node.name, node.node_id)

    def on_node_removed(self, node: BNNode) -> None:
        self.logger.info("node removed: %s", node.name)

    def on_edge_added(self, parent: BNNode, child: BNNode) -> None:
        self.logger.info("edge added: %s -> %s", parent.name, child.name)

    def on_edge_removed(self, parent: BNNode, child: BNNode) -> None:
        self.logger.info("edge removed: %s -> %s", parent.name, child.name)

    def on_edge_reversed(self, parent: BNNode, child: BNNode) -> None:
        self.logger.info(
            "edge reversed: %s -> %s is now %s -> %s",
            parent.name,
            child.name,
            child.name,
            parent.name,
        )

    def on_cpd_built(self, node: BNNode) -> None:
        self.logger.debug("cpd built: %s", node.cpd)

    def on_order_recomputed(self, order: Sequence[BNNode]) -> None:
        self.logger.debug("topological order: %s", [n.name for n in order])

    def on_rejected(self, operation: str, error: Exception) -> None:
        self.logger.warning("%s rejected: %s", operation, error)


class CompositeObserver(StructureObserver):
    """
    Fans every event out to several observers, in order.
    """

    def __init__(self, observers: Iterable[StructureObserver]) -> None:
        self.observers: List[StructureObserver] = list(observers)

    def on_node_added(self, node: BNNode) -> None:
        for obs in self.observers:
            obs.on_node_added(node)

    def on_node_removed(self, node: BNNode) -> None:
        for obs in self.observers:
            obs.on_node_removed(node)

    def on_edge_added(self, parent: BNNode, child: BNNode) -> None:
        for obs in self.observers:
            obs.on_edge_added(parent, child)

    def on_edge_removed(self, parent: BNNode, child: BNNode) -> None:
        for obs in self.observers:
            obs.on_edge_removed(parent, child)

    def on_edge_reversed(self, parent: BNNode, child: BNNode) -> None:
        for obs in self.observers:
            obs.on_edge_reversed(parent, child)

    def on_cpd_built(self, node: BNNode) -> None:
        for obs in self.observers:
            obs.on_cpd_built(node)

    def on_order_recomputed(self, order: Sequence[BNNode]) -> None:
        for obs in self.observers:
            obs.on_order_recomputed(order)

    def on_rejected(self, operation: str, error: Exception) -> None:
        for obs in self.observers:
            obs.on_rejected(operation, error)
