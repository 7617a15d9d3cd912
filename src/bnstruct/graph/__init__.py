"""
Graph subsystem for bnstruct.

Defines the structural model of a Bayesian network:
- nodes and their parent/child relations
- adjacency-matrix conversion, cycle detection and topological sorting
- the node manager that keeps the network acyclic, sorted and its
  CPDs fresh across every edit
"""

from bnstruct.graph.node import BNNode
from bnstruct.graph.adjacency import adjacency_matrix, convert_to_adjacency_matrix
from bnstruct.graph.dag import has_cycle, topological_sort
from bnstruct.graph.observer import (
    StructureObserver,
    NullObserver,
    LoggingObserver,
    CompositeObserver,
)
from bnstruct.graph.node_manager import BNNodeManager

__all__ = [
    "BNNode",
    "adjacency_matrix",
    "convert_to_adjacency_matrix",
    "has_cycle",
    "topological_sort",
    "StructureObserver",
    "NullObserver",
    "LoggingObserver",
    "CompositeObserver",
    "BNNodeManager",
]
