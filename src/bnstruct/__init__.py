"""
bnstruct
========

Structural core of a discrete Bayesian network.

Keeps a set of attribute-bound nodes connected by directed edges
acyclic under every edit, re-derives the topological order after each
change, and rebuilds the CPD tree of every node whose parent set moved.

Core idea:
- Stage an edit, validate it, then commit structure, order and CPDs
  together, or not at all.

Public API:
- BNNodeManager
- BNNode
- Attribute, DataSet
- CPDTreeBuilder
"""

from bnstruct.data.attribute import Attribute, AttributeSet
from bnstruct.data.dataset import DataSet
from bnstruct.graph.node import BNNode
from bnstruct.graph.node_manager import BNNodeManager
from bnstruct.cpd.tree_builder import CPDTreeBuilder
from bnstruct.errors import (
    BNStructError,
    CycleError,
    DuplicateAttributeError,
    DuplicateEdgeError,
    InvalidRelationError,
    MissingNodeError,
    StructureBusyError,
)

__all__ = [
    "Attribute",
    "AttributeSet",
    "DataSet",
    "BNNode",
    "BNNodeManager",
    "CPDTreeBuilder",
    "BNStructError",
    "CycleError",
    "DuplicateAttributeError",
    "DuplicateEdgeError",
    "InvalidRelationError",
    "MissingNodeError",
    "StructureBusyError",
]

__version__ = "0.1.0"
