"""
Conditional probability distribution models.

A CPD tree is a function of a node's attribute and its parents'
attributes; the node manager rebuilds it whenever the parent set changes.
"""

from bnstruct.cpd.cpd_tree import CPDTree, CPDBranch, CPDLeaf
from bnstruct.cpd.tree_builder import CPDBuilder, CPDTreeBuilder

__all__ = [
    "CPDTree",
    "CPDBranch",
    "CPDLeaf",
    "CPDBuilder",
    "CPDTreeBuilder",
]
