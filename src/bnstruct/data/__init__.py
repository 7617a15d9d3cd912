"""
Data boundary for bnstruct.

Attributes identify network variables; a DataSet holds the observed
instances the CPD builder estimates distributions from.
"""

from bnstruct.data.attribute import Attribute, AttributeSet
from bnstruct.data.dataset import DataSet

__all__ = [
    "Attribute",
    "AttributeSet",
    "DataSet",
]
