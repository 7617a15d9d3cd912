from __future__ import annotations


class BNStructError(Exception):
    """
    Base class for every recoverable structural error.

    A raised BNStructError always means the network was left unchanged.
    """


class DuplicateAttributeError(BNStructError, ValueError):
    """
    The attribute is already represented by a node in the network.
    """


class CycleError(BNStructError, ValueError):
    """
    The requested edge change would introduce a directed cycle.
    """


class DuplicateEdgeError(BNStructError, ValueError):
    """
    The requested edge is already present.
    """


class InvalidRelationError(BNStructError, ValueError):
    """
    A parent/child primitive was asked to add a present relation
    or to remove an absent one.
    """


class MissingNodeError(BNStructError, KeyError):
    """
    A reference does not resolve to a registered node.
    """

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the message readable
        return str(self.args[0]) if self.args else ""


class StructureBusyError(BNStructError, RuntimeError):
    """
    Derived structure was read while a mutation was in progress.
    """
