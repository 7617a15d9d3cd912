from __future__ import annotations

from contextlib import contextmanager
import logging
import threading
from typing import Dict, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np

from bnstruct.config.settings import NetworkConfig
from bnstruct.cpd.cpd_tree import CPDTree
from bnstruct.cpd.tree_builder import CPDBuilder, CPDTreeBuilder
from bnstruct.data.attribute import Attribute, AttributeSet
from bnstruct.data.dataset import DataSet
from bnstruct.errors import (
    CycleError,
    DuplicateAttributeError,
    DuplicateEdgeError,
    InvalidRelationError,
    MissingNodeError,
    StructureBusyError,
)
from bnstruct.graph.adjacency import adjacency_matrix, convert_to_adjacency_matrix
from bnstruct.graph.dag import has_cycle, topological_sort
from bnstruct.graph.node import BNNode
from bnstruct.graph.observer import LoggingObserver, StructureObserver

NodeRef = Union[BNNode, Attribute, str]


class _StructureDraft:
    """
    Staged copy of the network's relations.

    Every structural edit is applied here first. The live nodes are only
    touched once the draft has been validated and all CPDs it requires
    have been built.
    """

    def __init__(self, nodes: Mapping[int, BNNode], order: Sequence[int]) -> None:
        self.nodes: Dict[int, BNNode] = dict(nodes)
        self.node_ids: List[int] = list(order)
        self.parents: Dict[int, List[int]] = {
            i: list(n.parents) for i, n in self.nodes.items()
        }
        self.children: Dict[int, List[int]] = {
            i: list(n.children) for i, n in self.nodes.items()
        }
        self.added: Dict[int, BNNode] = {}
        self.removed: Dict[int, BNNode] = {}

    # -------------------- Nodes --------------------

    def add_node(self, node_id: int, node: BNNode) -> None:
        self.nodes[node_id] = node
        self.node_ids.append(node_id)
        self.parents[node_id] = []
        self.children[node_id] = []
        self.added[node_id] = node

    def drop_node(self, node_id: int) -> List[int]:
        """
        Detach every incident edge and drop the node.

        Returns the ids of its former children.
        """
        former_children = list(self.children[node_id])

        for parent in list(self.parents[node_id]):
            self.detach(parent, node_id)
        for child in former_children:
            self.detach(node_id, child)

        self.node_ids.remove(node_id)
        del self.parents[node_id]
        del self.children[node_id]
        self.removed[node_id] = self.nodes.pop(node_id)

        return former_children

    # -------------------- Edges --------------------

    def has_edge(self, parent: int, child: int) -> bool:
        return child in self.children[parent] and parent in self.parents[child]

    def attach(self, parent: int, child: int) -> None:
        if child not in self.children[parent]:
            self.children[parent].append(child)
        if parent not in self.parents[child]:
            self.parents[child].append(parent)

    def detach(self, parent: int, child: int) -> bool:
        existed = self.has_edge(parent, child)
        if child in self.children[parent]:
            self.children[parent].remove(child)
        if parent in self.parents[child]:
            self.parents[child].remove(parent)
        return existed

    # -------------------- Topology --------------------

    def matrix(self) -> np.ndarray:
        return adjacency_matrix(self.node_ids, lambda i: self.children[i])

    def is_acyclic(self) -> bool:
        return not has_cycle(self.matrix())

    def sorted_ids(self) -> List[int]:
        return [self.node_ids[i] for i in topological_sort(self.matrix())]


class BNNodeManager:
    """
    Owns the nodes of a Bayesian network and every edit to its structure.

    Guarantees, between any two public calls:
    - the parent -> child graph is acyclic
    - the cached order is a topological order of that graph
    - every node's CPD was built from its current parent set

    Each mutation is staged on a draft, validated, and committed in one
    step together with the rebuilt CPDs and the new order. A rejected or
    failed mutation leaves the network exactly as it was.

    Nodes may be referenced by BNNode, Attribute, or attribute name.
    """

    def __init__(
        self,
        *,
        config: NetworkConfig | None = None,
        cpd_builder: CPDBuilder | None = None,
        observer: StructureObserver | None = None,
    ) -> None:
        self.config = config or NetworkConfig()
        self.cpd_builder = cpd_builder or CPDTreeBuilder()
        self.observer = observer or LoggingObserver()

        self._attributes = AttributeSet()
        self._nodes: Dict[int, BNNode] = {}
        self._by_attribute: Dict[Attribute, int] = {}
        self._order: List[int] = []
        self._next_id = 0

        self._lock = threading.RLock()
        self._mutating = False

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get_node(self, ref: NodeRef) -> BNNode:
        with self._lock:
            return self._resolve(ref)

    @property
    def attribute_set(self) -> AttributeSet:
        with self._lock:
            return self._attributes.copy()

    @property
    def attributes(self) -> List[Attribute]:
        with self._lock:
            return self._attributes.attributes

    @property
    def nodes(self) -> List[BNNode]:
        """
        Registered nodes in registration order.
        """
        with self._lock:
            return list(self._nodes.values())

    @property
    def num_nodes(self) -> int:
        return len(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, ref: object) -> bool:
        if not isinstance(ref, (BNNode, Attribute, str)):
            return False
        with self._lock:
            try:
                self._resolve(ref)
            except MissingNodeError:
                return False
            return True

    def parents_of(self, ref: NodeRef) -> List[BNNode]:
        with self._lock:
            return [self._nodes[i] for i in self._resolve(ref).parents]

    def children_of(self, ref: NodeRef) -> List[BNNode]:
        with self._lock:
            return [self._nodes[i] for i in self._resolve(ref).children]

    # ------------------------------------------------------------------
    # Topological order
    # ------------------------------------------------------------------

    @property
    def order(self) -> List[int]:
        """
        Node ids in topological order.
        """
        with self._lock:
            self._ensure_idle("order")
            return list(self._order)

    def topologically_sorted(self) -> List[BNNode]:
        """
        Nodes in topological order: every parent precedes its children.
        """
        with self._lock:
            self._ensure_idle("topologically_sorted")
            return self._ordered_nodes()

    def edges(self) -> List[Tuple[BNNode, BNNode]]:
        """
        All (parent, child) pairs, grouped by parent in topological order.
        """
        with self._lock:
            self._ensure_idle("edges")
            return [
                (node, self._nodes[c])
                for node in self._ordered_nodes()
                for c in node.children
            ]

    def adjacency_matrix(self) -> np.ndarray:
        """
        Adjacency matrix whose rows and columns follow the topological order.
        """
        with self._lock:
            self._ensure_idle("adjacency_matrix")
            return convert_to_adjacency_matrix(self._ordered_nodes())

    # ------------------------------------------------------------------
    # Edge predicates
    # ------------------------------------------------------------------

    def edge_exists(self, parent: NodeRef, child: NodeRef) -> bool:
        """
        True iff parent -> child is recorded on both endpoints.

        A relation recorded on only one side is a bookkeeping fault; it is
        logged and reported as absent.
        """
        with self._lock:
            p = self._resolve(parent)
            c = self._resolve(child)

            child_found = p.has_child(c.node_id)
            parent_found = c.has_parent(p.node_id)

            if child_found != parent_found:
                logging.getLogger("bnstruct.graph").warning(
                    "one-sided relation between %s and %s: child_found=%s parent_found=%s",
                    p.name,
                    c.name,
                    child_found,
                    parent_found,
                )

            return child_found and parent_found

    def is_valid_edge(self, parent: NodeRef, child: NodeRef) -> bool:
        """
        Whether adding parent -> child would keep the graph acyclic.

        The edge is tried on a staged copy; the network is not touched.
        """
        with self._lock:
            p = self._resolve(parent)
            c = self._resolve(child)

            draft = self._draft()
            draft.attach(p.node_id, c.node_id)
            return draft.is_acyclic()

    def is_valid_reverse_edge(self, parent: NodeRef, child: NodeRef) -> bool:
        """
        Whether turning parent -> child into child -> parent keeps the
        graph acyclic. If parent -> child does not exist this is the same
        as is_valid_edge(child, parent).
        """
        with self._lock:
            p = self._resolve(parent)
            c = self._resolve(child)

            if not self.edge_exists(p, c):
                return self.is_valid_edge(c, p)

            draft = self._draft()
            draft.detach(p.node_id, c.node_id)
            draft.attach(c.node_id, p.node_id)
            return draft.is_acyclic()

    # ------------------------------------------------------------------
    # Structural mutation
    # ------------------------------------------------------------------

    def add_node(
        self,
        node: Union[BNNode, Attribute],
        data: DataSet,
        laplace_count: Optional[int] = None,
    ) -> BNNode:
        """
        Register a node with no relations and build its marginal CPD.
        """
        if isinstance(node, Attribute):
            node = BNNode(node)

        with self._lock:
            with self._mutation("add_node"):
                attr = node.attribute
                if attr in self._by_attribute or attr.name in self._attributes:
                    raise DuplicateAttributeError(
                        f"Attribute '{attr.name}' is already represented in the network"
                    )
                if node.node_id is not None or node.parents or node.children:
                    raise InvalidRelationError(
                        f"Node '{node.name}' is already registered or carries relations"
                    )

                draft = self._draft()
                draft.add_node(self._next_id, node)
                rebuilt, order = self._commit(
                    draft,
                    rebuild=[self._next_id],
                    data=data,
                    laplace_count=laplace_count,
                )

            self.observer.on_node_added(node)
            self._announce(rebuilt, order)
        return node

    def remove_node(
        self,
        node: NodeRef,
        data: DataSet,
        laplace_count: Optional[int] = None,
    ) -> BNNode:
        """
        Remove a node together with its incident edges.

        Former children lose a parent, so their CPDs are rebuilt.
        """
        with self._lock:
            with self._mutation("remove_node"):
                target = self._resolve(node)

                draft = self._draft()
                former_children = draft.drop_node(target.node_id)
                rebuilt, order = self._commit(
                    draft,
                    rebuild=former_children,
                    data=data,
                    laplace_count=laplace_count,
                )

            self.observer.on_node_removed(target)
            self._announce(rebuilt, order)
        return target

    def create_edge(
        self,
        parent: NodeRef,
        child: NodeRef,
        data: DataSet,
        laplace_count: Optional[int] = None,
    ) -> None:
        """
        Add parent -> child and rebuild the child's CPD.

        Raises DuplicateEdgeError if the edge exists and CycleError if it
        would close a cycle; the network is unchanged in both cases.
        """
        with self._lock:
            with self._mutation("create_edge"):
                p = self._resolve(parent)
                c = self._resolve(child)

                draft = self._draft()
                if draft.has_edge(p.node_id, c.node_id):
                    raise DuplicateEdgeError(
                        f"Edge {p.name} -> {c.name} already exists"
                    )

                draft.attach(p.node_id, c.node_id)
                if not draft.is_acyclic():
                    raise CycleError(
                        f"Edge {p.name} -> {c.name} would create a cycle"
                    )

                rebuilt, order = self._commit(
                    draft,
                    rebuild=[c.node_id],
                    data=data,
                    laplace_count=laplace_count,
                )

            self.observer.on_edge_added(p, c)
            self._announce(rebuilt, order)

    def remove_edge(
        self,
        parent: NodeRef,
        child: NodeRef,
        data: DataSet,
        laplace_count: Optional[int] = None,
    ) -> None:
        """
        Remove parent -> child and rebuild the child's CPD.

        Removing an absent edge changes no relation, but the child's CPD is
        still rebuilt and the order recomputed.
        """
        with self._lock:
            with self._mutation("remove_edge"):
                p = self._resolve(parent)
                c = self._resolve(child)

                draft = self._draft()
                existed = draft.detach(p.node_id, c.node_id)
                rebuilt, order = self._commit(
                    draft,
                    rebuild=[c.node_id],
                    data=data,
                    laplace_count=laplace_count,
                )

            if existed:
                self.observer.on_edge_removed(p, c)
            self._announce(rebuilt, order)

    def reverse_edge(
        self,
        parent: NodeRef,
        child: NodeRef,
        data: DataSet,
        laplace_count: Optional[int] = None,
    ) -> None:
        """
        Turn parent -> child into child -> parent and rebuild both CPDs.

        Validation is part of the call: a reversal that would close a
        cycle raises CycleError and changes nothing. If parent -> child
        does not exist, child -> parent is simply added.
        """
        with self._lock:
            with self._mutation("reverse_edge"):
                p = self._resolve(parent)
                c = self._resolve(child)

                draft = self._draft()
                if draft.has_edge(c.node_id, p.node_id):
                    raise DuplicateEdgeError(
                        f"Edge {c.name} -> {p.name} already exists"
                    )

                existed = draft.detach(p.node_id, c.node_id)
                draft.attach(c.node_id, p.node_id)
                if not draft.is_acyclic():
                    raise CycleError(
                        f"Reversing {p.name} -> {c.name} would create a cycle"
                    )

                rebuilt, order = self._commit(
                    draft,
                    rebuild=[c.node_id, p.node_id],
                    data=data,
                    laplace_count=laplace_count,
                )

            if existed:
                self.observer.on_edge_reversed(p, c)
            else:
                self.observer.on_edge_added(c, p)
            self._announce(rebuilt, order)

    # ------------------------------------------------------------------
    # Parameters
    # ------------------------------------------------------------------

    def build_cpd(
        self,
        node: NodeRef,
        data: DataSet,
        laplace_count: Optional[int] = None,
    ) -> CPDTree:
        """
        Rebuild one node's CPD from its current parents.
        """
        with self._lock:
            with self._mutation("build_cpd"):
                target = self._resolve(node)
                cpd = self.cpd_builder.build(
                    data,
                    self._cpd_attributes(target.node_id, target.parents, self._nodes),
                    self._laplace(laplace_count),
                )
                target.set_cpd(cpd)

            self.observer.on_cpd_built(target)
        return cpd

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @contextmanager
    def _mutation(self, operation: str) -> Iterator[None]:
        with self._lock:
            try:
                if self._mutating:
                    raise StructureBusyError(
                        f"{operation} called while another mutation is in progress"
                    )
                self._mutating = True
                try:
                    yield
                finally:
                    self._mutating = False
            except Exception as exc:
                self.observer.on_rejected(operation, exc)
                raise

    def _ensure_idle(self, accessor: str) -> None:
        if self._mutating:
            raise StructureBusyError(
                f"{accessor} read while a mutation is in progress"
            )

    def _resolve(self, ref: NodeRef) -> BNNode:
        if isinstance(ref, BNNode):
            if ref.node_id is not None and self._nodes.get(ref.node_id) is ref:
                return ref
            raise MissingNodeError(f"Node '{ref.name}' is not registered in this network")

        if isinstance(ref, Attribute):
            node_id = self._by_attribute.get(ref)
            label = ref.name
        elif isinstance(ref, str):
            attr = self._attributes.get(ref)
            node_id = self._by_attribute.get(attr) if attr is not None else None
            label = ref
        else:
            raise TypeError(f"Cannot resolve a node from {type(ref).__name__}")

        if node_id is None:
            raise MissingNodeError(f"No node represents attribute '{label}'")
        return self._nodes[node_id]

    def _draft(self) -> _StructureDraft:
        return _StructureDraft(self._nodes, self._order)

    def _laplace(self, laplace_count: Optional[int]) -> int:
        if laplace_count is None:
            return self.config.laplace_count
        return laplace_count

    @staticmethod
    def _cpd_attributes(
        node_id: int,
        parent_ids: Sequence[int],
        nodes: Mapping[int, BNNode],
    ) -> List[Attribute]:
        # parents in parent-set order, own attribute last
        return [nodes[p].attribute for p in parent_ids] + [nodes[node_id].attribute]

    def _commit(
        self,
        draft: _StructureDraft,
        *,
        rebuild: Sequence[int],
        data: DataSet,
        laplace_count: Optional[int],
    ) -> Tuple[List[BNNode], List[BNNode]]:
        """
        Sort the draft, build the CPDs it needs, then write everything to
        the live network. Nothing is written if sorting or any CPD build
        fails.

        Returns the rebuilt nodes and the committed order.
        """
        k = self._laplace(laplace_count)

        # raises CycleError before anything is written
        order = draft.sorted_ids()

        cpds = {
            node_id: self.cpd_builder.build(
                data,
                self._cpd_attributes(node_id, draft.parents[node_id], draft.nodes),
                k,
            )
            for node_id in rebuild
        }

        # -------------------- Commit (cannot fail) --------------------

        for node_id, node in draft.removed.items():
            node._replace_relations((), ())
            node.node_id = None
            del self._nodes[node_id]
            del self._by_attribute[node.attribute]
            self._attributes.remove(node.attribute)

        for node_id, node in draft.added.items():
            node.node_id = node_id
            self._nodes[node_id] = node
            self._by_attribute[node.attribute] = node_id
            self._attributes.add(node.attribute)
            self._next_id = max(self._next_id, node_id + 1)

        for node_id, node in draft.nodes.items():
            node._replace_relations(
                tuple(draft.parents[node_id]),
                tuple(draft.children[node_id]),
            )

        for node_id, cpd in cpds.items():
            draft.nodes[node_id].set_cpd(cpd)

        self._order = order

        rebuilt = [draft.nodes[node_id] for node_id in rebuild]
        return rebuilt, [draft.nodes[node_id] for node_id in order]

    def _ordered_nodes(self) -> List[BNNode]:
        return [self._nodes[i] for i in self._order]

    def _announce(self, rebuilt: Sequence[BNNode], order: Sequence[BNNode]) -> None:
        # `order` is the one this commit produced, not whatever is live now
        for node in rebuilt:
            self.observer.on_cpd_built(node)
        self.observer.on_order_recomputed(list(order))

    def __repr__(self) -> str:
        return f"BNNodeManager(nodes={len(self._nodes)})"
