"""In-memory graph store for a single workflow.

Nodes live in an id-keyed map and are never mutated: every update swaps in
a new copy of the node. The store's lock serializes engine ticks against
editor mutations, so a tick always sees (and writes) one consistent graph.
"""

import logging
import threading
from collections.abc import Iterable

from tradeflow.errors import DuplicateNodeError, NodeNotFoundError
from tradeflow.models.nodes import (
    ActionNode,
    ActionState,
    Edge,
    Node,
    TriggerNode,
    TriggerState,
    WorkflowSnapshot,
)

logger = logging.getLogger(__name__)


class Workflow:
    """The set of nodes and edges the engine runs against.

    Usage:
        workflow = Workflow()
        workflow.add_node(trigger)
        workflow.add_node(action)
        workflow.add_edge(trigger.id, action.id)

        with workflow.lock:
            ...  # read and write a consistent graph
    """

    def __init__(self, nodes: Iterable[Node] = (), edges: Iterable[Edge] = ()) -> None:
        self.lock = threading.RLock()
        self._nodes: dict[str, Node] = {}
        self._edges: list[Edge] = []
        self._retired_ids: set[str] = set()
        for node in nodes:
            self.add_node(node)
        # edges from a document are taken as-is; dispatch tolerates dangling ones
        self._edges.extend(edges)

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __repr__(self) -> str:
        return f"Workflow(nodes={len(self._nodes)}, edges={len(self._edges)})"

    # -- nodes ---------------------------------------------------------------

    @property
    def nodes(self) -> list[Node]:
        with self.lock:
            return list(self._nodes.values())

    def triggers(self) -> list[TriggerNode]:
        with self.lock:
            return [n for n in self._nodes.values() if isinstance(n, TriggerNode)]

    def actions(self) -> list[ActionNode]:
        with self.lock:
            return [n for n in self._nodes.values() if isinstance(n, ActionNode)]

    def get(self, node_id: str) -> Node | None:
        return self._nodes.get(node_id)

    def require(self, node_id: str) -> Node:
        """Get a node or raise NodeNotFoundError."""
        node = self._nodes.get(node_id)
        if node is None:
            raise NodeNotFoundError(node_id)
        return node

    def add_node(self, node: Node) -> Node:
        """Add a node. Ids must be new for the session."""
        with self.lock:
            if node.id in self._nodes:
                raise DuplicateNodeError(node.id)
            if node.id in self._retired_ids:
                raise DuplicateNodeError(node.id, retired=True)
            self._nodes[node.id] = node
            return node

    def remove_node(self, node_id: str) -> Node:
        """Delete a node and every edge touching it. The id is retired."""
        with self.lock:
            node = self.require(node_id)
            del self._nodes[node_id]
            self._retired_ids.add(node_id)
            self._edges = [
                e for e in self._edges if e.source != node_id and e.target != node_id
            ]
            return node

    def update_runtime_state(
        self, node_id: str, runtime_state: TriggerState | ActionState
    ) -> Node:
        """Replace a node's runtime state with a new copy of the node.

        This is the engine's only write path; configuration is never touched.
        """
        with self.lock:
            node = self.require(node_id)
            expected = TriggerState if isinstance(node, TriggerNode) else ActionState
            if not isinstance(runtime_state, expected):
                raise TypeError(
                    f"{node.category} node '{node_id}' takes {expected.__name__}, "
                    f"got {type(runtime_state).__name__}"
                )
            updated = node.model_copy(update={"runtime_state": runtime_state})
            self._nodes[node_id] = updated
            return updated

    # -- edges ---------------------------------------------------------------

    @property
    def edges(self) -> list[Edge]:
        with self.lock:
            return list(self._edges)

    def add_edge(self, source: str, target: str) -> Edge:
        """Connect two existing nodes. Connecting the same pair twice is a no-op."""
        with self.lock:
            self.require(source)
            self.require(target)
            edge = Edge(source=source, target=target)
            if edge not in self._edges:
                self._edges.append(edge)
            return edge

    def remove_edge(self, source: str, target: str) -> bool:
        """Remove the edge between two nodes. Returns False if there was none."""
        with self.lock:
            before = len(self._edges)
            self._edges = [
                e for e in self._edges if not (e.source == source and e.target == target)
            ]
            return len(self._edges) != before

    def outgoing(self, node_id: str) -> list[Edge]:
        """Edges whose source is ``node_id``, in insertion order."""
        with self.lock:
            return [e for e in self._edges if e.source == node_id]

    def dangling_edges(self) -> list[Edge]:
        """Edges whose source or target does not resolve."""
        with self.lock:
            return [
                e for e in self._edges
                if e.source not in self._nodes or e.target not in self._nodes
            ]

    # -- whole graph ---------------------------------------------------------

    def clear(self) -> None:
        """Drop every node and edge. Cleared ids stay retired."""
        with self.lock:
            self._retired_ids.update(self._nodes)
            self._nodes.clear()
            self._edges.clear()

    def snapshot(self) -> WorkflowSnapshot:
        """Export nodes (with runtime state) and edges."""
        with self.lock:
            return WorkflowSnapshot(nodes=list(self._nodes.values()), edges=list(self._edges))

    def load(self, snapshot: WorkflowSnapshot) -> None:
        """Replace the whole graph with a snapshot's contents.

        Loading starts a fresh graph, so the retired-id history is reset.
        """
        loaded = Workflow.from_snapshot(snapshot)
        with self.lock:
            self._nodes = loaded._nodes
            self._edges = loaded._edges
            self._retired_ids = set()
        logger.info("loaded workflow with %d nodes and %d edges", len(self._nodes), len(self._edges))

    @classmethod
    def from_snapshot(cls, snapshot: WorkflowSnapshot) -> "Workflow":
        return cls(nodes=snapshot.nodes, edges=snapshot.edges)
