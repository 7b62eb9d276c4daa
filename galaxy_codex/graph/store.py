"""Authoritative in-memory topic graph."""

import logging
import threading
from typing import Callable

from galaxy_codex.domain.topic import GraphSnapshot, NodeStatus, TopicEdge, TopicNode
from galaxy_codex.exceptions import InvalidState, NodeNotFound
from galaxy_codex.graph.presentation import presentation_hints

logger = logging.getLogger(__name__)

SnapshotListener = Callable[[GraphSnapshot], None]

_WRITABLE = (NodeStatus.PENDING, NodeStatus.STREAMING)


class GraphStore:
    """Mapping of node ID to node plus the ordered list of edges.

    Every public mutation is applied atomically under one lock and bumps the
    snapshot version. Node records are immutable; a write replaces the record,
    so snapshots can share them with the store safely.
    """

    def __init__(self) -> None:
        self._nodes: dict[str, TopicNode] = {}
        self._edges: list[TopicEdge] = []
        self._edge_keys: set[tuple[str, str]] = set()
        self._focused_node_id: str | None = None
        self._version = 0
        self._listeners: list[SnapshotListener] = []
        self._lock = threading.RLock()

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    @property
    def focused_node_id(self) -> str | None:
        return self._focused_node_id

    @property
    def version(self) -> int:
        return self._version

    def get(self, node_id: str) -> TopicNode | None:
        """Get a node by its ID."""
        return self._nodes.get(node_id)

    def has_edge(self, source_id: str, target_id: str) -> bool:
        return (source_id, target_id) in self._edge_keys

    def create_stub(self, node_id: str, name: str, parent_id: str | None = None) -> TopicNode:
        """Create a stub node, or return the existing node with this ID unchanged.

        The first caller wins both the display name and the parent.
        """
        with self._lock:
            existing = self._nodes.get(node_id)
            if existing is not None:
                return existing

            node = self._with_hints(
                TopicNode(id=node_id, name=name, parent_id=parent_id, status=NodeStatus.STUB)
            )
            self._nodes[node_id] = node
            self._commit()

        logger.debug(f"Created stub node {node_id!r} (parent={parent_id!r})")
        return node

    def add_edge(self, source_id: str, target_id: str) -> bool:
        """Add a directed edge, ignoring duplicates and missing endpoints.

        Returns:
            True if a new edge was added
        """
        with self._lock:
            if (source_id, target_id) in self._edge_keys:
                return False
            missing = [node_id for node_id in (source_id, target_id) if node_id not in self._nodes]
            if missing:
                logger.warning(
                    f"Ignoring edge {source_id!r} -> {target_id!r}: unknown node(s) {missing}"
                )
                return False

            self._edge_keys.add((source_id, target_id))
            self._edges.append(TopicEdge(source_id=source_id, target_id=target_id))
            self._commit()

        return True

    def remove_edge(self, source_id: str, target_id: str) -> bool:
        """Remove a directed edge if present.

        Returns:
            True if an edge was removed
        """
        with self._lock:
            if (source_id, target_id) not in self._edge_keys:
                return False
            self._edge_keys.discard((source_id, target_id))
            self._edges = [
                edge
                for edge in self._edges
                if (edge.source_id, edge.target_id) != (source_id, target_id)
            ]
            self._commit()

        return True

    def remove_stub(self, node_id: str) -> bool:
        """Remove a stub node that no edge touches and that is not focused.

        Returns:
            True if the node was removed
        """
        with self._lock:
            node = self._nodes.get(node_id)
            if node is None or node.status is not NodeStatus.STUB:
                return False
            if node_id == self._focused_node_id or any(
                node_id in key for key in self._edge_keys
            ):
                return False
            del self._nodes[node_id]
            self._commit()

        logger.debug(f"Removed stub node {node_id!r}")
        return True

    def begin(self, node_id: str) -> TopicNode:
        """Reset a node to pending when a content session attaches to it."""
        with self._lock:
            node = self._require(node_id)
            node = self._replace(
                node, status=NodeStatus.PENDING, content="", category=None
            )
            self._commit()

        return node

    def append_chunk(self, node_id: str, text: str) -> TopicNode:
        """Append streamed text to a pending or streaming node."""
        with self._lock:
            node = self._require(node_id, _WRITABLE)
            node = self._replace(
                node, status=NodeStatus.STREAMING, content=node.content + text
            )
            self._commit()

        return node

    def finalize(
        self, node_id: str, category: str, final_content: str | None = None
    ) -> TopicNode:
        """Mark a node complete.

        Args:
            node_id: ID of the node to finalize
            category: Classification label from the backend
            final_content: Authoritative article text replacing the accumulated chunks
        """
        with self._lock:
            node = self._require(node_id, _WRITABLE)
            content = node.content if final_content is None else final_content
            node = self._replace(
                node, status=NodeStatus.COMPLETE, category=category, content=content
            )
            self._commit()

        return node

    def mark_failed(self, node_id: str, fallback_content: str) -> TopicNode:
        """Mark a node failed, replacing its content with the fallback text."""
        with self._lock:
            node = self._require(node_id)
            node = self._replace(node, status=NodeStatus.FAILED, content=fallback_content)
            self._commit()

        return node

    def focus(self, node_id: str) -> None:
        """Set the node the detail panel should display."""
        with self._lock:
            self._require(node_id)
            if self._focused_node_id == node_id:
                return
            self._focused_node_id = node_id
            self._commit()

    def snapshot(self) -> GraphSnapshot:
        with self._lock:
            return self._build_snapshot()

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """Register a listener called with the new snapshot after every mutation.

        Returns:
            Function that removes the listener again
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _require(
        self, node_id: str, allowed: tuple[NodeStatus, ...] | None = None
    ) -> TopicNode:
        node = self._nodes.get(node_id)
        if node is None:
            raise NodeNotFound(node_id)
        if allowed is not None and node.status not in allowed:
            raise InvalidState(node_id, node.status.value, tuple(s.value for s in allowed))
        return node

    def _replace(self, node: TopicNode, **changes: object) -> TopicNode:
        updated = self._with_hints(node.model_copy(update=changes))
        self._nodes[node.id] = updated
        return updated

    @staticmethod
    def _with_hints(node: TopicNode) -> TopicNode:
        size, color = presentation_hints(
            category=node.category, status=node.status, is_root=node.parent_id is None
        )
        return node.model_copy(update={"size_hint": size, "color_hint": color})

    def _commit(self) -> None:
        # Listeners run under the lock so they see snapshots in version order
        self._version += 1
        if self._listeners:
            self._notify(self._build_snapshot())

    def _build_snapshot(self) -> GraphSnapshot:
        return GraphSnapshot(
            nodes=tuple(self._nodes.values()),
            links=tuple(self._edges),
            focused_node_id=self._focused_node_id,
            version=self._version,
        )

    def _notify(self, snapshot: GraphSnapshot) -> None:
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Snapshot listener failed")
