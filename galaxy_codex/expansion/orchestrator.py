"""Entry point for growing the topic graph from user interaction."""

import asyncio
import logging

from galaxy_codex.backends.base import ContentBackend
from galaxy_codex.domain.topic import GraphSnapshot, NodeStatus
from galaxy_codex.exceptions import NodeNotFound
from galaxy_codex.graph.identity import normalize, resolve
from galaxy_codex.graph.store import GraphStore

from .session import ContentSession, SessionRegistry

logger = logging.getLogger(__name__)


class GraphExpansionOrchestrator:
    """Resolves activated topics to nodes and starts content sessions for them.

    One activation fetches content for at most one node. Topics referenced by
    the resulting article only become stub nodes; their own content is fetched
    once the user activates them.
    """

    def __init__(
        self,
        *,
        store: GraphStore,
        backend: ContentBackend,
        extract_while_streaming: bool = False,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            store: Graph store shared with the rendering boundary
            backend: Content backend used by every session
            extract_while_streaming: Spawn stub nodes from partial text as it streams
        """
        self.store = store
        self.backend = backend
        self.extract_while_streaming = extract_while_streaming
        self.sessions = SessionRegistry()

    def seed(self, term: str) -> str | None:
        """Create and focus a root stub without fetching its content."""
        if not term or not term.strip():
            return None
        node_id = self._link(term, None)
        self.store.focus(node_id)
        return node_id

    def activate_or_expand(self, term: str, parent_id: str | None = None) -> str | None:
        """Focus the node for a term, creating it and fetching its content when new.

        Must be called from a running event loop; the content session runs in
        the background and its progress is observed through the store.

        Args:
            term: Topic name from a clicked node or cross-reference
            parent_id: ID of the node the reference was clicked in, if any

        Returns:
            ID of the activated node, or None if the term was empty
        """
        if not term or not term.strip():
            logger.info("Ignoring activation of an empty topic term")
            return None

        if parent_id is not None and parent_id not in self.store:
            logger.warning(f"Unknown parent {parent_id!r} for {term!r}, activating as a root")
            parent_id = None

        node_id = self._link(term, parent_id)
        self.store.focus(node_id)

        node = resolve(node_id, self.store)
        # Only never-fetched stubs get a session; content is fetched at most once
        if node is not None and node.status is NodeStatus.STUB and node_id not in self.sessions:
            self._start_session(node_id, node.name)
        return node_id

    def restart(self, node_id: str) -> ContentSession:
        """Fetch a node's content again, superseding any session in flight."""
        node = resolve(node_id, self.store)
        if node is None:
            raise NodeNotFound(node_id)
        return self._start_session(node_id, node.name)

    @property
    def active_sessions(self) -> dict[str, ContentSession]:
        return {s.node_id: s for s in self.sessions.sessions()}

    def get_snapshot(self) -> GraphSnapshot:
        return self.store.snapshot()

    def get_focused_node_id(self) -> str | None:
        return self.store.focused_node_id

    async def wait_idle(self) -> None:
        """Wait until no content session is in flight."""
        while True:
            tasks = [s.task for s in self.sessions.sessions() if s.task is not None]
            if not tasks:
                return
            await asyncio.gather(*tasks, return_exceptions=True)

    async def aclose(self) -> None:
        """Cancel every session in flight and close the backend."""
        sessions = self.sessions.sessions()
        for session in sessions:
            session.cancel()
        tasks = [s.task for s in sessions if s.task is not None]
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        await self.backend.aclose()

    def _link(self, term: str, parent_id: str | None) -> str:
        """Resolve a term to a node, creating the stub and parent edge as needed."""
        term = term.strip()
        node_id = normalize(term)
        self.store.create_stub(node_id, term, parent_id)
        if parent_id is not None and parent_id != node_id:
            self.store.add_edge(parent_id, node_id)
        return node_id

    def _start_session(self, node_id: str, topic: str) -> ContentSession:
        session = ContentSession(
            node_id=node_id,
            topic=topic,
            store=self.store,
            backend=self.backend,
            registry=self.sessions,
            on_complete=self._spawn_children,
            on_partial_references=self._spawn_children,
            on_partial_discarded=self._discard_children,
            extract_while_streaming=self.extract_while_streaming,
        )
        previous = self.sessions.register(session)
        if previous is not None:
            logger.info(f"Superseding {previous!r}")
            previous.cancel()

        session.start()
        return session

    def _spawn_children(self, node_id: str, terms: list[str]) -> None:
        before = len(self.store)
        for term in terms:
            if term.strip():
                self._link(term, node_id)
        logger.info(
            f"Linked {len(terms)} references from {node_id!r}, "
            f"{len(self.store) - before} new stub nodes"
        )

    def _discard_children(self, node_id: str, terms: list[str]) -> None:
        """Undo the links a failed expansion made while its text was streaming."""
        removed = 0
        for term in terms:
            child_id = normalize(term.strip())
            if child_id == node_id:
                continue
            self.store.remove_edge(node_id, child_id)
            child = self.store.get(child_id)
            if child is not None and child.parent_id == node_id and child_id not in self.sessions:
                removed += self.store.remove_stub(child_id)
        logger.info(f"Dropped links from failed {node_id!r}, {removed} stub nodes removed")
