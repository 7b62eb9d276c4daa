"""Lifecycle of one content-generation request for one node."""

import asyncio
import logging
import uuid
from contextlib import aclosing
from enum import Enum
from typing import Callable

from galaxy_codex.backends.base import ContentBackend
from galaxy_codex.domain.article import ChunkEvent, CompleteEvent, ErrorEvent
from galaxy_codex.exceptions import BackendFailure, InvalidState, NodeNotFound
from galaxy_codex.graph.extractor import extract_cross_references
from galaxy_codex.graph.store import GraphStore

logger = logging.getLogger(__name__)

ReferencesCallback = Callable[[str, list[str]], None]

FALLBACK_SUGGESTIONS = ("history", "fundamentals", "applications")


class SessionState(str, Enum):
    IDLE = "idle"
    REQUESTED = "requested"
    STREAMING = "streaming"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


TERMINAL_STATES = (SessionState.COMPLETED, SessionState.FAILED, SessionState.CANCELLED)


def fallback_content(topic: str) -> str:
    """Content shown on a node whose article could not be generated."""
    suggestions = "\n".join(f"- [[{topic} {suffix}]]" for suffix in FALLBACK_SUGGESTIONS)
    return (
        f"# {topic}\n\n"
        f"Content for **{topic}** could not be generated right now. "
        "Try again later, or explore a related topic:\n\n"
        f"{suggestions}\n"
    )


class SessionRegistry:
    """Tracks the single active session of each node."""

    def __init__(self) -> None:
        self._active: dict[str, "ContentSession"] = {}

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._active

    def __len__(self) -> int:
        return len(self._active)

    def get(self, node_id: str) -> "ContentSession | None":
        return self._active.get(node_id)

    def sessions(self) -> list["ContentSession"]:
        return list(self._active.values())

    def register(self, session: "ContentSession") -> "ContentSession | None":
        """Make a session the active one for its node.

        Returns:
            The superseded session, if there was one
        """
        previous = self._active.get(session.node_id)
        self._active[session.node_id] = session
        return previous

    def is_current(self, session: "ContentSession") -> bool:
        active = self._active.get(session.node_id)
        return active is not None and active.token == session.token

    def release(self, session: "ContentSession") -> None:
        if self.is_current(session):
            del self._active[session.node_id]


class ContentSession:
    """Streams the article for one node into the store.

    State moves idle -> requested -> streaming -> completed, or to failed on
    any backend error. Events arriving after the session has been superseded
    by a newer session for the same node are discarded.
    """

    def __init__(
        self,
        *,
        node_id: str,
        topic: str,
        store: GraphStore,
        backend: ContentBackend,
        registry: SessionRegistry,
        on_complete: ReferencesCallback | None = None,
        on_partial_references: ReferencesCallback | None = None,
        on_partial_discarded: ReferencesCallback | None = None,
        extract_while_streaming: bool = False,
    ) -> None:
        self.node_id = node_id
        self.topic = topic
        self.token = uuid.uuid4().hex
        self.state = SessionState.IDLE
        self.task: asyncio.Task | None = None

        self._store = store
        self._backend = backend
        self._registry = registry
        self._on_complete = on_complete
        self._on_partial_references = on_partial_references
        self._on_partial_discarded = on_partial_discarded
        self._extract_while_streaming = extract_while_streaming
        self._seen_references: set[str] = set()
        self._partial_references: list[str] = []

    def __repr__(self) -> str:
        return (
            f"ContentSession(node_id={self.node_id!r}, token={self.token[:8]}, "
            f"state={self.state.value})"
        )

    @property
    def is_current(self) -> bool:
        return self._registry.is_current(self)

    @property
    def done(self) -> bool:
        return self.state in TERMINAL_STATES

    def start(self) -> asyncio.Task:
        """Request content and consume the stream in a background task.

        Must be called from a running event loop.
        """
        loop = asyncio.get_running_loop()
        self._request()
        self.task = loop.create_task(
            self._consume(), name=f"content-session:{self.node_id}"
        )
        return self.task

    async def run(self) -> SessionState:
        """Request content and consume the stream in the current task."""
        self._request()
        return await self._consume()

    def cancel(self) -> None:
        """Stop the session; later events from its stream are never applied."""
        if self.done:
            return
        self.state = SessionState.CANCELLED
        self._registry.release(self)
        if self.task is not None and not self.task.done():
            self.task.cancel()
        logger.debug(f"Cancelled {self!r}")

    def _request(self) -> None:
        if self.state is not SessionState.IDLE:
            raise RuntimeError(f"{self!r} was already started")
        if not self.is_current:
            self.state = SessionState.CANCELLED
            return
        self._store.begin(self.node_id)
        self.state = SessionState.REQUESTED
        logger.info(f"Requesting content for {self.topic!r}")

    async def _consume(self) -> SessionState:
        if self.state is not SessionState.REQUESTED:
            return self.state

        try:
            async with aclosing(self._backend.stream(self.topic)) as events:
                async for event in events:
                    if not self.is_current:
                        logger.debug(f"Discarding {event.type} event from stale {self!r}")
                        if not self.done:
                            self.state = SessionState.CANCELLED
                        return self.state

                    if isinstance(event, ChunkEvent):
                        self._handle_chunk(event)
                    elif isinstance(event, CompleteEvent):
                        self._handle_complete(event)
                        return self.state
                    elif isinstance(event, ErrorEvent):
                        raise BackendFailure(self.topic, event.message)

            raise BackendFailure(self.topic, "stream ended without a complete event")
        except BackendFailure as e:
            self._handle_failure(e)
        except (NodeNotFound, InvalidState):
            logger.exception(f"Store rejected an update from {self!r}")
            self.state = SessionState.FAILED
        except Exception as e:
            logger.exception(f"Content backend raised unexpectedly in {self!r}")
            self._handle_failure(BackendFailure(self.topic, f"{type(e).__name__}: {e}"))
        finally:
            self._registry.release(self)

        return self.state

    def _handle_chunk(self, event: ChunkEvent) -> None:
        node = self._store.append_chunk(self.node_id, event.text)
        self.state = SessionState.STREAMING

        if self._extract_while_streaming and self._on_partial_references is not None:
            new_terms = self._unseen(extract_cross_references(node.content))
            if new_terms:
                self._partial_references.extend(new_terms)
                self._on_partial_references(self.node_id, new_terms)

    def _handle_complete(self, event: CompleteEvent) -> None:
        node = self._store.finalize(self.node_id, event.data.category, event.data.content)
        self.state = SessionState.COMPLETED
        self._registry.release(self)
        logger.info(f"Content for {self.topic!r} complete ({len(node.content)} chars)")

        # Re-run on the final text to catch anything missed while streaming
        references = extract_cross_references(node.content)
        if self._on_complete is not None:
            self._on_complete(self.node_id, references)

    def _handle_failure(self, error: BackendFailure) -> None:
        if not self.is_current:
            logger.debug(f"Ignoring failure of stale {self!r}: {error}")
            if not self.done:
                self.state = SessionState.CANCELLED
            return

        logger.warning(f"Content generation failed for {self.topic!r}: {error.reason}")
        self._store.mark_failed(self.node_id, fallback_content(self.topic))
        self.state = SessionState.FAILED

        # A failed node keeps no children, including ones spawned mid-stream
        if self._partial_references and self._on_partial_discarded is not None:
            self._on_partial_discarded(self.node_id, self._partial_references)

    def _unseen(self, terms: list[str]) -> list[str]:
        new_terms = [term for term in terms if term.casefold() not in self._seen_references]
        self._seen_references.update(term.casefold() for term in new_terms)
        return new_terms
