import asyncio
from typing import AsyncIterator

from fastapi import APIRouter, HTTPException
from fastapi.responses import StreamingResponse
from loguru import logger

from galaxy_codex.backends.writer_backend import WriterContentBackend
from galaxy_codex.domain.article import Article, ErrorEvent, StreamEvent
from galaxy_codex.exceptions import BackendFailure

KEEP_ALIVE = ": keep-alive\n\n"

_END = object()


def format_event(event: StreamEvent) -> str:
    """Format one stream event as an SSE message with a JSON data line."""
    return f"data: {event.model_dump_json()}\n\n"


async def _next_event(iterator: AsyncIterator[StreamEvent]) -> object:
    try:
        return await anext(iterator)
    except StopAsyncIteration:
        return _END


async def stream_response(
    events: AsyncIterator[StreamEvent], keep_alive_interval: float
) -> AsyncIterator[str]:
    """Format stream events as SSE messages.

    A keep-alive comment is sent whenever the generator stays silent for
    keep_alive_interval seconds. A backend failure ends the stream with an
    error event.
    """
    next_event: asyncio.Task | None = None
    try:
        while True:
            if next_event is None:
                next_event = asyncio.create_task(_next_event(events))
            done, _ = await asyncio.wait({next_event}, timeout=keep_alive_interval)
            if not done:
                yield KEEP_ALIVE
                continue

            task, next_event = next_event, None
            event = task.result()
            if event is _END:
                break
            yield format_event(event)  # type: ignore[arg-type]
    except BackendFailure as e:
        logger.error(f"Error in stream: {str(e)}")
        yield format_event(ErrorEvent(message=e.reason))
    finally:
        if next_event is not None:
            next_event.cancel()


def _require_topic(topic: str) -> str:
    if not topic.strip():
        raise HTTPException(status_code=400, detail="Topic is required")
    return topic.strip()


def _create_expand_endpoint(backend: WriterContentBackend):
    """Create the single-shot article endpoint handler."""

    async def expand(topic: str = "") -> Article:
        topic = _require_topic(topic)
        logger.info(f"Generating article for: {topic}")
        try:
            return await backend.fetch(topic)
        except BackendFailure as e:
            logger.error(f"Error generating article for '{topic}': {e.reason}")
            raise HTTPException(status_code=500, detail="Failed to generate content") from e

    return expand


def _create_expand_stream_endpoint(backend: WriterContentBackend, keep_alive_interval: float):
    """Create the streaming article endpoint handler."""

    async def expand_stream(topic: str = "") -> StreamingResponse:
        topic = _require_topic(topic)
        logger.info(f"Streaming article for: {topic}")
        return StreamingResponse(
            stream_response(backend.stream(topic), keep_alive_interval),
            media_type="text/event-stream",
            headers={
                "Cache-Control": "no-cache",
                "Connection": "keep-alive",
                "Content-Type": "text/event-stream",
            },
        )

    return expand_stream


def get_endpoints_router(
    *,
    backend: WriterContentBackend,
    keep_alive_interval: float,
) -> APIRouter:
    router = APIRouter()

    @router.get("/health")
    async def health_check():
        return {"status": "healthy"}

    router.get("/api/expand", response_model=Article)(_create_expand_endpoint(backend))
    router.get("/api/expand/stream")(
        _create_expand_stream_endpoint(backend, keep_alive_interval)
    )

    return router
