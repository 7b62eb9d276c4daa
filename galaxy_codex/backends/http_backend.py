"""HTTP clients for a remote content backend."""

import json
import logging
from typing import AsyncIterator

import httpx
from pydantic import ValidationError

from galaxy_codex.domain.article import Article, StreamEvent, stream_event_adapter
from galaxy_codex.exceptions import BackendFailure

logger = logging.getLogger(__name__)

EXPAND_PATH = "/api/expand"
EXPAND_STREAM_PATH = "/api/expand/stream"

_KEEP_ALIVE_TYPES = {"ping", "keep-alive", "heartbeat"}


class HttpArticleSource:
    """Single-shot client: GET /api/expand?topic=... returning one JSON article."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self.client = client

    async def fetch(self, topic: str) -> Article:
        try:
            response = await self.client.get(EXPAND_PATH, params={"topic": topic})
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise BackendFailure(topic, f"status {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise BackendFailure(topic, f"transport error: {e}") from e

        try:
            return Article.model_validate_json(response.content)
        except ValidationError as e:
            raise BackendFailure(topic, "malformed article payload") from e

    async def aclose(self) -> None:
        await self.client.aclose()


class HttpStreamBackend:
    """Incremental push client reading JSON events from a Server-Sent Events stream."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self.client = client

    async def stream(self, topic: str) -> AsyncIterator[StreamEvent]:
        try:
            async with self.client.stream(
                "GET",
                EXPAND_STREAM_PATH,
                params={"topic": topic},
                headers={"Accept": "text/event-stream"},
            ) as response:
                if response.is_error:
                    raise BackendFailure(topic, f"status {response.status_code}")

                async for payload in iter_sse_data(response.aiter_lines()):
                    event = parse_event(topic, payload)
                    if event is not None:
                        yield event
        except httpx.HTTPError as e:
            raise BackendFailure(topic, f"transport error: {e}") from e

    async def aclose(self) -> None:
        await self.client.aclose()


async def iter_sse_data(lines: AsyncIterator[str]) -> AsyncIterator[str]:
    """Group SSE lines into event payloads.

    Comment lines (":" prefix, used for keep-alives) and fields other than
    "data" are skipped. Multiple data lines of one event are joined by newlines.
    """
    data_lines: list[str] = []
    async for line in lines:
        if line == "":
            if data_lines:
                yield "\n".join(data_lines)
                data_lines = []
            continue
        if line.startswith(":"):
            continue

        field, _, value = line.partition(":")
        if field == "data":
            data_lines.append(value[1:] if value.startswith(" ") else value)

    if data_lines:
        yield "\n".join(data_lines)


def parse_event(topic: str, payload: str) -> StreamEvent | None:
    """Parse one event payload, returning None for keep-alive signals."""
    if not payload.strip():
        return None

    try:
        raw = json.loads(payload)
    except json.JSONDecodeError as e:
        raise BackendFailure(topic, "malformed stream event") from e

    if isinstance(raw, dict) and raw.get("type") in _KEEP_ALIVE_TYPES:
        logger.debug(f"Ignoring keep-alive event for {topic!r}")
        return None

    try:
        return stream_event_adapter.validate_python(raw)
    except ValidationError as e:
        raise BackendFailure(topic, "malformed stream event") from e
