"""Content backend generating articles in-process with an ArticleWriter."""

from typing import AsyncIterator

from starlette.concurrency import iterate_in_threadpool, run_in_threadpool

from galaxy_codex.domain.article import Article, StreamEvent
from galaxy_codex.exceptions import BackendFailure
from galaxy_codex.llms.base import ArticleWriter


class WriterContentBackend:
    """Runs the blocking writer in a worker thread and relays its events."""

    def __init__(self, writer: ArticleWriter) -> None:
        self.writer = writer

    async def fetch(self, topic: str) -> Article:
        try:
            return await run_in_threadpool(self.writer.write, topic)
        except Exception as e:
            raise BackendFailure(topic, str(e)) from e

    async def stream(self, topic: str) -> AsyncIterator[StreamEvent]:
        try:
            async for event in iterate_in_threadpool(self.writer.write_stream(topic)):
                yield event
        except Exception as e:
            raise BackendFailure(topic, str(e)) from e

    async def aclose(self) -> None:
        pass
