from typing import AsyncGenerator, AsyncIterator, Protocol

from galaxy_codex.domain.article import Article, CompleteEvent, StreamEvent


class ArticleSource(Protocol):
    """Single-shot protocol: one topic in, one finished article out."""

    async def fetch(self, topic: str) -> Article:
        """Fetch the article for a topic, raising BackendFailure on any error."""
        ...

    async def aclose(self) -> None: ...


class ContentBackend(Protocol):
    """Incremental push protocol consumed by content sessions."""

    def stream(self, topic: str) -> AsyncGenerator[StreamEvent, None]:
        """Yield chunk events followed by one complete or error event.

        Sessions close the generator as soon as they stop reading from it.

        Transport failures and malformed payloads raise BackendFailure.
        """
        ...

    async def aclose(self) -> None: ...


class SingleShotBackend:
    """Presents a single-shot source as a degenerate one-event stream."""

    def __init__(self, source: ArticleSource) -> None:
        self.source = source

    async def stream(self, topic: str) -> AsyncIterator[StreamEvent]:
        article = await self.source.fetch(topic)
        yield CompleteEvent(data=article)

    async def aclose(self) -> None:
        await self.source.aclose()
