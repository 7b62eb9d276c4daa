import asyncio
from typing import AsyncIterator, Dict, List, Union

from galaxy_codex.domain.article import Article, CompleteEvent, StreamEvent
from galaxy_codex.exceptions import BackendFailure

ScriptItem = Union[StreamEvent, Exception]


def default_article(topic: str) -> Article:
    return Article(name=topic, category="General", content=f"An article about {topic}.")


class FakeContentBackend:
    """Fake incremental backend replaying a scripted list of events per topic."""

    def __init__(self, scripts: Dict[str, List[ScriptItem]] | None = None) -> None:
        self.scripts = scripts or {}
        self.requests: List[str] = []
        self.closed = False

    async def stream(self, topic: str) -> AsyncIterator[StreamEvent]:
        self.requests.append(topic)
        script = self.scripts.get(topic, [CompleteEvent(data=default_article(topic))])
        for item in script:
            await asyncio.sleep(0)
            if isinstance(item, Exception):
                raise item
            yield item

    async def aclose(self) -> None:
        self.closed = True


class FakeArticleSource:
    """Fake single-shot source returning predefined articles."""

    def __init__(
        self,
        articles: Dict[str, Article] | None = None,
        failing_topics: set[str] | None = None,
    ) -> None:
        self.articles = articles or {}
        self.failing_topics = failing_topics or set()
        self.requests: List[str] = []
        self.closed = False

    async def fetch(self, topic: str) -> Article:
        self.requests.append(topic)
        await asyncio.sleep(0)
        if topic in self.failing_topics:
            raise BackendFailure(topic, "status 500")
        return self.articles.get(topic, default_article(topic))

    async def aclose(self) -> None:
        self.closed = True


class QueueContentBackend:
    """Fake backend whose events are pushed by the test, one queue per request.

    Push None to end a stream.
    """

    def __init__(self) -> None:
        self.queues: List[asyncio.Queue] = []
        self.requests: List[str] = []

    async def stream(self, topic: str) -> AsyncIterator[StreamEvent]:
        self.requests.append(topic)
        queue: asyncio.Queue = asyncio.Queue()
        self.queues.append(queue)
        while True:
            item = await queue.get()
            if item is None:
                return
            if isinstance(item, Exception):
                raise item
            yield item

    async def aclose(self) -> None:
        pass
