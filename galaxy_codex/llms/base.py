from typing import Generator, Protocol

from galaxy_codex.domain.article import Article, StreamEvent


class ArticleWriter(Protocol):
    def write(self, topic: str) -> Article: ...

    def write_stream(self, topic: str) -> Generator[StreamEvent, None, None]:
        """Stream an article as chunk events followed by one complete event."""
        ...
