from typing import Generator

from instructor import Instructor

from galaxy_codex.domain.article import Article, ChunkEvent, CompleteEvent, StreamEvent
from galaxy_codex.llms.schemas import ArticleResponse
from galaxy_codex.prompt import get_messages

DEFAULT_CATEGORY = "General"


class InstructorArticleWriter:
    def __init__(
        self,
        instructor: Instructor,
        *,
        model: str,
        system_message: str,
        max_tokens: int = 2048,
    ) -> None:
        self.instructor = instructor
        self.model = model
        self.system_message = system_message
        self.max_tokens = max_tokens

    def write(self, topic: str) -> Article:
        response = self.instructor.chat.completions.create(
            model=self.model,
            max_tokens=self.max_tokens,
            messages=self._messages(topic),  # type: ignore
            response_model=ArticleResponse,
        )
        return response.to_article(topic)

    def write_stream(self, topic: str) -> Generator[StreamEvent, None, None]:
        """Stream an article, yielding only new content as chunk events."""
        partials = self.instructor.chat.completions.create_partial(
            model=self.model,
            max_tokens=self.max_tokens,
            messages=self._messages(topic),  # type: ignore
            response_model=ArticleResponse,
            stream=True,
        )

        content = ""
        latest = ""
        category = None
        for partial in partials:
            category = partial.category or category
            current = partial.content or ""
            latest = current or latest
            # Partial objects carry the whole text so far, emit only the delta
            if len(current) > len(content) and current.startswith(content):
                yield ChunkEvent(text=current[len(content) :])
                content = current

        if not latest:
            raise ValueError(f"Model returned no article content for {topic!r}")

        yield CompleteEvent(
            data=Article(name=topic, category=category or DEFAULT_CATEGORY, content=latest)
        )

    def _messages(self, topic: str) -> list[dict]:
        messages = get_messages(topic=topic, system_message=self.system_message)
        return [m.model_dump() for m in messages]
