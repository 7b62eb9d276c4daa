from typing import Literal

from pydantic import BaseModel, Field

from galaxy_codex.domain.article import Article


class LLMMessage(BaseModel):
    role: Literal["user", "assistant", "system"]
    content: str


class ArticleResponse(BaseModel):
    """Structured educational article about a single topic"""

    category: str = Field(
        ...,
        description=(
            "A short classification label for the topic, two or three words at most, "
            "for example 'Core AI', 'Mathematics' or 'Robotics'"
        ),
    )
    content: str = Field(
        ...,
        description=(
            "The article in Markdown. Wrap every related concept worth exploring next "
            "in double square brackets, like [[Neural Networks]]"
        ),
    )

    def to_article(self, topic: str) -> Article:
        return Article(name=topic, category=self.category, content=self.content)
