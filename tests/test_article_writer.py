"""Tests for the instructor-backed article writer."""

from unittest.mock import MagicMock

import pytest

from galaxy_codex.domain.article import ChunkEvent, CompleteEvent
from galaxy_codex.llms.instructor_article_writer import DEFAULT_CATEGORY, InstructorArticleWriter
from galaxy_codex.llms.schemas import ArticleResponse


def partial(category: str | None, content: str | None) -> ArticleResponse:
    return ArticleResponse.model_construct(category=category, content=content)


@pytest.fixture
def instructor_client() -> MagicMock:
    return MagicMock()


@pytest.fixture
def writer(instructor_client: MagicMock) -> InstructorArticleWriter:
    return InstructorArticleWriter(
        instructor_client, model="test-model", system_message="You are a tutor.", max_tokens=512
    )


def test_write_returns_article_named_after_topic(
    writer: InstructorArticleWriter, instructor_client: MagicMock
) -> None:
    instructor_client.chat.completions.create.return_value = ArticleResponse(
        category="Core AI", content="Intro [[Machine Learning]]."
    )

    article = writer.write("Artificial Intelligence")

    assert article.name == "Artificial Intelligence"
    assert article.category == "Core AI"
    assert article.content == "Intro [[Machine Learning]]."

    kwargs = instructor_client.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == "test-model"
    assert kwargs["max_tokens"] == 512
    assert kwargs["response_model"] is ArticleResponse
    assert kwargs["messages"][0] == {"role": "system", "content": "You are a tutor."}
    assert "Artificial Intelligence" in kwargs["messages"][1]["content"]


def test_write_stream_yields_deltas_then_complete(
    writer: InstructorArticleWriter, instructor_client: MagicMock
) -> None:
    instructor_client.chat.completions.create_partial.return_value = iter(
        [
            partial(None, None),
            partial("Core", "Intro "),
            partial("Core AI", "Intro [[Machine"),
            partial("Core AI", "Intro [[Machine"),
            partial("Core AI", "Intro [[Machine Learning]]."),
        ]
    )

    events = list(writer.write_stream("Artificial Intelligence"))

    assert events[:-1] == [
        ChunkEvent(text="Intro "),
        ChunkEvent(text="[[Machine"),
        ChunkEvent(text=" Learning]]."),
    ]
    assert isinstance(events[-1], CompleteEvent)
    assert events[-1].data.category == "Core AI"
    assert events[-1].data.content == "Intro [[Machine Learning]]."
    assert instructor_client.chat.completions.create_partial.call_args.kwargs["stream"] is True


def test_write_stream_final_text_wins_over_revised_partials(
    writer: InstructorArticleWriter, instructor_client: MagicMock
) -> None:
    instructor_client.chat.completions.create_partial.return_value = iter(
        [partial(None, "Draft one"), partial(None, "Rewritten article")]
    )

    events = list(writer.write_stream("Optics"))

    assert events[0] == ChunkEvent(text="Draft one")
    assert events[-1].data.content == "Rewritten article"
    assert events[-1].data.category == DEFAULT_CATEGORY


def test_write_stream_without_content_raises(
    writer: InstructorArticleWriter, instructor_client: MagicMock
) -> None:
    instructor_client.chat.completions.create_partial.return_value = iter([partial("AI", None)])

    with pytest.raises(ValueError):
        list(writer.write_stream("Optics"))
