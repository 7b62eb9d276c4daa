from typing import Generator

import pytest
from fastapi.testclient import TestClient

from galaxy_codex.api import create_app
from galaxy_codex.backends.base import SingleShotBackend
from galaxy_codex.domain.article import Article
from galaxy_codex.expansion.orchestrator import GraphExpansionOrchestrator
from galaxy_codex.graph.store import GraphStore
from tests.fakes import FakeArticleSource, FakeArticleWriter


@pytest.fixture
def test_articles() -> dict[str, Article]:
    return {
        "Artificial Intelligence": Article(
            name="Artificial Intelligence",
            category="Core AI",
            content="Intro [[Machine Learning]] and [[Robotics]].",
        ),
        "Machine Learning": Article(
            name="Machine Learning",
            category="Core AI",
            content=(
                "Part of [[Artificial Intelligence]]. "
                "See [[Deep Learning]] and [[machine learning]] itself."
            ),
        ),
    }


@pytest.fixture
def store() -> GraphStore:
    return GraphStore()


@pytest.fixture
def fake_source(test_articles: dict[str, Article]) -> FakeArticleSource:
    return FakeArticleSource(test_articles, failing_topics={"Quantum Foo"})


@pytest.fixture
def orchestrator(store: GraphStore, fake_source: FakeArticleSource) -> GraphExpansionOrchestrator:
    return GraphExpansionOrchestrator(store=store, backend=SingleShotBackend(fake_source))


@pytest.fixture
def fake_writer(test_articles: dict[str, Article]) -> FakeArticleWriter:
    return FakeArticleWriter(test_articles, failing_topics={"Quantum Foo"})


@pytest.fixture
def test_client(
    orchestrator: GraphExpansionOrchestrator, fake_writer: FakeArticleWriter
) -> Generator[TestClient, None, None]:
    """Create test client with fake implementations."""
    app = create_app(orchestrator=orchestrator, writer=fake_writer, keep_alive_interval=5.0)
    with TestClient(app) as client:
        yield client
