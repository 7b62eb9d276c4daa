from tests.fakes.fake_article_writer import FakeArticleWriter
from tests.fakes.fake_backend import FakeArticleSource, FakeContentBackend, QueueContentBackend

__all__ = ["FakeArticleSource", "FakeArticleWriter", "FakeContentBackend", "QueueContentBackend"]
