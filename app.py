import sys

import httpx
import instructor
from anthropic import Anthropic
from loguru import logger

from galaxy_codex.api import create_app
from galaxy_codex.backends.base import ContentBackend, SingleShotBackend
from galaxy_codex.backends.http_backend import HttpArticleSource, HttpStreamBackend
from galaxy_codex.backends.writer_backend import WriterContentBackend
from galaxy_codex.config import settings
from galaxy_codex.expansion.orchestrator import GraphExpansionOrchestrator
from galaxy_codex.graph.store import GraphStore
from galaxy_codex.llms.instructor_article_writer import InstructorArticleWriter

logger.configure(handlers=[{"sink": sys.stderr, "level": settings.log_level}])


def build_content_backend(writer: InstructorArticleWriter) -> ContentBackend:
    if not settings.content_backend_url:
        logger.info("Generating articles in-process")
        return WriterContentBackend(writer)

    client = httpx.AsyncClient(
        base_url=settings.content_backend_url, timeout=settings.request_timeout
    )
    logger.info(
        f"Using {settings.content_protocol} content backend at {settings.content_backend_url}"
    )
    if settings.content_protocol == "single":
        return SingleShotBackend(HttpArticleSource(client))
    return HttpStreamBackend(client)


logger.info("Initializing Galaxy Codex with Claude article generation")
# Create instructor client with Anthropic Claude
anthropic_client = Anthropic(api_key=settings.anthropic_api_key)
instructor_client = instructor.from_anthropic(
    anthropic_client, mode=instructor.Mode.ANTHROPIC_TOOLS
)

writer = InstructorArticleWriter(
    instructor_client,
    model=settings.article_model,
    system_message=settings.system_message,
    max_tokens=settings.article_max_tokens,
)
store = GraphStore()
orchestrator = GraphExpansionOrchestrator(
    store=store,
    backend=build_content_backend(writer),
    extract_while_streaming=settings.extract_while_streaming,
)
orchestrator.seed(settings.seed_topic)

app = create_app(
    orchestrator=orchestrator,
    writer=writer,
    keep_alive_interval=settings.keep_alive_interval,
)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=3001)
