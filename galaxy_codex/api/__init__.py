from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from galaxy_codex.api.endpoints import get_endpoints_router
from galaxy_codex.api.graph import get_graph_router
from galaxy_codex.backends.writer_backend import WriterContentBackend
from galaxy_codex.expansion.orchestrator import GraphExpansionOrchestrator
from galaxy_codex.llms.base import ArticleWriter


def create_app(
    *,
    orchestrator: GraphExpansionOrchestrator,
    writer: ArticleWriter,
    keep_alive_interval: float = 15.0,
) -> FastAPI:
    """Create FastAPI app."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await orchestrator.aclose()

    app = FastAPI(lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(
        router=get_endpoints_router(
            backend=WriterContentBackend(writer), keep_alive_interval=keep_alive_interval
        )
    )
    app.include_router(router=get_graph_router(orchestrator))

    return app
