"""CLI for expanding a topic against a content backend and printing the resulting graph"""

import argparse
import asyncio
import sys

import httpx
from loguru import logger

from galaxy_codex.backends.base import ContentBackend, SingleShotBackend
from galaxy_codex.backends.http_backend import HttpArticleSource, HttpStreamBackend
from galaxy_codex.config import settings
from galaxy_codex.expansion.orchestrator import GraphExpansionOrchestrator
from galaxy_codex.graph.store import GraphStore


def build_backend(backend_url: str, protocol: str, timeout: float) -> ContentBackend:
    client = httpx.AsyncClient(base_url=backend_url, timeout=timeout)
    if protocol == "single":
        return SingleShotBackend(HttpArticleSource(client))
    return HttpStreamBackend(client)


async def main(
    topics: list[str],
    backend_url: str,
    protocol: str,
    timeout: float,
) -> str:
    orchestrator = GraphExpansionOrchestrator(
        store=GraphStore(),
        backend=build_backend(backend_url, protocol, timeout),
    )
    try:
        parent_id = None
        for topic in topics:
            parent_id = orchestrator.activate_or_expand(topic, parent_id)
            await orchestrator.wait_idle()
    finally:
        await orchestrator.aclose()

    snapshot = orchestrator.get_snapshot()
    logger.info(f"Graph has {len(snapshot.nodes)} nodes and {len(snapshot.links)} links")
    return snapshot.model_dump_json(indent=2)


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument(
        "topics",
        nargs="+",
        help="Topics to activate in order, each one referenced from the previous",
    )
    parser.add_argument(
        "--backend-url",
        type=str,
        required=False,
        help="Base URL of the content backend",
        default=settings.content_backend_url or "http://localhost:3001",
    )
    parser.add_argument(
        "--protocol",
        choices=["stream", "single"],
        required=False,
        help="Content backend protocol",
        default=settings.content_protocol,
    )
    parser.add_argument(
        "--timeout",
        type=float,
        required=False,
        help="Request timeout in seconds",
        default=settings.request_timeout,
    )

    args = parser.parse_args()
    logger.configure(handlers=[{"sink": sys.stderr, "level": settings.log_level}])

    print(
        asyncio.run(
            main(
                topics=args.topics,
                backend_url=args.backend_url,
                protocol=args.protocol,
                timeout=args.timeout,
            )
        )
    )
