"""Endpoints exposing the topic graph to the renderer."""

from fastapi import APIRouter, HTTPException
from loguru import logger
from pydantic import BaseModel

from galaxy_codex.domain.topic import GraphSnapshot, TopicNode
from galaxy_codex.exceptions import NodeNotFound
from galaxy_codex.expansion.orchestrator import GraphExpansionOrchestrator


class ActivateRequest(BaseModel):
    term: str
    parent_id: str | None = None


class NodeRef(BaseModel):
    node_id: str | None


def get_graph_router(orchestrator: GraphExpansionOrchestrator) -> APIRouter:
    router = APIRouter(prefix="/api/graph")

    @router.get("", response_model=GraphSnapshot)
    async def get_graph():
        return orchestrator.get_snapshot()

    @router.get("/focus", response_model=NodeRef)
    async def get_focus():
        return NodeRef(node_id=orchestrator.get_focused_node_id())

    @router.get("/nodes/{node_id}", response_model=TopicNode)
    async def get_node(node_id: str):
        node = orchestrator.store.get(node_id)
        if node is None:
            raise HTTPException(status_code=404, detail="Node not found")
        return node

    @router.post("/activate", response_model=NodeRef, status_code=202)
    async def activate(request: ActivateRequest):
        if not request.term.strip():
            raise HTTPException(status_code=422, detail="Topic term must not be empty")
        if request.parent_id is not None and request.parent_id not in orchestrator.store:
            raise HTTPException(status_code=404, detail="Parent node not found")

        node_id = orchestrator.activate_or_expand(request.term, request.parent_id)
        logger.debug(f"Activated {request.term!r} as {node_id!r}")
        return NodeRef(node_id=node_id)

    @router.post("/nodes/{node_id}/retry", response_model=NodeRef, status_code=202)
    async def retry(node_id: str):
        try:
            orchestrator.restart(node_id)
        except NodeNotFound as err:
            raise HTTPException(status_code=404, detail="Node not found") from err
        return NodeRef(node_id=node_id)

    return router
