"""Topic graph domain models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class NodeStatus(str, Enum):
    STUB = "stub"
    PENDING = "pending"
    STREAMING = "streaming"
    COMPLETE = "complete"
    FAILED = "failed"


class TopicNode(BaseModel):
    """Represents one explorable topic in the graph.

    Attributes:
        id: Normalized identifier derived from the first display name
        name: Display name as first encountered
        category: Classification label, set once content arrives
        content: Article body, grows while streaming and is fixed once finished
        status: Lifecycle status of the node
        size_hint: Relative node size for the renderer
        color_hint: Hex color for the renderer
        parent_id: ID of the node whose expansion created this node
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    category: str | None = None
    content: str = ""
    status: NodeStatus = NodeStatus.STUB
    size_hint: int = 20
    color_hint: str = "#aaddff"
    parent_id: str | None = None


class TopicEdge(BaseModel):
    """Directed "source references target" relation."""

    model_config = ConfigDict(frozen=True)

    source_id: str
    target_id: str


class GraphSnapshot(BaseModel):
    """Immutable point-in-time view of the graph handed to the renderer."""

    model_config = ConfigDict(frozen=True)

    nodes: tuple[TopicNode, ...] = ()
    links: tuple[TopicEdge, ...] = ()
    focused_node_id: str | None = None
    version: int = 0

    def get_node(self, node_id: str) -> TopicNode | None:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def outgoing(self, node_id: str) -> list[TopicEdge]:
        return [link for link in self.links if link.source_id == node_id]
