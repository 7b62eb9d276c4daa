"""Content sessions and the orchestrator that grows the topic graph."""

from galaxy_codex.expansion.orchestrator import GraphExpansionOrchestrator
from galaxy_codex.expansion.session import ContentSession, SessionRegistry, SessionState

__all__ = [
    "ContentSession",
    "GraphExpansionOrchestrator",
    "SessionRegistry",
    "SessionState",
]
