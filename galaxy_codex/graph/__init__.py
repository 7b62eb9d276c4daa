"""In-memory topic graph: identity, cross-reference extraction and storage."""

from galaxy_codex.graph.extractor import extract_cross_references
from galaxy_codex.graph.identity import normalize, resolve
from galaxy_codex.graph.store import GraphStore

__all__ = [
    "GraphStore",
    "extract_cross_references",
    "normalize",
    "resolve",
]
