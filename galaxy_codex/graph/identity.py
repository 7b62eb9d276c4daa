"""Resolution of human-readable topic terms to stable node IDs."""

import re
from hashlib import sha256
from typing import TYPE_CHECKING

from galaxy_codex.domain.topic import TopicNode
from galaxy_codex.exceptions import InvalidInput

if TYPE_CHECKING:
    from galaxy_codex.graph.store import GraphStore

# "+" and "#" stay part of the ID so that "C", "C++" and "C#" remain distinct.
_SEPARATOR_RUN = re.compile(r"(?:[^\w+#]|_)+")
_SEPARATOR = "-"


def normalize(term: str) -> str:
    """Normalize a topic term into a node ID.

    Lowercases the term, trims it and collapses every run of whitespace or
    punctuation into a single separator, so "Machine  Learning",
    "machine-learning" and "MACHINE_LEARNING" all share one ID.

    Args:
        term: Display name of the topic

    Returns:
        Deterministic node ID for the term

    Raises:
        InvalidInput: If the term is empty or whitespace-only
    """
    folded = term.strip().casefold()
    if not folded:
        raise InvalidInput(term)

    node_id = _SEPARATOR_RUN.sub(_SEPARATOR, folded).strip(_SEPARATOR)
    if not node_id:
        # Punctuation-only terms still need a stable, distinct ID
        node_id = f"topic-{sha256(folded.encode()).hexdigest()[:12]}"
    return node_id


def resolve(node_id: str, store: "GraphStore") -> TopicNode | None:
    """Look up a node by ID, returning None when it does not exist yet."""
    return store.get(node_id)
