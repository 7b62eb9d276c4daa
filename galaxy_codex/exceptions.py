"""Exceptions raised by the graph core and the content backends."""


class GalaxyCodexError(Exception):
    """Base exception for topic graph operations."""


class InvalidInput(GalaxyCodexError):
    """Raised for an empty or whitespace-only topic term."""

    def __init__(self, term: str):
        self.term = term
        super().__init__(f"Topic term must not be empty: {term!r}")


class NodeNotFound(GalaxyCodexError):
    """Raised when a store operation targets an unknown node."""

    def __init__(self, node_id: str):
        self.node_id = node_id
        super().__init__(f"Node '{node_id}' not found")


class InvalidState(GalaxyCodexError):
    """Raised when a node is not in a status that allows the operation."""

    def __init__(self, node_id: str, status: str, expected: tuple[str, ...]):
        self.node_id = node_id
        self.status = status
        self.expected = expected
        super().__init__(
            f"Node '{node_id}' is {status}, expected one of: {', '.join(expected)}"
        )


class BackendFailure(GalaxyCodexError):
    """Raised when the content backend fails or returns a malformed payload."""

    def __init__(self, topic: str, reason: str):
        self.topic = topic
        self.reason = reason
        super().__init__(f"Content backend failed for '{topic}': {reason}")
