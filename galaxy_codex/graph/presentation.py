"""Size and color hints for the renderer."""

from hashlib import sha256

from galaxy_codex.domain.topic import NodeStatus

ROOT_COLOR = "#00ffff"
STUB_COLOR = "#aaddff"
FAILED_COLOR = "#ff4444"
CATEGORY_PALETTE = (
    "#ff0055",
    "#ffaa00",
    "#7cfc00",
    "#bf7fff",
    "#ff66cc",
    "#33ccff",
    "#ffd700",
    "#00ccff",
)

ROOT_SIZE = 80
_STATUS_SIZES = {
    NodeStatus.STUB: 20,
    NodeStatus.PENDING: 30,
    NodeStatus.STREAMING: 30,
    NodeStatus.COMPLETE: 40,
    NodeStatus.FAILED: 20,
}


def category_color(category: str) -> str:
    """Pick a palette color that only depends on the category label."""
    digest = sha256(category.strip().casefold().encode()).digest()
    return CATEGORY_PALETTE[digest[0] % len(CATEGORY_PALETTE)]


def presentation_hints(
    *, category: str | None, status: NodeStatus, is_root: bool
) -> tuple[int, str]:
    """Compute the (size_hint, color_hint) pair for a node."""
    size = ROOT_SIZE if is_root else _STATUS_SIZES[status]

    if status is NodeStatus.FAILED:
        color = FAILED_COLOR
    elif category:
        color = category_color(category)
    elif is_root:
        color = ROOT_COLOR
    else:
        color = STUB_COLOR

    return size, color
