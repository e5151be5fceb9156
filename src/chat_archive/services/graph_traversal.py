"""Message graph traversal for chat_archive.

Mapping-style exports store messages as a dict of nodes keyed by ID. The
ChatGPT variant is a tree linked by ``parent`` pointers where only the
branch ending at ``current_node`` is live; the DeepSeek variant is
effectively a bag of turns ordered by insertion time.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from chat_archive.errors import ConversationParseError, CyclicGraphError
from chat_archive.logging import get_logger
from chat_archive.utils.timestamps import TimestampNormalizer

__all__ = [
    "MappingNode",
    "build_node_index",
    "collect_fragment_nodes",
    "walk_active_branch",
]

logger = get_logger(__name__)


@dataclass(frozen=True)
class MappingNode:
    """One node of a mapping graph."""

    id: str
    parent: str | None
    message: dict[str, Any] | None


def build_node_index(mapping: Any) -> dict[str, MappingNode]:
    """Index raw mapping entries as immutable nodes.

    Args:
        mapping: The raw ``mapping`` object

    Returns:
        Dict of node ID to MappingNode

    Raises:
        ConversationParseError: If the mapping or a node is not an object
    """
    if not isinstance(mapping, dict):
        raise ConversationParseError("mapping is not an object")

    nodes: dict[str, MappingNode] = {}
    for key, raw_node in mapping.items():
        if not isinstance(raw_node, dict):
            raise ConversationParseError(f"mapping node {key!r} is not an object")
        parent = raw_node.get("parent")
        message = raw_node.get("message")
        nodes[key] = MappingNode(
            id=str(raw_node.get("id") or key),
            parent=str(parent) if parent else None,
            message=message if isinstance(message, dict) else None,
        )
    return nodes


def walk_active_branch(
    mapping: Any,
    current_node: str,
    include: Callable[[MappingNode], bool] | None = None,
) -> list[MappingNode]:
    """Reconstruct the active thread ending at ``current_node``.

    Starts at the leaf and follows ``parent`` pointers until a node has no
    parent, then reverses the collected nodes into chronological order.
    Nodes rejected by ``include`` are left out but the walk still continues
    through them to their parent. Sibling branches are never visited.

    Args:
        mapping: The raw ``mapping`` object
        current_node: Leaf of the active branch
        include: Optional predicate selecting which nodes to keep

    Returns:
        Kept nodes, root first

    Raises:
        ConversationParseError: If ``current_node`` is not in the mapping
        CyclicGraphError: If a node is reached twice
    """
    nodes = build_node_index(mapping)
    if current_node not in nodes:
        raise ConversationParseError(f"current_node {current_node!r} not found in mapping")

    collected: list[MappingNode] = []
    visited: set[str] = set()
    node_key: str | None = current_node

    while node_key is not None:
        if node_key in visited:
            raise CyclicGraphError(node_key)
        visited.add(node_key)

        node = nodes.get(node_key)
        if node is None:
            logger.debug("mapping_parent_missing", node_id=node_key)
            break

        if include is None or include(node):
            collected.append(node)
        node_key = node.parent

    collected.reverse()
    return collected


def collect_fragment_nodes(
    mapping: Any,
    normalizer: TimestampNormalizer,
) -> list[MappingNode]:
    """Collect fragment-bearing nodes sorted by insertion time.

    There is no tree structure to respect; nodes whose message has a
    ``fragments`` list are ordered by the message's ``inserted_at``. Ties
    keep mapping order.

    Args:
        mapping: The raw ``mapping`` object
        normalizer: Timestamp normalizer used for the sort key

    Returns:
        Fragment nodes in chronological order
    """
    nodes = [
        node
        for node in build_node_index(mapping).values()
        if node.message is not None and isinstance(node.message.get("fragments"), list)
    ]
    return sorted(nodes, key=lambda node: normalizer.normalize(node.message.get("inserted_at")))
