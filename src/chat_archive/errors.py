"""Error taxonomy for chat_archive.

Adapters and traversal helpers raise these; the batch importer converts
them into per-item failure results so one bad conversation never stops a
batch.
"""

__all__ = [
    "ChatArchiveError",
    "ConversationParseError",
    "CyclicGraphError",
    "InvalidPolicyError",
    "MalformedDocumentError",
    "UnrecognizedFormatError",
]


class ChatArchiveError(Exception):
    """Base class for all chat_archive errors."""


class MalformedDocumentError(ChatArchiveError, ValueError):
    """An uploaded file is neither valid JSON nor a usable HTML export."""

    def __init__(self, file_name: str, reason: str) -> None:
        super().__init__(f"{file_name}: {reason}")
        self.file_name = file_name
        self.reason = reason


class UnrecognizedFormatError(ChatArchiveError, ValueError):
    """A raw conversation matched none of the known export shapes."""


class ConversationParseError(ChatArchiveError, ValueError):
    """A classified conversation could not be turned into a record."""


class CyclicGraphError(ConversationParseError):
    """A parent-pointer walk revisited a node."""

    def __init__(self, node_id: str) -> None:
        super().__init__(f"cycle detected in message graph at node {node_id!r}")
        self.node_id = node_id


class InvalidPolicyError(ChatArchiveError, ValueError):
    """A duplicate resolution request is inconsistent with the duplicate set."""
