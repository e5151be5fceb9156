"""Project export for chat_archive.

The export document is itself an importable file: every record is in app
export shape, so importing it reproduces the same conversations.
"""

from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Any

from chat_archive.models.conversation import Conversation

__all__ = [
    "EXPORT_VERSION",
    "export_project",
]

EXPORT_VERSION = "1.0"


def export_project(
    conversations: Sequence[Conversation],
    now: datetime | None = None,
) -> dict[str, Any]:
    """Build the JSON-serializable project export document.

    Args:
        conversations: Conversations to export, in the order given
        now: Export time (defaults to the current UTC time)

    Returns:
        Dict with ``version``, ``exportDate``, ``conversations`` and ``metadata``
    """
    exported_at = now or datetime.now(UTC)
    return {
        "version": EXPORT_VERSION,
        "exportDate": exported_at.isoformat().replace("+00:00", "Z"),
        "conversations": [conversation.to_record() for conversation in conversations],
        "metadata": {
            "totalConversations": len(conversations),
            "totalPairs": sum(conversation.pair_count for conversation in conversations),
        },
    }
