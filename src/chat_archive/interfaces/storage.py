"""Storage interface for chat_archive.

This module defines the Protocol for the conversation store.
"""

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from chat_archive.models.conversation import Conversation

__all__ = [
    "StorageInterface",
]


@runtime_checkable
class StorageInterface(Protocol):
    """Contract for the persistent conversation store.

    The store is authoritative: callers read the whole set, compute the new
    set in memory, and write it back in a single ``save_all``. An
    implementation must make ``save_all`` atomic, so a failed write leaves
    the previous set in place.
    """

    async def load_all(self) -> list[Conversation]:
        """Load every stored conversation.

        Returns:
            All conversations, in stored order
        """
        ...

    async def save_all(self, conversations: Sequence[Conversation]) -> None:
        """Replace the stored set.

        Args:
            conversations: The complete new set
        """
        ...

    async def clear(self) -> None:
        """Delete every stored conversation."""
        ...
