"""Structural edits for chat_archive.

Each edit returns a new Conversation; the stored record is replaced by the
caller. Pair indices and the create/update range stay valid after every edit.
"""

import time

from chat_archive.models.conversation import Conversation
from chat_archive.services.conversation_assembler import reconcile_times
from chat_archive.services.pair_assembler import renumber_pairs

__all__ = [
    "delete_pair",
    "rename_conversation",
    "toggle_conversation_star",
    "toggle_pair_star",
]


def delete_pair(conversation: Conversation, pair_id: str) -> Conversation:
    """Remove a pair, renumbering the rest and re-widening the time range.

    Raises:
        KeyError: If the conversation has no such pair
    """
    if conversation.get_pair(pair_id) is None:
        raise KeyError(pair_id)

    pairs = renumber_pairs(pair for pair in conversation.pairs if pair.id != pair_id)
    create_time, update_time = reconcile_times(
        conversation.create_time, conversation.update_time, pairs
    )
    return conversation.model_copy(
        update={"pairs": pairs, "create_time": create_time, "update_time": update_time}
    )


def rename_conversation(
    conversation: Conversation,
    title: str,
    now: float | None = None,
) -> Conversation:
    """Change the title and bump the update time.

    Args:
        conversation: Conversation to rename
        title: New title (blank titles are rejected)
        now: Edit time in epoch seconds (defaults to the current time)

    Raises:
        ValueError: If the title is blank
    """
    if not title.strip():
        raise ValueError("title must not be blank")
    edited_at = time.time() if now is None else now
    return conversation.model_copy(
        update={
            "title": title,
            "update_time": max(conversation.create_time, edited_at),
        }
    )


def toggle_pair_star(conversation: Conversation, pair_id: str) -> Conversation:
    """Flip the starred flag of one pair.

    Raises:
        KeyError: If the conversation has no such pair
    """
    if conversation.get_pair(pair_id) is None:
        raise KeyError(pair_id)
    pairs = [
        pair.model_copy(update={"starred": not pair.starred}) if pair.id == pair_id else pair
        for pair in conversation.pairs
    ]
    return conversation.model_copy(update={"pairs": pairs})


def toggle_conversation_star(conversation: Conversation) -> Conversation:
    return conversation.model_copy(update={"starred": not conversation.starred})
