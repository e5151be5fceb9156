"""Hashing utilities for chat_archive.

This module provides deterministic hash functions for synthesizing
stable identifiers when an export does not carry its own.
"""

import hashlib
from typing import Any

__all__ = [
    "generate_conversation_id",
    "generate_message_id",
    "hash_text",
    "stable_hash",
]


def hash_text(text: str) -> str:
    """Generate SHA256 hash of text.

    Args:
        text: Input text to hash

    Returns:
        Hexadecimal SHA256 hash string
    """
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def stable_hash(*args: Any) -> str:
    """Generate a stable hash from multiple arguments.

    Converts all arguments to strings and joins them with pipe separator.

    Args:
        *args: Values to include in the hash

    Returns:
        Hexadecimal SHA256 hash string
    """
    combined = "|".join(str(arg) for arg in args)
    return hash_text(combined)


def generate_conversation_id(
    source: str,
    title: str,
    first_content: str,
    create_time: float,
    prefix: str = "conv_",
) -> str:
    """Generate deterministic conversation ID.

    The same id-less conversation imported twice gets the same ID, so the
    second import shows up as a duplicate instead of a copy.

    Args:
        source: Source format tag
        title: Conversation title
        first_content: Content of the first question (may be empty)
        create_time: Declared creation time in epoch seconds

    Returns:
        Prefixed 16-character hash
    """
    return prefix + stable_hash("conversation", source, title, first_content, create_time)[:16]


def generate_message_id(conversation_key: str, position: int, role: str) -> str:
    """Generate deterministic message ID from its position in a conversation.

    Args:
        conversation_key: Any string that identifies the parent conversation
        position: Zero-based position of the raw message
        role: Message role

    Returns:
        Prefixed 16-character hash
    """
    return "msg_" + stable_hash("message", conversation_key, position, role)[:16]
