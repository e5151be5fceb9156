"""Utility functions for chat_archive.

This module contains internal utility functions.
"""

from chat_archive.utils.hashing import (
    generate_conversation_id,
    generate_message_id,
    hash_text,
    stable_hash,
)
from chat_archive.utils.timestamps import TimestampNormalizer, parse_timestamp

__all__ = [
    "TimestampNormalizer",
    "generate_conversation_id",
    "generate_message_id",
    "hash_text",
    "parse_timestamp",
    "stable_hash",
]
