"""Data models for chat_archive.

This module exports the pydantic models used across the package.
"""

from chat_archive.models.conversation import Conversation, Pair
from chat_archive.models.duplicates import DuplicateRecord, DuplicateReport, Resolution
from chat_archive.models.ingest import ParsedConversation
from chat_archive.models.message import Artifact, Message, Role
from chat_archive.models.source import SourceFormat

__all__ = [
    "Artifact",
    "Conversation",
    "DuplicateRecord",
    "DuplicateReport",
    "Message",
    "Pair",
    "ParsedConversation",
    "Resolution",
    "Role",
    "SourceFormat",
]
