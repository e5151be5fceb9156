"""Interfaces for chat_archive.

This module exports the Protocol the orchestrator depends on.
"""

from chat_archive.interfaces.storage import StorageInterface

__all__ = [
    "StorageInterface",
]
