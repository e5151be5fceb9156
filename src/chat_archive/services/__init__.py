"""Services for chat_archive.

This module exports the pairing, assembly and duplicate services plus the
pure helpers for editing, searching and exporting records. The batch
importer depends on the importers package and is imported from
``chat_archive.services.batch_import`` directly.
"""

from chat_archive.services.conversation_assembler import ConversationAssembler, reconcile_times
from chat_archive.services.duplicate_resolver import DuplicatePolicy, DuplicateResolver
from chat_archive.services.editing import (
    delete_pair,
    rename_conversation,
    toggle_conversation_star,
    toggle_pair_star,
)
from chat_archive.services.export import export_project
from chat_archive.services.pair_assembler import PairAccumulator, PairAssembler, renumber_pairs
from chat_archive.services.search import search_conversations, search_pairs, starred_pairs

__all__ = [
    "ConversationAssembler",
    "DuplicatePolicy",
    "DuplicateResolver",
    "PairAccumulator",
    "PairAssembler",
    "delete_pair",
    "export_project",
    "reconcile_times",
    "rename_conversation",
    "renumber_pairs",
    "search_conversations",
    "search_pairs",
    "starred_pairs",
    "toggle_conversation_star",
    "toggle_pair_star",
]
