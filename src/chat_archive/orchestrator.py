"""ChatArchive orchestrator for chat_archive.

This module provides the main entry point for the package: importing
export files into a conversation store and editing what is stored.
"""

import time
from collections.abc import Callable, Collection, Iterable, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from chat_archive.config import ChatArchiveConfig
from chat_archive.importers.documents import SourceFile
from chat_archive.interfaces.storage import StorageInterface
from chat_archive.logging import get_logger
from chat_archive.models.conversation import Conversation, Pair
from chat_archive.models.duplicates import DuplicateReport, Resolution
from chat_archive.services import editing
from chat_archive.services.batch_import import BatchImporter, BatchReport
from chat_archive.services.conversation_assembler import ConversationAssembler
from chat_archive.services.duplicate_resolver import DuplicatePolicy, DuplicateResolver
from chat_archive.services.export import export_project
from chat_archive.services.search import search_conversations, starred_pairs
from chat_archive.utils.timestamps import TimestampNormalizer

__all__ = ["ChatArchive", "ImportResult"]

logger = get_logger(__name__)


@dataclass
class ImportResult:
    """Statistics from one import."""

    conversations_parsed: int = 0
    conversations_new: int = 0
    conversations_overwritten: int = 0
    conversations_kept: int = 0
    total_stored: int = 0
    warnings: list[str] = field(default_factory=list)


class ChatArchive:
    """Main orchestrator for a chat_archive conversation store.

    The store is passed in and owned by the caller. Every operation that
    changes it reads the full set once and writes the new set back with a
    single ``save_all``; nothing is cached between calls.

    Example:
        archive = ChatArchive(storage)
        report = archive.parse_batch(files)
        duplicates = await archive.detect_duplicates(report.conversations)
        resolution = archive.resolve_duplicates(duplicates, DuplicatePolicy.PER_ITEM, {"c1"})
        await archive.commit(resolution)
    """

    def __init__(
        self,
        storage: StorageInterface,
        config: ChatArchiveConfig | None = None,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize ChatArchive.

        Args:
            storage: Conversation store
            config: Configuration (loaded from .env if omitted)
            clock: Source of "now" in epoch seconds
        """
        self._storage = storage
        self._config = config or ChatArchiveConfig()
        self._clock = clock

        normalizer = TimestampNormalizer(clock)
        self._importer = BatchImporter(
            self._config.imports,
            normalizer,
            ConversationAssembler(self._config.imports),
        )
        self._resolver = DuplicateResolver()

    # === IMPORT WORKFLOW ===

    def parse_batch(self, files: Iterable[SourceFile]) -> BatchReport:
        """Parse uploaded files without touching the store.

        Args:
            files: Uploaded files

        Returns:
            BatchReport with conversations and warnings
        """
        return self._importer.parse_batch(files)

    async def detect_duplicates(self, batch: Sequence[Conversation]) -> DuplicateReport:
        """Compare a parsed batch against the stored set.

        Args:
            batch: Conversations from parse_batch()

        Returns:
            DuplicateReport with both versions of every collision
        """
        existing = await self._storage.load_all()
        return self._resolver.detect(batch, existing)

    def resolve_duplicates(
        self,
        report: DuplicateReport,
        policy: DuplicatePolicy | str,
        overwrite_ids: Collection[str] | None = None,
    ) -> Resolution:
        """Apply a duplicate policy chosen by the user.

        Raises:
            InvalidPolicyError: If the policy and IDs do not fit the report
        """
        return self._resolver.resolve(report, policy, overwrite_ids)

    async def commit(self, resolution: Resolution) -> list[Conversation]:
        """Merge a resolution into the store with a single write.

        Args:
            resolution: Output of resolve_duplicates()

        Returns:
            The stored set after the merge, newest first
        """
        existing = await self._storage.load_all()
        merged = self._resolver.merge(existing, resolution)
        await self._storage.save_all(merged)

        logger.info(
            "import_committed",
            added=len(resolution.new),
            overwritten=len(resolution.to_overwrite),
            kept=len(resolution.to_keep),
            total=len(merged),
        )
        return merged

    async def import_files(
        self,
        files: Iterable[SourceFile],
        policy: DuplicatePolicy | str = DuplicatePolicy.KEEP_OLD,
        overwrite_ids: Collection[str] | None = None,
    ) -> ImportResult:
        """Parse files and merge them into the store in one step.

        Args:
            files: Uploaded files
            policy: Duplicate policy applied to ID collisions
            overwrite_ids: IDs to overwrite (per-item policy only)

        Returns:
            ImportResult with statistics and warnings

        Raises:
            InvalidPolicyError: If the policy and IDs do not fit the batch
        """
        report = self.parse_batch(files)
        result = ImportResult(
            conversations_parsed=len(report.conversations),
            warnings=report.warnings,
        )

        existing = await self._storage.load_all()
        duplicates = self._resolver.detect(report.conversations, existing)
        resolution = self._resolver.resolve(duplicates, policy, overwrite_ids)

        if resolution.to_import:
            merged = self._resolver.merge(existing, resolution)
            await self._storage.save_all(merged)
            result.total_stored = len(merged)
        else:
            result.total_stored = len(existing)

        result.conversations_new = len(resolution.new)
        result.conversations_overwritten = len(resolution.to_overwrite)
        result.conversations_kept = len(resolution.to_keep)

        logger.info(
            "import_files_completed",
            parsed=result.conversations_parsed,
            new=result.conversations_new,
            overwritten=result.conversations_overwritten,
            kept=result.conversations_kept,
            warnings=len(result.warnings),
        )
        return result

    # === READS ===

    async def list_conversations(self) -> list[Conversation]:
        return await self._storage.load_all()

    async def get_conversation(self, conversation_id: str) -> Conversation | None:
        conversations = await self._storage.load_all()
        return next((c for c in conversations if c.id == conversation_id), None)

    async def search(self, query: str | None) -> list[Conversation]:
        """Find stored conversations by title or message text."""
        return search_conversations(await self._storage.load_all(), query)

    async def starred_pairs(self) -> list[tuple[Conversation, Pair]]:
        return starred_pairs(await self._storage.load_all())

    async def export_project(self, now: datetime | None = None) -> dict[str, Any]:
        """Export the stored set as an importable project document."""
        conversations = await self._storage.load_all()
        exported_at = now or datetime.fromtimestamp(self._clock(), UTC)
        return export_project(conversations, exported_at)

    # === EDITS ===

    async def delete_pair(self, conversation_id: str, pair_id: str) -> Conversation:
        """Delete one pair from a stored conversation.

        Raises:
            KeyError: If the conversation or pair does not exist
        """
        return await self._edit(conversation_id, lambda c: editing.delete_pair(c, pair_id))

    async def rename_conversation(self, conversation_id: str, title: str) -> Conversation:
        """Rename a stored conversation.

        Raises:
            KeyError: If the conversation does not exist
            ValueError: If the title is blank
        """
        now = self._clock()
        return await self._edit(
            conversation_id, lambda c: editing.rename_conversation(c, title, now)
        )

    async def toggle_pair_star(self, conversation_id: str, pair_id: str) -> Conversation:
        return await self._edit(conversation_id, lambda c: editing.toggle_pair_star(c, pair_id))

    async def toggle_conversation_star(self, conversation_id: str) -> Conversation:
        return await self._edit(conversation_id, editing.toggle_conversation_star)

    async def delete_conversation(self, conversation_id: str) -> bool:
        """Delete a stored conversation.

        Returns:
            False if no conversation had that ID
        """
        conversations = await self._storage.load_all()
        remaining = [c for c in conversations if c.id != conversation_id]
        if len(remaining) == len(conversations):
            return False
        await self._storage.save_all(remaining)
        logger.info("conversation_deleted", conversation_id=conversation_id)
        return True

    async def clear(self) -> None:
        await self._storage.clear()
        logger.info("storage_cleared")

    async def _edit(
        self,
        conversation_id: str,
        edit: Callable[[Conversation], Conversation],
    ) -> Conversation:
        """Apply an edit to one stored conversation and write the set back."""
        conversations = await self._storage.load_all()
        for position, conversation in enumerate(conversations):
            if conversation.id == conversation_id:
                break
        else:
            raise KeyError(conversation_id)

        edited = edit(conversation)
        updated = list(conversations)
        updated[position] = edited
        await self._storage.save_all(updated)
        logger.debug("conversation_edited", conversation_id=conversation_id)
        return edited
