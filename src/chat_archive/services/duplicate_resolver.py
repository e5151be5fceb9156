"""Duplicate resolution for chat_archive.

This module decides what happens when an import batch contains
conversation IDs that are already stored.
"""

from collections.abc import Collection, Iterable, Sequence
from enum import StrEnum

from chat_archive.errors import InvalidPolicyError
from chat_archive.logging import get_logger
from chat_archive.models.conversation import Conversation
from chat_archive.models.duplicates import DuplicateRecord, DuplicateReport, Resolution

__all__ = [
    "DuplicatePolicy",
    "DuplicateResolver",
]

logger = get_logger(__name__)


class DuplicatePolicy(StrEnum):
    """Caller-chosen rule for merging colliding conversations."""

    KEEP_OLD = "keep-old"
    """Only conversations with new IDs are added"""

    OVERWRITE_ALL = "overwrite-all"
    """Every incoming version replaces its stored counterpart"""

    PER_ITEM = "per-item"
    """Listed IDs are overwritten, the rest keep the stored version"""


class DuplicateResolver:
    """Service for detecting and resolving ID collisions.

    The resolver never touches storage. It partitions a batch, applies a
    policy, and computes the merged set the caller then saves in one write.

    Example:
        resolver = DuplicateResolver()
        report = resolver.detect(batch, existing)
        resolution = resolver.resolve(report, DuplicatePolicy.OVERWRITE_ALL)
        merged = resolver.merge(existing, resolution)
    """

    def detect(
        self,
        batch: Iterable[Conversation],
        existing: Iterable[Conversation],
    ) -> DuplicateReport:
        """Partition a batch into collisions and new conversations.

        When the batch itself repeats an ID, the first occurrence wins.

        Args:
            batch: Freshly parsed conversations
            existing: Stored conversations

        Returns:
            DuplicateReport
        """
        stored = {conversation.id: conversation for conversation in existing}
        seen: set[str] = set()
        duplicates: list[DuplicateRecord] = []
        new: list[Conversation] = []

        for conversation in batch:
            if conversation.id in seen:
                logger.debug("batch_repeat_ignored", conversation_id=conversation.id)
                continue
            seen.add(conversation.id)

            old = stored.get(conversation.id)
            if old is None:
                new.append(conversation)
            else:
                duplicates.append(DuplicateRecord(id=conversation.id, old=old, new=conversation))

        logger.info("duplicates_detected", duplicates=len(duplicates), new=len(new))
        return DuplicateReport(duplicates=duplicates, new=new)

    def resolve(
        self,
        report: DuplicateReport,
        policy: DuplicatePolicy | str,
        overwrite_ids: Collection[str] | None = None,
    ) -> Resolution:
        """Apply a policy to a duplicate report.

        Args:
            report: Output of detect()
            policy: Resolution policy
            overwrite_ids: IDs to overwrite (per-item policy only)

        Returns:
            Resolution

        Raises:
            InvalidPolicyError: If the policy is unknown, per-item is requested
                without IDs, or IDs are given that are not duplicates
        """
        try:
            policy = DuplicatePolicy(policy)
        except ValueError as e:
            raise InvalidPolicyError(f"unknown duplicate policy: {policy!r}") from e

        if policy is not DuplicatePolicy.PER_ITEM and overwrite_ids:
            raise InvalidPolicyError(
                f"overwrite_ids only apply to the {DuplicatePolicy.PER_ITEM} policy"
            )

        match policy:
            case DuplicatePolicy.KEEP_OLD:
                selected: set[str] = set()
            case DuplicatePolicy.OVERWRITE_ALL:
                selected = set(report.duplicate_ids)
            case DuplicatePolicy.PER_ITEM:
                if overwrite_ids is None:
                    raise InvalidPolicyError("per-item policy requires overwrite_ids")
                selected = set(overwrite_ids)
                unknown = selected.difference(report.duplicate_ids)
                if unknown:
                    raise InvalidPolicyError(
                        f"not duplicates in this import: {', '.join(sorted(unknown))}"
                    )

        resolution = Resolution(
            new=list(report.new),
            to_keep=[record.old for record in report.duplicates if record.id not in selected],
            to_overwrite=[record.new for record in report.duplicates if record.id in selected],
        )
        logger.info(
            "duplicates_resolved",
            policy=policy,
            new=len(resolution.new),
            kept=len(resolution.to_keep),
            overwritten=len(resolution.to_overwrite),
        )
        return resolution

    def resolve_duplicates(
        self,
        batch: Sequence[Conversation],
        existing: Sequence[Conversation],
        policy: DuplicatePolicy | str,
        overwrite_ids: Collection[str] | None = None,
    ) -> Resolution:
        """Detect and resolve in one step."""
        return self.resolve(self.detect(batch, existing), policy, overwrite_ids)

    def merge(
        self,
        existing: Iterable[Conversation],
        resolution: Resolution,
    ) -> list[Conversation]:
        """Compute the full conversation set after applying a resolution.

        Overwritten conversations take their stored counterpart's place, new
        ones are appended, and the result is sorted by update time, newest
        first. An overwrite whose stored counterpart has since been deleted
        is appended like a new conversation.

        Args:
            existing: Stored conversations
            resolution: Output of resolve()

        Returns:
            The complete set to save
        """
        replacements = {conversation.id: conversation for conversation in resolution.to_overwrite}
        merged = [replacements.get(conversation.id, conversation) for conversation in existing]

        present = {conversation.id for conversation in merged}
        for conversation in resolution.to_overwrite:
            if conversation.id not in present:
                logger.info("overwrite_target_missing", conversation_id=conversation.id)
                merged.append(conversation)
                present.add(conversation.id)
        for conversation in resolution.new:
            if conversation.id not in present:
                merged.append(conversation)
                present.add(conversation.id)

        merged.sort(key=lambda conversation: conversation.update_time, reverse=True)
        return merged
