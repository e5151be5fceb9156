"""Conversation assembly for chat_archive.

This module turns a parser's ParsedConversation into the canonical
Conversation record: pairs numbered 1..N and a create/update range that
covers every message actually present.
"""

from collections.abc import Sequence

from chat_archive.config import ImportSettings
from chat_archive.logging import get_logger
from chat_archive.models.conversation import Conversation, Pair
from chat_archive.models.ingest import ParsedConversation
from chat_archive.services.pair_assembler import PairAssembler, renumber_pairs
from chat_archive.utils.hashing import generate_conversation_id

__all__ = [
    "ConversationAssembler",
    "reconcile_times",
]

logger = get_logger(__name__)


def reconcile_times(
    create_time: float,
    update_time: float,
    pairs: Sequence[Pair],
) -> tuple[float, float]:
    """Widen a declared time range to cover every message timestamp.

    The result always satisfies ``create_time <= update_time``, even when the
    declared values are inverted or were defaulted to "now".

    Args:
        create_time: Declared creation time (epoch seconds)
        update_time: Declared update time (epoch seconds)
        pairs: Pairs whose messages bound the range

    Returns:
        Tuple of (create_time, update_time)
    """
    timestamps = [message.timestamp for pair in pairs for message in pair.messages()]
    if timestamps:
        create_time = min(create_time, *timestamps)
        update_time = max(update_time, *timestamps)
    return create_time, max(create_time, update_time)


class ConversationAssembler:
    """Service for building Conversation records from parser output.

    Formats that pair their own messages (Claude, DeepSeek, app exports)
    hand over pairs; everything else goes through the generic PairAssembler.

    Example:
        assembler = ConversationAssembler()
        conversation = assembler.assemble(parsed)
    """

    def __init__(
        self,
        settings: ImportSettings | None = None,
        pair_assembler: PairAssembler | None = None,
    ) -> None:
        self._settings = settings or ImportSettings()
        self._pair_assembler = pair_assembler or PairAssembler()

    def assemble(self, parsed: ParsedConversation) -> Conversation:
        """Build a Conversation from one parsed conversation.

        Args:
            parsed: Parser output

        Returns:
            Conversation with contiguous pair indices and reconciled times
        """
        if parsed.is_paired:
            pairs = renumber_pairs(parsed.pairs)
        else:
            pairs = self._pair_assembler.build(parsed.messages)

        create_time, update_time = reconcile_times(parsed.create_time, parsed.update_time, pairs)
        conversation_id = parsed.conversation_id or self._synthesize_id(parsed, pairs)

        conversation = Conversation(
            id=conversation_id,
            title=parsed.title,
            create_time=create_time,
            update_time=update_time,
            pairs=pairs,
            starred=parsed.starred,
            source=parsed.source,
            folder_id=parsed.folder_id,
        )
        logger.debug(
            "conversation_assembled",
            conversation_id=conversation.id,
            source=conversation.source,
            pair_count=conversation.pair_count,
        )
        return conversation

    def _synthesize_id(self, parsed: ParsedConversation, pairs: Sequence[Pair]) -> str:
        """Derive a stable ID for a conversation the source left unnamed."""
        if pairs:
            first_content = pairs[0].question.content
            first_time = pairs[0].question.timestamp
        else:
            first_content = ""
            first_time = parsed.create_time
        return generate_conversation_id(
            parsed.source,
            parsed.title,
            first_content,
            first_time,
            prefix=self._settings.conversation_id_prefix,
        )
