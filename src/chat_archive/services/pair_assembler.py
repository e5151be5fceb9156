"""Pair assembly for chat_archive.

This module groups chronological messages into question/answer pairs.
"""

from collections.abc import Iterable

from chat_archive.logging import get_logger
from chat_archive.models.conversation import Pair
from chat_archive.models.message import Message

__all__ = [
    "PairAccumulator",
    "PairAssembler",
    "renumber_pairs",
]

logger = get_logger(__name__)


class PairAccumulator:
    """Incremental pair builder shared by every pairing path.

    A user message opens a new pair with the next index; assistant messages
    attach to the most recently opened pair. Answers that arrive before any
    question have no pair to join and are discarded (counted in
    ``orphans_dropped``).

    Example:
        acc = PairAccumulator()
        acc.open(question)
        acc.answer(reply)
        pairs = acc.pairs
    """

    def __init__(self) -> None:
        self._pairs: list[Pair] = []
        self.orphans_dropped = 0

    def open(self, question: Message, pair_id: str | None = None) -> Pair:
        """Start a new pair with ``question``."""
        pair = Pair(
            id=pair_id or question.id,
            question=question,
            answers=[],
            index=len(self._pairs) + 1,
        )
        self._pairs.append(pair)
        return pair

    def answer(self, message: Message) -> bool:
        """Append an answer to the open pair.

        Returns:
            False if no pair is open and the answer was dropped
        """
        if not self._pairs:
            self.orphans_dropped += 1
            logger.debug("orphan_answer_dropped", message_id=message.id)
            return False
        self._pairs[-1].answers.append(message)
        return True

    @property
    def pairs(self) -> list[Pair]:
        return list(self._pairs)


class PairAssembler:
    """Service for grouping a flat message sequence into pairs.

    Messages are taken in the order given (parsers already produce
    chronological order). Every user message opens a pair; every following
    assistant message joins it until the next user message.

    Example:
        assembler = PairAssembler()
        pairs = assembler.build(messages)
    """

    def build(self, messages: Iterable[Message]) -> list[Pair]:
        """Build pairs from chronological messages.

        Args:
            messages: Messages in chronological order

        Returns:
            Pairs with indices 1..N
        """
        accumulator = PairAccumulator()
        message_count = 0

        for message in messages:
            message_count += 1
            if message.is_user:
                accumulator.open(message)
            else:
                accumulator.answer(message)

        pairs = accumulator.pairs
        logger.debug(
            "pairs_built",
            input_count=message_count,
            output_count=len(pairs),
            orphans_dropped=accumulator.orphans_dropped,
        )
        return pairs


def renumber_pairs(pairs: Iterable[Pair]) -> list[Pair]:
    """Return the pairs with indices reassigned to 1..N by position."""
    return [
        pair if pair.index == position else pair.model_copy(update={"index": position})
        for position, pair in enumerate(pairs, start=1)
    ]
