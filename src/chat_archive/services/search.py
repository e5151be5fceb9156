"""Search helpers for chat_archive."""

from collections.abc import Iterable

from chat_archive.models.conversation import Conversation, Pair

__all__ = [
    "pair_matches",
    "search_conversations",
    "search_pairs",
    "starred_pairs",
]


def pair_matches(pair: Pair, needle: str) -> bool:
    """Check a pair's question and answers for a lowercased needle."""
    return any(needle in message.content.lower() for message in pair.messages())


def search_conversations(
    conversations: Iterable[Conversation],
    query: str | None,
) -> list[Conversation]:
    """Find conversations whose title or any message contains ``query``.

    Matching is case-insensitive. A blank query returns everything.
    """
    conversations = list(conversations)
    if not query or not query.strip():
        return conversations

    needle = query.lower()
    return [
        conversation
        for conversation in conversations
        if needle in conversation.title.lower()
        or any(pair_matches(pair, needle) for pair in conversation.pairs)
    ]


def search_pairs(conversation: Conversation, query: str | None) -> list[Pair]:
    """Find pairs within one conversation. A blank query matches nothing."""
    if not query or not query.strip():
        return []
    needle = query.lower()
    return [pair for pair in conversation.pairs if pair_matches(pair, needle)]


def starred_pairs(conversations: Iterable[Conversation]) -> list[tuple[Conversation, Pair]]:
    """Collect starred pairs across conversations with their parent."""
    return [
        (conversation, pair)
        for conversation in conversations
        for pair in conversation.pairs
        if pair.starred
    ]
