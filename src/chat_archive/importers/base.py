"""Base format parser for chat_archive.

This module defines the abstract base class for per-format parsers.
"""

from abc import ABC, abstractmethod
from typing import Any

from chat_archive.config import ImportSettings
from chat_archive.models.ingest import ParsedConversation
from chat_archive.models.source import SourceFormat
from chat_archive.utils.hashing import generate_message_id, stable_hash
from chat_archive.utils.timestamps import TimestampNormalizer

__all__ = [
    "FormatParser",
]


class FormatParser(ABC):
    """Abstract base class for per-format parsers.

    A parser turns one raw conversation object, already classified by the
    format detector, into a ParsedConversation.

    Important: Parsers must NOT persist data or mutate the raw input.
    They only normalize data.

    Example:
        class MyParser(FormatParser):
            @property
            def source_format(self) -> SourceFormat:
                return SourceFormat.SIMPLE

            def parse(self, raw: dict) -> ParsedConversation:
                ...
    """

    def __init__(
        self,
        settings: ImportSettings | None = None,
        normalizer: TimestampNormalizer | None = None,
    ) -> None:
        """Initialize parser.

        Args:
            settings: Import defaults (loaded from the environment if omitted)
            normalizer: Timestamp normalizer shared across a batch
        """
        self._settings = settings or ImportSettings()
        self._normalizer = normalizer or TimestampNormalizer()

    @property
    @abstractmethod
    def source_format(self) -> SourceFormat:
        """Return the format this parser handles."""
        ...

    @abstractmethod
    def parse(self, raw: dict[str, Any]) -> ParsedConversation:
        """Parse one raw conversation.

        This method must be pure - it should not persist data or
        mutate any state.

        Args:
            raw: Raw conversation object matched to this parser's format

        Returns:
            ParsedConversation ready for assembly

        Raises:
            ConversationParseError: If the conversation is structurally broken
        """
        ...

    def _title(self, raw: dict[str, Any]) -> str:
        """Resolve the title, falling back to the configured default."""
        for key in ("title", "name"):
            value = raw.get(key)
            if isinstance(value, str) and value.strip():
                return value
        return self._settings.default_title

    def _conversation_id(self, raw: dict[str, Any]) -> str | None:
        """Return the source-provided conversation ID, if any."""
        for key in ("conversation_id", "id", "uuid"):
            value = raw.get(key)
            if value:
                return str(value)
        return None

    def _conversation_key(self, raw: dict[str, Any]) -> str:
        """Key used to derive message IDs when the source has none."""
        return self._conversation_id(raw) or stable_hash(self.source_format, self._title(raw))

    def _message_id(self, raw_id: Any, conversation_key: str, position: int, role: str) -> str:
        """Return the source message ID or a deterministic substitute."""
        if raw_id:
            return str(raw_id)
        return generate_message_id(conversation_key, position, role)
