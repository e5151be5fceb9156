"""Flat message list parsers for chat_archive.

This module handles the simplest export shapes: a conversation object
with a ``messages`` list, or the same list nested under ``conversation``.
"""

from typing import Any

from typing_extensions import override

from chat_archive.importers.base import FormatParser
from chat_archive.logging import get_logger
from chat_archive.models.ingest import ParsedConversation
from chat_archive.models.message import Message
from chat_archive.models.source import SourceFormat

__all__ = [
    "SimpleParser",
    "WrappedSimpleParser",
]

logger = get_logger(__name__)


def _role_of(raw_msg: dict[str, Any]) -> str | None:
    role = raw_msg.get("role") or raw_msg.get("author")
    if isinstance(role, dict):
        role = role.get("role")
    if role in ("user", "human"):
        return "user"
    if role in ("assistant", "tool"):
        return "assistant"
    return None


def _content_of(raw_msg: dict[str, Any]) -> str:
    content = raw_msg.get("content") or raw_msg.get("text") or ""
    if isinstance(content, dict):
        content = content.get("parts") or content.get("text") or ""
    if isinstance(content, list):
        return "\n".join(str(part) for part in content if isinstance(part, (str, int, float)))
    return str(content)


class SimpleParser(FormatParser):
    """Parser for flat message list conversations.

    Expected format:
        {
            "id": "chat-1",
            "title": "Chat Title",
            "create_time": 1704067200,
            "messages": [
                {"id": "m1", "role": "user", "content": "Hello", "timestamp": 1704067200},
                {"id": "m2", "role": "assistant", "content": "Hi!", "model": "gpt-4"}
            ]
        }
    """

    @property
    @override
    def source_format(self) -> SourceFormat:
        return SourceFormat.SIMPLE

    @override
    def parse(self, raw: dict[str, Any]) -> ParsedConversation:
        return self._parse_messages(raw, raw["messages"])

    def _parse_messages(
        self,
        meta: dict[str, Any],
        raw_messages: list[Any],
    ) -> ParsedConversation:
        """Parse a message list using ``meta`` for conversation fields."""
        conversation_key = self._conversation_key(meta)
        messages: list[Message] = []

        for position, raw_msg in enumerate(raw_messages):
            if not isinstance(raw_msg, dict):
                continue

            role = _role_of(raw_msg)
            if role is None:
                logger.debug("simple_message_skipped", position=position)
                continue

            message_id = self._message_id(raw_msg.get("id"), conversation_key, position, role)
            timestamp = self._normalizer.first(raw_msg.get("create_time"), raw_msg.get("timestamp"))
            content = _content_of(raw_msg)

            if role == "user":
                messages.append(
                    Message(id=message_id, role="user", content=content, timestamp=timestamp)
                )
            else:
                metadata = raw_msg.get("metadata") or {}
                model = (
                    raw_msg.get("model")
                    or raw_msg.get("model_slug")
                    or metadata.get("model_slug")
                    or self._settings.default_chatgpt_model
                )
                messages.append(
                    Message(
                        id=message_id,
                        role="assistant",
                        content=content,
                        timestamp=timestamp,
                        model=model,
                    )
                )

        return ParsedConversation(
            source=self.source_format,
            conversation_id=self._conversation_id(meta),
            title=self._title(meta),
            create_time=self._normalizer.first(meta.get("create_time"), meta.get("timestamp")),
            update_time=self._normalizer.first(meta.get("update_time"), meta.get("timestamp")),
            messages=messages,
        )


class WrappedSimpleParser(SimpleParser):
    """Parser for a flat message list nested under ``conversation``.

    Conversation fields are read from the outer object first, then from
    the nested one.
    """

    @property
    @override
    def source_format(self) -> SourceFormat:
        return SourceFormat.WRAPPED_SIMPLE

    @override
    def parse(self, raw: dict[str, Any]) -> ParsedConversation:
        inner = raw["conversation"]
        meta = {**inner, **{key: value for key, value in raw.items() if key != "conversation"}}
        return self._parse_messages(meta, inner["messages"])
