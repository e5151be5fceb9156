"""Claude parser for chat_archive.

This module provides a parser for Claude's conversation export.
"""

from typing import Any

from typing_extensions import override

from chat_archive.importers.base import FormatParser
from chat_archive.logging import get_logger
from chat_archive.models.ingest import ParsedConversation
from chat_archive.models.message import Message
from chat_archive.models.source import SourceFormat
from chat_archive.services.extraction import (
    extract_attachments,
    extract_claude_content,
    format_model_name,
)
from chat_archive.services.pair_assembler import PairAccumulator

__all__ = [
    "ClaudeParser",
]

logger = get_logger(__name__)


def _normalize_role(sender: Any) -> str | None:
    """Normalize sender/role to standard roles."""
    if not isinstance(sender, str):
        return None
    sender_lower = sender.lower()
    if sender_lower in ("human", "user"):
        return "user"
    if sender_lower == "assistant":
        return "assistant"
    return None


class ClaudeParser(FormatParser):
    """Parser for Claude export format.

    Messages arrive in order in ``chat_messages``. Content is either a
    string or a list of typed blocks; tool calls may carry generated files
    (artifacts) and user messages may carry attachments.

    Expected format:
        {
            "uuid": "conversation-id",
            "name": "Chat Title",
            "created_at": "2024-01-01T00:00:00Z",
            "updated_at": "2024-01-01T00:05:00Z",
            "chat_messages": [
                {
                    "uuid": "message-id",
                    "sender": "human",
                    "content": [{"type": "text", "text": "Hello"}],
                    "attachments": [{"file_name": "a.txt", "extracted_content": "..."}],
                    "created_at": "2024-01-01T00:00:00Z"
                }
            ]
        }
    """

    @property
    @override
    def source_format(self) -> SourceFormat:
        return SourceFormat.CLAUDE

    @override
    def parse(self, raw: dict[str, Any]) -> ParsedConversation:
        conversation_key = self._conversation_key(raw)
        model_label = self._settings.claude_model_label
        if raw.get("model"):
            model_label = format_model_name(raw["model"])
        accumulator = PairAccumulator()

        for position, raw_msg in enumerate(raw["chat_messages"]):
            if not isinstance(raw_msg, dict):
                continue

            role = _normalize_role(raw_msg.get("sender") or raw_msg.get("role"))
            body = extract_claude_content(raw_msg.get("content"), raw_msg.get("text"))
            attachment_text, has_attachments = extract_attachments(raw_msg)

            if not body.text.strip() and not body.has_tool_use and not has_attachments:
                logger.debug("claude_message_empty", position=position)
                continue

            timestamp = self._normalizer.normalize(raw_msg.get("created_at"))
            uuid = raw_msg.get("uuid")

            if role == "user":
                content = "\n\n".join(part for part in (body.text, attachment_text) if part)
                accumulator.open(
                    Message(
                        id=self._message_id(uuid, conversation_key, position, "user"),
                        role="user",
                        content=content,
                        timestamp=timestamp,
                        has_attachments=has_attachments,
                    )
                )
            elif role == "assistant":
                content = body.text
                if not content.strip() and body.has_tool_use:
                    content = self._settings.tool_use_placeholder
                accumulator.answer(
                    Message(
                        id=f"{uuid}_response"
                        if uuid
                        else self._message_id(None, conversation_key, position, "assistant"),
                        role="assistant",
                        content=content,
                        timestamp=timestamp,
                        model=model_label,
                        thinking=body.thinking or None,
                        artifacts=body.artifacts,
                    )
                )
            else:
                logger.debug("claude_message_unknown_role", position=position, role=role)

        return ParsedConversation(
            source=self.source_format,
            conversation_id=self._conversation_id(raw),
            title=self._title(raw),
            create_time=self._normalizer.first(raw.get("created_at"), raw.get("inserted_at")),
            update_time=self._normalizer.first(raw.get("updated_at")),
            pairs=accumulator.pairs,
        )
