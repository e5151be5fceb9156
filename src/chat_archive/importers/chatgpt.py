"""ChatGPT mapping parser for chat_archive.

This module provides a parser for ChatGPT's conversations.json export.
"""

from typing import Any

from typing_extensions import override

from chat_archive.importers.base import FormatParser
from chat_archive.logging import get_logger
from chat_archive.models.ingest import ParsedConversation
from chat_archive.models.message import Message
from chat_archive.models.source import SourceFormat
from chat_archive.services.extraction import extract_mapping_text
from chat_archive.services.graph_traversal import MappingNode, walk_active_branch

__all__ = [
    "ChatGPTMappingParser",
]

logger = get_logger(__name__)


def _is_visible(node: MappingNode) -> bool:
    """Keep nodes with text, excluding system prompts the user did not write."""
    message = node.message
    if message is None or not extract_mapping_text(message).strip():
        return False
    author = message.get("author") or {}
    if author.get("role") == "system":
        metadata = message.get("metadata") or {}
        return bool(metadata.get("is_user_system_message"))
    return True


class ChatGPTMappingParser(FormatParser):
    """Parser for ChatGPT export format (conversations.json).

    Each conversation stores its messages as a tree in ``mapping``; edits
    and regenerations create sibling branches. Only the branch ending at
    ``current_node`` is read.

    Export format example:
        {
            "id": "conversation-id",
            "title": "Chat Title",
            "create_time": 1704067200.5,
            "update_time": 1704067300.0,
            "current_node": "n2",
            "mapping": {
                "n1": {"parent": null, "message": {
                    "author": {"role": "user"},
                    "content": {"parts": ["Hello"]}}},
                "n2": {"parent": "n1", "message": {
                    "author": {"role": "assistant"},
                    "content": {"parts": ["Hi!"]},
                    "metadata": {"model_slug": "gpt-4o"}}}
            }
        }
    """

    @property
    @override
    def source_format(self) -> SourceFormat:
        return SourceFormat.CHATGPT_MAPPING

    @override
    def parse(self, raw: dict[str, Any]) -> ParsedConversation:
        nodes = walk_active_branch(raw.get("mapping"), str(raw.get("current_node")), _is_visible)

        messages: list[Message] = []
        for node in nodes:
            message = self._parse_node(node)
            if message is not None:
                messages.append(message)

        return ParsedConversation(
            source=self.source_format,
            conversation_id=self._conversation_id(raw),
            title=self._title(raw),
            create_time=self._normalizer.first(raw.get("create_time"), raw.get("timestamp")),
            update_time=self._normalizer.first(raw.get("update_time"), raw.get("timestamp")),
            messages=messages,
        )

    def _parse_node(self, node: MappingNode) -> Message | None:
        """Convert a visible node into a Message."""
        raw_msg = node.message or {}
        role = (raw_msg.get("author") or {}).get("role")
        message_id = str(raw_msg.get("id") or node.id)
        timestamp = self._normalizer.normalize(raw_msg.get("create_time"))
        content = extract_mapping_text(raw_msg)

        if role == "user":
            return Message(id=message_id, role="user", content=content, timestamp=timestamp)

        if role in ("assistant", "tool"):
            metadata = raw_msg.get("metadata") or {}
            model = (
                metadata.get("model_slug")
                or metadata.get("default_model_slug")
                or self._settings.default_chatgpt_model
            )
            return Message(
                id=message_id,
                role="assistant",
                content=content,
                timestamp=timestamp,
                model=model,
            )

        # User-authored system messages survive the walk but belong to no pair.
        logger.debug("mapping_message_excluded", message_id=message_id, role=role)
        return None
