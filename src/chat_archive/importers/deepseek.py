"""DeepSeek parser for chat_archive.

This module provides a parser for DeepSeek's conversation export.
"""

from typing import Any

from typing_extensions import override

from chat_archive.importers.base import FormatParser
from chat_archive.models.ingest import ParsedConversation
from chat_archive.models.message import Message
from chat_archive.models.source import SourceFormat
from chat_archive.services.extraction import format_model_name, split_fragments
from chat_archive.services.graph_traversal import collect_fragment_nodes
from chat_archive.services.pair_assembler import PairAccumulator

__all__ = [
    "DeepSeekParser",
]


class DeepSeekParser(FormatParser):
    """Parser for DeepSeek export format.

    DeepSeek also uses a ``mapping`` object, but each node carries typed
    ``fragments`` (REQUEST, THINK, RESPONSE) and the conversation has
    ISO-8601 ``inserted_at``/``updated_at`` fields. A single node may hold
    both the question and its answer.

    Export format example:
        {
            "id": "conv-id",
            "title": "Math",
            "inserted_at": "2025-01-27T10:00:00+08:00",
            "updated_at": "2025-01-27T10:05:00+08:00",
            "mapping": {
                "1": {"id": "1", "message": {
                    "inserted_at": "2025-01-27T10:00:00+08:00",
                    "model": "deepseek-reasoner",
                    "fragments": [
                        {"type": "REQUEST", "content": "2+2?"},
                        {"type": "THINK", "content": "add digits"},
                        {"type": "RESPONSE", "content": "4"}
                    ]}}
            }
        }
    """

    @property
    @override
    def source_format(self) -> SourceFormat:
        return SourceFormat.DEEPSEEK

    @override
    def parse(self, raw: dict[str, Any]) -> ParsedConversation:
        accumulator = PairAccumulator()

        for node in collect_fragment_nodes(raw.get("mapping"), self._normalizer):
            raw_msg = node.message or {}
            texts = split_fragments(raw_msg.get("fragments"))
            timestamp = self._normalizer.normalize(raw_msg.get("inserted_at"))

            if texts.request:
                accumulator.open(
                    Message(id=node.id, role="user", content=texts.request, timestamp=timestamp)
                )

            if texts.response or texts.think:
                model = raw_msg.get("model") or self._settings.default_deepseek_model
                accumulator.answer(
                    Message(
                        id=f"{node.id}_response",
                        role="assistant",
                        content=texts.response,
                        timestamp=timestamp,
                        model=format_model_name(model),
                        thinking=texts.think or None,
                    )
                )

        return ParsedConversation(
            source=self.source_format,
            conversation_id=self._conversation_id(raw),
            title=self._title(raw),
            create_time=self._normalizer.first(raw.get("inserted_at"), raw.get("created_at")),
            update_time=self._normalizer.first(raw.get("updated_at")),
            pairs=accumulator.pairs,
        )
