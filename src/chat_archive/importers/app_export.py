"""App export parser for chat_archive.

Records written by this application's own project export are already in
canonical shape; parsing them is validation plus a little tolerance for
fields older versions wrote.
"""

from typing import Any

from typing_extensions import override

from chat_archive.importers.base import FormatParser
from chat_archive.models.conversation import Pair
from chat_archive.models.ingest import ParsedConversation
from chat_archive.models.message import Message
from chat_archive.models.source import SourceFormat

__all__ = [
    "AppExportParser",
]

# Older exports stored these on the wrong side of a pair.
_ASSISTANT_ONLY = ("model", "thinking", "artifacts")
_USER_ONLY = ("hasAttachments", "has_attachments")


class AppExportParser(FormatParser):
    """Parser for canonical records (``pairs`` already present).

    The record's own ``source`` tag is kept so a re-imported export is
    identical to what was exported.
    """

    @property
    @override
    def source_format(self) -> SourceFormat:
        return SourceFormat.APP_EXPORT

    @override
    def parse(self, raw: dict[str, Any]) -> ParsedConversation:
        conversation_key = self._conversation_key(raw)
        pairs = [
            self._parse_pair(raw_pair, conversation_key, position)
            for position, raw_pair in enumerate(raw["pairs"], start=1)
        ]

        return ParsedConversation(
            source=SourceFormat.from_tag(raw.get("source")) or self.source_format,
            conversation_id=self._conversation_id(raw),
            title=self._title(raw),
            create_time=self._normalizer.first(raw.get("createTime"), raw.get("create_time")),
            update_time=self._normalizer.first(raw.get("updateTime"), raw.get("update_time")),
            pairs=pairs,
            starred=bool(raw.get("starred")),
            folder_id=raw.get("folderId") or raw.get("folder_id"),
        )

    def _parse_pair(self, raw_pair: dict[str, Any], conversation_key: str, position: int) -> Pair:
        question = self._parse_message(raw_pair["question"], "user", conversation_key, position)
        answers = [
            self._parse_message(raw_answer, "assistant", f"{conversation_key}/{offset}", position)
            for offset, raw_answer in enumerate(raw_pair.get("answers") or [])
            if isinstance(raw_answer, dict)
        ]
        return Pair(
            id=str(raw_pair.get("id") or question.id),
            question=question,
            answers=answers,
            index=position,
            starred=bool(raw_pair.get("starred")),
        )

    def _parse_message(
        self,
        raw_msg: dict[str, Any],
        role: str,
        conversation_key: str,
        position: int,
    ) -> Message:
        dropped = _ASSISTANT_ONLY if role == "user" else _USER_ONLY
        data = {
            key: value
            for key, value in raw_msg.items()
            if key not in dropped and value is not None
        }
        data["role"] = role
        data["id"] = self._message_id(raw_msg.get("id"), conversation_key, position, role)
        data["timestamp"] = self._normalizer.normalize(raw_msg.get("timestamp"))
        data["content"] = str(raw_msg.get("content") or "")
        return Message.model_validate(data)
