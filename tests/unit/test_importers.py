"""Unit tests for chat_archive importers."""

from typing import Any

import pytest

from chat_archive.config import ImportSettings
from chat_archive.errors import ConversationParseError, CyclicGraphError, UnrecognizedFormatError
from chat_archive.importers.app_export import AppExportParser
from chat_archive.importers.chatgpt import ChatGPTMappingParser
from chat_archive.importers.claude import ClaudeParser
from chat_archive.importers.deepseek import DeepSeekParser
from chat_archive.importers.detection import describe_conversation, detect_format
from chat_archive.importers.dispatch import get_parser, parse_raw_conversation
from chat_archive.importers.simple import SimpleParser, WrappedSimpleParser
from chat_archive.models.conversation import Conversation
from chat_archive.models.source import SourceFormat
from chat_archive.utils.timestamps import TimestampNormalizer


class TestDetectFormat:
    """Tests for format detection."""

    def test_each_shape(
        self,
        chatgpt_raw: dict[str, Any],
        claude_raw: dict[str, Any],
        deepseek_raw: dict[str, Any],
        simple_raw: dict[str, Any],
    ) -> None:
        assert detect_format(chatgpt_raw) is SourceFormat.CHATGPT_MAPPING
        assert detect_format(claude_raw) is SourceFormat.CLAUDE
        assert detect_format(deepseek_raw) is SourceFormat.DEEPSEEK
        assert detect_format(simple_raw) is SourceFormat.SIMPLE
        assert detect_format({"conversation": {"messages": []}}) is SourceFormat.WRAPPED_SIMPLE

    def test_app_export_checked_first(self, sample_conversation: Conversation) -> None:
        record = sample_conversation.to_record()
        record["mapping"] = {}
        record["current_node"] = "leftover"
        record["messages"] = []

        assert detect_format(record) is SourceFormat.APP_EXPORT

    def test_deepseek_needs_conversation_level_time(self, deepseek_raw: dict[str, Any]) -> None:
        del deepseek_raw["inserted_at"]
        del deepseek_raw["updated_at"]
        deepseek_raw["current_node"] = "2"

        assert detect_format(deepseek_raw) is SourceFormat.CHATGPT_MAPPING

    def test_empty_pairs_is_not_app_export(self) -> None:
        with pytest.raises(UnrecognizedFormatError):
            detect_format({"pairs": []})

    def test_exported_conversation_without_pairs(self) -> None:
        record = {"id": "c", "pairs": [], "createTime": 1.0, "source": "claude"}
        assert detect_format(record) is SourceFormat.APP_EXPORT

    def test_exported_pair_with_null_answers(self, sample_conversation: Conversation) -> None:
        record = sample_conversation.to_record()
        record["pairs"][1]["answers"] = None

        assert detect_format(record) is SourceFormat.APP_EXPORT
        parsed = parse_raw_conversation(record)
        assert parsed.pairs is not None
        assert parsed.pairs[1].answers == []

    def test_unrecognized(self) -> None:
        with pytest.raises(UnrecognizedFormatError, match="keys: foo"):
            detect_format({"foo": 1})

    def test_not_an_object(self) -> None:
        with pytest.raises(UnrecognizedFormatError):
            detect_format(["a", "list"])

    def test_describe_conversation(self) -> None:
        assert describe_conversation({"name": "Chat", "id": "x"}) == "Chat"
        assert describe_conversation({"uuid": "u-1"}) == "u-1"
        assert describe_conversation({}) is None
        assert describe_conversation("text") is None


class TestDispatch:
    """Tests for parser dispatch."""

    def test_every_format_has_a_parser(self) -> None:
        for source_format in SourceFormat:
            assert get_parser(source_format).source_format is source_format

    def test_parse_raw_conversation(self, simple_raw: dict[str, Any]) -> None:
        parsed = parse_raw_conversation(simple_raw)
        assert parsed.source is SourceFormat.SIMPLE


class TestChatGPTMappingParser:
    """Tests for ChatGPT mapping parser."""

    def test_reads_only_active_branch(
        self, chatgpt_raw: dict[str, Any], normalizer: TimestampNormalizer
    ) -> None:
        parsed = ChatGPTMappingParser(normalizer=normalizer).parse(chatgpt_raw)

        assert [m.id for m in parsed.messages] == ["u1b", "a1b", "u2", "a2"]
        assert parsed.messages[0].content == "Explain asyncio briefly."
        assert parsed.messages[1].model == "gpt-4o"
        assert parsed.conversation_id == "gpt-conv-1"
        assert parsed.create_time == 1704067200.0
        assert not parsed.is_paired

    def test_user_system_message_survives_walk_but_not_pairing(
        self, chatgpt_raw: dict[str, Any]
    ) -> None:
        chatgpt_raw["mapping"]["sys"]["message"]["metadata"] = {"is_user_system_message": True}

        parsed = ChatGPTMappingParser().parse(chatgpt_raw)

        assert [m.id for m in parsed.messages] == ["u1b", "a1b", "u2", "a2"]

    def test_default_model(self, chatgpt_raw: dict[str, Any]) -> None:
        del chatgpt_raw["mapping"]["a2"]["message"]["metadata"]
        settings = ImportSettings(default_chatgpt_model="ChatGPT")

        parsed = ChatGPTMappingParser(settings=settings).parse(chatgpt_raw)

        assert parsed.messages[-1].model == "ChatGPT"

    def test_missing_current_node(self, chatgpt_raw: dict[str, Any]) -> None:
        chatgpt_raw["current_node"] = "does-not-exist"
        with pytest.raises(ConversationParseError):
            ChatGPTMappingParser().parse(chatgpt_raw)

    def test_cycle(self, chatgpt_raw: dict[str, Any]) -> None:
        chatgpt_raw["mapping"]["root"]["parent"] = "a2"
        with pytest.raises(CyclicGraphError):
            ChatGPTMappingParser().parse(chatgpt_raw)

    def test_missing_times_default_to_now(
        self, chatgpt_raw: dict[str, Any], normalizer: TimestampNormalizer
    ) -> None:
        del chatgpt_raw["create_time"]
        del chatgpt_raw["update_time"]

        parsed = ChatGPTMappingParser(normalizer=normalizer).parse(chatgpt_raw)

        assert parsed.create_time == normalizer.now()
        assert parsed.update_time == normalizer.now()


class TestClaudeParser:
    """Tests for Claude parser."""

    def test_parse(self, claude_raw: dict[str, Any]) -> None:
        parsed = ClaudeParser().parse(claude_raw)

        assert parsed.conversation_id == "claude-conv-1"
        assert parsed.title == "Write a script"
        assert parsed.create_time == 1709287200.0
        assert parsed.pairs is not None
        assert len(parsed.pairs) == 1

        pair = parsed.pairs[0]
        assert pair.id == "m1"
        assert pair.index == 1
        assert pair.question.content == (
            "Write hello.py\n\n[Attachment: notes.txt]\n\nprint only"
        )
        assert pair.question.has_attachments

        answer = pair.answers[0]
        assert answer.id == "m2_response"
        assert answer.content == "Here it is."
        assert answer.thinking == "Keep it short."
        assert answer.model == "Claude"
        assert len(answer.artifacts) == 1
        assert answer.artifacts[0].title == "hello.py"
        assert answer.artifacts[0].type == "python"
        assert answer.artifacts[0].content == "print('hello')\n"

    def test_tool_use_only_answer_gets_placeholder(self, claude_raw: dict[str, Any]) -> None:
        claude_raw["chat_messages"][1]["content"] = [
            {"type": "tool_use", "name": "web_search", "input": {"query": "hello"}}
        ]

        parsed = ClaudeParser().parse(claude_raw)

        assert parsed.pairs is not None
        assert parsed.pairs[0].answers[0].content == "[Tool use only - no text response]"

    def test_empty_messages_are_dropped(self, claude_raw: dict[str, Any]) -> None:
        claude_raw["chat_messages"].insert(
            1, {"uuid": "blank", "sender": "human", "content": [{"type": "text", "text": " "}]}
        )

        parsed = ClaudeParser().parse(claude_raw)

        assert parsed.pairs is not None
        assert len(parsed.pairs) == 1
        assert len(parsed.pairs[0].answers) == 1

    def test_orphan_answer_dropped(self, claude_raw: dict[str, Any]) -> None:
        claude_raw["chat_messages"].insert(
            0, {"uuid": "early", "sender": "assistant", "text": "Welcome"}
        )

        parsed = ClaudeParser().parse(claude_raw)

        assert parsed.pairs is not None
        assert [answer.id for answer in parsed.pairs[0].answers] == ["m2_response"]

    def test_title_default(self, claude_raw: dict[str, Any]) -> None:
        claude_raw["name"] = ""
        assert ClaudeParser().parse(claude_raw).title == "New Chat"


class TestDeepSeekParser:
    """Tests for DeepSeek parser."""

    def test_fragments_become_pairs_in_insertion_order(
        self, deepseek_raw: dict[str, Any]
    ) -> None:
        parsed = DeepSeekParser().parse(deepseek_raw)

        assert parsed.pairs is not None
        assert [pair.question.content for pair in parsed.pairs] == ["2+2?", "3+3?"]
        assert [pair.index for pair in parsed.pairs] == [1, 2]

        first = parsed.pairs[0]
        assert first.id == "1"
        assert first.answers[0].id == "1_response"
        assert first.answers[0].content == "4"
        assert first.answers[0].thinking == "add digits"
        assert first.answers[0].model == "DeepSeek Reasoner"
        assert parsed.pairs[1].answers[0].model == "DeepSeek Chat"
        assert parsed.pairs[1].answers[0].thinking is None

    def test_single_node_example(self) -> None:
        raw = {
            "id": "d",
            "inserted_at": "2025-01-27T10:00:00Z",
            "mapping": {
                "n": {
                    "id": "n",
                    "message": {
                        "fragments": [
                            {"type": "REQUEST", "content": "2+2?"},
                            {"type": "THINK", "content": "add digits"},
                            {"type": "RESPONSE", "content": "4"},
                        ]
                    },
                }
            },
        }

        parsed = DeepSeekParser().parse(raw)

        assert parsed.pairs is not None
        assert len(parsed.pairs) == 1
        assert parsed.pairs[0].question.content == "2+2?"
        assert parsed.pairs[0].answers[0].content == "4"
        assert parsed.pairs[0].answers[0].thinking == "add digits"


class TestSimpleParsers:
    """Tests for flat message list parsers."""

    def test_simple(self, simple_raw: dict[str, Any]) -> None:
        parsed = SimpleParser().parse(simple_raw)

        assert [m.role for m in parsed.messages] == ["user", "assistant"]
        assert parsed.messages[1].model == "GPT"
        assert parsed.messages[0].timestamp == 1704067200.0

    def test_roles_and_content_variants(self) -> None:
        raw = {
            "messages": [
                {"author": {"role": "human"}, "content": {"parts": ["a", "b"]}},
                {"role": "tool", "text": "result", "model_slug": "gpt-4"},
                {"role": "system", "content": "ignored"},
                "not a message",
            ]
        }

        parsed = SimpleParser().parse(raw)

        assert [(m.role, m.content) for m in parsed.messages] == [
            ("user", "a\nb"),
            ("assistant", "result"),
        ]
        assert parsed.messages[1].model == "gpt-4"

    def test_missing_ids_are_deterministic(self) -> None:
        raw = {"title": "T", "messages": [{"role": "user", "content": "Hi"}]}

        first = SimpleParser().parse(raw).messages[0].id
        second = SimpleParser().parse(raw).messages[0].id

        assert first == second
        assert first.startswith("msg_")

    def test_wrapped(self) -> None:
        raw = {
            "id": "outer",
            "conversation": {
                "id": "inner",
                "title": "Inner title",
                "messages": [{"role": "user", "content": "Hi"}],
            },
        }

        parsed = WrappedSimpleParser().parse(raw)

        assert parsed.source is SourceFormat.WRAPPED_SIMPLE
        assert parsed.conversation_id == "outer"
        assert parsed.title == "Inner title"
        assert len(parsed.messages) == 1


class TestAppExportParser:
    """Tests for app export parser."""

    def test_keeps_record_fields(self, sample_conversation: Conversation) -> None:
        record = sample_conversation.model_copy(
            update={"starred": True, "folder_id": "f1", "source": SourceFormat.CLAUDE}
        ).to_record()
        record["pairs"][1]["starred"] = True

        parsed = AppExportParser().parse(record)

        assert parsed.source is SourceFormat.CLAUDE
        assert parsed.starred
        assert parsed.folder_id == "f1"
        assert parsed.pairs is not None
        assert parsed.pairs[1].starred
        assert parsed.pairs[0] == sample_conversation.pairs[0]
        assert parsed.pairs[1] == sample_conversation.pairs[1].model_copy(update={"starred": True})

    def test_tolerates_fields_on_wrong_side(self, sample_conversation: Conversation) -> None:
        record = sample_conversation.to_record()
        record["pairs"][0]["question"]["model"] = "GPT"
        record["pairs"][0]["answers"][0]["hasAttachments"] = True
        record["source"] = "chatgpt"

        parsed = AppExportParser().parse(record)

        assert parsed.source is SourceFormat.CHATGPT_MAPPING
        assert parsed.pairs is not None
        assert parsed.pairs[0].question.model is None
        assert not parsed.pairs[0].answers[0].has_attachments
