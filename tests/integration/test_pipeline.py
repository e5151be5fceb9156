"""Integration tests for chat_archive import pipeline."""

import json
from pathlib import Path

import pytest

from chat_archive.config import ChatArchiveConfig
from chat_archive.importers.documents import SourceFile
from chat_archive.models.source import SourceFormat
from chat_archive.orchestrator import ChatArchive
from chat_archive.services.batch_import import BatchImporter
from chat_archive.services.duplicate_resolver import DuplicatePolicy
from chat_archive.utils.timestamps import TimestampNormalizer
from mocks.memory_storage import InMemoryStorage

# Path to fixtures
FIXTURES_DIR = Path(__file__).parent.parent / "fixtures"

NOW = 1_800_000_000.0


def _importer() -> BatchImporter:
    return BatchImporter(normalizer=TimestampNormalizer(clock=lambda: NOW))


class TestChatGPTImportPipeline:
    """Integration tests for ChatGPT exports."""

    def test_parse_fixture_file(self) -> None:
        """Test parsing actual ChatGPT export fixture."""
        report = _importer().parse_batch(
            [SourceFile.from_path(FIXTURES_DIR / "chatgpt_export.json")]
        )

        assert report.warnings == []
        assert len(report.conversations) == 2

        first = report.conversations[0]
        assert first.id == "6f1c2a4e-0001"
        assert first.title == "Python Async Programming Help"
        assert first.source is SourceFormat.CHATGPT_MAPPING
        assert first.pair_count == 2

        # The edited-away question on the sibling branch is ignored
        assert "async/await" in first.pairs[0].question.content
        assert [a.id for a in first.pairs[0].answers] == ["n3", "n4"]
        assert "gather" in first.pairs[1].question.content
        assert first.pairs[1].answers[0].model == "gpt-4o"

        # Last answer is later than the declared update_time
        assert first.update_time == 1704067600.0

        second = report.conversations[1]
        assert second.title == "Quick Math Question"
        assert second.pairs[0].answers[0].content == "15% of 80 is 12."

    def test_html_with_embedded_json(self) -> None:
        """Test the HTML export's embedded jsonData is used as-is."""
        report = _importer().parse_batch(
            [SourceFile.from_path(FIXTURES_DIR / "chatgpt_export.html")]
        )

        assert report.warnings == []
        conversation = report.conversations[0]
        assert conversation.id == "html-0001"
        assert conversation.title == 'Brackets ] and "quotes" ['
        assert conversation.pairs[0].question.content == "Is [this] parsed?"
        assert conversation.pairs[0].answers[0].content == "Yes ] it is."


class TestClaudeImportPipeline:
    """Integration tests for Claude exports."""

    def test_parse_fixture_file(self) -> None:
        """Test parsing actual Claude export fixture."""
        report = _importer().parse_batch(
            [SourceFile.from_path(FIXTURES_DIR / "claude_export.json")]
        )

        assert report.warnings == []
        conversation = report.conversations[0]
        assert conversation.source is SourceFormat.CLAUDE
        assert conversation.title == "Bash backup script"
        assert conversation.pair_count == 2

        first, second = conversation.pairs
        assert first.question.has_attachments
        assert first.question.content.endswith("[Attachment: crontab.png]")
        answer = first.answers[0]
        assert answer.thinking == "rsync is the simplest option."
        assert answer.artifacts[0].id == "backup-script"
        assert answer.artifacts[0].title == "backup.sh"
        assert answer.artifacts[0].content.startswith("#!/bin/sh")

        # Attachment-only question and tool-only answer both survive
        assert second.question.content == "[Attachment: error.log]\n\nrsync: permission denied"
        assert second.answers[0].content == "[Tool use only - no text response]"
        assert conversation.update_time == second.answers[0].timestamp


class TestDeepSeekImportPipeline:
    """Integration tests for DeepSeek exports."""

    def test_parse_fixture_file(self) -> None:
        report = _importer().parse_batch(
            [SourceFile.from_path(FIXTURES_DIR / "deepseek_export.json")]
        )

        assert report.warnings == []
        conversation = report.conversations[0]
        assert conversation.source is SourceFormat.DEEPSEEK
        assert [p.question.content for p in conversation.pairs] == ["2+2?", "And 10 * 10?"]
        assert conversation.pairs[0].answers[0].thinking == "add digits"
        assert conversation.create_time == 1737943200.0


class TestRenderedTranscript:
    """Integration tests for the HTML scrape fallback."""

    def test_scraped_conversation(self) -> None:
        report = _importer().parse_batch(
            [SourceFile.from_path(FIXTURES_DIR / "rendered_transcript.html")]
        )

        assert report.warnings == []
        conversation = report.conversations[0]
        assert conversation.source is SourceFormat.SIMPLE
        assert conversation.title == "Packing list"
        assert conversation.id.startswith("conv_")
        assert conversation.pairs[0].question.content == "What should I pack for a weekend hike?"
        assert "rain jacket" in conversation.pairs[0].answers[0].content
        assert conversation.create_time == NOW


class TestArchiveWorkflow:
    """End-to-end import, re-import and export through the orchestrator."""

    @pytest.mark.asyncio
    async def test_full_workflow(self) -> None:
        storage = InMemoryStorage()
        archive = ChatArchive(storage, ChatArchiveConfig(), clock=lambda: NOW)
        files = [
            SourceFile.from_path(FIXTURES_DIR / name)
            for name in ("chatgpt_export.json", "claude_export.json", "deepseek_export.json")
        ]

        first = await archive.import_files(files)
        assert first.conversations_new == 4
        assert first.warnings == []

        # Re-importing the same files only produces duplicates
        again = await archive.import_files(files, DuplicatePolicy.KEEP_OLD)
        assert again.conversations_new == 0
        assert again.conversations_kept == 4
        assert storage.save_calls == 1

        await archive.toggle_pair_star("ds-0001", "1")
        await archive.delete_pair("6f1c2a4e-0001", "n2")

        exported = await archive.export_project()
        assert exported["metadata"] == {"totalConversations": 4, "totalPairs": 6}

        # The project export re-imports as an identical set
        reimport = ChatArchive(InMemoryStorage(), ChatArchiveConfig(), clock=lambda: NOW)
        report = reimport.parse_batch([SourceFile("project.json", json.dumps(exported))])
        assert report.warnings == []
        assert report.conversations == await archive.list_conversations()
