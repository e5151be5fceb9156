"""Unit tests for chat_archive configuration."""

import pytest

from chat_archive.config import ChatArchiveConfig, ImportSettings, LoggingSettings


class TestImportSettings:
    """Tests for ImportSettings."""

    def test_defaults(self) -> None:
        settings = ImportSettings()

        assert settings.default_title == "New Chat"
        assert settings.default_chatgpt_model == "GPT"
        assert settings.default_deepseek_model == "DeepSeek"
        assert settings.claude_model_label == "Claude"
        assert settings.conversation_id_prefix == "conv_"
        assert settings.html_fallback_enabled is True

    def test_environment_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CHAT_ARCHIVE_IMPORT_DEFAULT_TITLE", "Untitled")
        monkeypatch.setenv("CHAT_ARCHIVE_IMPORT_HTML_FALLBACK_ENABLED", "false")

        settings = ImportSettings()

        assert settings.default_title == "Untitled"
        assert settings.html_fallback_enabled is False


class TestLoggingSettings:
    """Tests for LoggingSettings."""

    def test_environment_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CHAT_ARCHIVE_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("CHAT_ARCHIVE_LOG_JSON_OUTPUT", "true")

        settings = LoggingSettings()

        assert settings.level == "DEBUG"
        assert settings.json_output is True


class TestChatArchiveConfig:
    """Tests for the aggregate config."""

    def test_aggregates_sections(self) -> None:
        config = ChatArchiveConfig(imports=ImportSettings(default_title="Chat"))

        assert config.imports.default_title == "Chat"
        assert config.logging.level == "INFO"
