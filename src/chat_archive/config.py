"""Configuration management for chat_archive.

This module provides typed configuration classes using pydantic-settings.
Configuration is loaded from environment variables with optional .env file support.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = [
    "ChatArchiveConfig",
    "ImportSettings",
    "LoggingSettings",
]


class ImportSettings(BaseSettings):
    """Defaults applied while normalizing raw exports."""

    model_config = SettingsConfigDict(
        env_prefix="CHAT_ARCHIVE_IMPORT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    default_title: str = "New Chat"
    default_chatgpt_model: str = "GPT"
    default_deepseek_model: str = "DeepSeek"
    claude_model_label: str = "Claude"
    tool_use_placeholder: str = "[Tool use only - no text response]"
    conversation_id_prefix: str = "conv_"
    html_fallback_enabled: bool = True


class LoggingSettings(BaseSettings):
    """Logging output settings."""

    model_config = SettingsConfigDict(
        env_prefix="CHAT_ARCHIVE_LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    level: str = "INFO"
    json_output: bool = False


class ChatArchiveConfig(BaseSettings):
    """Main configuration aggregating all settings.

    Example usage:
        config = ChatArchiveConfig()
        title = config.imports.default_title
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    imports: ImportSettings = ImportSettings()
    logging: LoggingSettings = LoggingSettings()
