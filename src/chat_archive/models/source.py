"""Source format tags for chat_archive."""

from enum import StrEnum

__all__ = [
    "SourceFormat",
]

# Tags written by earlier versions of the viewer's own export.
_LEGACY_TAGS = {
    "chatgpt": "chatgpt_mapping",
}


class SourceFormat(StrEnum):
    """Closed set of raw conversation shapes the importer understands."""

    APP_EXPORT = "app_export"
    """Already-normalized records from this application's own export."""

    CLAUDE = "claude"
    """Claude export with a ``chat_messages`` array."""

    DEEPSEEK = "deepseek"
    """DeepSeek export: ``mapping`` of fragment-tagged nodes."""

    CHATGPT_MAPPING = "chatgpt_mapping"
    """ChatGPT export: parent-pointer ``mapping`` with ``current_node``."""

    SIMPLE = "simple"
    """Flat ``messages`` list."""

    WRAPPED_SIMPLE = "wrapped_simple"
    """Flat list nested under ``conversation.messages``."""

    @classmethod
    def from_tag(cls, tag: object) -> "SourceFormat | None":
        """Resolve a stored source tag, accepting legacy spellings."""
        if not isinstance(tag, str):
            return None
        value = _LEGACY_TAGS.get(tag, tag)
        try:
            return cls(value)
        except ValueError:
            return None
