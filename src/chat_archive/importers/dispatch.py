"""Parser dispatch for chat_archive.

Every SourceFormat has exactly one parser. The ``match`` below ends in
``assert_never`` so a type checker rejects a new format without a handler.
"""

from typing import Any, assert_never

from chat_archive.config import ImportSettings
from chat_archive.importers.app_export import AppExportParser
from chat_archive.importers.base import FormatParser
from chat_archive.importers.chatgpt import ChatGPTMappingParser
from chat_archive.importers.claude import ClaudeParser
from chat_archive.importers.deepseek import DeepSeekParser
from chat_archive.importers.detection import detect_format
from chat_archive.importers.simple import SimpleParser, WrappedSimpleParser
from chat_archive.models.ingest import ParsedConversation
from chat_archive.models.source import SourceFormat
from chat_archive.utils.timestamps import TimestampNormalizer

__all__ = [
    "get_parser",
    "parse_raw_conversation",
]


def get_parser(
    source_format: SourceFormat,
    settings: ImportSettings | None = None,
    normalizer: TimestampNormalizer | None = None,
) -> FormatParser:
    """Create the parser for a source format.

    Args:
        source_format: Detected format
        settings: Import defaults passed to the parser
        normalizer: Timestamp normalizer passed to the parser

    Returns:
        Parser instance
    """
    match source_format:
        case SourceFormat.APP_EXPORT:
            return AppExportParser(settings, normalizer)
        case SourceFormat.CLAUDE:
            return ClaudeParser(settings, normalizer)
        case SourceFormat.DEEPSEEK:
            return DeepSeekParser(settings, normalizer)
        case SourceFormat.CHATGPT_MAPPING:
            return ChatGPTMappingParser(settings, normalizer)
        case SourceFormat.SIMPLE:
            return SimpleParser(settings, normalizer)
        case SourceFormat.WRAPPED_SIMPLE:
            return WrappedSimpleParser(settings, normalizer)
        case _:
            assert_never(source_format)


def parse_raw_conversation(
    raw: Any,
    settings: ImportSettings | None = None,
    normalizer: TimestampNormalizer | None = None,
) -> ParsedConversation:
    """Detect the format of ``raw`` and parse it.

    Raises:
        UnrecognizedFormatError: If no known shape matches
        ConversationParseError: If the matched parser rejects the input
    """
    source_format = detect_format(raw)
    return get_parser(source_format, settings, normalizer).parse(raw)
