"""Format detection and per-format parsers for chat_archive.

This module exports the parser base class, the detector and dispatch.
"""

from chat_archive.importers.app_export import AppExportParser
from chat_archive.importers.base import FormatParser
from chat_archive.importers.chatgpt import ChatGPTMappingParser
from chat_archive.importers.claude import ClaudeParser
from chat_archive.importers.deepseek import DeepSeekParser
from chat_archive.importers.detection import describe_conversation, detect_format
from chat_archive.importers.dispatch import get_parser, parse_raw_conversation
from chat_archive.importers.documents import SourceFile, load_raw_conversations, unwrap_document
from chat_archive.importers.simple import SimpleParser, WrappedSimpleParser

__all__ = [
    "AppExportParser",
    "ChatGPTMappingParser",
    "ClaudeParser",
    "DeepSeekParser",
    "FormatParser",
    "SimpleParser",
    "SourceFile",
    "WrappedSimpleParser",
    "describe_conversation",
    "detect_format",
    "get_parser",
    "load_raw_conversations",
    "parse_raw_conversation",
    "unwrap_document",
]
