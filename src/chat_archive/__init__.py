"""chat_archive - Normalize AI chat exports into one browsable conversation store.

This package provides tools for:
- Detecting and parsing exports from ChatGPT, Claude, DeepSeek and simple JSON
- Reading HTML exports that embed or render the same data
- Grouping messages into question/answer pairs with stable IDs
- Resolving ID collisions against an existing store
- Exporting the store as a re-importable project file

Example usage:
    from chat_archive import ChatArchive, DuplicatePolicy, SourceFile

    archive = ChatArchive(storage)
    result = await archive.import_files(
        [SourceFile.from_path("conversations.json")],
        policy=DuplicatePolicy.OVERWRITE_ALL,
    )
    for warning in result.warnings:
        print(warning)
"""

__version__ = "0.1.0"

from chat_archive.config import ChatArchiveConfig, ImportSettings, LoggingSettings
from chat_archive.errors import (
    ChatArchiveError,
    ConversationParseError,
    CyclicGraphError,
    InvalidPolicyError,
    MalformedDocumentError,
    UnrecognizedFormatError,
)
from chat_archive.importers.detection import detect_format
from chat_archive.importers.documents import SourceFile
from chat_archive.interfaces.storage import StorageInterface
from chat_archive.models import (
    Artifact,
    Conversation,
    DuplicateRecord,
    DuplicateReport,
    Message,
    Pair,
    Resolution,
    SourceFormat,
)
from chat_archive.orchestrator import ChatArchive, ImportResult
from chat_archive.services.batch_import import BatchImporter, BatchReport
from chat_archive.services.duplicate_resolver import DuplicatePolicy, DuplicateResolver
from chat_archive.services.export import export_project

__all__ = [  # noqa: RUF022
    # Orchestrator
    "ChatArchive",
    "ImportResult",
    # Import pipeline
    "BatchImporter",
    "BatchReport",
    "SourceFile",
    "detect_format",
    "DuplicatePolicy",
    "DuplicateResolver",
    "export_project",
    # Interfaces
    "StorageInterface",
    # Models
    "Artifact",
    "Conversation",
    "DuplicateRecord",
    "DuplicateReport",
    "Message",
    "Pair",
    "Resolution",
    "SourceFormat",
    # Config
    "ChatArchiveConfig",
    "ImportSettings",
    "LoggingSettings",
    # Errors
    "ChatArchiveError",
    "ConversationParseError",
    "CyclicGraphError",
    "InvalidPolicyError",
    "MalformedDocumentError",
    "UnrecognizedFormatError",
]
