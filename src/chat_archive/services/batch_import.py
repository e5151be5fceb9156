"""Batch import for chat_archive.

This module runs a set of uploaded files through detection, parsing and
assembly. Every file and every conversation inside it yields an explicit
outcome, so one bad item never stops the rest of the batch.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from chat_archive.config import ImportSettings
from chat_archive.errors import MalformedDocumentError, UnrecognizedFormatError
from chat_archive.importers.detection import describe_conversation
from chat_archive.importers.dispatch import parse_raw_conversation
from chat_archive.importers.documents import SourceFile, load_raw_conversations, unwrap_document
from chat_archive.logging import file_context, get_logger
from chat_archive.models.conversation import Conversation
from chat_archive.services.conversation_assembler import ConversationAssembler
from chat_archive.utils.timestamps import TimestampNormalizer

__all__ = [
    "BatchImporter",
    "BatchReport",
    "FailureKind",
    "FileFailure",
    "ParseFailure",
    "ParseSuccess",
]

logger = get_logger(__name__)


class FailureKind(StrEnum):
    """Why a file or conversation was skipped."""

    MALFORMED_DOCUMENT = "malformed_document"
    """The file is not readable JSON or HTML"""

    NO_CONVERSATIONS = "no_conversations"
    """The file parsed but held nothing to import"""

    UNRECOGNIZED_FORMAT = "unrecognized_format"
    """A conversation matched no known export shape"""

    PARSE_ERROR = "parse_error"
    """A classified conversation could not be parsed"""


@dataclass(frozen=True)
class ParseSuccess:
    """A conversation that made it through parsing and assembly."""

    file_name: str
    item: int
    conversation: Conversation


@dataclass(frozen=True)
class ParseFailure:
    """A single conversation that was skipped.

    Attributes:
        file_name: File the conversation came from
        item: 1-based position of the conversation within its file
        kind: Failure category
        reason: Human-readable cause
        label: Title or ID of the raw conversation, if it had one
    """

    file_name: str
    item: int
    kind: FailureKind
    reason: str
    label: str | None = None

    @property
    def message(self) -> str:
        subject = f"item {self.item}" if self.label is None else f"item {self.item} ({self.label})"
        return f"{self.file_name}: {subject}: {self.reason}"


@dataclass(frozen=True)
class FileFailure:
    """A whole file that was rejected."""

    file_name: str
    kind: FailureKind
    reason: str

    @property
    def message(self) -> str:
        return f"{self.file_name}: {self.reason}"


Outcome = ParseSuccess | ParseFailure | FileFailure


@dataclass
class BatchReport:
    """Every outcome of one batch, in file and item order."""

    outcomes: list[Outcome] = field(default_factory=list)

    @property
    def conversations(self) -> list[Conversation]:
        return [o.conversation for o in self.outcomes if isinstance(o, ParseSuccess)]

    @property
    def failures(self) -> list[ParseFailure | FileFailure]:
        return [o for o in self.outcomes if not isinstance(o, ParseSuccess)]

    @property
    def warnings(self) -> list[str]:
        return [failure.message for failure in self.failures]

    def extend(self, other: "BatchReport") -> None:
        self.outcomes.extend(other.outcomes)


class BatchImporter:
    """Service for parsing a batch of uploaded export files.

    Parsing is pure: nothing is read from or written to storage here.

    Example:
        importer = BatchImporter()
        report = importer.parse_batch([SourceFile("conversations.json", data)])
        for warning in report.warnings:
            print(warning)
    """

    def __init__(
        self,
        settings: ImportSettings | None = None,
        normalizer: TimestampNormalizer | None = None,
        assembler: ConversationAssembler | None = None,
    ) -> None:
        """Initialize importer.

        Args:
            settings: Import defaults (loaded from the environment if omitted)
            normalizer: Timestamp normalizer shared by every parser
            assembler: Conversation assembler
        """
        self._settings = settings or ImportSettings()
        self._normalizer = normalizer or TimestampNormalizer()
        self._assembler = assembler or ConversationAssembler(self._settings)

    def parse_batch(self, files: Iterable[SourceFile]) -> BatchReport:
        """Parse every file in an upload.

        Args:
            files: Uploaded files

        Returns:
            BatchReport with one outcome per conversation or rejected file
        """
        report = BatchReport()
        file_count = 0
        for source in files:
            file_count += 1
            report.extend(self.parse_file(source))

        logger.info(
            "batch_parsed",
            files=file_count,
            conversations=len(report.conversations),
            warnings=len(report.failures),
        )
        return report

    def parse_file(self, source: SourceFile) -> BatchReport:
        """Parse one uploaded file."""
        with file_context(source.name):
            try:
                raw_conversations = load_raw_conversations(
                    source, html_fallback=self._settings.html_fallback_enabled
                )
            except MalformedDocumentError as e:
                logger.warning("file_rejected", reason=e.reason)
                return BatchReport(
                    [FileFailure(source.name, FailureKind.MALFORMED_DOCUMENT, e.reason)]
                )

            return self._parse_items(raw_conversations, source.name)

    def parse_document(self, data: Any, file_name: str = "<document>") -> BatchReport:
        """Parse an already-decoded JSON document.

        Args:
            data: Decoded JSON (array, wrapper object or single conversation)
            file_name: Name used in warnings

        Returns:
            BatchReport
        """
        with file_context(file_name):
            try:
                raw_conversations = unwrap_document(data, file_name)
            except MalformedDocumentError as e:
                logger.warning("file_rejected", reason=e.reason)
                return BatchReport(
                    [FileFailure(file_name, FailureKind.MALFORMED_DOCUMENT, e.reason)]
                )

            return self._parse_items(raw_conversations, file_name)

    def _parse_items(self, raw_conversations: list[Any], file_name: str) -> BatchReport:
        if not raw_conversations:
            logger.warning("file_empty")
            return BatchReport(
                [FileFailure(file_name, FailureKind.NO_CONVERSATIONS, "no conversations found")]
            )

        outcomes: list[Outcome] = [
            self._parse_item(raw, file_name, item)
            for item, raw in enumerate(raw_conversations, start=1)
        ]
        return BatchReport(outcomes)

    def _parse_item(self, raw: Any, file_name: str, item: int) -> ParseSuccess | ParseFailure:
        """Parse one raw conversation, converting any error into a failure."""
        label = describe_conversation(raw)
        try:
            parsed = parse_raw_conversation(raw, self._settings, self._normalizer)
            conversation = self._assembler.assemble(parsed)
        except UnrecognizedFormatError as e:
            kind, reason = FailureKind.UNRECOGNIZED_FORMAT, str(e)
        except Exception as e:
            kind, reason = FailureKind.PARSE_ERROR, str(e) or type(e).__name__
        else:
            return ParseSuccess(file_name, item, conversation)

        logger.warning(
            "conversation_skipped",
            item=item,
            label=label,
            kind=kind,
            reason=reason,
        )
        return ParseFailure(file_name, item, kind, reason, label)
