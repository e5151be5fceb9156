"""Document loading for chat_archive.

Turns one uploaded file into the list of raw conversation objects it
contains, without interpreting any of them.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from chat_archive.errors import MalformedDocumentError
from chat_archive.importers.html_export import extract_embedded_json, scrape_conversations
from chat_archive.logging import get_logger

__all__ = [
    "SourceFile",
    "load_raw_conversations",
    "unwrap_document",
]

logger = get_logger(__name__)

_HTML_SUFFIXES = (".html", ".htm")


@dataclass(frozen=True)
class SourceFile:
    """One uploaded file: its name and raw bytes or decoded text."""

    name: str
    content: str | bytes

    @classmethod
    def from_path(cls, path: Path | str) -> "SourceFile":
        """Read a file from disk."""
        path = Path(path)
        return cls(name=path.name, content=path.read_bytes())

    def text(self) -> str:
        """Return the content as text.

        Raises:
            MalformedDocumentError: If the bytes are not UTF-8
        """
        if isinstance(self.content, str):
            return self.content
        try:
            return self.content.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise MalformedDocumentError(self.name, f"not UTF-8 text ({e.reason})") from e

    def looks_like_html(self, text: str) -> bool:
        """Decide between the HTML and JSON paths."""
        if self.name.lower().endswith(_HTML_SUFFIXES):
            return True
        if self.name.lower().endswith(".json"):
            return False
        return text.lstrip().startswith("<")


def unwrap_document(data: Any, file_name: str = "<document>") -> list[Any]:
    """Return the raw conversation candidates held by a JSON document.

    Accepts a top-level array, a ``{"conversations": [...]}`` wrapper (which
    includes this application's own project export), or a single
    conversation object.

    Raises:
        MalformedDocumentError: If the document is neither array nor object
    """
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        conversations = data.get("conversations")
        if isinstance(conversations, list):
            return conversations
        return [data]
    raise MalformedDocumentError(file_name, "top-level JSON must be an array or an object")


def load_raw_conversations(source: SourceFile, html_fallback: bool = True) -> list[Any]:
    """Load the raw conversation candidates from one file.

    Args:
        source: Uploaded file
        html_fallback: Scrape rendered HTML when no embedded JSON is found

    Returns:
        Raw conversation objects, in file order

    Raises:
        MalformedDocumentError: If the file cannot be read as JSON or HTML
    """
    text = source.text()

    if source.looks_like_html(text):
        data = extract_embedded_json(text)
        if data is not None:
            return unwrap_document(data, source.name)
        if not html_fallback:
            raise MalformedDocumentError(source.name, "no embedded conversation data found")
        logger.info("html_fallback_scrape", file=source.name)
        return scrape_conversations(text)

    try:
        data = json.loads(text)
    except (ValueError, RecursionError) as e:
        raise MalformedDocumentError(source.name, f"invalid JSON: {e}") from e
    return unwrap_document(data, source.name)
