"""HTML export handling for chat_archive.

ChatGPT's HTML export embeds the same JSON as ``conversations.json`` in a
``var jsonData = [...]`` script assignment. When that cannot be recovered,
a text scrape of the page yields degraded flat-message conversations.
"""

import json
import re
from dataclasses import dataclass, field
from html.parser import HTMLParser
from typing import Any

from chat_archive.logging import get_logger

__all__ = [
    "extract_embedded_json",
    "find_json_array_end",
    "scrape_conversations",
]

logger = get_logger(__name__)

_ASSIGNMENT = re.compile(r"var\s+jsonData\s*=\s*")

_VOID_TAGS = frozenset(
    {"area", "base", "br", "col", "embed", "hr", "img", "input", "link", "meta", "source", "wbr"}
)
_MESSAGE_CLASSES = frozenset({"text-base", "message", "conversation-turn"})
_MESSAGE_ATTRS = ("data-message-id", "data-message-author-role")
_CONTENT_CLASSES = frozenset({"markdown", "prose", "message-content"})
_ROLE_ATTRS = ("data-message-author-role", "data-author-role")


def find_json_array_end(text: str, start: int) -> int | None:
    """Find the index of the bracket closing the array opened at ``start``.

    Brackets inside double-quoted strings (including escaped quotes) are
    not counted.

    Args:
        text: Text containing the array
        start: Index of the opening ``[``

    Returns:
        Index of the matching ``]``, or None if the array never closes
    """
    depth = 0
    in_string = False
    escaped = False

    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue

        if char == '"':
            in_string = True
        elif char == "[":
            depth += 1
        elif char == "]":
            depth -= 1
            if depth == 0:
                return index
    return None


def extract_embedded_json(html: str) -> Any | None:
    """Recover the ``jsonData`` array embedded in an HTML export.

    Returns:
        The decoded JSON value, or None if absent or unparsable
    """
    match = _ASSIGNMENT.search(html)
    if match is None:
        return None

    start = html.find("[", match.end())
    if start == -1:
        return None

    end = find_json_array_end(html, start)
    if end is None:
        logger.warning("embedded_json_unterminated", offset=start)
        return None

    payload = html[start : end + 1]
    try:
        return json.loads(payload)
    except (ValueError, RecursionError) as e:
        logger.warning("embedded_json_invalid", error=str(e), length=len(payload))
        return None


@dataclass
class _Capture:
    role: str | None
    text: list[str] = field(default_factory=list)
    content: list[str] = field(default_factory=list)


@dataclass
class _Group:
    title: str | None = None
    messages: list[dict[str, str]] = field(default_factory=list)


@dataclass
class _Element:
    tag: str
    classes: frozenset[str]
    group: _Group | None = None
    capture: _Capture | None = None
    is_content: bool = False
    title_text: list[str] | None = None


def _clean(parts: list[str]) -> str:
    lines = (line.strip() for line in "".join(parts).splitlines())
    return re.sub(r"\n{3,}", "\n\n", "\n".join(lines)).strip()


class _TranscriptScraper(HTMLParser):
    """Collect message text from a rendered transcript page."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self._stack: list[_Element] = []
        self.document = _Group()
        self.groups: list[_Group] = []
        self.page_title: str | None = None

    def _current_group(self) -> _Group:
        for element in reversed(self._stack):
            if element.group is not None:
                return element.group
        return self.document

    def _current_capture(self) -> _Capture | None:
        for element in reversed(self._stack):
            if element.capture is not None:
                return element.capture
        return None

    def _in_content(self) -> bool:
        for element in reversed(self._stack):
            if element.is_content:
                return True
            if element.capture is not None:
                return False
        return False

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if tag in _VOID_TAGS:
            return

        attributes = {name: value or "" for name, value in attrs}
        classes = frozenset(attributes.get("class", "").split())
        element = _Element(tag=tag, classes=classes)
        capture = self._current_capture()
        declared_role = next(
            (attributes[name] for name in _ROLE_ATTRS if attributes.get(name)), None
        )

        if "conversation" in classes:
            element.group = _Group()
            self.groups.append(element.group)

        if capture is None:
            if classes & _MESSAGE_CLASSES or any(name in attributes for name in _MESSAGE_ATTRS):
                role = declared_role or ("user" if "user" in classes else None)
                element.capture = _Capture(role=role)
        else:
            if declared_role == "user" and capture.role is None:
                capture.role = "user"
            if classes & _CONTENT_CLASSES or "data-message-content" in attributes:
                element.is_content = True

        group = element.group or self._current_group()
        if group.title is None and (tag in ("h1", "title") or "conversation-title" in classes):
            element.title_text = []

        self._stack.append(element)

    def handle_endtag(self, tag: str) -> None:
        if not any(element.tag == tag for element in self._stack):
            return
        while self._stack:
            element = self._stack.pop()
            self._close(element)
            if element.tag == tag:
                break

    def handle_data(self, data: str) -> None:
        for element in self._stack:
            if element.title_text is not None:
                element.title_text.append(data)

        capture = self._current_capture()
        if capture is not None:
            capture.text.append(data)
            if self._in_content():
                capture.content.append(data)

    def close(self) -> None:
        super().close()
        while self._stack:
            self._close(self._stack.pop())

    def _close(self, element: _Element) -> None:
        if element.title_text is not None:
            title = _clean(element.title_text)
            if title:
                if element.tag == "title":
                    self.page_title = self.page_title or title
                else:
                    group = element.group or self._current_group()
                    group.title = group.title or title

        if element.capture is not None:
            capture = element.capture
            text = _clean(capture.content) or _clean(capture.text)
            if text:
                role = capture.role
                if role is None:
                    role = "user" if _clean(capture.text).startswith("You") else "assistant"
                group = self._current_group()
                group.messages.append({"role": role, "content": text})


def scrape_conversations(html: str) -> list[dict[str, Any]]:
    """Scrape flat-message conversations from rendered HTML.

    Elements with class ``conversation`` delimit separate conversations;
    without any, the whole page is one conversation.

    Args:
        html: HTML document text

    Returns:
        Simple-format conversation objects (``title`` plus ``messages``)
    """
    scraper = _TranscriptScraper()
    scraper.feed(html)
    scraper.close()

    groups = [group for group in scraper.groups if group.messages] or [scraper.document]
    conversations: list[dict[str, Any]] = []
    for number, group in enumerate(groups, start=1):
        if not group.messages:
            continue
        title = group.title or (scraper.page_title if len(groups) == 1 else None)
        conversations.append(
            {"title": title or f"Chat {number}", "messages": group.messages}
        )

    logger.debug("html_scraped", conversations=len(conversations))
    return conversations
