"""Content extraction helpers for chat_archive.

Raw message bodies carry more than text: Claude content blocks hold tool
calls that produced files, hidden reasoning and attachments; DeepSeek
nodes hold typed fragments; ChatGPT nodes hold mixed content parts. The
functions here pull those apart so parsers only decide structure.
"""

import json
from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Any

from chat_archive.logging import get_logger
from chat_archive.models.message import Artifact

__all__ = [
    "ClaudeContent",
    "FragmentText",
    "extract_artifact",
    "extract_attachments",
    "extract_claude_content",
    "extract_mapping_text",
    "format_model_name",
    "split_fragments",
]

logger = get_logger(__name__)

_EXTENSION_LANGUAGES = {
    "py": "python",
    "js": "javascript",
    "ts": "typescript",
    "tsx": "tsx",
    "jsx": "jsx",
    "md": "markdown",
    "sh": "bash",
    "yml": "yaml",
    "yaml": "yaml",
    "json": "json",
    "html": "html",
    "css": "css",
    "sql": "sql",
    "rs": "rust",
    "go": "go",
}


@dataclass
class ClaudeContent:
    """Pieces extracted from one Claude message body."""

    text: str = ""
    thinking: str = ""
    artifacts: list[Artifact] = field(default_factory=list)
    has_tool_use: bool = False


@dataclass(frozen=True)
class FragmentText:
    """Concatenated DeepSeek fragment text per fragment type."""

    request: str = ""
    think: str = ""
    response: str = ""


def _filename_title(path: Any) -> str | None:
    if not isinstance(path, str) or not path.strip():
        return None
    return PurePosixPath(path.strip()).name or None


def _language_from_path(path: Any) -> str:
    title = _filename_title(path)
    if not title or "." not in title:
        return ""
    extension = title.rsplit(".", 1)[1].lower()
    return _EXTENSION_LANGUAGES.get(extension, extension)


def _first_text(*values: Any) -> str | None:
    for value in values:
        if isinstance(value, str) and value:
            return value
    return None


def _artifact_id(block: dict[str, Any], tool_input: dict[str, Any], position: int) -> str:
    raw_id = block.get("id") or tool_input.get("id")
    return str(raw_id) if raw_id else f"artifact_{position}"


def _from_json_block(
    block: dict[str, Any], tool_input: dict[str, Any], position: int
) -> Artifact | None:
    display = block.get("display_content")
    if not isinstance(display, dict) or display.get("type") != "json_block":
        return None

    payload = display.get("json_block")
    if isinstance(payload, str):
        try:
            payload = json.loads(payload)
        except ValueError:
            logger.debug("json_block_unparsable", block_id=block.get("id"))
            return None
    if not isinstance(payload, dict):
        return None

    content = _first_text(payload.get("code"), payload.get("content"))
    if content is None:
        return None

    filename = payload.get("filename") or payload.get("path")
    return Artifact(
        id=_artifact_id(block, tool_input, position),
        type=payload.get("language") or _language_from_path(filename),
        title=_filename_title(filename) or payload.get("title") or "Artifact",
        content=content,
    )


def _from_code_block(
    block: dict[str, Any], tool_input: dict[str, Any], position: int
) -> Artifact | None:
    display = block.get("display_content")
    if not isinstance(display, dict) or display.get("type") != "code_block":
        return None

    code = _first_text(display.get("code"))
    if code is None:
        return None

    filename = display.get("filename")
    return Artifact(
        id=_artifact_id(block, tool_input, position),
        type=display.get("language") or _language_from_path(filename),
        title=_filename_title(filename) or "Artifact",
        content=code,
    )


def _from_create_file(
    block: dict[str, Any], tool_input: dict[str, Any], position: int
) -> Artifact | None:
    if block.get("name") != "create_file":
        return None

    file_text = _first_text(tool_input.get("file_text"))
    if file_text is None:
        return None

    path = tool_input.get("path")
    return Artifact(
        id=_artifact_id(block, tool_input, position),
        type=_language_from_path(path),
        title=_filename_title(path) or "Untitled",
        content=file_text,
    )


def _from_legacy_artifacts(
    block: dict[str, Any], tool_input: dict[str, Any], position: int
) -> Artifact | None:
    if block.get("name") != "artifacts":
        return None

    content = _first_text(tool_input.get("content"))
    if content is None:
        return None

    raw_id = tool_input.get("id") or block.get("id")
    return Artifact(
        id=str(raw_id) if raw_id else f"artifact_{position}",
        type=str(tool_input.get("type") or ""),
        title=tool_input.get("title") or "Artifact",
        content=content,
    )


# Checked in order; the first representation that matches wins.
_ARTIFACT_EXTRACTORS = (
    _from_json_block,
    _from_code_block,
    _from_create_file,
    _from_legacy_artifacts,
)


def extract_artifact(block: dict[str, Any], position: int = 0) -> Artifact | None:
    """Extract at most one artifact from a Claude ``tool_use`` block.

    Candidates are checked in priority order: a ``json_block`` display with
    ``code``/``content``, a ``code_block`` display with ``code``, a
    ``create_file`` call with ``input.file_text``, and finally a legacy
    ``artifacts`` call with ``input.content``.

    Args:
        block: The tool_use content block
        position: Position of the block within its message, used when no
            ID is available

    Returns:
        The artifact, or None if no representation matched
    """
    tool_input = block.get("input")
    if not isinstance(tool_input, dict):
        tool_input = {}

    for extractor in _ARTIFACT_EXTRACTORS:
        artifact = extractor(block, tool_input, position)
        if artifact is not None:
            return artifact
    return None


def extract_claude_content(content: Any, fallback_text: Any = None) -> ClaudeContent:
    """Split a Claude message ``content`` into text, thinking and artifacts.

    Text blocks concatenate into the message text. ``tool_use`` blocks never
    contribute text but may yield artifacts. ``thinking`` blocks become the
    reasoning trace. Any other block type is ignored.

    Args:
        content: The raw ``content`` value (list of blocks or plain string)
        fallback_text: Message-level ``text`` used when content has no text

    Returns:
        ClaudeContent with the extracted pieces
    """
    result = ClaudeContent()

    if isinstance(content, str):
        result.text = content
    elif isinstance(content, list):
        texts: list[str] = []
        thoughts: list[str] = []
        for position, block in enumerate(content):
            if not isinstance(block, dict):
                continue
            block_type = block.get("type")
            if block_type == "text":
                texts.append(block.get("text") or "")
            elif block_type == "thinking":
                thought = block.get("thinking")
                if isinstance(thought, str) and thought.strip():
                    thoughts.append(thought)
            elif block_type == "tool_use":
                result.has_tool_use = True
                artifact = extract_artifact(block, position)
                if artifact is not None:
                    result.artifacts.append(artifact)
        result.text = "".join(texts)
        result.thinking = "\n\n".join(thoughts)

    if not result.text.strip() and isinstance(fallback_text, str):
        result.text = fallback_text

    return result


def extract_attachments(raw_msg: dict[str, Any]) -> tuple[str, bool]:
    """Render a Claude message's attachments as inline question text.

    Each attachment contributes a ``[Attachment: name]`` marker followed by
    its extracted text, if any. ``files`` entries that only name a file add
    a marker unless an attachment with the same name was already listed.

    Args:
        raw_msg: Raw Claude chat message

    Returns:
        Tuple of (inline text, whether any attachment was present)
    """
    parts: list[str] = []
    seen_names: set[str] = set()

    for attachment in raw_msg.get("attachments") or []:
        if not isinstance(attachment, dict):
            continue
        name = attachment.get("file_name") or "attachment"
        seen_names.add(name)
        parts.append(f"[Attachment: {name}]")
        extracted = attachment.get("extracted_content")
        if isinstance(extracted, str) and extracted.strip():
            parts.append(extracted.strip())

    for file_ref in raw_msg.get("files") or []:
        if not isinstance(file_ref, dict):
            continue
        name = file_ref.get("file_name") or "file"
        if name in seen_names:
            continue
        seen_names.add(name)
        parts.append(f"[Attachment: {name}]")

    return "\n\n".join(parts), bool(seen_names)


def split_fragments(fragments: Any) -> FragmentText:
    """Concatenate DeepSeek fragments by type, in source order.

    Args:
        fragments: The node's ``fragments`` list

    Returns:
        FragmentText with REQUEST, THINK and RESPONSE text
    """
    buckets: dict[str, list[str]] = {"REQUEST": [], "THINK": [], "RESPONSE": []}
    for fragment in fragments or []:
        if not isinstance(fragment, dict):
            continue
        bucket = buckets.get(fragment.get("type"))
        content = fragment.get("content")
        if bucket is not None and isinstance(content, str):
            bucket.append(content)

    return FragmentText(
        request="".join(buckets["REQUEST"]),
        think="".join(buckets["THINK"]),
        response="".join(buckets["RESPONSE"]),
    )


def extract_mapping_text(message: dict[str, Any]) -> str:
    """Join the text parts of a ChatGPT mapping message.

    Non-string parts (images, audio transcripts, asset pointers) and
    whitespace-only strings are ignored.
    """
    content = message.get("content")
    if not isinstance(content, dict):
        return ""
    parts = content.get("parts")
    if not isinstance(parts, list):
        return ""
    return "".join(part for part in parts if isinstance(part, str) and part.strip())


def format_model_name(model: str | None) -> str:
    """Turn a raw model identifier into a display label.

    Example:
        format_model_name("deepseek-reasoner")  # "DeepSeek Reasoner"
        format_model_name("gpt-4o")             # "gpt-4o"
    """
    if not model:
        return "AI"
    if model == "Claude":
        return model

    lowered = model.lower()
    if "deepseek" in lowered:
        return "DeepSeek Reasoner" if "reasoner" in lowered else "DeepSeek Chat"
    if "gpt" in lowered:
        return model
    if "claude" in lowered:
        return "Claude"
    if "gemini" in lowered:
        return "Gemini"
    return model[0].upper() + model[1:]
