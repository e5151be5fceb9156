"""Format detection for chat_archive.

Shapes are not mutually exclusive (an app export may carry leftover fields
from a round trip), so checks run most-specific first.
"""

from typing import Any

from chat_archive.errors import UnrecognizedFormatError
from chat_archive.models.source import SourceFormat

__all__ = [
    "describe_conversation",
    "detect_format",
]


def _is_app_export(raw: dict[str, Any]) -> bool:
    pairs = raw.get("pairs")
    if not isinstance(pairs, list):
        return False
    if not pairs:
        # An exported conversation whose pairs were all deleted.
        return "createTime" in raw and "source" in raw
    return all(
        isinstance(pair, dict)
        and isinstance(pair.get("question"), dict)
        and isinstance(pair.get("answers") or [], list)
        for pair in pairs
    )


def detect_format(raw: Any) -> SourceFormat:
    """Classify one raw conversation.

    Args:
        raw: Raw conversation object

    Returns:
        The matching SourceFormat

    Raises:
        UnrecognizedFormatError: If no known shape matches
    """
    if not isinstance(raw, dict):
        raise UnrecognizedFormatError(f"expected an object, got {type(raw).__name__}")

    if _is_app_export(raw):
        return SourceFormat.APP_EXPORT

    if isinstance(raw.get("chat_messages"), list):
        return SourceFormat.CLAUDE

    has_mapping = isinstance(raw.get("mapping"), dict)
    if has_mapping and (raw.get("inserted_at") is not None or raw.get("updated_at") is not None):
        return SourceFormat.DEEPSEEK
    if has_mapping and raw.get("current_node"):
        return SourceFormat.CHATGPT_MAPPING

    if isinstance(raw.get("messages"), list):
        return SourceFormat.SIMPLE

    conversation = raw.get("conversation")
    if isinstance(conversation, dict) and isinstance(conversation.get("messages"), list):
        return SourceFormat.WRAPPED_SIMPLE

    keys = ", ".join(sorted(str(key) for key in raw)[:8]) or "none"
    raise UnrecognizedFormatError(f"no known conversation shape (keys: {keys})")


def describe_conversation(raw: Any) -> str | None:
    """Best-effort label (title or ID) for warnings about a raw conversation."""
    if not isinstance(raw, dict):
        return None
    for key in ("title", "name", "conversation_id", "id", "uuid"):
        value = raw.get(key)
        if isinstance(value, (str, int)) and str(value).strip():
            return str(value)
    return None
