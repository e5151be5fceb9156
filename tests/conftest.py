"""Shared test fixtures for chat_archive.

This module provides pytest fixtures used across all tests.
"""

from collections.abc import Callable
from typing import Any

import pytest

from chat_archive.config import ImportSettings
from chat_archive.models.conversation import Conversation, Pair
from chat_archive.models.message import Message
from chat_archive.models.source import SourceFormat
from chat_archive.utils.timestamps import TimestampNormalizer
from mocks.memory_storage import InMemoryStorage

# Pinned "now" for every parser that falls back to the current time.
FIXED_NOW = 1_750_000_000.0


# Service fixtures
@pytest.fixture
def import_settings() -> ImportSettings:
    """Create import settings with the built-in defaults."""
    return ImportSettings()


@pytest.fixture
def normalizer() -> TimestampNormalizer:
    """Create a timestamp normalizer with a pinned clock."""
    return TimestampNormalizer(clock=lambda: FIXED_NOW)


@pytest.fixture
def memory_storage() -> InMemoryStorage:
    """Create an empty in-memory conversation store."""
    return InMemoryStorage()


# Raw export fixtures
@pytest.fixture
def chatgpt_raw() -> dict[str, Any]:
    """ChatGPT conversation with an edited first question.

    ``u1`` was edited into ``u1b``; ``current_node`` points into the
    ``u1b`` branch, so ``u1``/``a1`` must not appear in the result.
    """
    return {
        "id": "gpt-conv-1",
        "title": "Async Python",
        "create_time": 1704067200.0,
        "update_time": 1704067400.0,
        "current_node": "a2",
        "mapping": {
            "root": {"id": "root", "parent": None, "message": None},
            "sys": {
                "id": "sys",
                "parent": "root",
                "message": {
                    "id": "sys",
                    "author": {"role": "system"},
                    "content": {"content_type": "text", "parts": ["You are helpful."]},
                },
            },
            "u1": {
                "id": "u1",
                "parent": "sys",
                "message": {
                    "id": "u1",
                    "author": {"role": "user"},
                    "create_time": 1704067210.0,
                    "content": {"content_type": "text", "parts": ["What is asyncio?"]},
                },
            },
            "a1": {
                "id": "a1",
                "parent": "u1",
                "message": {
                    "id": "a1",
                    "author": {"role": "assistant"},
                    "create_time": 1704067220.0,
                    "content": {"content_type": "text", "parts": ["An old answer."]},
                },
            },
            "u1b": {
                "id": "u1b",
                "parent": "sys",
                "message": {
                    "id": "u1b",
                    "author": {"role": "user"},
                    "create_time": 1704067230.0,
                    "content": {"content_type": "text", "parts": ["Explain asyncio briefly."]},
                },
            },
            "a1b": {
                "id": "a1b",
                "parent": "u1b",
                "message": {
                    "id": "a1b",
                    "author": {"role": "assistant"},
                    "create_time": 1704067240.0,
                    "content": {"content_type": "text", "parts": ["asyncio runs coroutines."]},
                    "metadata": {"model_slug": "gpt-4o"},
                },
            },
            "u2": {
                "id": "u2",
                "parent": "a1b",
                "message": {
                    "id": "u2",
                    "author": {"role": "user"},
                    "create_time": 1704067300.0,
                    "content": {"content_type": "text", "parts": ["And gather?"]},
                },
            },
            "a2": {
                "id": "a2",
                "parent": "u2",
                "message": {
                    "id": "a2",
                    "author": {"role": "assistant"},
                    "create_time": 1704067310.0,
                    "content": {"content_type": "text", "parts": ["gather awaits many."]},
                    "metadata": {"model_slug": "gpt-4o"},
                },
            },
        },
    }


@pytest.fixture
def claude_raw() -> dict[str, Any]:
    """Claude conversation with thinking, an artifact and an attachment."""
    return {
        "uuid": "claude-conv-1",
        "name": "Write a script",
        "created_at": "2024-03-01T10:00:00Z",
        "updated_at": "2024-03-01T10:05:00Z",
        "chat_messages": [
            {
                "uuid": "m1",
                "sender": "human",
                "created_at": "2024-03-01T10:00:00Z",
                "content": [{"type": "text", "text": "Write hello.py"}],
                "attachments": [{"file_name": "notes.txt", "extracted_content": "print only"}],
            },
            {
                "uuid": "m2",
                "sender": "assistant",
                "created_at": "2024-03-01T10:01:00Z",
                "content": [
                    {"type": "thinking", "thinking": "Keep it short."},
                    {"type": "text", "text": "Here it is."},
                    {
                        "type": "tool_use",
                        "id": "tool-1",
                        "name": "create_file",
                        "input": {"path": "/tmp/hello.py", "file_text": "print('hello')\n"},
                    },
                ],
            },
        ],
    }


@pytest.fixture
def deepseek_raw() -> dict[str, Any]:
    """DeepSeek conversation whose mapping is out of chronological order."""
    return {
        "id": "ds-conv-1",
        "title": "Arithmetic",
        "inserted_at": "2025-01-27T10:00:00+00:00",
        "updated_at": "2025-01-27T10:05:00+00:00",
        "mapping": {
            "root": {"id": "root", "parent": None, "children": ["2", "1"], "message": None},
            "2": {
                "id": "2",
                "parent": "1",
                "message": {
                    "inserted_at": "2025-01-27T10:02:00+00:00",
                    "model": "deepseek-chat",
                    "fragments": [
                        {"type": "REQUEST", "content": "3+3?"},
                        {"type": "RESPONSE", "content": "6"},
                    ],
                },
            },
            "1": {
                "id": "1",
                "parent": "root",
                "message": {
                    "inserted_at": "2025-01-27T10:01:00+00:00",
                    "model": "deepseek-reasoner",
                    "fragments": [
                        {"type": "REQUEST", "content": "2+2?"},
                        {"type": "THINK", "content": "add digits"},
                        {"type": "RESPONSE", "content": "4"},
                    ],
                },
            },
        },
    }


@pytest.fixture
def simple_raw() -> dict[str, Any]:
    """Flat message list conversation."""
    return {
        "id": "simple-1",
        "title": "Greetings",
        "create_time": 1704067200,
        "messages": [
            {"id": "s1", "role": "user", "content": "Hello", "timestamp": 1704067200},
            {"id": "s2", "role": "assistant", "content": "Hi!", "timestamp": 1704067201},
        ],
    }


# Canonical model fixtures
def make_conversation(
    conversation_id: str = "c1",
    update_time: float = 1704067400.0,
    title: str = "Sample",
    pair_count: int = 2,
) -> Conversation:
    """Build a valid Conversation with ``pair_count`` answered pairs."""
    pairs = [
        Pair(
            id=f"{conversation_id}-q{i}",
            question=Message(
                id=f"{conversation_id}-q{i}",
                role="user",
                content=f"Question {i}",
                timestamp=1704067200.0 + i * 10,
            ),
            answers=[
                Message(
                    id=f"{conversation_id}-a{i}",
                    role="assistant",
                    content=f"Answer {i}",
                    timestamp=1704067200.0 + i * 10 + 5,
                    model="gpt-4o",
                )
            ],
            index=i,
        )
        for i in range(1, pair_count + 1)
    ]
    return Conversation(
        id=conversation_id,
        title=title,
        create_time=1704067200.0,
        update_time=update_time,
        pairs=pairs,
        source=SourceFormat.SIMPLE,
    )


@pytest.fixture
def conversation_factory() -> Callable[..., Conversation]:
    """Provide the Conversation builder to tests that need several records."""
    return make_conversation


@pytest.fixture
def sample_conversation() -> Conversation:
    """Create sample Conversation with two pairs."""
    return make_conversation()
