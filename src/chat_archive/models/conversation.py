"""Conversation models for chat_archive.

A Conversation is an ordered list of Pairs; a Pair is one user question and
the assistant answers that followed it. These are the records the storage
collaborator persists verbatim.
"""

from collections.abc import Iterator

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from chat_archive.models.message import Message
from chat_archive.models.source import SourceFormat

__all__ = [
    "Conversation",
    "Pair",
]

_WIRE_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    validate_assignment=True,
    extra="ignore",
)


class Pair(BaseModel):
    """One question and its answers; the unit users browse and star.

    Attributes:
        id: Taken from the question message
        question: The user message
        answers: Assistant messages in order (empty means no response)
        index: 1-based position within the conversation
        starred: User flag, mutable after creation
    """

    model_config = _WIRE_CONFIG

    id: str
    question: Message
    answers: list[Message] = Field(default_factory=list)
    index: int = Field(ge=1)
    starred: bool = False

    @model_validator(mode="after")
    def _check_roles(self) -> "Pair":
        if not self.question.is_user:
            raise ValueError("pair question must be a user message")
        if any(not answer.is_assistant for answer in self.answers):
            raise ValueError("pair answers must be assistant messages")
        return self

    @property
    def has_response(self) -> bool:
        """Check whether any assistant answered the question."""
        return len(self.answers) > 0

    def messages(self) -> Iterator[Message]:
        """Iterate over the question followed by its answers."""
        yield self.question
        yield from self.answers


class Conversation(BaseModel):
    """Canonical, orderable conversation record.

    Attributes:
        id: Stable ID (source-provided, or synthesized once and kept)
        title: Display title
        create_time: Epoch seconds, never later than the earliest message
        update_time: Epoch seconds, never earlier than the latest message
        pairs: Pairs ordered by index 1..N
        starred: User flag
        source: Format the conversation was imported from
        folder_id: Opaque folder reference owned by the folder subsystem
    """

    model_config = _WIRE_CONFIG

    id: str
    title: str
    create_time: float = Field(description="Epoch seconds")
    update_time: float = Field(description="Epoch seconds")
    pairs: list[Pair] = Field(default_factory=list)
    starred: bool = False
    source: SourceFormat
    folder_id: str | None = None

    @model_validator(mode="after")
    def _check_invariants(self) -> "Conversation":
        if self.create_time > self.update_time:
            raise ValueError("create_time must not be later than update_time")
        indices = [pair.index for pair in self.pairs]
        if indices != list(range(1, len(self.pairs) + 1)):
            raise ValueError("pair indices must run 1..N without gaps")
        return self

    @property
    def pair_count(self) -> int:
        return len(self.pairs)

    def messages(self) -> Iterator[Message]:
        """Iterate over every message in chronological pair order."""
        for pair in self.pairs:
            yield from pair.messages()

    def get_pair(self, pair_id: str) -> Pair | None:
        """Find a pair by ID."""
        return next((pair for pair in self.pairs if pair.id == pair_id), None)

    def to_record(self) -> dict:
        """Serialize to the camelCase JSON shape used by storage and exports."""
        return self.model_dump(mode="json", by_alias=True)
