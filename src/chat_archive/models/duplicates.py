"""Duplicate detection models for chat_archive.

These exist only for the span of one import: a report of which incoming
conversations collide with stored ones, and the resolution chosen for them.
"""

from pydantic import BaseModel, ConfigDict, Field

from chat_archive.models.conversation import Conversation

__all__ = [
    "DuplicateRecord",
    "DuplicateReport",
    "Resolution",
]


class DuplicateRecord(BaseModel):
    """An incoming conversation whose ID is already stored.

    Attributes:
        id: The shared conversation ID
        old: The stored version
        new: The freshly parsed version
    """

    model_config = ConfigDict(frozen=True)

    id: str
    old: Conversation
    new: Conversation


class DuplicateReport(BaseModel):
    """Partition of an import batch by ID membership in the store."""

    model_config = ConfigDict(frozen=True)

    duplicates: list[DuplicateRecord] = Field(default_factory=list)
    new: list[Conversation] = Field(default_factory=list)

    @property
    def duplicate_ids(self) -> list[str]:
        return [record.id for record in self.duplicates]


class Resolution(BaseModel):
    """What to write after a duplicate policy has been applied.

    Attributes:
        new: Conversations with no stored counterpart, always added
        to_keep: Stored conversations left untouched despite a collision
        to_overwrite: Incoming versions that replace their stored counterpart
    """

    model_config = ConfigDict(frozen=True)

    new: list[Conversation] = Field(default_factory=list)
    to_keep: list[Conversation] = Field(default_factory=list)
    to_overwrite: list[Conversation] = Field(default_factory=list)

    @property
    def to_import(self) -> list[Conversation]:
        """Every incoming conversation that will be written."""
        return [*self.new, *self.to_overwrite]
