"""Message models for chat_archive.

Messages are immutable once a parser has produced them. On the wire (and in
storage) field names are camelCase.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

__all__ = [
    "Artifact",
    "Message",
    "Role",
]

Role = Literal["user", "assistant"]


class Artifact(BaseModel):
    """Named auxiliary content produced alongside an assistant answer.

    Attributes:
        id: Artifact identifier (source-provided or derived)
        type: Language or format tag (e.g. "python", "text/markdown")
        title: Display title, usually a filename
        content: Artifact body, verbatim
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    type: str = ""
    title: str = "Artifact"
    content: str


class Message(BaseModel):
    """Single authored turn.

    Attributes:
        id: Source-provided or synthesized message ID
        role: "user" or "assistant"
        content: Markdown-bearing text
        timestamp: Epoch seconds
        model: Model label (assistant only)
        thinking: Hidden reasoning trace (assistant only)
        artifacts: Tool-generated artifacts (assistant only)
        has_attachments: Whether files were attached (user only)
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    id: str
    role: Role
    content: str = ""
    timestamp: float = Field(description="Epoch seconds")
    model: str | None = None
    thinking: str | None = None
    artifacts: list[Artifact] = Field(default_factory=list)
    has_attachments: bool = False

    @model_validator(mode="after")
    def _check_role_fields(self) -> "Message":
        if self.role == "user":
            if self.model is not None or self.thinking is not None or self.artifacts:
                raise ValueError("model, thinking and artifacts are assistant-only fields")
        elif self.has_attachments:
            raise ValueError("has_attachments is a user-only field")
        return self

    @property
    def is_user(self) -> bool:
        return self.role == "user"

    @property
    def is_assistant(self) -> bool:
        return self.role == "assistant"
