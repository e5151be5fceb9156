"""Parser output boundary model for chat_archive.

ParsedConversation is the contract between format parsers and the
conversation assembler: raw timestamps and title as the source declared
them, plus either a flat chronological message list or pairs the parser
already grouped itself.
"""

from pydantic import BaseModel, ConfigDict, Field

from chat_archive.models.conversation import Pair
from chat_archive.models.message import Message
from chat_archive.models.source import SourceFormat

__all__ = [
    "ParsedConversation",
]


class ParsedConversation(BaseModel):
    """One conversation as a parser read it, before assembly.

    Attributes:
        source: Detected source format
        conversation_id: Source-provided ID, if any
        title: Title after defaulting
        create_time: Declared creation time (epoch seconds, "now" if absent)
        update_time: Declared update time (epoch seconds, "now" if absent)
        messages: Chronological messages for formats paired generically
        pairs: Pairs built by the parser itself (Claude, DeepSeek, app export)
        starred: Carried over from app exports
        folder_id: Carried over from app exports
    """

    model_config = ConfigDict(frozen=True)

    source: SourceFormat
    conversation_id: str | None = None
    title: str
    create_time: float = Field(description="Epoch seconds")
    update_time: float = Field(description="Epoch seconds")
    messages: list[Message] = Field(default_factory=list)
    pairs: list[Pair] | None = None
    starred: bool = False
    folder_id: str | None = None

    @property
    def is_paired(self) -> bool:
        """Check whether the parser already grouped messages into pairs."""
        return self.pairs is not None
