"""Generic note models, backend-independent."""

from enum import Enum, IntEnum

from pydantic import BaseModel


class NoteType(IntEnum):
    """Kind of note, as stored by the note service."""

    BLINKO = 0
    NOTE = 1
    TODO = 2

    @classmethod
    def parse(cls, value: "str | int | NoteType") -> "NoteType":
        """Accepts the enum, its lowercase name or its numeric code ("note", "1", 1)."""
        if isinstance(value, NoteType):
            return value
        raw = str(value).strip().lower()
        for member in cls:
            if raw in (member.name.lower(), str(member.value)):
                return member
        raise ValueError(f"Unknown note type '{value}'. Expected one of: blinko, note, todo.")


class Flag(str, Enum):
    """Three-valued update flag. UNSET leaves the stored value untouched."""

    UNSET = "unset"
    TRUE = "true"
    FALSE = "false"

    @classmethod
    def from_optional(cls, value: "bool | None | Flag") -> "Flag":
        if isinstance(value, Flag):
            return value
        if value is None:
            return cls.UNSET
        return cls.TRUE if value else cls.FALSE

    def as_bool(self) -> bool | None:
        if self is Flag.UNSET:
            return None
        return self is Flag.TRUE


class Note(BaseModel):
    """
    Represents a single note as returned by the note service.
    """
    id: int
    content: str = ""
    type: NoteType = NoteType.BLINKO
    is_archived: bool = False
    is_top: bool = False
    is_share: bool = False
    is_recycle: bool = False


class NoteUpsert(BaseModel):
    """
    Represents an update sent to the note service. Flags left UNSET are not sent.
    """
    id: int
    content: str
    type: NoteType = NoteType.BLINKO
    is_archived: Flag = Flag.UNSET
    is_top: Flag = Flag.UNSET
    is_share: Flag = Flag.UNSET
    is_recycle: Flag = Flag.UNSET
