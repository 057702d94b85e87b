"""Agent-facing input schemas of the note tools."""

from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, StrictInt, WithJsonSchema

from shared.clients.notes.models.Note import Flag, NoteType


def _coerce_flag(value: Any) -> Flag:
    if value is None or isinstance(value, (bool, Flag)):
        return Flag.from_optional(value)
    if isinstance(value, str) and value.strip().lower() in {flag.value for flag in Flag}:
        return Flag(value.strip().lower())
    raise ValueError("must be true, false or null")


def _coerce_note_type(value: Any) -> NoteType:
    if isinstance(value, bool):
        raise ValueError("must be one of: blinko, note, todo")
    return NoteType.parse(value)


# true / false set the flag, null or absent leaves it untouched
TriStateFlag = Annotated[
    Flag,
    BeforeValidator(_coerce_flag),
    WithJsonSchema({"type": ["boolean", "null"], "default": None}),
]

NoteTypeField = Annotated[
    NoteType,
    BeforeValidator(_coerce_note_type),
    WithJsonSchema({"type": "string", "enum": ["blinko", "note", "todo"], "default": "blinko"}),
]


class DeleteNotesInput(BaseModel):
    model_config = ConfigDict(extra="forbid")

    ids: list[StrictInt] = Field(min_length=1, description="IDs of the notes to move to the recycle bin.")


class NoteUpdateInput(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    id: StrictInt = Field(description="ID of the note to update.")
    content: str = Field(description="New content of the note.")
    type: NoteTypeField = NoteType.BLINKO
    is_archived: TriStateFlag = Field(default=Flag.UNSET, alias="isArchived")
    is_top: TriStateFlag = Field(default=Flag.UNSET, alias="isTop")
    is_share: TriStateFlag = Field(default=Flag.UNSET, alias="isShare")
    is_recycle: TriStateFlag = Field(default=Flag.UNSET, alias="isRecycle")


class BatchUpdateNotesInput(BaseModel):
    model_config = ConfigDict(extra="forbid")

    notes: list[NoteUpdateInput] = Field(description="Updates to apply; each one succeeds or fails on its own.")
