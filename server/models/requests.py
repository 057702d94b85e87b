from pydantic import BaseModel, Field


class IngestRequest(BaseModel):
    source_id: str = Field(min_length=1)
    text: str
    title: str | None = None


class NoteWebhookRequest(BaseModel):
    note_id: int
    content: str | None = None
    deleted: bool = False
