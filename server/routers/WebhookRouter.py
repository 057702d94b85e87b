from fastapi import APIRouter, BackgroundTasks, Depends, Request

from server.dependencies.auth import verify_api_key
from server.models.requests import NoteWebhookRequest
from services.retrieval.RetrievalService import RetrievalService
from shared.errors import AssistantCoreError
from shared.models.document import Document

router = APIRouter(prefix="/webhook", tags=["webhook"])


async def sync_note(retrieval_service: RetrievalService, body: NoteWebhookRequest, logging) -> None:
    """Re-ingest a changed note, or drop a deleted or emptied one from the index."""
    source_id = str(body.note_id)
    try:
        if body.deleted or not (body.content or "").strip():
            await retrieval_service.remove(source_id)
        else:
            await retrieval_service.ingest(Document(source_id=source_id, text=body.content))
    except AssistantCoreError as e:
        logging.error("Webhook sync of note %s failed: %s", source_id, e)


@router.post("/note")
async def webhook_note(
    request: Request,
    body: NoteWebhookRequest,
    background_tasks: BackgroundTasks,
    _: None = Depends(verify_api_key),
) -> dict:
    """Accept a note change webhook and update the index in the background.

    Args:
        request (Request): FastAPI request (provides app.state.context).
        body (NoteWebhookRequest): JSON body with the note id, its content and a deleted flag.
        background_tasks (BackgroundTasks): FastAPI background task queue.
        _ (None): Auth dependency result (unused).

    Returns:
        dict: Acknowledgement payload with status and note_id.
    """
    retrieval_service = request.app.state.context.get_retrieval_service()
    background_tasks.add_task(sync_note, retrieval_service, body, request.app.state.logging)
    return {"status": "accepted", "note_id": body.note_id}
