from fastapi import APIRouter, BackgroundTasks, Depends, Request

from server.dependencies.auth import verify_api_key
from server.models.responses import IndexStatsResponse
from services.index.IndexManager import IndexManager
from shared.errors import AssistantCoreError

router = APIRouter(prefix="/index", tags=["index"])


async def run_rebuild(index_manager: IndexManager, logging) -> None:
    try:
        await index_manager.rebuild()
    except AssistantCoreError as e:
        logging.error("Background index rebuild failed: %s", e)


@router.get("")
async def index_stats(
    request: Request,
    _: None = Depends(verify_api_key),
) -> IndexStatsResponse:
    """Report state, dimension and size of the vector index."""
    index_manager = request.app.state.context.get_index_manager()
    return IndexStatsResponse(**await index_manager.stats())


@router.post("/rebuild")
async def rebuild_index(
    request: Request,
    background_tasks: BackgroundTasks,
    _: None = Depends(verify_api_key),
) -> dict:
    """Trigger a full rebuild of the vector index from the note corpus.

    Returns:
        dict: Acknowledgement payload; the rebuild runs in the background.
    """
    index_manager = request.app.state.context.get_index_manager()
    background_tasks.add_task(run_rebuild, index_manager, request.app.state.logging)
    return {"status": "accepted"}
