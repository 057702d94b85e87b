from fastapi import APIRouter, Depends, Request

from server.dependencies.auth import verify_api_key
from server.models.requests import IngestRequest
from server.models.responses import IngestResponse
from shared.models.document import Document
from shared.models.search import SearchRequest, SearchResponse

router = APIRouter(tags=["retrieval"])


@router.post("/retrieve")
async def retrieve(
    request: Request,
    body: SearchRequest,
    _: None = Depends(verify_api_key),
) -> SearchResponse:
    """Return the note chunks most similar to a query.

    Args:
        request (Request): FastAPI request (provides app.state.context).
        body (SearchRequest): JSON body with the query and limit.
        _ (None): Auth dependency result (unused).

    Returns:
        SearchResponse: Matching chunks with their source note and offsets.
    """
    retrieval_service = request.app.state.context.get_retrieval_service()
    return await retrieval_service.retrieve(body.query, k=body.limit)


@router.post("/ingest")
async def ingest(
    request: Request,
    body: IngestRequest,
    _: None = Depends(verify_api_key),
) -> IngestResponse:
    """Index one document, replacing its previous chunks."""
    retrieval_service = request.app.state.context.get_retrieval_service()
    chunks = await retrieval_service.ingest(Document(source_id=body.source_id, text=body.text, title=body.title))
    return IngestResponse(source_id=body.source_id, chunks=chunks)
