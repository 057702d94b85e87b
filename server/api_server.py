"""FastAPI application entry point for the note assistant core."""

import os
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from services.context.AssistantContext import AssistantContext
from shared.errors import (
    AssistantCoreError,
    DimensionMismatchError,
    IndexNotReady,
    IngestError,
    ProviderError,
    UnsupportedClientRole,
)
from shared.helper.HelperConfig import HelperConfig
from shared.logging.logging_setup import setup_logging
from server.routers.IndexRouter import router as index_router
from server.routers.RetrievalRouter import router as retrieval_router
from server.routers.ToolsRouter import router as tools_router
from server.routers.WebhookRouter import router as webhook_router

logging = setup_logging()
app_version = os.getenv("APP_VERSION", "unknown")

ERROR_STATUS: dict[type[AssistantCoreError], int] = {
    IndexNotReady: 503,
    ProviderError: 502,
    IngestError: 502,
    DimensionMismatchError: 409,
    UnsupportedClientRole: 500,
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # when the app starts
    app.state.logging = logging
    app.state.helper_config = HelperConfig(logger=logging)
    app.state.context = AssistantContext(helper_config=app.state.helper_config)

    logging.info("Booting assistant context...")
    await app.state.context.boot()
    await check_connections(app.state.context)
    logging.info("Note assistant API ready.", color="green")

    # while the app is running...
    yield

    # when the app shuts down, close all client connections
    logging.info("Shutting down, closing all clients...")
    await app.state.context.close()


app = FastAPI(
    title="note_assistant",
    description=(
        "Retrieval-and-action core of a note assistant. Notes are chunked, embedded and "
        "indexed for semantic retrieval via POST /retrieve; agents mutate notes through "
        "schema-validated tools via POST /tools/{tool_id}."
    ),
    version=app_version,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(retrieval_router)
app.include_router(index_router)
app.include_router(tools_router)
app.include_router(webhook_router)


@app.exception_handler(AssistantCoreError)
async def assistant_error_handler(request: Request, exc: AssistantCoreError) -> JSONResponse:
    status = next((code for error_type, code in ERROR_STATUS.items() if isinstance(exc, error_type)), 400)
    return JSONResponse(status_code=status, content={"error": type(exc).__name__, "detail": str(exc)})


async def check_connections(context: AssistantContext) -> None:
    """Check connectivity to the configured backends on startup.

    Note service failures are non-fatal (rebuilds and tools will fail later,
    but the server stays up). An unreachable embedding backend is fatal:
    nothing can be indexed or retrieved without it.

    Raises:
        ProviderError: If the embedding backend is not reachable.
    """
    try:
        await context.get_notes_client().do_healthcheck()
    except ProviderError as e:
        logging.warning("Note service is not reachable: %s. Rebuilds and tools may fail.", e)

    await context.get_embed_client().do_healthcheck()


if __name__ == "__main__":
    import uvicorn

    logging.info(
        "Starting note assistant API Server v%s from root dir: %s on port 8000...",
        app_version,
        os.environ.get("ROOT_DIR", "unknown"),
    )
    uvicorn.run(app, host="0.0.0.0", port=8000)
