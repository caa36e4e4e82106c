"""
FastAPI application for the DebateRAG REST API.

Run with:
    uvicorn debaterag.api.main:app --reload

Or use the CLI:
    debaterag serve
"""

import logging
from contextlib import asynccontextmanager

from fastapi import APIRouter, Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from debaterag import __version__
from debaterag.api.models import (
    ChatRequest,
    ChatResponse,
    DebateListResponse,
    DebateResponse,
    ErrorResponse,
    HealthResponse,
)
from debaterag.config import configure_logging, settings
from debaterag.errors import DebateRagError
from debaterag.graph.state import PipelineDependencies
from debaterag.graph.workflow import raise_for_failure, run_question
from debaterag.retrieval.resources import (
    get_debate_store,
    get_pipeline_dependencies,
    initialize_resources,
)
from debaterag.store import DebateCreate, DebateStore
from debaterag.store.schemas import utc_now
from debaterag.tracing import setup_tracing

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "An error occurred while processing your request."


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
        - Configure logging
        - Initialize tracing if enabled
        - Create the store schema, load the embedder, create the LLM client

    Shutdown:
        - Resources cleaned up on process exit
    """
    configure_logging()
    logger.info("Initializing DebateRAG resources...")

    if setup_tracing():
        logger.info(f"Phoenix tracing enabled ({settings.phoenix_endpoint})")

    try:
        resource_status = initialize_resources()
        logger.info(f"Resource initialization status: {resource_status}")
    except Exception as e:
        logger.error(f"Failed to initialize resources: {e}")
        raise RuntimeError(f"Startup failed: {e}") from e

    yield

    logger.info("Shutting down DebateRAG...")


def _error_response(status_code: int, message: str, error: str | None = None) -> JSONResponse:
    body = ErrorResponse(message=message, error=error)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(by_alias=True, exclude_none=True),
    )


async def app_error_handler(request: Request, exc: DebateRagError) -> JSONResponse:
    """Render application errors; 5xx bodies never carry internal details."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {type(exc).__name__}: {exc.message}")
        return _error_response(exc.status_code, GENERIC_ERROR_MESSAGE)
    return _error_response(exc.status_code, exc.message)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Answer malformed request bodies with 400 instead of FastAPI's 422."""
    details = "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg', '')}"
        for err in exc.errors()
    )
    return _error_response(status.HTTP_400_BAD_REQUEST, "Validation Error", details)


def create_app(with_lifespan: bool = True) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        with_lifespan: Eagerly initialize resources on startup (disabled in tests)

    Returns:
        Configured FastAPI app instance
    """
    app = FastAPI(
        title="DebateRAG",
        description="Debate transcript store with retrieval-augmented Q&A over a client's history",
        version=__version__,
        lifespan=lifespan if with_lifespan else None,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(DebateRagError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    app.include_router(router)

    return app


error_responses = {
    400: {"model": ErrorResponse, "description": "Invalid request"},
    500: {"model": ErrorResponse, "description": "Internal error"},
}

router = APIRouter(prefix="/api", responses=error_responses)


@router.get("/debates", response_model=DebateListResponse, tags=["Debates"])
def list_debates(store: DebateStore = Depends(get_debate_store)) -> DebateListResponse:
    """List debate summaries, newest first."""
    return DebateListResponse(data=store.list_summaries())


@router.get(
    "/debates/{debate_id}",
    response_model=DebateResponse,
    responses={404: {"model": ErrorResponse, "description": "Debate not found"}},
    tags=["Debates"],
)
def get_debate(debate_id: str, store: DebateStore = Depends(get_debate_store)) -> DebateResponse:
    """Fetch one full debate record; 400 on a malformed id, 404 when unknown."""
    return DebateResponse(data=store.get(debate_id))


@router.post(
    "/debates",
    response_model=DebateResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Debates"],
)
def create_debate(
    debate: DebateCreate,
    store: DebateStore = Depends(get_debate_store),
) -> DebateResponse:
    """Persist a new debate record."""
    record = store.create(debate)
    logger.info(f"Saved debate {record.id} for client {record.client_id}")
    return DebateResponse(data=record)


@router.post("/chat/rag", response_model=ChatResponse, tags=["Chat"])
async def chat_rag(
    request: ChatRequest,
    deps: PipelineDependencies = Depends(get_pipeline_dependencies),
) -> ChatResponse:
    """
    Answer a question about the client's debate history.

    The question flows through:
    1. Loader - fetches the client's debates (or all debates)
    2. Chunker - splits each flattened transcript
    3. Indexer - embeds the chunks into a fresh index
    4. Retriever - takes the top-k chunks for the question
    5. Generator - answers from those chunks only

    Raises:
        ValidationError: 400 when the question is missing or blank
        DebateRagError: 500 when any stage fails
    """
    result = raise_for_failure(await run_question(request.question, request.client_id, deps))
    return ChatResponse(reply=result.reply or "")


@router.get("/health", response_model=HealthResponse, tags=["System"])
async def health_check() -> HealthResponse:
    """Liveness check."""
    return HealthResponse(timestamp=utc_now())


app = create_app()
