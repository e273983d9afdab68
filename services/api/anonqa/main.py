"""FastAPI application entry point.

AnonQA Board API - anonymous questions, answers, votes and reports.
"""

from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from anonqa.routes import api_router
from anonqa.services.errors import BoardError
from anonqa.services.moderation import policy_from_words
from anonqa.settings import Settings, get_settings
from anonqa.stores.base import QuestionStore
from anonqa.stores.memory import InMemoryStore
from anonqa.stores.postgres import init_db, close_db, ping_db
from anonqa.stores.redis import init_redis, close_redis
from anonqa.stores.sql import SqlStore

logger = logging.getLogger("uvicorn.error")


def build_store(settings: Settings) -> QuestionStore:
    """Construct the store for the configured backend (database must be initialized first)."""
    policy = policy_from_words(settings.banned_words)
    if settings.store_backend == "memory":
        return InMemoryStore(policy=policy)
    return SqlStore(policy=policy)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Builds the store once per process unless one was injected via create_app().
    """
    settings: Settings = app.state.settings
    owns_store = getattr(app.state, "store", None) is None

    if owns_store:
        if settings.store_backend == "postgres":
            try:
                await init_db()
                await ping_db()
                logger.info("Postgres connected")
            except Exception:
                # Requests will surface TransientError until the database is reachable.
                logger.exception("Postgres init failed")
        app.state.store = build_store(settings)
        logger.info(f"Store backend: {settings.store_backend}")

    # Listing cache is optional
    try:
        await init_redis()
    except Exception:
        logger.exception("Redis init failed")

    yield

    # Shutdown
    await close_redis()
    if owns_store:
        await app.state.store.close()
        app.state.store = None
        if settings.store_backend == "postgres":
            await close_db()


def create_app(settings: Settings | None = None, store: QuestionStore | None = None) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        settings: Settings override (defaults to environment settings).
        store: Pre-built store; when given, the lifespan does not create one.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Anonymous question & answer board API",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )
    app.state.settings = settings
    app.state.store = store

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(BoardError)
    async def board_error_handler(request: Request, exc: BoardError) -> JSONResponse:
        """Store errors map to {message} with the error's status code."""
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """Malformed requests are validation errors too (400, not 422)."""
        errors = exc.errors()
        if errors:
            first = errors[0]
            where = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
            message = f"Invalid {where}: {first.get('msg')}" if where else str(first.get("msg"))
        else:
            message = "Invalid request"
        return JSONResponse(status_code=400, content={"message": message})

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Global exception handler returning structured error format."""
        logger.exception("Unhandled error")
        return JSONResponse(
            status_code=500,
            content={"message": str(exc) if settings.debug else "Internal server error"},
        )

    # Health check endpoint
    @app.get("/health", tags=["health"])
    async def health_check() -> dict[str, bool]:
        """Health check endpoint."""
        return {"ok": True}

    # Include API routes
    app.include_router(api_router)

    return app


# Application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "anonqa.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
