"""FastAPI application for the Knowledge Assistant API."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .... import __version__
from ....composition import Container, build_container
from ....config import Settings, get_settings, setup_logging
from ....core.domain.exceptions import KnowledgeAssistantError
from ...common.exception_handler import client_error_body, get_http_status_code, log_exception
from .routers import documents, health, query

logger = logging.getLogger(__name__)


def create_app(container: Container | None = None, settings: Settings | None = None) -> FastAPI:
    """Create the API application.

    Args:
        container: Prebuilt container (tests). When omitted, one is built from
            settings at startup and closed at shutdown.
        settings: Settings to build from; defaults to the environment.
    """
    settings = container.settings if container else (settings or get_settings())
    debug = settings.debug

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        owned = app.state.container is None
        if owned:
            app.state.container = build_container(settings)
        logger.info("Knowledge Assistant API starting up...")
        logger.info("API docs available at /docs")
        logger.info("Debug mode: %s", "ENABLED" if debug else "DISABLED")
        try:
            yield
        finally:
            logger.info("Knowledge Assistant API shutting down...")
            if owned:
                await app.state.container.aclose()
                app.state.container = None

    app = FastAPI(
        title="Knowledge Assistant API",
        description=(
            "Enterprise knowledge assistant. Answers questions from an indexed "
            "knowledge base using retrieval-augmented generation."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(query.router)
    app.include_router(documents.router)

    @app.exception_handler(KnowledgeAssistantError)
    async def knowledge_assistant_error_handler(
        request: Request, exc: KnowledgeAssistantError
    ) -> JSONResponse:
        """Structured JSON for every application error.

        Operators get the full record in the logs; clients get the error block.
        """
        status_code = get_http_status_code(exc)
        level = logging.WARNING if status_code < 500 else logging.ERROR
        log_exception(
            exc,
            level=level,
            extra_context={"path": str(request.url.path), "method": request.method},
        )
        return JSONResponse(status_code=status_code, content=client_error_body(exc, debug))

    @app.exception_handler(RequestValidationError)
    async def request_validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Report malformed bodies as 400 in the same shape as other errors."""
        errors = exc.errors()
        first = errors[0] if errors else {}
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = first.get("msg", "Invalid request")
        if location:
            message = f"{location}: {message}"
        logger.warning("Request validation failed on %s: %s", request.url.path, message)
        return JSONResponse(
            status_code=400,
            content={"error": {"type": "ValidationError", "code": "KA_VAL_001", "message": message}},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Unhandled exceptions: log everything, tell the client little."""
        log_exception(exc, extra_context={"path": str(request.url.path), "method": request.method})
        if debug:
            content = client_error_body(exc, debug=True)
        else:
            content = {
                "error": {
                    "type": "InternalServerError",
                    "code": "PYTHON_ERR",
                    "message": "An error occurred while processing your request. Please try again.",
                }
            }
        return JSONResponse(status_code=get_http_status_code(exc), content=content)

    return app


def _create_default_app() -> FastAPI:
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_file, settings.log_json)
    return create_app(settings=settings)


# Export for uvicorn: knowledge_assistant.adapters.inbound.api.main:app
app = _create_default_app()

__all__ = ["app", "create_app"]
