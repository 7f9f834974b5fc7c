"""
multiagent_store.api.app

FastAPI app factory for the Multi-Agent Store Assistant.

Responsibilities:
- Build the FastAPI application and register routers/middleware.
- Initialize and dispose shared infrastructure (DB engine, chat-model HTTP client).
- Translate request validation and unexpected errors into the service's error policy.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.status import HTTP_400_BAD_REQUEST, HTTP_500_INTERNAL_SERVER_ERROR

from multiagent_store import __version__
from multiagent_store.agents.chat import ChatModelClient
from multiagent_store.api.routers.health import router as health_router
from multiagent_store.api.routers.multiagent import BAD_REQUEST_DETAIL, PREFIX
from multiagent_store.api.routers.multiagent import router as multiagent_router
from multiagent_store.api.routers.products import router as products_router
from multiagent_store.db.init_db import init_db, seed_catalog
from multiagent_store.db.session import create_engine, create_sessionmaker
from multiagent_store.observability.logging import configure_logging, get_logger
from multiagent_store.observability.middleware import RequestContextMiddleware
from multiagent_store.settings import Settings

log = get_logger(__name__)


def create_app(*, settings: Settings) -> FastAPI:
    configure_logging(service_name=settings.service_name, level=settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env, agent_backend=settings.agent_backend)
        engine = create_engine(settings)
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        if settings.env in ("dev", "test"):
            # Prod databases are provisioned out of band.
            await init_db(engine)
            if settings.seed_catalog:
                await seed_catalog(app.state.sessionmaker)

        http = None
        app.state.chat_client = None
        if settings.agent_backend == "llm":
            http = ChatModelClient.http_client_for(settings)
            app.state.chat_client = ChatModelClient(settings=settings, http=http)

        try:
            yield
        finally:
            if http is not None:
                await http.aclose()
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="Multi-Agent Store Assistant",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(RequestContextMiddleware)
    app.include_router(health_router, tags=["health"])
    app.include_router(products_router)
    app.include_router(multiagent_router)

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        # Assist routes answer any malformed body with their fixed 400 message.
        if request.url.path.startswith(PREFIX):
            log.info("assist_bad_request", errors=len(exc.errors()))
            return JSONResponse(
                status_code=HTTP_400_BAD_REQUEST, content={"detail": BAD_REQUEST_DETAIL}
            )
        return await request_validation_exception_handler(request, exc)

    @app.exception_handler(Exception)
    async def _unhandled_error(request: Request, exc: Exception) -> JSONResponse:
        log.error("unhandled_error", exc_info=exc)
        return JSONResponse(
            status_code=HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "An unexpected error occurred."},
        )

    return app


# --- Module Notes -----------------------------------------------------------
# App composition stays here; business logic stays in routers/services/orchestration.
