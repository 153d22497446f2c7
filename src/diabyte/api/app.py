"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from diabyte.api.dosing import router as dosing_router
from diabyte.api.foods import router as foods_router
from diabyte.api.plans import router as plans_router
from diabyte.api.profile import router as profile_router
from diabyte.app_logging import configure_logging
from diabyte.containers import AppContainer
from diabyte.domain.errors import DosingError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(foods_router)
    app.include_router(profile_router)
    app.include_router(dosing_router)
    app.include_router(plans_router)

    @app.exception_handler(DosingError)
    async def dosing_error_handler(request: Request, exc: DosingError) -> JSONResponse:
        logger.info(
            "Request rejected: %s %s -> %s",
            request.method,
            request.url.path,
            type(exc).__name__,
        )
        return JSONResponse(status_code=exc.http_status, content={"error": exc.to_dict()})

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
