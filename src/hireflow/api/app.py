"""
FastAPI application factory.

The container of collaborators is built in the lifespan handler and closed
on shutdown. Every error leaves the API as ``{"error": <message>}``.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from hireflow import __version__
from hireflow.api.cors import DEFAULT_ALLOWED_ORIGINS, HireFlowCORSMiddleware
from hireflow.api.routes import router
from hireflow.config import Settings, get_settings
from hireflow.errors import HireFlowError

logger = logging.getLogger(__name__)

ContainerFactory = Callable[[Settings], Awaitable[Any]]


async def _default_container_factory(settings: Settings) -> Any:
    from hireflow.container import ServiceContainer

    return await ServiceContainer.create(settings)


async def hireflow_error_handler(request: Request, exc: HireFlowError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}", exc_info=exc)
    else:
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.public_message})


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else None
    message = first.get("msg", "Invalid request") if first else "Invalid request"
    if first and first.get("loc"):
        field = ".".join(str(part) for part in first["loc"] if part != "body")
        if field:
            message = f"{field}: {message}"
    return JSONResponse(status_code=400, content={"error": message})


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app(
    settings: Settings | None = None,
    container_factory: ContainerFactory | None = None,
) -> FastAPI:
    """
    Build the API application.

    Args:
        settings: Application settings (cached settings if None).
        container_factory: Coroutine building the service container; tests
            pass one that injects fakes.

    Returns:
        Configured FastAPI app.
    """
    settings = settings or get_settings()
    factory = container_factory or _default_container_factory

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        container = await factory(settings)
        app.state.container = container
        logger.info("HireFlow AI backend ready")
        try:
            yield
        finally:
            await container.close()
            logger.info("HireFlow AI backend stopped")

    app = FastAPI(
        title="HireFlow AI",
        description="AI technical interview backend",
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.add_middleware(
        HireFlowCORSMiddleware,
        allowed_origins=(settings.frontend_url, *DEFAULT_ALLOWED_ORIGINS),
        platform_domain=settings.cors_platform_domain,
    )

    app.add_exception_handler(HireFlowError, hireflow_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(router)
    return app
