"""Main entry point for the marketplace web application."""

from __future__ import annotations

import contextlib
import logging
import os
import typing as t
from collections.abc import AsyncIterator

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

import lectern
from lectern.core import BootConfiguration, di, LecternContainer
from lectern.core.config.web import MarketWebSettings
from lectern.errors import LecternError
from lectern.lib.json import FastAPIJSONResponse
from lectern.model import DeploymentEnvironment
from lectern.storage.object import LocalObjectStore, ObjectStore
from lectern.storage.record import RecordStore, StoreError

from .route import router

logger = logging.getLogger(__name__)

BootVariable = "__Lectern_BOOT"


async def handle_lectern_error(request: Request, exc: Exception) -> FastAPIJSONResponse:
    assert isinstance(exc, LecternError)
    if exc.http_status >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error(
            "request failed",
            extra={"method": request.method, "path": request.url.path, "error": exc.message},
        )
    return FastAPIJSONResponse(exc.render(), status_code=exc.http_status)


async def handle_store_error(request: Request, exc: Exception) -> FastAPIJSONResponse:
    logger.error(
        "record store failure",
        exc_info=exc,
        extra={"method": request.method, "path": request.url.path},
    )
    return FastAPIJSONResponse(
        {"error": "The record store could not complete the request", "details": str(exc) or type(exc).__name__},
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


async def handle_validation_error(request: Request, exc: Exception) -> FastAPIJSONResponse:
    assert isinstance(exc, RequestValidationError)
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path"))
        messages.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return FastAPIJSONResponse({"error": messages}, status_code=status.HTTP_400_BAD_REQUEST)


async def handle_unexpected_error(request: Request, exc: Exception) -> FastAPIJSONResponse:
    logger.exception("unhandled error", exc_info=exc, extra={"method": request.method, "path": request.url.path})
    return FastAPIJSONResponse(
        {"error": "Internal server error", "details": str(exc) or type(exc).__name__},
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


@di.inject
def _create_app(
    config: MarketWebSettings = di.Provide["config.web.market", di.as_(MarketWebSettings)],
    env: DeploymentEnvironment = di.Provide["env"],
    records: RecordStore = di.Provide["storage.records"],
    object_store: ObjectStore = di.Provide["storage.object_store"],
) -> FastAPI:
    @contextlib.asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        await records.initialize()
        try:
            yield
        finally:
            await records.close()

    app = FastAPI(
        title="Lectern",
        description="Course and book marketplace",
        version=lectern.__version__,
        lifespan=lifespan,
        default_response_class=FastAPIJSONResponse,
    )

    origins = list(config.cors_origins)
    if env is DeploymentEnvironment.Local and config.frontend is not None:
        origins += [
            f"http://{config.frontend.host}:{config.frontend.port}",
            f"http://localhost:{config.frontend.port}",
        ]
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.add_exception_handler(LecternError, handle_lectern_error)
    app.add_exception_handler(StoreError, handle_store_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    app.include_router(router)

    if isinstance(object_store, LocalObjectStore):
        app.mount(object_store.url_prefix, StaticFiles(directory=object_store.base_path), name="uploads")
    return app


def create_app() -> FastAPI:
    """Factory function for uvicorn."""
    boot_vars = os.getenv(BootVariable)
    if boot_vars:
        boot_cf = BootConfiguration.model_validate_json(boot_vars)
        ct = LecternContainer()
        LecternContainer.boot(ct, **dict(boot_cf))
        return _create_app(
            config=MarketWebSettings(**ct.config.web.market()),
            env=boot_cf.env,
            records=t.cast(RecordStore, ct.storage.records()),
            object_store=t.cast(ObjectStore, ct.storage.object_store()),
        )
    return _create_app()
