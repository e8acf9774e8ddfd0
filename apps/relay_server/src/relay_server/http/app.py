from __future__ import annotations

import logging

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from relay_core import __version__
from relay_core.errors import BackendError, BlobUnavailableError, RelayError
from relay_core.ports import BlobStore

from relay_server.adapters import BlobStoreFactory
from relay_server.config import Settings
from relay_server.http.api import build_api_router, build_files_router
from relay_server.http.context import AppContext, build_retry_policy
from relay_server.http.schemas import ErrorResponse

logger = logging.getLogger(__name__)

_GENERIC_DETAILS = {
    BackendError: "The storage backend rejected the request",
    BlobUnavailableError: "The storage backend is temporarily unavailable",
}


def _public_details(exc: RelayError, production: bool) -> str:
    if production:
        for exc_type, message in _GENERIC_DETAILS.items():
            if isinstance(exc, exc_type):
                return message
    return str(exc) or exc.kind


def _describe_validation_error(err: dict) -> str:
    location = ".".join(str(part) for part in err.get("loc", ()) if part not in ("query", "path", "body"))
    message = err.get("msg", "invalid value")
    return f"{location}: {message}" if location else message


def create_app(settings: Settings | None = None, blob_store: BlobStore | None = None) -> FastAPI:
    cfg = settings or Settings()
    store = blob_store or BlobStoreFactory(cfg).create_blob_store()

    ctx = AppContext(
        settings=cfg,
        blob_store=store,
        upload_retry=build_retry_policy(cfg, cfg.upload_max_attempts),
        retrieval_retry=build_retry_policy(cfg, cfg.retrieval_max_attempts),
    )

    app = FastAPI(title="Blob Relay", version=__version__)
    app.state.ctx = ctx
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Range", "Accept-Ranges", "Content-Length", "X-File-Name"],
    )

    @app.exception_handler(RelayError)
    async def relay_error_handler(request: Request, exc: RelayError) -> Response:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        if request.method == "HEAD":
            return Response(status_code=exc.status_code)
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(error=exc.kind, details=_public_details(exc, cfg.is_production)).model_dump(),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> Response:
        if request.method == "HEAD":
            return Response(status_code=400)
        errors = exc.errors()
        if any(tuple(err.get("loc", ()))[-1:] == ("file",) for err in errors):
            body = ErrorResponse(error="no_file", details="No file uploaded")
        else:
            details = "; ".join(_describe_validation_error(err) for err in errors)
            body = ErrorResponse(error="invalid_request", details=details or "Invalid request")
        return JSONResponse(status_code=400, content=body.model_dump())

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        details = "Internal server error" if cfg.is_production else str(exc)
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error="internal_error", details=details).model_dump(),
        )

    app.include_router(build_api_router())
    app.include_router(build_files_router())

    return app
