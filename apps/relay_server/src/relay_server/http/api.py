from __future__ import annotations

from datetime import UTC, datetime

from fastapi import APIRouter, File, Query, Request, Response, UploadFile
from fastapi.responses import JSONResponse
from relay_core import __version__
from relay_core.errors import PayloadTooLargeError
from relay_core.pipelines import public_url, resolve_metadata, upload_blob
from relay_core.services import (
    SUPPORTED_TYPES,
    TABLE_VERSION,
    identifier_extension,
    mime_for_extension,
)
from starlette.concurrency import run_in_threadpool

from relay_server.http.responder import serve_blob
from relay_server.http.schemas import (
    ErrorResponse,
    FileInfoResponse,
    HealthResponse,
    SupportedTypesResponse,
    UploadResponse,
)


def _base_url(request: Request) -> str:
    configured = request.app.state.ctx.settings.public_base_url
    return configured or str(request.base_url)


def build_api_router() -> APIRouter:
    router = APIRouter(prefix="/api")

    @router.post("/upload", response_model=UploadResponse)
    async def upload(request: Request, file: UploadFile | None = File(default=None)) -> UploadResponse | JSONResponse:
        ctx = request.app.state.ctx
        if file is None:
            return JSONResponse(
                status_code=400,
                content=ErrorResponse(error="no_file", details="No file uploaded").model_dump(),
            )

        limit = ctx.blob_store.max_object_size
        data = await file.read(limit + 1)
        if len(data) > limit:
            raise PayloadTooLargeError(file.size, limit)

        result = await run_in_threadpool(
            lambda: upload_blob(
                original_filename=file.filename,
                content=data,
                blob_store=ctx.blob_store,
                retry_policy=ctx.upload_retry,
                namespace=ctx.settings.storage_prefix,
                base_url=_base_url(request),
            )
        )
        return UploadResponse(
            filename=result.identifier,
            url=result.url or result.identifier,
            size=result.size,
            type=result.mime,
            extension=result.extension,
            detected=result.detected.value,
        )

    @router.get("/info/{identifier}", response_model=FileInfoResponse)
    def info(identifier: str, request: Request) -> FileInfoResponse:
        ctx = request.app.state.ctx
        metadata = resolve_metadata(
            identifier,
            blob_store=ctx.blob_store,
            retry_policy=ctx.retrieval_retry,
            namespace=ctx.settings.storage_prefix,
        )
        extension = identifier_extension(identifier)
        return FileInfoResponse(
            filename=identifier,
            size=metadata.size,
            type=mime_for_extension(extension),
            extension=extension,
            url=public_url(_base_url(request), identifier),
            sha=metadata.fingerprint,
            download_url=metadata.locator,
        )

    @router.get("/supported-types", response_model=SupportedTypesResponse)
    def supported_types(request: Request) -> SupportedTypesResponse:
        return SupportedTypesResponse(
            version=TABLE_VERSION,
            max_size=request.app.state.ctx.settings.max_object_size,
            categories={category: list(exts) for category, exts in SUPPORTED_TYPES.items()},
        )

    @router.get("/health", response_model=HealthResponse)
    def health(request: Request) -> HealthResponse:
        return HealthResponse(
            status="ok",
            timestamp=datetime.now(UTC).isoformat(),
            version=__version__,
            storage_backend=request.app.state.ctx.settings.storage_backend,
        )

    @router.api_route("/{path:path}", methods=["GET", "POST", "PUT", "DELETE", "HEAD"], include_in_schema=False)
    def endpoint_not_found(path: str) -> JSONResponse:
        return JSONResponse(
            status_code=404,
            content=ErrorResponse(error="endpoint_not_found", details=f"No endpoint at /api/{path}").model_dump(),
        )

    return router


def build_files_router() -> APIRouter:
    router = APIRouter()

    @router.api_route("/{identifier}", methods=["GET", "HEAD"], response_model=None)
    def serve_file(
        identifier: str,
        request: Request,
        text: bool = Query(default=False),
    ) -> Response:
        return serve_blob(
            identifier,
            ctx=request.app.state.ctx,
            range_header=request.headers.get("Range"),
            force_text=text,
            head=request.method == "HEAD",
        )

    return router
