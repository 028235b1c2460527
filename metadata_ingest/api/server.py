"""HTTP boundary: JSON in, envelope or typed error out."""

import uuid
from collections.abc import Awaitable, Callable
from typing import Any

from fastapi import Body, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from metadata_ingest.config.settings import Settings
from metadata_ingest.exceptions import ApiError, ErrorCode, internal_error, invalid_input
from metadata_ingest.logging.logger import Log
from metadata_ingest.processor.processor import Processor


def create_app(processor: Processor, settings: Settings) -> FastAPI:
    app = FastAPI(title="Metadata Ingest API")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["authorization", "x-client-info", "apikey", "content-type", "x-request-id"],
        expose_headers=["x-request-id"],
    )

    @app.middleware("http")
    async def tag_request(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex[:12]
        token = Log.bind_request(request_id)
        try:
            response = await call_next(request)
        finally:
            Log.release_request(token)
        response.headers["x-request-id"] = request_id
        return response

    def require_bearer(request: Request) -> None:
        if not settings.require_auth:
            return
        header = request.headers.get("authorization", "")
        if not header:
            raise ApiError(ErrorCode.AUTH_MISSING, "Missing authorization header.")
        scheme, _, token = header.partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            raise ApiError(ErrorCode.AUTH_INVALID, "Invalid authorization header.")

    @app.exception_handler(ApiError)
    async def handle_api_error(request: Request, exc: ApiError) -> JSONResponse:
        Log.warning(f"{request.url.path} -> {exc.status} {exc.code.value}: {exc.message}")
        return JSONResponse(status_code=exc.status, content=exc.to_envelope())

    @app.exception_handler(RequestValidationError)
    async def handle_malformed_body(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = [str(error.get("msg", "Invalid request body.")) for error in exc.errors()]
        error = invalid_input("Request body must be valid JSON.", {"errors": errors})
        return await handle_api_error(request, error)

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        Log.error(f"Unhandled error on {request.url.path}: {exc!r}")
        error = internal_error()
        return JSONResponse(status_code=error.status, content=error.to_envelope())

    @app.get("/health")
    def health_check() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/analyze-url", dependencies=[Depends(require_bearer)])
    def analyze_url(body: Any = Body(default=None)) -> dict[str, object]:
        return processor.analyze_url(body)

    @app.post("/analyze-file", dependencies=[Depends(require_bearer)])
    def analyze_file(body: Any = Body(default=None)) -> dict[str, object]:
        return processor.analyze_file(body)

    @app.post("/generate-embedding", dependencies=[Depends(require_bearer)])
    def generate_embedding(body: Any = Body(default=None)) -> dict[str, object]:
        return processor.generate_embedding(body)

    return app
