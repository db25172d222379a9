"""HTTP entry point for asset ingestion.

Run with ``uvicorn src.api.app:create_app --factory``.
"""

from __future__ import annotations

from typing import Optional

from fastapi import FastAPI, Header, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..common.errors import IngestionError
from ..common.logging import configure_logging, get_logger
from ..pipelines.services import IngestionServices, build_services
from .schemas import ErrorResponse, UploadResponse

LOGGER = get_logger(__name__)

_ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_401_UNAUTHORIZED: {"model": ErrorResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
}


def create_app(services: Optional[IngestionServices] = None) -> FastAPI:
    """Build the API around explicitly injected clients."""

    configure_logging()
    services = services or build_services()
    orchestrator = services.orchestrator()

    app = FastAPI(title="3D Asset Publisher", version="1.0.0")
    app.state.services = services

    @app.exception_handler(IngestionError)
    async def _ingestion_error(_request: Request, exc: IngestionError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def _unexpected_error(_request: Request, exc: Exception) -> JSONResponse:
        LOGGER.exception("api.unexpected_error")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Upload failed", "details": str(exc)},
        )

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok"}

    @app.post("/api/upload", response_model=UploadResponse, responses=_ERROR_RESPONSES)
    async def upload(
        request: Request,
        x_admin_secret: Optional[str] = Header(default=None),
    ) -> UploadResponse:
        """Publish one asset bundle: GLB model, optional thumbnail, gallery images."""
        result = await orchestrator.ingest(request, x_admin_secret)
        return UploadResponse.from_result(result)

    return app
