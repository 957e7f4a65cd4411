"""FastAPI application."""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from richdoc.exceptions import (
    ArticleNotFoundError,
    ConfigurationError,
    DocumentParseError,
    FetchError,
)
from richdoc.utils.logging_config import get_logger
from server.models import ErrorResponse, HealthResponse
from server.routers.articles import router as articles_router

logger = get_logger(__name__)

app = FastAPI(title="richdoc", description="Render rich-text articles into presentation trees.")
app.include_router(articles_router)


def _error(status_code: int, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=str(exc)).model_dump())


@app.exception_handler(ArticleNotFoundError)
async def handle_not_found(request: Request, exc: ArticleNotFoundError) -> JSONResponse:  # noqa: ARG001
    return _error(status.HTTP_404_NOT_FOUND, exc)


@app.exception_handler(DocumentParseError)
async def handle_parse_error(request: Request, exc: DocumentParseError) -> JSONResponse:  # noqa: ARG001
    return _error(422, exc)


@app.exception_handler(ConfigurationError)
async def handle_configuration_error(request: Request, exc: ConfigurationError) -> JSONResponse:  # noqa: ARG001
    logger.error("Content store is not configured", extra={"error": str(exc)})
    return _error(status.HTTP_503_SERVICE_UNAVAILABLE, exc)


@app.exception_handler(FetchError)
async def handle_fetch_error(request: Request, exc: FetchError) -> JSONResponse:
    logger.error("Content store request failed", extra={"path": request.url.path, "error": str(exc)})
    return _error(status.HTTP_502_BAD_GATEWAY, exc)


@app.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Liveness probe."""
    return HealthResponse()
