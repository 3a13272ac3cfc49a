from fastapi import Depends, FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Type
import logging

from string_analyzer.api.routes import router
from string_analyzer.config import Settings, get_settings
from string_analyzer.crud.string_repository import StringRepository
from string_analyzer.dependencies import get_repository
from string_analyzer.exceptions import (
    ConflictError,
    ConflictingFiltersError,
    InvalidInputError,
    NotFoundError,
    StringAnalyzerError,
    UninterpretableQueryError,
)
from string_analyzer.schemas import HealthResponse
from string_analyzer.services.query_parser import QueryParser
from string_analyzer.services.string_service import StringService

logger = logging.getLogger(__name__)

# Starlette renamed its 422 constant; the number itself is stable
UNPROCESSABLE = 422

ERROR_STATUS_CODES: Dict[Type[StringAnalyzerError], int] = {
    ConflictError: status.HTTP_409_CONFLICT,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictingFiltersError: UNPROCESSABLE,
    UninterpretableQueryError: status.HTTP_400_BAD_REQUEST,
    InvalidInputError: UNPROCESSABLE,
}


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def error_response(status_code: int, error: str, **extra: Any) -> JSONResponse:
    """Every error body is {"error": ...} plus optional context keys."""
    return JSONResponse(status_code=status_code, content={"error": error, **extra})


def status_code_for(exc: StringAnalyzerError) -> int:
    for cls in type(exc).__mro__:
        if cls in ERROR_STATUS_CODES:
            return ERROR_STATUS_CODES[cls]
    return status.HTTP_400_BAD_REQUEST


async def string_analyzer_exception_handler(request: Request, exc: StringAnalyzerError):
    status_code = status_code_for(exc)
    logger.warning(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc}")

    if isinstance(exc, UninterpretableQueryError):
        return error_response(
            status_code, str(exc),
            interpreted_query={"original": exc.query, "parsed_filters": {}},
        )
    if isinstance(exc, ConflictingFiltersError):
        if exc.query is None:
            return error_response(status_code, str(exc), filters=exc.filters.as_dict())
        return error_response(
            status_code, str(exc),
            interpreted_query={"original": exc.query, "parsed_filters": exc.filters.as_dict()},
        )
    return error_response(status_code, str(exc))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    details = {}
    status_code = status.HTTP_400_BAD_REQUEST
    for error in exc.errors():
        loc = tuple(error["loc"])
        details[str(loc[-1]) if loc else "request"] = error["msg"]

        # A present but non-string "value" is a type error, not a bad request
        if loc[:2] == ("body", "value") and error["type"] != "missing":
            status_code = UNPROCESSABLE

    return error_response(status_code, "Validation failed", details=details)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # Routing errors (unknown path, wrong method) keep their status
    return error_response(exc.status_code, str(exc.detail))


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled {type(exc).__name__} on {request.method} {request.url.path}", exc_info=exc)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def create_app(
    settings: Optional[Settings] = None,
    repository: Optional[StringRepository] = None
) -> FastAPI:
    """Build the FastAPI app with its own repository and service."""
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Analyze and store string properties, then query them",
        version=settings.app_version
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # One repository per app; the service and routes only hold references to it
    app.state.settings = settings
    app.state.repository = repository if repository is not None else StringRepository()
    app.state.string_service = StringService(app.state.repository, QueryParser())
    logger.info("In-memory string repository initialized")

    app.add_exception_handler(StringAnalyzerError, string_analyzer_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(router, tags=["strings"])

    @app.get("/")
    def root():
        """Root endpoint"""
        return {
            "message": settings.app_name,
            "version": settings.app_version,
            "endpoints": {
                "POST /strings": "Analyze and store a string",
                "GET /strings/{string_value}": "Get specific string analysis",
                "GET /strings": "Get all strings with optional filters",
                "GET /strings/filter-by-natural-language": "Filter using natural language",
                "DELETE /strings/{string_value}": "Delete a string",
                "GET /health": "Health check",
                "GET /docs": "API documentation"
            }
        }

    @app.get("/health", response_model=HealthResponse)
    def health_check(repository: StringRepository = Depends(get_repository)):
        """Health check endpoint"""
        return HealthResponse(
            status="healthy",
            timestamp=datetime.now(timezone.utc),
            total_strings=repository.count()
        )

    return app


def run() -> None:
    import uvicorn

    settings = app.state.settings
    uvicorn.run(app, host=settings.host, port=settings.port)


configure_logging(get_settings().log_level)
app = create_app()


if __name__ == "__main__":
    run()
