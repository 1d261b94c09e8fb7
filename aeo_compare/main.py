from http import HTTPStatus
import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Settings, get_settings
from .exceptions import AEOCompareError, InvalidComparisonRequest, error_body, to_error_response
from .llm.providers import LLMProvider, OpenRouterProvider
from .logging_config import configure_logging
from .middleware import RequestIDMiddleware
from .routers import analyze, observability

logger = logging.getLogger(__name__)


def _missing_snippets(exc: RequestValidationError) -> list:
    missing = set()
    for err in exc.errors():
        loc = err.get("loc") or ()
        for field in ("snippetA", "snippetB"):
            if field in loc:
                missing.add(field)
    return sorted(missing) or ["snippetA", "snippetB"]


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AEOCompareError)
    async def service_error_handler(request: Request, exc: AEOCompareError):
        return to_error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return to_error_response(InvalidComparisonRequest(_missing_snippets(exc)))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if isinstance(exc.detail, str):
            content = error_body(exc.detail)
        else:
            content = error_body(HTTPStatus(exc.status_code).phrase, exc.detail)
        return JSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unexpected error handling {request.method} {request.url.path}")
        # Runs outside RequestIDMiddleware, so the header is set here.
        request_id = getattr(request.state, "request_id", None)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body("Internal server error"),
            headers={"X-Request-ID": request_id} if request_id else None,
        )


def create_app(settings: Optional[Settings] = None, provider: Optional[LLMProvider] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(title=settings.app_name, debug=settings.debug)
    app.state.settings = settings
    app.state.provider = provider or OpenRouterProvider.from_settings(settings)

    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    app.include_router(analyze.router, prefix="/api", tags=["analyze"])

    @app.get("/healthz")
    def healthz():
        return {"status": "ok"}

    # Observability endpoints
    app.include_router(observability.router, prefix="/ops", tags=["observability"])

    if not settings.has_api_key:
        logger.warning("OPENROUTER_API_KEY is not set; /api/analyze will answer 500 until it is configured")

    return app


app = create_app()
