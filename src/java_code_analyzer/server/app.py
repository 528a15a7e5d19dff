"""HTTP API for Java defect analysis.

Endpoints:
    POST /api/analyze       Live analysis (demo data when no key is set)
    POST /api/analyze/demo  Demo analysis, never calls the AI service
    GET  /api/health        Liveness, configuration status and counters

Every response carries an ``X-Request-ID`` header. Failures use the
envelope ``{"success": false, "error", "details", "requestId"}``; stack
traces never reach the client.
"""

import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger

from .. import __version__
from ..analysis.engine import AnalysisEngine
from ..analysis.models import AnalysisOutcome
from ..config import defaults
from ..config.settings import AnalyzerSettings, load_settings
from ..core.exceptions import (
    CodeAnalyzerError,
    CredentialError,
    InputValidationError,
    RateLimitError,
    TransientUpstreamError,
    UpstreamError,
    UpstreamTimeoutError,
)
from .schemas import AnalyzeRequest

REQUEST_ID_HEADER = "X-Request-ID"


@dataclass
class ServiceStats:
    """Process-wide counters reported by /api/health."""

    started_at: float = field(default_factory=time.monotonic)
    requests: int = 0
    analyses: int = 0
    demo_analyses: int = 0
    failures: int = 0

    def uptime_seconds(self) -> float:
        return round(time.monotonic() - self.started_at, 3)

    def to_dict(self) -> dict[str, int]:
        return {
            "requests": self.requests,
            "analyses": self.analyses,
            "demoAnalyses": self.demo_analyses,
            "failures": self.failures,
        }


def error_details(exc: CodeAnalyzerError) -> str:
    """Human-readable hint for a failure class."""
    if isinstance(exc, InputValidationError):
        return (
            f"Submit between 1 and {defaults.MAX_CODE_LENGTH} characters of Java code"
        )
    if isinstance(exc, CredentialError):
        if exc.status_code == 503:
            return "Set DEEPSEEK_API_KEY on the server, or use /api/analyze/demo"
        return "The configured DEEPSEEK_API_KEY was rejected by the AI service"
    if isinstance(exc, RateLimitError):
        return "The AI service is rate limiting requests; try again later"
    if isinstance(exc, UpstreamTimeoutError):
        return "The AI service did not respond in time; try a shorter snippet"
    if isinstance(exc, TransientUpstreamError):
        return "The AI service is temporarily unavailable"
    if isinstance(exc, UpstreamError):
        return "The AI service returned an unexpected response"
    return "Analysis failed"


def _request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


def _error_response(
    request: Request, status_code: int, error: str, details: str
) -> JSONResponse:
    stats: ServiceStats = request.app.state.stats
    stats.failures += 1
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": error,
            "details": details,
            "requestId": _request_id(request),
        },
    )


def _success_response(request: Request, outcome: AnalysisOutcome) -> JSONResponse:
    stats: ServiceStats = request.app.state.stats
    if outcome.demo:
        stats.demo_analyses += 1
    else:
        stats.analyses += 1

    content: dict[str, Any] = {
        "success": True,
        "data": outcome.result.to_dict(),
        "requestId": _request_id(request),
        "demo": outcome.demo,
    }
    if outcome.model:
        content["model"] = outcome.model
    if outcome.usage is not None:
        content["usage"] = outcome.usage
    if outcome.note:
        content["note"] = outcome.note
    return JSONResponse(content=content)


def create_app(
    settings: AnalyzerSettings | None = None,
    engine: AnalysisEngine | None = None,
) -> FastAPI:
    """Create FastAPI application for the analyzer service.

    Args:
        settings: Service settings (loaded from the environment when None)
        engine: Analysis engine (built from settings when None)

    Returns:
        Configured FastAPI application
    """
    settings = settings or load_settings()
    engine = engine or AnalysisEngine(settings)

    app = FastAPI(title="Java Code Analyzer", version=__version__)
    app.state.settings = settings
    app.state.engine = engine
    app.state.stats = ServiceStats()

    @app.middleware("http")
    async def request_context(request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        app.state.stats.requests += 1
        start_time = time.time()

        with logger.contextualize(request_id=request_id):
            try:
                response = await call_next(request)
            except Exception as e:
                logger.exception(f"Unhandled error on {request.url.path}: {e}")
                details = (
                    f"{type(e).__name__}: {e}"
                    if settings.is_development
                    else "Internal server error"
                )
                response = _error_response(request, 500, "Analysis failed", details)

            elapsed_ms = (time.time() - start_time) * 1000
            logger.info(
                f"{request.method} {request.url.path} -> "
                f"{response.status_code} ({elapsed_ms:.0f}ms)"
            )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response

    @app.exception_handler(CodeAnalyzerError)
    async def handle_analyzer_error(
        request: Request, exc: CodeAnalyzerError
    ) -> JSONResponse:
        log = logger.warning if exc.status_code < 500 else logger.error
        log(f"{type(exc).__name__} ({exc.status_code}): {exc.message}")
        return _error_response(request, exc.status_code, exc.message, error_details(exc))

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg')}"
            for err in exc.errors()
        )
        logger.warning(f"Rejected malformed request body: {problems}")
        return _error_response(request, 400, "Invalid request body", problems)

    @app.get("/api/health")
    async def health() -> dict[str, Any]:
        """Liveness and configuration status."""
        return {
            "status": "ok",
            "apiKeyConfigured": settings.api_key_configured,
            "model": settings.model,
            "version": __version__,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "uptimeSeconds": app.state.stats.uptime_seconds(),
            "counters": app.state.stats.to_dict(),
            "message": "Java Code Analyzer API is running",
        }

    @app.post("/api/analyze")
    async def analyze(request: Request, body: AnalyzeRequest) -> JSONResponse:
        """Analyze Java code with the AI service."""
        outcome = await engine.analyze(
            body.code, body.analysis_options(), body.file_name
        )
        return _success_response(request, outcome)

    @app.post("/api/analyze/demo")
    async def analyze_demo(request: Request, body: AnalyzeRequest) -> JSONResponse:
        """Return a locally generated demo report."""
        outcome = engine.analyze_demo(body.code, body.analysis_options())
        return _success_response(request, outcome)

    return app
