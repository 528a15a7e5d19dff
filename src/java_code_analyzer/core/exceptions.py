"""Typed exception hierarchy for java-code-analyzer.

Hierarchy
---------
CodeAnalyzerError (base)
├── InputValidationError     – empty or oversized source (400, never retried)
├── CredentialError          – missing or rejected API key (401/503, never retried)
├── UpstreamError            – non-retryable upstream failure (500)
│   ├── RateLimitError       – HTTP 429, retried with long backoff
│   └── TransientUpstreamError – 5xx / network, retried with short backoff
│       └── UpstreamTimeoutError – per-attempt timeout (504)
├── ResponseFormatError      – malformed model output, recovered locally
└── ConfigError              – invalid settings

Every class carries the HTTP ``status_code`` the server responds with.
"""

from typing import Any


class CodeAnalyzerError(Exception):
    """Base exception for Java Code Analyzer."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}
        if status_code is not None:
            self.status_code = status_code


# ── Request layer ───────────────────────────────────────────────────────


class InputValidationError(CodeAnalyzerError):
    """Submitted source is empty or exceeds the length limit."""

    status_code = 400


class CredentialError(CodeAnalyzerError):
    """API key is missing or was rejected by the upstream service.

    Rejected keys surface as 401. A key that is simply not configured is
    raised with ``status_code=503`` since the server, not the caller, is
    misconfigured.
    """

    status_code = 401


# ── Upstream layer ──────────────────────────────────────────────────────


class UpstreamError(CodeAnalyzerError):
    """Upstream LLM call failed in a way that retrying will not fix."""

    status_code = 500


class RateLimitError(UpstreamError):
    """Upstream answered HTTP 429."""

    status_code = 429


class TransientUpstreamError(UpstreamError):
    """Upstream server error or connectivity failure."""

    status_code = 503


class UpstreamTimeoutError(TransientUpstreamError):
    """Upstream did not answer within the per-attempt timeout."""

    status_code = 504


# ── Response layer ──────────────────────────────────────────────────────


class ResponseFormatError(CodeAnalyzerError):
    """Model output could not be parsed as a JSON report.

    Raised and caught inside the normalizer; callers never see it.
    """

    pass


# ── Configuration layer ─────────────────────────────────────────────────


class ConfigError(CodeAnalyzerError):
    """Configuration / validation errors."""

    pass
