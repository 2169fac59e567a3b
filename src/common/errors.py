"""Error taxonomy shared by the pipeline stages.

Batch operations never raise these to their callers; they are caught at the
per-feed / per-company / per-url boundary and reported as structured results.
"""

from __future__ import annotations

from enum import Enum


class PipelineError(Exception):
    """Base class for pipeline errors."""


class FetchError(PipelineError):
    """Network failure, timeout or unusable HTTP response."""


class HttpError(FetchError):
    """Upstream answered with a non-2xx status."""

    def __init__(self, status_code: int, reason: str = "") -> None:
        self.status_code = status_code
        self.reason = reason
        super().__init__(f"HTTP {status_code}: {reason}".rstrip(": "))


class FormatError(PipelineError):
    """Response body is not something the pipeline can parse."""


class EmptyFeedError(FormatError):
    def __init__(self, message: str = "Empty RSS feed received") -> None:
        super().__init__(message)


class NotRssError(FormatError):
    def __init__(self, message: str = "Response is not a valid RSS/XML feed") -> None:
        super().__init__(message)


class ExtractionFailure(PipelineError):
    """No selector, library or pattern produced quality-validated content."""


class ResolutionFailure(PipelineError):
    """A Google-News wrapper could not be resolved to a publisher URL."""


class CompletionErrorKind(str, Enum):
    INVALID_CREDENTIAL = "InvalidCredential"
    RATE_LIMITED = "RateLimited"
    MALFORMED_REQUEST = "MalformedRequest"
    UPSTREAM_UNAVAILABLE = "UpstreamUnavailable"
    NO_CONTENT = "NoContent"


_USER_MESSAGES = {
    CompletionErrorKind.INVALID_CREDENTIAL: "Invalid API key. Update the API key in settings and try again.",
    CompletionErrorKind.RATE_LIMITED: "Rate limit exceeded. Please try again in a moment.",
    CompletionErrorKind.MALFORMED_REQUEST: "Invalid request format",
    CompletionErrorKind.UPSTREAM_UNAVAILABLE: "Completion service temporarily unavailable",
    CompletionErrorKind.NO_CONTENT: "No analysis content received",
}


class CompletionServiceError(PipelineError):
    """Failure reported by the completion (summarization) service."""

    def __init__(self, kind: CompletionErrorKind, message: str = "") -> None:
        self.kind = kind
        self.message = message or _USER_MESSAGES[kind]
        super().__init__(f"{kind.value}: {self.message}")

    @property
    def is_actionable(self) -> bool:
        """True when the user can fix the problem (credential or wait-and-retry)."""
        return self.kind in (CompletionErrorKind.INVALID_CREDENTIAL, CompletionErrorKind.RATE_LIMITED)

    @property
    def user_message(self) -> str:
        if self.is_actionable:
            return _USER_MESSAGES[self.kind]
        return "Analysis failed. Use retry to try again."


class StoreError(PipelineError):
    """Opaque failure passed through from the content store."""
