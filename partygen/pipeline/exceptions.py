"""Exceptions raised inside the content pipeline.

Only InvalidRequestError escapes ``ContentPipeline.acquire``; everything
else is absorbed by the retry loop or turned into fallback content.
"""

from partygen.content.validation import ValidationIssue


class PipelineError(Exception):
    """Base exception for pipeline errors."""

    pass


class GenerationError(PipelineError):
    """The generation backend failed to produce a payload."""

    pass


class TransientGenerationError(GenerationError):
    """Network, rate-limit or empty-response failure. Worth retrying.

    Attributes:
        retry_after: Server-requested delay in seconds, if any.
    """

    def __init__(self, message: str, retry_after: float | None = None) -> None:
        super().__init__(message)
        self.retry_after = retry_after


class PermanentGenerationError(GenerationError):
    """Failure that retrying cannot fix (bad credentials, rejected request)."""

    pass


class ValidationFailure(PipelineError):
    """Payload was decoded but rejected by the validation gate.

    Attributes:
        issues: Every issue the gate reported.
    """

    def __init__(self, message: str, issues: list[ValidationIssue] | None = None) -> None:
        super().__init__(message)
        self.issues = issues or []


class ExhaustedRetriesError(PipelineError):
    """Retry budget exhausted without an accepted payload.

    Attributes:
        attempts: Number of attempts made.
        last_error: Error from the final attempt.
    """

    def __init__(self, attempts: int, last_error: Exception | None = None) -> None:
        super().__init__(f"Gave up after {attempts} attempt(s): {last_error}")
        self.attempts = attempts
        self.last_error = last_error


class NoFallbackAvailableError(PipelineError):
    """No curated content exists for the requested kind."""

    pass


class InvalidRequestError(PipelineError, ValueError):
    """Request parameters or settings are invalid for the kind."""

    pass
