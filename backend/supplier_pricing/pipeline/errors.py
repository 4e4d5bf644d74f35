"""
Domain-specific exception hierarchy for the price update pipeline.

All pipeline exceptions inherit from PipelineError so callers can
catch broadly or narrowly as needed.  Each exception carries structured
context (job ID, details) for logging/debugging.
"""

from __future__ import annotations


class PipelineError(Exception):
    """Base exception for all pipeline errors."""

    def __init__(
        self,
        message: str,
        *,
        job_id: str | None = None,
        details: dict | None = None,
    ) -> None:
        self.job_id = job_id
        self.details = details or {}
        super().__init__(message)


class FileAccessError(PipelineError):
    """The uploaded file is missing or cannot be read."""
    pass


class UnsupportedFileKindError(PipelineError):
    """The declared file kind is not one of the supported kinds."""

    def __init__(self, file_kind: str, **kwargs) -> None:
        self.file_kind = file_kind
        super().__init__(f"Unsupported file kind: {file_kind}", **kwargs)


class InvalidStatusTransitionError(PipelineError):
    """A job status change outside the allowed lifecycle was attempted."""

    def __init__(self, current: str, target: str, **kwargs) -> None:
        self.current = current
        self.target = target
        super().__init__(f"Cannot move job from '{current}' to '{target}'", **kwargs)


class ProcessingTimeoutError(PipelineError):
    """Processing exceeded the configured deadline."""

    def __init__(self, timeout_seconds: float, **kwargs) -> None:
        self.timeout_seconds = timeout_seconds
        super().__init__(f"Processing timed out after {timeout_seconds:g} seconds", **kwargs)


class JobNotFoundError(PipelineError):
    """No price update job with the given ID exists in scope."""
    pass


class JobNotSubmittableError(PipelineError):
    """The job does not meet the preconditions for approval submission."""
    pass
