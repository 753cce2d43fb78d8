"""Error types for the comparison pipeline.

Client-facing errors carry the HTTP status the API layer should answer with.
"""

from __future__ import annotations


class ComparisonError(Exception):
    status_code = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ComparisonValidationError(ComparisonError):
    status_code = 400


class NotFoundError(ComparisonError):
    status_code = 404


class InsufficientCreditsError(ComparisonError):
    status_code = 402


class DuplicateComparisonError(ComparisonError):
    status_code = 409


class ExternalServiceError(Exception):
    """The vision-analysis service failed or could not be reached."""


class PersistenceError(Exception):
    """A single difference row could not be written."""


class FatalPipelineError(Exception):
    """An asynchronous comparison run could not finish."""
