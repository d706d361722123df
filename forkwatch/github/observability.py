"""Error categorization for remote lookup failures.

Failed per-item lookups are dropped from batch results; the category logged
alongside them tells operators whether a rerun is likely to help.
"""

from __future__ import annotations

import enum

from .errors import GitHubAPIError, GitHubConfigError, GitHubResponseShapeError

# HTTP status code threshold for server errors (5xx)
_HTTP_SERVER_ERROR_THRESHOLD = 500


class ErrorCategory(enum.StrEnum):
    """Categories for classifying remote failures in log output."""

    TRANSIENT = "transient"
    CLIENT_ERROR = "client_error"
    SCHEMA_DRIFT = "schema_drift"
    CONFIGURATION = "configuration"
    UNKNOWN = "unknown"


_EXCEPTION_CATEGORY_MAP: tuple[tuple[type[BaseException], ErrorCategory], ...] = (
    (GitHubResponseShapeError, ErrorCategory.SCHEMA_DRIFT),
    (GitHubConfigError, ErrorCategory.CONFIGURATION),
)


def categorize_error(exc: BaseException) -> ErrorCategory:
    """Categorize a remote failure.

    Server errors and transport failures (no status code) are transient;
    other HTTP errors are the caller's problem.
    """
    if isinstance(exc, GitHubAPIError):
        if (
            exc.status_code is None
            or exc.status_code >= _HTTP_SERVER_ERROR_THRESHOLD
        ):
            return ErrorCategory.TRANSIENT
        return ErrorCategory.CLIENT_ERROR

    for exc_type, category in _EXCEPTION_CATEGORY_MAP:
        if isinstance(exc, exc_type):
            return category

    return ErrorCategory.UNKNOWN
