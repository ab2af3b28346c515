"""Central exception hierarchy for the supplier reputation engine.

All custom exceptions inherit from ReputationError.

Exception Hierarchy:
    ReputationError (base)
    ├── ConfigurationError
    ├── SourceError
    │   ├── SourceUnavailableError
    │   └── SourceFetchError
    └── AuthorizationError

Only AuthorizationError is meant to reach callers of the engine. Source errors
are raised by signal sources and absorbed by the loaders: an unavailable source
degrades its signal for the whole batch, a fetch error empties it.

Usage:
    from supplier_reputation.exceptions import SourceUnavailableError

    try:
        rows = client.execute_query(query, params)
    except duckdb.CatalogException as exc:
        raise wrap_exception(
            exc,
            SourceUnavailableError,
            source="match_health",
            relation="supplier_match_health_summary",
        ) from exc
"""

from __future__ import annotations

from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Error codes for programmatic handling.

    Categories:
        1xxx - Configuration errors
        3xxx - Signal source errors
        4xxx - Authorization errors
    """

    # Configuration errors (1xxx)
    CONFIG_LOAD_FAILED = 1001
    CONFIG_VALIDATION_FAILED = 1002

    # Signal sources (3xxx)
    SOURCE_UNAVAILABLE = 3001
    SOURCE_FETCH_FAILED = 3002

    # Authorization (4xxx)
    AUTHORIZATION_FAILED = 4001


class ReputationError(Exception):
    """Base exception for all supplier reputation errors.

    Attributes:
        message: Human-readable error description
        component: Engine component (e.g., "source.match_health")
        operation: Operation being performed (e.g., "score_for_suppliers")
        details: Additional context as dictionary
        retryable: Whether the whole operation can be retried by the caller
        status_code: Numeric error code from ErrorCode enum
        cause: Original exception if wrapping another error
    """

    def __init__(
        self,
        message: str,
        component: str | None = None,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
        retryable: bool = False,
        status_code: ErrorCode | None = None,
        cause: Exception | None = None,
    ):
        self.message = message
        self.component = component or self.__class__.__module__
        self.operation = operation
        self.details = details or {}
        self.retryable = retryable
        self.status_code = status_code
        self.cause = cause

        parts = [message]
        if component:
            parts.append(f"[component={component}]")
        if operation:
            parts.append(f"[operation={operation}]")
        if status_code:
            parts.append(f"[code={status_code}]")

        super().__init__(" ".join(parts))

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for logging/serialization.

        Example:
            {
                "error_type": "SourceFetchError",
                "message": "quote_messages lookup failed",
                "component": "source.thread_activity",
                "operation": "get",
                "details": {"quote_count": 40},
                "retryable": true,
                "status_code": 3002,
                "cause": "IOException: ..."
            }
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "component": self.component,
            "operation": self.operation,
            "details": self.details,
            "retryable": self.retryable,
            "status_code": self.status_code.value if self.status_code else None,
            "cause": str(self.cause) if self.cause else None,
        }


class ConfigurationError(ReputationError):
    """Configuration loading or validation failed.

    Not retryable as configuration issues must be fixed manually.

    Example:
        raise ConfigurationError(
            "Base configuration file not found",
            config_key="reputation",
            details={"file_path": "config/base.yaml"}
        )
    """

    def __init__(self, message: str, config_key: str | None = None, **kwargs: Any):
        details = kwargs.pop("details", {})
        if config_key:
            details["config_key"] = config_key

        component = kwargs.pop("component", "config")

        super().__init__(
            message,
            component=component,
            details=details,
            status_code=kwargs.pop("status_code", ErrorCode.CONFIG_VALIDATION_FAILED),
            retryable=False,
            **kwargs,
        )


class SourceError(ReputationError):
    """A signal source could not serve a request.

    Args:
        source: Logical signal name ("match_health", "feedback", ...)
        relation: Backing view or table, when known
    """

    def __init__(
        self,
        message: str,
        source: str | None = None,
        relation: str | None = None,
        **kwargs: Any,
    ):
        details = kwargs.pop("details", {})
        if source:
            details["source"] = source
        if relation:
            details["relation"] = relation

        component = kwargs.pop("component", f"source.{source}" if source else "source")

        super().__init__(message, component=component, details=details, **kwargs)


class SourceUnavailableError(SourceError):
    """The backing aggregate is structurally absent (missing view, table or column).

    Not retryable: the deployment has to ship the relation first.
    """

    def __init__(self, message: str, **kwargs: Any):
        super().__init__(
            message,
            status_code=kwargs.pop("status_code", ErrorCode.SOURCE_UNAVAILABLE),
            retryable=False,
            **kwargs,
        )


class SourceFetchError(SourceError):
    """Transient failure while reading a source (transport, query timeout, ...)."""

    def __init__(self, message: str, **kwargs: Any):
        super().__init__(
            message,
            status_code=kwargs.pop("status_code", ErrorCode.SOURCE_FETCH_FAILED),
            retryable=True,
            **kwargs,
        )


class AuthorizationError(ReputationError):
    """The caller is not allowed to read reputation data.

    Example:
        raise AuthorizationError(
            "Administrator access required",
            operation="require_admin",
        )
    """

    def __init__(self, message: str, **kwargs: Any):
        component = kwargs.pop("component", "authorization")
        super().__init__(
            message,
            component=component,
            status_code=kwargs.pop("status_code", ErrorCode.AUTHORIZATION_FAILED),
            retryable=False,
            **kwargs,
        )


def wrap_exception(
    original: Exception,
    error_class: type[ReputationError],
    message: str | None = None,
    **kwargs: Any,
) -> ReputationError:
    """Wrap a generic exception in a structured reputation exception.

    Args:
        original: Original exception to wrap
        error_class: ReputationError subclass to use
        message: Override message (defaults to original message)
        **kwargs: Additional arguments for exception constructor

    Returns:
        Instance of error_class with original exception as cause
    """
    return error_class(message or str(original), cause=original, **kwargs)


def is_retryable(exc: Exception) -> bool:
    """Check if an exception is retryable."""
    if isinstance(exc, ReputationError):
        return exc.retryable
    return False


def get_error_code(exc: Exception) -> int | None:
    """Get error code from exception if available."""
    if isinstance(exc, ReputationError) and exc.status_code:
        return exc.status_code.value
    return None
