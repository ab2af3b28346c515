"""Unit tests for centralized exception module.

Tests cover:
- Base exception class functionality
- Exception hierarchy correctness
- Error code system
- Helper functions (wrap_exception, is_retryable, get_error_code)
"""

import pytest

from supplier_reputation.exceptions import (
    AuthorizationError,
    ConfigurationError,
    ErrorCode,
    ReputationError,
    SourceError,
    SourceFetchError,
    SourceUnavailableError,
    get_error_code,
    is_retryable,
    wrap_exception,
)


pytestmark = pytest.mark.fast


class TestBaseException:
    def test_minimal(self):
        exc = ReputationError("Test error")

        assert exc.message == "Test error"
        assert exc.details == {}
        assert exc.retryable is False
        assert exc.status_code is None
        assert str(exc) == "Test error"

    def test_full_context_in_message(self):
        exc = ReputationError(
            "Failed",
            component="source.feedback",
            operation="get",
            status_code=ErrorCode.SOURCE_FETCH_FAILED,
        )

        assert "[component=source.feedback]" in str(exc)
        assert "[operation=get]" in str(exc)
        assert "[code=3002]" in str(exc)

    def test_to_dict(self):
        cause = RuntimeError("socket closed")
        exc = ReputationError(
            "Failed",
            component="source.feedback",
            details={"supplier_count": 3},
            status_code=ErrorCode.SOURCE_FETCH_FAILED,
            cause=cause,
        )

        assert exc.to_dict() == {
            "error_type": "ReputationError",
            "message": "Failed",
            "component": "source.feedback",
            "operation": None,
            "details": {"supplier_count": 3},
            "retryable": False,
            "status_code": 3002,
            "cause": "socket closed",
        }


class TestHierarchy:
    @pytest.mark.parametrize(
        "error_class",
        [
            ConfigurationError,
                    SourceError,
            SourceUnavailableError,
            SourceFetchError,
            AuthorizationError,
        ],
    )
    def test_all_inherit_from_base(self, error_class):
        assert issubclass(error_class, ReputationError)

    def test_source_errors_share_parent(self):
        assert issubclass(SourceUnavailableError, SourceError)
        assert issubclass(SourceFetchError, SourceError)

    def test_error_code_categories(self):
        assert {code // 1000 for code in ErrorCode} == {1, 3, 4}


class TestSpecificExceptions:
    def test_configuration_error(self):
        exc = ConfigurationError("bad value", config_key="reputation.feedback")

        assert exc.component == "config"
        assert exc.details["config_key"] == "reputation.feedback"
        assert exc.status_code == ErrorCode.CONFIG_VALIDATION_FAILED
        assert not exc.retryable

    def test_source_unavailable(self):
        exc = SourceUnavailableError(
            "view missing", source="match_health", relation="supplier_match_health_summary"
        )

        assert exc.component == "source.match_health"
        assert exc.details == {
            "source": "match_health",
            "relation": "supplier_match_health_summary",
        }
        assert exc.status_code == ErrorCode.SOURCE_UNAVAILABLE
        assert not exc.retryable

    def test_source_fetch_is_retryable(self):
        exc = SourceFetchError("timeout", source="thread_activity")

        assert exc.retryable
        assert exc.status_code == ErrorCode.SOURCE_FETCH_FAILED

    def test_authorization_error(self):
        exc = AuthorizationError("Administrator access required", operation="require_admin")

        assert exc.component == "authorization"
        assert exc.status_code == ErrorCode.AUTHORIZATION_FAILED
        assert not exc.retryable


class TestHelpers:
    def test_wrap_exception_keeps_cause(self):
        original = ValueError("no such table")

        wrapped = wrap_exception(original, SourceUnavailableError, source="feedback")

        assert isinstance(wrapped, SourceUnavailableError)
        assert wrapped.cause is original
        assert wrapped.message == "no such table"
        assert wrapped.details["source"] == "feedback"

    def test_wrap_exception_message_override(self):
        wrapped = wrap_exception(
            RuntimeError("x"), SourceFetchError, message="quotes lookup failed"
        )

        assert wrapped.message == "quotes lookup failed"

    def test_is_retryable(self):
        assert is_retryable(SourceFetchError("x"))
        assert not is_retryable(SourceUnavailableError("x"))
        assert not is_retryable(RuntimeError("x"))

    def test_get_error_code(self):
        assert get_error_code(AuthorizationError("x")) == 4001
        assert get_error_code(ReputationError("x")) is None
        assert get_error_code(ValueError("x")) is None
