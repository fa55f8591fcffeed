"""Tests for correlation IDs carried by domain exceptions."""

import pytest

from core.correlation import set_correlation_id
from models.exceptions import (
    AuthenticationException,
    DomainException,
    EmptyExportDomainException,
    InsufficientPermissionsException,
    InvalidIntervalException,
    NotFoundException,
    ValidationException,
)


@pytest.fixture(autouse=True)
def reset_correlation_context():
    set_correlation_id("")
    yield
    set_correlation_id("")


class TestDomainExceptionCorrelationId:
    def test_uses_context_correlation_id(self) -> None:
        set_correlation_id("req00001")
        assert DomainException("boom").correlation_id == "req00001"

    def test_generates_id_without_context(self) -> None:
        exc = DomainException("boom")
        assert len(exc.correlation_id) == 8
        assert all(c in "0123456789abcdef" for c in exc.correlation_id)

    def test_explicit_id_overrides_context(self) -> None:
        set_correlation_id("req00001")
        exc = DomainException("boom", correlation_id="explicit")
        assert exc.correlation_id == "explicit"

    def test_ids_without_context_are_unique(self) -> None:
        assert DomainException("a").correlation_id != DomainException("b").correlation_id


class TestStatsExceptions:
    @pytest.mark.parametrize(
        "exc_factory",
        [
            lambda: InvalidIntervalException("fortnight"),
            lambda: InvalidIntervalException(None),
            EmptyExportDomainException,
            lambda: NotFoundException("missing"),
            lambda: AuthenticationException("Not authenticated"),
            lambda: InsufficientPermissionsException("Not enough permissions"),
        ],
    )
    def test_inherit_context_id(self, exc_factory) -> None:
        set_correlation_id("shared01")
        assert exc_factory().correlation_id == "shared01"

    def test_invalid_interval_message_names_value(self) -> None:
        exc = InvalidIntervalException("fortnight")
        assert isinstance(exc, ValidationException)
        assert "fortnight" in exc.message
        assert exc.interval == "fortnight"

    def test_missing_interval_message(self) -> None:
        exc = InvalidIntervalException(None)
        assert "required" in exc.message
        assert exc.interval is None

    def test_empty_export_is_validation_error(self) -> None:
        exc = EmptyExportDomainException()
        assert isinstance(exc, ValidationException)
        assert str(exc) == exc.message
