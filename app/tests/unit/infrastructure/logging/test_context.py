"""Unit tests for infrastructure.logging.context module."""

import pytest
import structlog

from infrastructure.logging.context import (
    bind_operation_context,
    clear_operation_context,
    get_correlation_id,
    set_correlation_id,
)

pytestmark = pytest.mark.unit


class TestBindOperationContext:
    def test_generates_correlation_id(self):
        with bind_operation_context(operation="auth.test") as correlation_id:
            assert correlation_id
            assert get_correlation_id() == correlation_id
            assert structlog.contextvars.get_contextvars()["operation"] == "auth.test"

        assert get_correlation_id() is None

    def test_explicit_correlation_id_and_extra(self):
        with bind_operation_context(
            correlation_id="req-1", token_class="delegated", channel="C0123456789"
        ) as correlation_id:
            context = structlog.contextvars.get_contextvars()

        assert correlation_id == "req-1"
        assert context["token_class"] == "delegated"
        assert context["channel"] == "C0123456789"

    def test_nested_blocks_restore_outer_values(self):
        with bind_operation_context(correlation_id="outer", operation="resolve"):
            with bind_operation_context(operation="conversations.list") as inner_id:
                assert inner_id == "outer"
                assert structlog.contextvars.get_contextvars()["operation"] == (
                    "conversations.list"
                )
            assert structlog.contextvars.get_contextvars()["operation"] == "resolve"
            assert get_correlation_id() == "outer"

    def test_unbinds_on_exception(self):
        with pytest.raises(RuntimeError):
            with bind_operation_context(correlation_id="req-2"):
                raise RuntimeError("boom")

        assert get_correlation_id() is None


class TestCorrelationIdHelpers:
    def test_set_and_clear(self):
        set_correlation_id("abc")
        assert get_correlation_id() == "abc"

        clear_operation_context()

        assert get_correlation_id() is None
