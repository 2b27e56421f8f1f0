"""Tests for the invocation logging adapter."""

from lambda_runtime.context.models import InvocationContext
from lambda_runtime.logging.adapters.invocation_adapter import (
    clear_invocation_context,
    set_invocation_context,
)
from lambda_runtime.logging.context import get_extra_context, get_request_id


def _make_context(**overrides):
    values = {
        "request_id": "req-1",
        "deadline_ms": 1_700_000_000_000,
        "invoked_function_arn": "arn:aws:lambda:us-east-1:123456789012:function:fn",
        "function_name": "fn",
        "function_version": "3",
    }
    values.update(overrides)
    return InvocationContext(**values)


class TestSetInvocationContext:
    def test_sets_request_id(self):
        set_invocation_context(_make_context())
        assert get_request_id() == "req-1"

    def test_sets_function_fields(self):
        set_invocation_context(_make_context())
        assert get_extra_context() == {"function_name": "fn", "function_version": "3"}

    def test_sets_trace_id_when_present(self):
        set_invocation_context(_make_context(trace_id="Root=1-abc"))
        assert get_extra_context()["xray_trace_id"] == "Root=1-abc"


class TestClearInvocationContext:
    def test_clears_all_fields(self):
        set_invocation_context(_make_context(trace_id="Root=1-abc"))
        clear_invocation_context()
        assert get_request_id() == ""
        assert get_extra_context() == {}
