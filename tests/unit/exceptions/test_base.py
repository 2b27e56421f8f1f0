"""Tests for base exception classes."""

from lambda_runtime.exceptions.base import LambdaRuntimeError
from lambda_runtime.exceptions.invocation_errors import HandlerError


class TestLambdaRuntimeError:
    def test_default_error_code(self):
        error = LambdaRuntimeError("something failed")
        assert error.error_code == "RUNTIME_ERROR"

    def test_default_error_type(self):
        error = LambdaRuntimeError("something failed")
        assert error.error_type == "runtime.Error"

    def test_message_attribute(self):
        error = LambdaRuntimeError("test message")
        assert error.message == "test message"

    def test_empty_context_by_default(self):
        error = LambdaRuntimeError("test")
        assert error.context == {}

    def test_custom_context(self):
        context = {"request_id": "abc"}
        error = LambdaRuntimeError("test", context=context)
        assert error.context == context

    def test_to_error_payload(self):
        error = LambdaRuntimeError("test message")
        assert error.to_error_payload() == {
            "errorMessage": "test message",
            "errorType": "runtime.Error",
        }

    def test_to_log_dict(self):
        error = LambdaRuntimeError("test message", context={"key": "value"})
        result = error.to_log_dict()
        assert result["error_code"] == "RUNTIME_ERROR"
        assert result["message"] == "test message"
        assert result["context"] == {"key": "value"}
        assert result["exception_type"] == "LambdaRuntimeError"

    def test_str_without_context(self):
        assert str(LambdaRuntimeError("plain")) == "plain"

    def test_str_with_context(self):
        error = LambdaRuntimeError("msg", context={"a": 1})
        assert str(error) == "msg (context: {'a': 1})"

    def test_repr(self):
        error = LambdaRuntimeError("msg")
        assert repr(error) == (
            "LambdaRuntimeError(message='msg', error_code='RUNTIME_ERROR', context={})"
        )


class TestSubclasses:
    def test_subclass_overrides_codes(self):
        error = HandlerError("denied")
        assert isinstance(error, LambdaRuntimeError)
        assert error.to_log_dict()["error_code"] == "HANDLER_ERROR"
        assert error.to_log_dict()["error_type"] == "HandlerError"
