"""Tests for logging context variables."""

import asyncio

import pytest

from lambda_runtime.logging.context import (
    clear_context,
    get_extra_context,
    get_request_id,
    set_extra_context,
    set_request_id,
)


class TestRequestId:
    def test_empty_by_default(self):
        assert get_request_id() == ""

    def test_set_and_get(self):
        set_request_id("req-1")
        assert get_request_id() == "req-1"


class TestExtraContext:
    def test_empty_by_default(self):
        assert get_extra_context() == {}

    def test_set_merges(self):
        set_extra_context(a=1)
        set_extra_context(b=2)
        assert get_extra_context() == {"a": 1, "b": 2}

    def test_returns_copy(self):
        set_extra_context(a=1)
        get_extra_context()["a"] = 99
        assert get_extra_context() == {"a": 1}


class TestClearContext:
    def test_clears_everything(self):
        set_request_id("req-1")
        set_extra_context(a=1)
        clear_context()
        assert get_request_id() == ""
        assert get_extra_context() == {}


class TestTaskPropagation:
    @pytest.mark.asyncio
    async def test_spawned_task_sees_request_id(self):
        set_request_id("req-42")

        async def read_request_id():
            return get_request_id()

        assert await asyncio.create_task(read_request_id()) == "req-42"
