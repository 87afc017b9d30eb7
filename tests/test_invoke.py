"""Tests for wayline._internal.invoke: sync and async handler calls."""

from wayline._internal.invoke import invoke


class TestInvoke:
    async def test_sync_handler(self) -> None:
        def handler(a, b=0):
            return a + b

        assert await invoke(handler, 1, b=2) == 3

    async def test_async_handler(self) -> None:
        async def handler(a):
            return a * 2

        assert await invoke(handler, 4) == 8

    async def test_sync_handler_returning_awaitable(self) -> None:
        async def inner():
            return "done"

        def handler():
            return inner()

        assert await invoke(handler) == "done"
