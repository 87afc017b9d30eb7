"""Uniform calling of user callables.

Route handlers, mounted-router handlers, error handlers and lifespan
hooks may each be plain functions or coroutine functions.
"""

import inspect
from typing import Any


async def invoke(func: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *func*; if the result is awaitable, return what it resolves to."""
    result = func(*args, **kwargs)
    return await result if inspect.isawaitable(result) else result
