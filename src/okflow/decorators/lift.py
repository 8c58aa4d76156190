"""@lift and @lift_async decorators for wrapping plain return values in Ok."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any

import wrapt

from okflow.result import Ok

__all__ = ['lift', 'lift_async']


def lift[**P, T](func: Callable[P, T]) -> Callable[P, Ok[T]]:
    """Decorator that wraps the return value in Ok.

    Useful for functions that never fail, to use them where a Result is
    expected: binding steps, ``map_all``, or the right-hand side of ``>>``.

    Args:
        func: The function to wrap.

    Returns:
        A wrapped function that returns Ok[T] instead of T.

    Example:
        ```python
        @lift
        def add(a: int, b: int) -> int:
            return a + b
        add(2, 3)
        # Ok(value=5)
        ```
    """

    @wrapt.decorator
    def wrapper(
        wrapped: Callable[P, T],
        instance: Any,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> Ok[T]:
        return Ok(wrapped(*args, **kwargs))

    return wrapper(func)  # type: ignore[return-value]


def lift_async[**P, T](
    func: Callable[P, Awaitable[T]],
) -> Callable[P, Awaitable[Ok[T]]]:
    """Async decorator that wraps the awaited return value in Ok.

    Example:
        ```python
        @lift_async
        async def load_settings() -> dict:
            return {'debug': True}
        await load_settings()
        # Ok(value={'debug': True})
        ```
    """

    @wrapt.decorator
    async def wrapper(
        wrapped: Callable[P, Awaitable[T]],
        instance: Any,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> Ok[T]:
        result = await wrapped(*args, **kwargs)
        return Ok(result)

    return wrapper(func)  # type: ignore[return-value]
