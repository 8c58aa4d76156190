"""@strict decorator: enforce that a collaborator returns a Result."""

from __future__ import annotations

import inspect
from collections.abc import Callable
from typing import Any

import wrapt

from okflow.errors import BadResultError
from okflow.result import Err, Ok

__all__ = ['strict']


def _call_text(wrapped: Callable[..., Any], args: tuple[Any, ...], kwargs: dict[str, Any]) -> str:
    name = getattr(wrapped, '__qualname__', None) or repr(wrapped)
    rendered = [*map(repr, args), *(f'{k}={v!r}' for k, v in kwargs.items())]
    return f'{name}({", ".join(rendered)})'


def _checked(wrapped: Callable[..., Any], args: tuple[Any, ...], kwargs: dict[str, Any], value: Any) -> Any:
    if not isinstance(value, Ok | Err):
        raise BadResultError(_call_text(wrapped, args, kwargs), value)
    return value


def strict[**P, R](func: Callable[P, R]) -> Callable[P, R]:
    """Decorator that raises BadResultError unless the function returns a Result.

    Catches collaborators that break the Result contract where they are
    called instead of deep inside a composition. Coroutine functions are
    checked after they are awaited.

    Example:
        ```python
        @strict
        def fetch_user(user_id: int) -> Result[User, str]:
            ...
        fetch_user(1)   # raises BadResultError if it returns e.g. None
        ```
    """
    if inspect.iscoroutinefunction(func):

        @wrapt.decorator
        async def async_wrapper(
            wrapped: Callable[..., Any],
            instance: Any,
            args: tuple[Any, ...],
            kwargs: dict[str, Any],
        ) -> Any:
            return _checked(wrapped, args, kwargs, await wrapped(*args, **kwargs))

        return async_wrapper(func)  # type: ignore[return-value]

    @wrapt.decorator
    def sync_wrapper(
        wrapped: Callable[..., Any],
        instance: Any,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> Any:
        return _checked(wrapped, args, kwargs, wrapped(*args, **kwargs))

    return sync_wrapper(func)  # type: ignore[return-value]
