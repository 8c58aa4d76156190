"""Combinators over Result values: bind, map, check, required, map_all."""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable, Iterable
from typing import Any

from okflow._source import describe
from okflow.errors import BadResultError, ContractError
from okflow.result import Err, Ok

__all__ = [
    'bind',
    'check',
    'map',
    'map_all',
    'map_all_async',
    'required',
]

VALUE_REQUIRED = 'value_required'


def _require_result(value: Any, name: str) -> None:
    if not isinstance(value, Ok | Err):
        raise ContractError(f'{name}() expects Ok or Err, got {value!r}')


def _require_unary(func: Any, name: str) -> None:
    """Fail unless ``func`` can be called with exactly one positional argument."""
    if not callable(func):
        raise ContractError(f'{name}() expects a single-argument callable, got {func!r}')
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return
    try:
        signature.bind(None)
    except TypeError:
        raise ContractError(f'{name}() expects a single-argument callable, got {describe(func)}') from None


def bind[T, U, E](result: Ok[T] | Err[E], func: Callable[[T], Ok[U] | Err[E]]) -> Ok[U] | Err[E]:
    """Apply ``func`` to the payload of an Ok; pass an Err through untouched.

    ``func`` is never called for an Err.

    Args:
        result: The Result to continue from.
        func: Single-argument callable returning a Result.

    Returns:
        ``func(value)`` for ``Ok(value)``, otherwise ``result`` itself.

    Raises:
        ContractError: If ``result`` is not a Result or ``func`` is not a
            single-argument callable.

    Example:
        ```python
        bind(Ok(8), lambda x: safe_div(x, 2))   # Ok(value=4.0)
        bind(Err('boom'), lambda x: safe_div(x, 2))   # Err(error='boom')
        ```
    """
    _require_unary(func, 'bind')
    _require_result(result, 'bind')
    if isinstance(result, Err):
        return result
    return func(result.value)


def map[T, U, E](result: Ok[T] | Err[E], func: Callable[[T], U]) -> Ok[U] | Err[E]:  # noqa: A001
    """Like ``bind`` but wraps the plain return value of ``func`` in Ok.

    Raises:
        ContractError: Same conditions as ``bind``.

    Example:
        ```python
        map(Ok(2), lambda x: x + 1)   # Ok(value=3)
        ```
    """
    _require_unary(func, 'map')
    _require_result(result, 'map')
    if isinstance(result, Err):
        return result
    return Ok(func(result.value))


def check[T, E](result: Ok[T] | Err[E], predicate: Callable[[T], bool], reason: E) -> Ok[T] | Err[E]:
    """Turn an Ok into ``Err(reason)`` when its payload fails ``predicate``.

    Err inputs pass through and the predicate is not called.

    Example:
        ```python
        check(Ok(5), lambda x: x > 0, 'negative')    # Ok(value=5)
        check(Ok(-5), lambda x: x > 0, 'negative')   # Err(error='negative')
        ```
    """
    _require_unary(predicate, 'check')
    _require_result(result, 'check')
    if isinstance(result, Err):
        return result
    if predicate(result.value):
        return result
    return Err(reason)


def required[T, E](value: T | None, reason: E = VALUE_REQUIRED) -> Ok[T] | Err[E]:  # type: ignore[assignment]
    """Wrap a present value in Ok and treat None as ``Err(reason)``.

    Only None counts as absent; falsy values such as 0 or '' are present.
    """
    if value is None:
        return Err(reason)
    return Ok(value)


def _collected[U](func: Callable[..., Any], returned: Any, values: list[U]) -> Err[Any] | None:
    if isinstance(returned, Err):
        return returned
    if not isinstance(returned, Ok):
        raise BadResultError(describe(func), returned)
    values.append(returned.value)
    return None


def map_all[T, U, E](items: Iterable[T], func: Callable[[T], Ok[U] | Err[E]]) -> Ok[list[U]] | Err[E]:
    """Apply a fallible function to every item, in order.

    Short-circuits on the first Err, which is returned unchanged; items after
    it are never visited and no partial list is returned.

    Args:
        items: The items to process.
        func: Single-argument callable returning a Result.

    Returns:
        ``Ok`` of the unwrapped values in input order, or the first Err.

    Raises:
        ContractError: If ``func`` is not a single-argument callable.
        BadResultError: If ``func`` returns something other than a Result.

    Example:
        ```python
        map_all([1, 2, 4], lambda x: safe_div(8, x))    # Ok(value=[8.0, 4.0, 2.0])
        map_all([-1, 0, 1], lambda x: safe_div(8, x))   # Err(error='zero_division')
        ```
    """
    _require_unary(func, 'map_all')
    values: list[U] = []
    for item in items:
        failed = _collected(func, func(item), values)
        if failed is not None:
            return failed
    return Ok(values)


async def map_all_async[T, U, E](
    items: Iterable[T],
    func: Callable[[T], Awaitable[Ok[U] | Err[E]] | Ok[U] | Err[E]],
) -> Ok[list[U]] | Err[E]:
    """Async form of ``map_all``; items are processed one at a time, in order."""
    _require_unary(func, 'map_all_async')
    values: list[U] = []
    for item in items:
        returned = func(item)
        if inspect.isawaitable(returned):
            returned = await returned
        failed = _collected(func, returned, values)
        if failed is not None:
            return failed
    return Ok(values)
