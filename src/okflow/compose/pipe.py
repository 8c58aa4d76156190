"""Chained-pipe operator: ``result >> rhs`` (bind) and ``result | rhs`` (map).

The right-hand side is either a single-argument callable or a ``Call``,
which fills its first argument slot with the success payload::

    Ok('a,b') | call(str.split, ',')        # Ok(value=['a', 'b'])
    Ok(8) >> call(safe_div, 2)              # safe_div(8, 2)
    Ok(8) >> call(safe_div, 0) | str        # Err(error='zero_division')

An Err on the left passes through without evaluating the right-hand side.
``>>`` binds tighter than ``|``: ``r | f >> g`` groups as ``r | (f >> g)``,
so parenthesise a map step that comes before a bind step.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from okflow._source import describe
from okflow.errors import BadResultError, ContractError
from okflow.result import Err, Ok

__all__ = ['Call', 'call', 'pipe_bind', 'pipe_map']


class Call:
    """A call expression whose first argument is supplied later.

    ``Call(f, *args, **kwargs)(x)`` evaluates ``f(x, *args, **kwargs)``.
    """

    __slots__ = ('args', 'func', 'kwargs')

    def __init__(self, func: Callable[..., Any], /, *args: Any, **kwargs: Any) -> None:
        if not callable(func):
            raise ContractError(f'call() expects a callable, got {func!r}')
        self.func = func
        self.args = args
        self.kwargs = kwargs

    def __call__(self, value: Any) -> Any:
        return self.func(value, *self.args, **self.kwargs)

    def __repr__(self) -> str:
        name = getattr(self.func, '__qualname__', None) or repr(self.func)
        rendered = ['_', *map(repr, self.args), *(f'{k}={v!r}' for k, v in self.kwargs.items())]
        return f'{name}({", ".join(rendered)})'


def call(func: Callable[..., Any], /, *args: Any, **kwargs: Any) -> Call:
    """Build a ``Call`` for the right-hand side of a pipe."""
    return Call(func, *args, **kwargs)


def _check(result: Any, rhs: Any, operator: str) -> None:
    if not isinstance(result, Ok | Err):
        raise ContractError(f'left operand of {operator} must be Ok or Err, got {result!r}')
    if not callable(rhs):
        raise ContractError(f'right operand of {operator} must be callable or call(...), got {rhs!r}')


def pipe_bind(result: Ok[Any] | Err[Any], rhs: Callable[[Any], Any]) -> Ok[Any] | Err[Any]:
    """Bind-flavoured pipe step.

    Raises:
        ContractError: If the operands have the wrong shape.
        BadResultError: If the right-hand side returns something other than a Result.
    """
    _check(result, rhs, '>>')
    if isinstance(result, Err):
        return result
    returned = rhs(result.value)
    if not isinstance(returned, Ok | Err):
        raise BadResultError(describe(rhs), returned)
    return returned


def pipe_map(result: Ok[Any] | Err[Any], rhs: Callable[[Any], Any]) -> Ok[Any] | Err[Any]:
    """Map-flavoured pipe step: the right-hand side's value is wrapped in Ok."""
    _check(result, rhs, '|')
    if isinstance(result, Err):
        return result
    return Ok(rhs(result.value))
