"""Presentation variants of the composition engine: with_, for_ and try_.

All three run the same engine and differ only in final-value handling:

- ``with_``: strict. The block's value must be a Result; failures can be
  corrected through recovery clauses, which must also return Results.
- ``for_``: auto-wrap. ``after`` may return a plain value, wrapped in Ok;
  optional rescue clauses turn an overall failure into a raw value.
- ``try_``: raw. ``after`` and the rescue clauses return domain values that
  leave the Result convention entirely (e.g. an HTTP response).
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from okflow.compose.engine import Mode, compose, compose_async
from okflow.compose.steps import Final, Recovery

__all__ = [
    'for_',
    'for_async',
    'try_',
    'try_async',
    'with_',
    'with_async',
]

type Clauses = Recovery | Mapping[Any, Any] | Iterable[Any]


def _with_after(steps: Iterable[Any], after: Any) -> list[Any]:
    collected = list(steps)
    if after is not None:
        collected.append(after if isinstance(after, Final) else Final(after))
    return collected


def with_(steps: Iterable[Any], recovery: Clauses | None = None) -> Any:
    """Strict composition with optional recovery.

    Args:
        steps: The step list; the last step must produce a Result.
        recovery: Clauses matched against the unwrapped failure reason.

    Returns:
        The block's Result, a recovery clause's Result, or the original Err.

    Example:
        ```python
        with_(
            [
                Bind('a', lambda: safe_div(8, 2)),
                Bind('_', lambda a: safe_div(a, 0)),
            ],
            recovery={"'zero_division'": Ok(float('inf'))},
        )
        # Ok(value=inf)
        ```
    """
    return compose(steps, recovery, mode=Mode.STRICT)


def for_(steps: Iterable[Any], after: Any = None, rescue: Clauses | None = None) -> Any:
    """Auto-wrapping composition.

    Args:
        steps: The step list.
        after: Final expression, appended as the last step. Plain values are
            wrapped in Ok.
        rescue: Clauses tested against the reason of an overall failure,
            including an Err returned by ``after``. The matching body's value
            is returned unwrapped; an unmatched reason raises
            ``UnhandledFailureError``.

    Example:
        ```python
        for_(
            [Bind('number', lambda: fetch_key(data, 'a')), Bind('result', lambda number: safe_div(6, number))],
            after=lambda result: result * 10,
        )
        # Ok(value=7.5)
        ```
    """
    return compose(_with_after(steps, after), mode=Mode.WRAP, rescue=rescue)


def try_(steps: Iterable[Any], after: Any = None, rescue: Clauses | None = None) -> Any:
    """Composition returning raw values.

    On success the ``after`` value is returned untouched. On failure the
    first rescue clause matching the reason runs and its value is returned
    untouched; a reason no clause matches raises ``UnhandledFailureError``.

    Example:
        ```python
        try_(
            [Bind('user', lambda: fetch_user(user_id)), Bind('cart', lambda user: fetch_cart(user))],
            after=lambda user, cart: response(201, checkout(cart, user)),
            rescue={"'user_not_found'": response(404, 'no such user')},
        )
        ```
    """
    return compose(_with_after(steps, after), mode=Mode.RAW, rescue=rescue)


async def with_async(steps: Iterable[Any], recovery: Clauses | None = None) -> Any:
    """Async form of ``with_``."""
    return await compose_async(steps, recovery, mode=Mode.STRICT)


async def for_async(steps: Iterable[Any], after: Any = None, rescue: Clauses | None = None) -> Any:
    """Async form of ``for_``."""
    return await compose_async(_with_after(steps, after), mode=Mode.WRAP, rescue=rescue)


async def try_async(steps: Iterable[Any], after: Any = None, rescue: Clauses | None = None) -> Any:
    """Async form of ``try_``."""
    return await compose_async(_with_after(steps, after), mode=Mode.RAW, rescue=rescue)
