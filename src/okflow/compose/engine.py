"""The composition engine: walk steps, thread bindings, short-circuit on Err.

The walk itself is a generator that never calls user code. It yields
``(expression, scope)`` requests and receives the evaluated value back, so a
plain driver (``compose``) and an awaiting driver (``compose_async``) share
one implementation of the algorithm:

1. Each invocation owns a fresh environment.
2. Steps run strictly in order.
3. ``Bind``: ``Err`` stops the walk; ``Ok(v)`` with ``v`` matching the pattern
   extends the environment; anything else raises ``BindError``.
4. ``Let``: the value is destructured with no result-tag check.
5. The last step's value is handled according to ``Mode``.
6. On ``Err`` with a recovery set, the first clause matching the unwrapped
   reason runs and its value is handled like a final value; no match returns
   the original ``Err``.
7. On ``Err`` with a rescue set, from a binding step or as the final value,
   the matching clause's value is returned as is.
"""

from __future__ import annotations

import inspect
from collections.abc import Generator, Iterable, Mapping
from enum import Enum
from typing import Any

from okflow._logging import get_logger
from okflow.compose.steps import Bind, Expression, Final, Let, Recovery, Step, coerce_steps
from okflow.errors import BadResultError, BindError, ContractError, MatchError, UnhandledFailureError
from okflow.result import Err, Ok

__all__ = ['Mode', 'compose', 'compose_async']

type _Walk = Generator[tuple[Expression, Mapping[str, Any]], Any, Any]


class Mode(Enum):
    """How the final value of a composition is handled.

    STRICT: the final value must already be an Ok or an Err.
    WRAP: non-result final values are wrapped in Ok.
    RAW: the final value is returned untouched.
    """

    STRICT = 'strict'
    WRAP = 'wrap'
    RAW = 'raw'


def _finish(value: Any, expression: Expression, mode: Mode) -> Any:
    if mode is Mode.RAW:
        return value
    if isinstance(value, Ok | Err):
        return value
    if mode is Mode.WRAP:
        return Ok(value)
    raise BadResultError(expression.describe(), value)


def _walk(steps: tuple[Step, ...], recovery: Recovery | None, rescue: Recovery | None, mode: Mode) -> _Walk:
    env: dict[str, Any] = {}
    outcome: Any = None
    failed: Err[Any] | None = None

    for position, step in enumerate(steps):
        value = yield step.expression, env
        match step:
            case Bind(pattern=pattern):
                if isinstance(value, Err):
                    failed = value
                    get_logger(__name__).debug('short_circuit', position=position, pattern=pattern.source)
                    break
                bound = pattern.match(value.value) if isinstance(value, Ok) else None
                if bound is None:
                    raise BindError(pattern.source, step.expression.describe(), value)
                env.update(bound)
                outcome = value
            case Let(pattern=pattern):
                bound = pattern.match(value)
                if bound is None:
                    raise MatchError(pattern.source, value)
                env.update(bound)
                outcome = value
            case Final():
                outcome = value

    if failed is None:
        last = steps[-1]
        if not isinstance(last, Bind):
            outcome = _finish(outcome, last.expression, mode)
        if rescue is None or not isinstance(outcome, Err):
            return outcome
        failed = outcome

    if rescue is not None:
        selected = rescue.select(failed.error)
        if selected is None:
            raise UnhandledFailureError(failed.error)
        clause, bound = selected
        return (yield clause.body, bound)

    if recovery is None:
        return failed

    selected = recovery.select(failed.error)
    if selected is None:
        get_logger(__name__).debug('recovery_passthrough', reason=repr(failed.error))
        return failed
    clause, bound = selected
    value = yield clause.body, bound
    return _finish(value, clause.body, mode)


def _prepare(
    steps: Iterable[Any],
    recovery: Any,
    rescue: Any,
    mode: Mode | str,
) -> _Walk:
    if recovery is not None and rescue is not None:
        raise ContractError('pass either recovery or rescue, not both')
    return _walk(coerce_steps(steps), Recovery.coerce(recovery), Recovery.coerce(rescue), Mode(mode))


def compose(
    steps: Iterable[Any],
    recovery: Recovery | Mapping[Any, Any] | Iterable[Any] | None = None,
    *,
    mode: Mode | str = Mode.STRICT,
    rescue: Recovery | Mapping[Any, Any] | Iterable[Any] | None = None,
) -> Any:
    """Run a step list and return a single Result.

    Args:
        steps: ``Bind``/``Let``/``Final`` steps; see ``okflow.compose.steps``.
        recovery: Clauses tested against the reason of the first failing
            binding step. Unmatched reasons pass through as ``Err``.
        mode: Final value handling: ``STRICT`` requires a Result, ``WRAP``
            wraps plain values in Ok, ``RAW`` returns them untouched.
        rescue: Clauses whose matching body value is returned unwrapped on
            failure, including an Err final value. Exclusive with ``recovery``.

    Returns:
        The composition's Result (or a raw value for ``RAW``/rescue).

    Raises:
        BindError: A binding step produced neither a matching Ok nor an Err.
        BadResultError: A final or recovery value was not a Result in STRICT mode.
        MatchError: A plain step's value did not match its pattern.
        UnhandledFailureError: No rescue clause matched the failure reason.
        ContractError: The step list or arguments are malformed.

    Example:
        ```python
        compose([
            Bind('a', lambda: safe_div(8, 2)),
            Bind('b', lambda a: safe_div(a, 2)),
            Final(lambda a, b: Ok(a + b)),
        ])
        # Ok(value=6.0)
        ```
    """
    walk = _prepare(steps, recovery, rescue, mode)
    request = next(walk)
    while True:
        expression, scope = request
        value = expression.evaluate(scope)
        try:
            request = walk.send(value)
        except StopIteration as e:
            return e.value


async def compose_async(
    steps: Iterable[Any],
    recovery: Recovery | Mapping[Any, Any] | Iterable[Any] | None = None,
    *,
    mode: Mode | str = Mode.STRICT,
    rescue: Recovery | Mapping[Any, Any] | Iterable[Any] | None = None,
) -> Any:
    """Async form of ``compose``.

    Expressions may be coroutine functions or return awaitables; each one is
    awaited to completion before the next step starts. Steps never overlap.

    Example:
        ```python
        await compose_async([
            Bind('user', lambda: fetch_user(user_id)),
            Bind('cart', lambda user: fetch_cart(user)),
            Final(lambda user, cart: checkout(cart, user)),
        ])
        ```
    """
    walk = _prepare(steps, recovery, rescue, mode)
    request = next(walk)
    while True:
        expression, scope = request
        value = expression.evaluate(scope)
        if inspect.isawaitable(value):
            value = await value
        try:
            request = walk.send(value)
        except StopIteration as e:
            return e.value
