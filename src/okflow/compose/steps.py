"""Composition steps and recovery clauses.

A composition is an ordered list of steps:

- ``Bind(pattern, expr)``: ``expr`` must produce a Result. ``Ok`` payloads are
  destructured into the environment and ``Err`` short-circuits.
- ``Let(pattern, expr)``: ordinary computation. The value is destructured
  but never inspected for a result tag.
- ``Final(expr)``: the value of the composition. Only valid last.

Expressions are callables that declare the names they need as parameters::

    Bind('a', lambda: safe_div(8, 2))
    Bind('b', lambda a: safe_div(a, 2))
    Final(lambda a, b: Ok(a + b))

Parameters with a default are never filled from the environment. A callable
taking ``**kwargs`` receives the whole environment, and a non-callable
object is used as a constant.
"""

from __future__ import annotations

import inspect
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from okflow._logging import get_logger
from okflow._source import describe
from okflow.compose.pattern import WILDCARD, Pattern
from okflow.errors import ContractError

__all__ = [
    'Bind',
    'Clause',
    'Expression',
    'Final',
    'Let',
    'Recovery',
    'Step',
    'coerce_steps',
]


def _parameters(target: Any) -> tuple[str, ...] | None:
    """Names filled from the environment; None if the callable takes ``**kwargs``.

    Parameters with a default keep it, so ``lambda i=i: ...`` captures work.
    """
    try:
        signature = inspect.signature(target)
    except (TypeError, ValueError):
        return ()
    names = []
    for parameter in signature.parameters.values():
        if parameter.kind is inspect.Parameter.VAR_KEYWORD:
            return None
        if parameter.default is not inspect.Parameter.empty:
            continue
        if parameter.kind in (inspect.Parameter.POSITIONAL_OR_KEYWORD, inspect.Parameter.KEYWORD_ONLY):
            names.append(parameter.name)
    return tuple(names)


@dataclass(slots=True, frozen=True)
class Expression:
    """A step's right-hand side: a callable fed from the environment, or a constant.

    Attributes:
        target: The callable (or constant value).
        source: Explicit source text for fault messages.
    """

    target: Any
    source: str | None = None
    params: tuple[str, ...] | None = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        params = _parameters(self.target) if callable(self.target) else ()
        object.__setattr__(self, 'params', params)

    def evaluate(self, scope: Mapping[str, Any]) -> Any:
        """Evaluate against ``scope``; may return an awaitable for async callables."""
        if not callable(self.target):
            return self.target
        if self.params is None:
            return self.target(**scope)
        return self.target(**{name: scope[name] for name in self.params if name in scope})

    def describe(self) -> str:
        """Source text used when quoting this expression in a fault."""
        return describe(self.target, self.source)


def _expression(expr: Any, source: str | None) -> Expression:
    if isinstance(expr, Expression):
        return expr if source is None else Expression(expr.target, source)
    return Expression(expr, source)


@dataclass(slots=True, frozen=True, init=False)
class Bind:
    """Binding step: ``pattern <- expr``; ``expr`` must evaluate to a Result."""

    pattern: Pattern
    expression: Expression

    def __init__(self, pattern: Pattern | str | type, expr: Any, *, source: str | None = None) -> None:
        object.__setattr__(self, 'pattern', Pattern.coerce(pattern))
        object.__setattr__(self, 'expression', _expression(expr, source))


@dataclass(slots=True, frozen=True, init=False)
class Let:
    """Plain step: ``pattern = expr``; the value is never checked for a tag."""

    pattern: Pattern
    expression: Expression

    def __init__(self, pattern: Pattern | str | type, expr: Any, *, source: str | None = None) -> None:
        object.__setattr__(self, 'pattern', Pattern.coerce(pattern))
        object.__setattr__(self, 'expression', _expression(expr, source))


@dataclass(slots=True, frozen=True, init=False)
class Final:
    """Terminal step: its value is the composition's value."""

    expression: Expression

    def __init__(self, expr: Any, *, source: str | None = None) -> None:
        object.__setattr__(self, 'expression', _expression(expr, source))


type Step = Bind | Let | Final


def coerce_steps(steps: Iterable[Any]) -> tuple[Step, ...]:
    """Normalise a raw step list.

    Steps stay as they are. The last entry, if it is not a step, becomes a
    ``Final``; a bare callable anywhere else becomes ``Let('_', expr)``.

    Raises:
        ContractError: On an empty list, a ``Final`` before the end, or an
            entry that cannot be a step.
    """
    raw = list(steps)
    if not raw:
        raise ContractError('a composition needs at least one step')

    last = len(raw) - 1
    coerced: list[Step] = []
    for index, entry in enumerate(raw):
        if isinstance(entry, Bind | Let):
            coerced.append(entry)
        elif isinstance(entry, Final):
            if index != last:
                raise ContractError(f'Final step at position {index} must be the last step')
            coerced.append(entry)
        elif index == last:
            coerced.append(Final(entry))
        elif callable(entry):
            coerced.append(Let(WILDCARD, entry))
        else:
            raise ContractError(f'step at position {index} is not a step or a callable: {entry!r}')
    return tuple(coerced)


@dataclass(slots=True, frozen=True, init=False)
class Clause:
    """One recovery handler: ``pattern -> body``.

    The body receives the pattern's captures as keyword arguments.
    """

    pattern: Pattern
    body: Expression

    def __init__(self, pattern: Pattern | str | type, body: Any, *, source: str | None = None) -> None:
        object.__setattr__(self, 'pattern', Pattern.coerce(pattern))
        object.__setattr__(self, 'body', _expression(body, source))


def _is_pair(value: Any) -> bool:
    """A lone ``(pattern, body)`` tuple rather than a sequence of clauses."""
    return isinstance(value, tuple) and len(value) == 2 and isinstance(value[0], str | type | Pattern)


class Recovery:
    """Ordered recovery clauses tested against an unwrapped failure reason.

    First match wins. When nothing matches, the caller gets the original
    ``Err(reason)`` back. Clause sets are not checked for exhaustiveness.

    Example:
        ```python
        Recovery(
            ("'zero_division'", lambda: Ok(float('inf'))),
            (KeyError, Err('missing')),
        )
        Recovery({"'not_found'": Ok(None), 'reason': lambda reason: Err(str(reason))})
        ```
    """

    __slots__ = ('clauses',)

    def __init__(self, *clauses: Clause | tuple[Any, Any] | Mapping[Any, Any]) -> None:
        collected: list[Clause] = []
        for entry in clauses:
            if isinstance(entry, Clause):
                collected.append(entry)
            elif isinstance(entry, Mapping):
                collected.extend(Clause(pattern, body) for pattern, body in entry.items())
            elif isinstance(entry, tuple) and len(entry) == 2:
                collected.append(Clause(*entry))
            else:
                raise ContractError(f'not a recovery clause: {entry!r}')
        if not collected:
            raise ContractError('a clause set needs at least one clause')
        self.clauses: tuple[Clause, ...] = tuple(collected)
        self._warn_unreachable()

    def __repr__(self) -> str:
        patterns = ', '.join(clause.pattern.source for clause in self.clauses)
        return f'Recovery({patterns})'

    def __len__(self) -> int:
        return len(self.clauses)

    @classmethod
    def coerce(cls, clauses: Recovery | Mapping[Any, Any] | Iterable[Any] | None) -> Recovery | None:
        """Accept a Recovery, a Clause, a mapping, a lone pair or an iterable of clauses/pairs."""
        if clauses is None or isinstance(clauses, Recovery):
            return clauses
        if isinstance(clauses, Mapping):
            return cls(clauses)
        if isinstance(clauses, Clause) or _is_pair(clauses):
            return cls(clauses)
        return cls(*clauses)

    def _warn_unreachable(self) -> None:
        seen: dict[str, int] = {}
        catch_all: int | None = None
        for index, clause in enumerate(self.clauses):
            source = clause.pattern.source
            shadowed_by = catch_all if catch_all is not None else seen.get(source)
            if shadowed_by is not None:
                get_logger(__name__).warning(
                    'unreachable_recovery_clause',
                    pattern=source,
                    position=index,
                    shadowed_by=self.clauses[shadowed_by].pattern.source,
                )
            seen.setdefault(source, index)
            if catch_all is None and clause.pattern.irrefutable:
                catch_all = index

    def select(self, reason: Any) -> tuple[Clause, dict[str, Any]] | None:
        """Return the first clause matching ``reason`` and its captures."""
        for clause in self.clauses:
            bindings = clause.pattern.match(reason)
            if bindings is not None:
                return clause, bindings
        return None

