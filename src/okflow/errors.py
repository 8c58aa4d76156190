"""Fault types raised when a composition contract is violated.

Business failures travel as ``Err`` values and are never raised. The
exceptions here signal programmer errors: a step that does not honour the
Result contract, a continuation that cannot be called, a malformed pattern.
Each fault also derives from the closest builtin so generic handlers keep
working.
"""

from __future__ import annotations

from typing import Any

__all__ = [
    'BadResultError',
    'BindError',
    'ContractError',
    'MatchError',
    'OkflowError',
    'PatternError',
    'UnhandledFailureError',
]


class OkflowError(Exception):
    """Base class for every fault raised by okflow."""


class BindError(OkflowError):
    """A binding step produced something other than a matching Ok or an Err."""

    def __init__(self, pattern: str, expression: str, value: Any) -> None:
        self.pattern = pattern
        self.expression = expression
        self.value = value
        super().__init__(self._render())

    def _render(self) -> str:
        actual = repr(self.value)
        return (
            f"no binding to right hand side value: '{actual}'\n"
            '\n'
            '    Code\n'
            f'      {self.pattern} <- {self.expression}\n'
            '\n'
            '    Expected signature\n'
            f'      {self.expression} :: Ok({self.pattern}) | Err(reason)\n'
            '\n'
            '    Actual values\n'
            f'      {self.expression} :: {actual}\n'
        )


class BadResultError(OkflowError):
    """A final value (block, recovery clause or pipe) was not a Result."""

    def __init__(self, code: str, value: Any) -> None:
        self.code = code
        self.value = value
        super().__init__(self._render())

    def _render(self) -> str:
        return (
            'final value from block was invalid, a result was expected.\n'
            '\n'
            '    Code\n'
            f'      {self.code}\n'
            '\n'
            '    Expected output\n'
            '      Ok(value) | Err(reason)\n'
            '\n'
            '    Actual output\n'
            f'      {self.value!r}\n'
        )


class ContractError(OkflowError, TypeError):
    """A combinator was called with arguments that break its contract."""


class MatchError(OkflowError, ValueError):
    """A plain step's value did not destructure against its pattern."""

    def __init__(self, pattern: str, value: Any) -> None:
        self.pattern = pattern
        self.value = value
        super().__init__(f'no match of right hand side value: {value!r} (pattern: {pattern})')


class PatternError(OkflowError, ValueError):
    """A pattern could not be parsed or uses an unsupported construct."""

    def __init__(self, source: str, reason: str) -> None:
        self.source = source
        self.reason = reason
        super().__init__(f'invalid pattern {source!r}: {reason}')


class UnhandledFailureError(OkflowError):
    """A rescue clause set had no clause for the failure reason."""

    def __init__(self, reason: Any) -> None:
        self.reason = reason
        super().__init__(f'no rescue clause matching failure reason: {reason!r}')
