"""Result type: Ok[T] | Err[E] for explicit, value-level failure handling."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, NoReturn, TypeIs

import msgspec

__all__ = [
    'Err',
    'Ok',
    'Result',
    'failure',
    'is_failure',
    'is_result',
    'is_success',
    'success',
]


class Ok[T](msgspec.Struct, frozen=True, gc=False):
    """Success variant of Result containing a value of type T.

    Ok wraps the payload of an operation that succeeded. The payload can be
    extracted, transformed, or threaded through a chain of Result-returning
    operations.

    Examples:
        >>> ok = Ok(42)
        >>> ok.unwrap()
        42
        >>> ok.map(lambda x: x * 2)
        Ok(value=84)
        >>> match ok:
        ...     case Ok(value):
        ...         value
        42
    """

    value: T

    def is_ok(self) -> TypeIs[Ok[T]]:
        """Return True since this is Ok."""
        return True

    def is_err(self) -> TypeIs[Err[object]]:
        """Return False since this is Ok."""
        return False

    def unwrap(self) -> T:
        """Return the contained Ok value."""
        return self.value

    def unwrap_or(self, default: T) -> T:  # noqa: ARG002
        """Return the contained Ok value, ignoring the default."""
        return self.value

    def unwrap_or_else(self, f: Callable[[], T]) -> T:  # noqa: ARG002
        """Return the contained Ok value, ignoring the fallback function."""
        return self.value

    def expect(self, _msg: str) -> T:
        """Return the contained Ok value, ignoring the message."""
        return self.value

    def map[U](self, f: Callable[[T], U]) -> Ok[U]:
        """Apply a function to the contained value.

        Args:
            f: Function to apply to the Ok value.

        Returns:
            Ok containing the result of applying f to the value.
        """
        return Ok(f(self.value))

    def map_err[F](self, _f: Callable[[object], F]) -> Ok[T]:
        """Return self unchanged since this is Ok."""
        return self

    def and_then[U, E](self, f: Callable[[T], Ok[U] | Err[E]]) -> Ok[U] | Err[E]:
        """Apply a function that returns a Result to the contained value.

        Also known as flatmap or bind.

        Args:
            f: Function that takes T and returns Result[U, E].

        Returns:
            The Result returned by f.
        """
        return f(self.value)

    def or_else[F](self, _f: Callable[[object], Ok[T] | Err[F]]) -> Ok[T]:
        """Return self unchanged since this is Ok."""
        return self

    def flatten[U, E](self: Ok[Ok[U] | Err[E]]) -> Ok[U] | Err[E]:
        """Flatten a nested Result.

        Converts Result[Result[T, E], E] into Result[T, E].
        """
        return self.value  # type: ignore[return-value]

    def __rshift__(self, rhs: Any) -> Ok[Any] | Err[Any]:
        """Bind-flavoured pipe: ``Ok(x) >> f`` returns ``f(x)``, which must be a Result."""
        from okflow.compose.pipe import pipe_bind

        return pipe_bind(self, rhs)

    def __or__(self, rhs: Any) -> Ok[Any]:
        """Map-flavoured pipe: ``Ok(x) | f`` returns ``Ok(f(x))``."""
        from okflow.compose.pipe import pipe_map

        return pipe_map(self, rhs)


class Err[E](msgspec.Struct, frozen=True, gc=False):
    """Failure variant of Result containing a reason of type E.

    The reason is ordinary data: it flows through every combinator untouched
    until something pattern-matches on it.

    Examples:
        >>> err = Err('something went wrong')
        >>> err.is_err()
        True
        >>> err.unwrap_or(0)
        0
    """

    error: E

    def is_ok(self) -> TypeIs[Ok[object]]:
        """Return False since this is Err."""
        return False

    def is_err(self) -> TypeIs[Err[E]]:
        """Return True since this is Err."""
        return True

    def unwrap(self) -> NoReturn:
        """Raise an exception since this is Err.

        Raises:
            RuntimeError: Always, since Err has no Ok value to unwrap.
        """
        raise RuntimeError(f'Called unwrap on Err: {self.error!r}')

    def unwrap_or[T](self, default: T) -> T:
        """Return the default value since this is Err."""
        return default

    def unwrap_or_else[T](self, f: Callable[[], T]) -> T:
        """Compute and return a default value since this is Err."""
        return f()

    def expect(self, msg: str) -> NoReturn:
        """Raise an exception with a custom message.

        Raises:
            RuntimeError: Always, with the custom message.
        """
        raise RuntimeError(f'{msg}: {self.error!r}')

    def map[T, U](self, _f: Callable[[T], U]) -> Err[E]:
        """Return self unchanged since this is Err."""
        return self

    def map_err[F](self, f: Callable[[E], F]) -> Err[F]:
        """Apply a function to the contained reason."""
        return Err(f(self.error))

    def and_then[T, U](self, _f: Callable[[T], Ok[U] | Err[E]]) -> Err[E]:
        """Return self unchanged since this is Err."""
        return self

    def or_else[T, F](self, f: Callable[[E], Ok[T] | Err[F]]) -> Ok[T] | Err[F]:
        """Apply a recovery function to the reason.

        Args:
            f: Function that takes the reason and returns a new Result.

        Returns:
            The Result returned by f.
        """
        return f(self.error)

    def flatten(self) -> Err[E]:
        """Return self since this is Err (nothing to flatten)."""
        return self

    def __rshift__(self, rhs: Any) -> Err[E]:
        """Bind-flavoured pipe returns self unchanged for Err."""
        from okflow.compose.pipe import pipe_bind

        return pipe_bind(self, rhs)

    def __or__(self, rhs: Any) -> Err[E]:
        """Map-flavoured pipe returns self unchanged for Err."""
        from okflow.compose.pipe import pipe_map

        return pipe_map(self, rhs)


type Result[T, E = Any] = Ok[T] | Err[E]


def success[T](value: T) -> Ok[T]:
    """Build a success result. ``success(v) == Ok(v)``."""
    return Ok(value)


def failure[E](reason: E) -> Err[E]:
    """Build a failure result. ``failure(r) == Err(r)``."""
    return Err(reason)


def is_result(value: object) -> TypeIs[Ok[Any] | Err[Any]]:
    """Return True if value is an Ok or an Err."""
    return isinstance(value, Ok | Err)


def is_success(value: object) -> TypeIs[Ok[Any]]:
    """Return True if value is an Ok.

    Unlike ``value.is_ok()`` this never raises on foreign values, which makes
    it safe for classifying the return of third-party callables.

    Examples:
        >>> is_success(Ok(1)), is_success(Err(1)), is_success(('ok', 1))
        (True, False, False)
    """
    return isinstance(value, Ok)


def is_failure(value: object) -> TypeIs[Err[Any]]:
    """Return True if value is an Err."""
    return isinstance(value, Err)
