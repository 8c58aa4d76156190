"""Tests for bind, map, check, required and map_all."""

import pytest
from hypothesis import given
from hypothesis import strategies as st
from strategies import integers, payloads, reasons, results
from support import safe_div

from okflow import BadResultError, ContractError, Err, Ok, bind, check, map, map_all, required  # noqa: A004


def explode(value):
    raise AssertionError('continuation must not be called')


class TestBind:
    """Tests for bind."""

    def test_bind_ok(self):
        """bind feeds the payload to the continuation."""
        assert bind(Ok(8), lambda x: safe_div(x, 2)) == Ok(4.0)

    def test_bind_ok_to_err(self):
        """A continuation may fail."""
        assert bind(Ok(8), lambda x: safe_div(x, 0)) == Err('zero_division')

    def test_bind_err(self):
        """Err passes through."""
        assert bind(Err('boom'), lambda x: safe_div(x, 2)) == Err('boom')

    @given(payloads)
    def test_left_identity(self, value):
        """bind(Ok(v), f) == f(v)."""

        def f(x):
            return Ok([x])

        assert bind(Ok(value), f) == f(value)

    @given(results)
    def test_right_identity(self, result):
        """bind(r, Ok) == r."""
        assert bind(result, Ok) == result

    @given(reasons)
    def test_err_never_calls_continuation(self, reason):
        """For Err, the continuation is never invoked."""
        assert bind(Err(reason), explode) == Err(reason)

    def test_non_result_input(self):
        """A value that is not a Result is a contract violation."""
        with pytest.raises(ContractError):
            bind(('ok', 1), Ok)

    def test_non_callable_continuation(self):
        """The continuation must be callable."""
        with pytest.raises(ContractError):
            bind(Ok(1), 'not a function')

    def test_wrong_arity_continuation(self):
        """The continuation must take exactly one argument."""
        with pytest.raises(ContractError):
            bind(Ok(1), lambda: Ok(1))
        with pytest.raises(ContractError):
            bind(Ok(1), lambda a, b: Ok(1))

    def test_contract_checked_for_err_too(self):
        """A bad continuation is rejected even when the input is Err."""
        with pytest.raises(ContractError):
            bind(Err('e'), 42)

    def test_contract_error_is_type_error(self):
        """ContractError derives from TypeError."""
        with pytest.raises(TypeError):
            bind(Ok(1), None)


class TestMap:
    """Tests for map."""

    def test_map_ok(self):
        """map wraps the plain return value in Ok."""
        assert map(Ok(2), lambda x: x + 1) == Ok(3)

    def test_map_err(self):
        """Err passes through."""
        assert map(Err('e'), lambda x: x + 1) == Err('e')

    def test_map_does_not_flatten(self):
        """A Result returned by the function is wrapped, not flattened."""
        assert map(Ok(2), Ok) == Ok(Ok(2))

    @given(integers)
    def test_map_is_bind_of_ok(self, value):
        """map(r, f) == bind(r, lambda x: Ok(f(x)))."""

        def f(x):
            return x * 3

        assert map(Ok(value), f) == bind(Ok(value), lambda x: Ok(f(x)))

    @given(reasons)
    def test_err_never_calls_function(self, reason):
        """For Err, the function is never invoked."""
        assert map(Err(reason), explode) == Err(reason)

    def test_non_result_input(self):
        """A value that is not a Result is a contract violation."""
        with pytest.raises(ContractError):
            map(5, str)


class TestCheck:
    """Tests for check."""

    def test_passes(self):
        """An Ok satisfying the predicate is returned unchanged."""
        assert check(Ok(5), lambda x: x > 0, 'negative') == Ok(5)

    def test_fails(self):
        """An Ok failing the predicate becomes Err(reason)."""
        assert check(Ok(-5), lambda x: x > 0, 'negative') == Err('negative')

    def test_err_passes_through(self):
        """The predicate is not consulted for Err."""
        assert check(Err('earlier'), explode, 'negative') == Err('earlier')

    def test_non_callable_predicate(self):
        """The predicate must be callable."""
        with pytest.raises(ContractError):
            check(Ok(1), True, 'reason')


class TestRequired:
    """Tests for required."""

    def test_present(self):
        """A present value is wrapped in Ok."""
        assert required('alice') == Ok('alice')

    def test_none_is_absent(self):
        """None becomes the default reason."""
        assert required(None) == Err('value_required')

    def test_custom_reason(self):
        """The reason can be overridden."""
        assert required(None, 'user_missing') == Err('user_missing')

    @pytest.mark.parametrize('value', [0, '', [], False])
    def test_falsy_values_are_present(self, value):
        """Only None counts as absent."""
        assert required(value) == Ok(value)


class TestMapAll:
    """Tests for map_all."""

    def test_all_succeed(self):
        """Payloads are collected in input order."""
        assert map_all([1, 2, 4], lambda x: safe_div(8, x)) == Ok([8.0, 4.0, 2.0])

    def test_first_failure_wins(self):
        """The first Err is returned unchanged."""
        assert map_all([-1, 0, 1], lambda x: safe_div(8, x)) == Err('zero_division')

    def test_empty(self):
        """An empty input yields Ok([])."""
        assert map_all([], lambda x: safe_div(8, x)) == Ok([])

    def test_stops_at_first_failure(self):
        """Items after the first failure are never visited."""
        seen = []

        def track(x):
            seen.append(x)
            return safe_div(8, x)

        assert map_all([2, 0, 4, 0], track) == Err('zero_division')
        assert seen == [2, 0]

    def test_accepts_any_iterable(self):
        """Generators are consumed lazily."""
        assert map_all((n for n in range(1, 3)), Ok) == Ok([1, 2])

    @given(st.lists(integers, max_size=20))
    def test_all_ok_round_trip(self, items):
        """Mapping Ok over any list returns Ok of that list."""
        assert map_all(items, Ok) == Ok(items)

    def test_non_result_return(self):
        """The function must return a Result."""
        with pytest.raises(BadResultError):
            map_all([1], lambda x: x)

    def test_non_unary_function(self):
        """The function must take a single argument."""
        with pytest.raises(ContractError):
            map_all([1], lambda: Ok(1))
