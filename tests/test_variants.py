"""Tests for the with_, for_ and try_ presentation variants."""

import pytest
from support import fetch_key, safe_div

from okflow import BadResultError, Bind, Err, Final, Ok, UnhandledFailureError, for_, try_, with_


class TestWith:
    """with_ is strict: the block must yield a Result."""

    def test_success(self):
        """A successful block returns its Result."""
        assert with_([Bind('a', lambda: safe_div(8, 2)), Final(lambda a: Ok(a * 2))]) == Ok(8.0)

    def test_requires_result(self):
        """A plain final value is a fault."""
        with pytest.raises(BadResultError):
            with_([Bind('a', lambda: Ok(1)), Final(lambda a: a)])

    def test_recovery(self):
        """Recovery corrects a failure."""
        result = with_(
            [Bind('a', lambda: safe_div(1, 0))],
            recovery={"'zero_division'": Ok(0)},
        )
        assert result == Ok(0)


class TestFor:
    """for_ wraps plain final values in Ok."""

    def test_after_plain_value(self):
        """``after`` may return a plain value."""
        data = {'a': 8}
        result = for_(
            [
                Bind('number', lambda: fetch_key(data, 'a')),
                Bind('result', lambda number: safe_div(6, number)),
            ],
            after=lambda result: result * 10,
        )
        assert result == Ok(7.5)

    def test_after_result(self):
        """A Result from ``after`` is kept as is."""
        assert for_([Bind('a', lambda: Ok(1))], after=lambda a: Err('late')) == Err('late')

    def test_failure_short_circuits(self):
        """A failing step skips ``after``."""
        calls = []
        result = for_(
            [Bind('number', lambda: fetch_key({}, 'a'))],
            after=lambda number: calls.append(number),
        )
        assert result == Err(('key_not_found', 'a'))
        assert calls == []

    def test_constant_after(self):
        """A constant ``after`` is wrapped."""
        assert for_([Bind('_', lambda: Ok(1))], after=42) == Ok(42)

    def test_without_after(self):
        """Without ``after`` the last step decides."""
        assert for_([Bind('a', lambda: Ok(1)), lambda a: a + 1]) == Ok(2)


class TestTry:
    """try_ returns raw values from ``after`` and rescue clauses."""

    @staticmethod
    def response(status, body):
        return {'status': status, 'body': body}

    def test_success_is_raw(self):
        """``after`` values are not wrapped."""
        result = try_(
            [Bind('user', lambda: Ok('alice')), Bind('cart', lambda user: Ok(['book']))],
            after=lambda user, cart: self.response(201, f'{user}: {len(cart)}'),
            rescue={"'user_not_found'": self.response(404, 'no such user')},
        )
        assert result == {'status': 201, 'body': 'alice: 1'}

    def test_rescue_is_raw(self):
        """A matching rescue clause's value is returned untouched."""
        result = try_(
            [Bind('user', lambda: Err('user_not_found'))],
            after=lambda user: self.response(201, user),
            rescue={"'user_not_found'": self.response(404, 'no such user')},
        )
        assert result == {'status': 404, 'body': 'no such user'}

    def test_rescue_captures_reason(self):
        """Rescue bodies receive the pattern's captures."""
        result = try_(
            [Bind('_', lambda: Err(('http', 502)))],
            after='unused',
            rescue=[("('http', status)", lambda status: self.response(status, 'upstream'))],
        )
        assert result == {'status': 502, 'body': 'upstream'}

    def test_unhandled_reason(self):
        """A reason no rescue clause matches is a fault."""
        with pytest.raises(UnhandledFailureError):
            try_([Bind('_', lambda: Err('timeout'))], after='unused', rescue={"'other'": None})

    def test_no_rescue_returns_err(self):
        """Without rescue clauses the Err itself is returned."""
        assert try_([Bind('_', lambda: Err('timeout'))], after='unused') == Err('timeout')


class TestForRescue:
    """for_ with rescue clauses returns raw values on overall failure."""

    def test_rescue_on_step_failure(self):
        """A failing step is handed to the rescue clauses."""
        result = for_(
            [Bind('a', lambda: safe_div(1, 0))],
            after=lambda a: a,
            rescue={"'zero_division'": 'infinite'},
        )
        assert result == 'infinite'

    def test_rescue_on_err_from_after(self):
        """An Err returned by ``after`` is an overall failure too."""
        result = for_(
            [Bind('a', lambda: Ok(1))],
            after=lambda a: Err(('too_small', a)),
            rescue=[("('too_small', n)", lambda n: f'got {n}')],
        )
        assert result == 'got 1'

    def test_success_is_still_wrapped(self):
        """Rescue clauses do not change the success path."""
        result = for_([Bind('a', lambda: Ok(20))], after=lambda a: a + 1, rescue={'_': 'unused'})
        assert result == Ok(21)

    def test_unmatched_reason(self):
        """A reason no rescue clause matches is a fault."""
        with pytest.raises(UnhandledFailureError):
            for_([Bind('a', lambda: safe_div(1, 0))], after=lambda a: a, rescue={"'other'": None})
