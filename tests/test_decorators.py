"""Tests for the @lift, @lift_async and @strict decorators."""

import pytest

from okflow import BadResultError, Bind, Err, Final, Ok, lift, lift_async, strict, with_


class TestLift:
    """Tests for @lift."""

    def test_wraps_return_value(self):
        """The return value is wrapped in Ok."""

        @lift
        def add(a, b):
            return a + b

        assert add(2, 3) == Ok(5)

    def test_preserves_metadata(self):
        """Name and docstring survive decoration."""

        @lift
        def add(a, b):
            """Add two numbers."""
            return a + b

        assert add.__name__ == 'add'
        assert add.__doc__ == 'Add two numbers.'

    def test_usable_as_binding_step(self):
        """A lifted function can feed a binding step."""

        @lift
        def double(n):
            return n * 2

        assert with_([Bind('n', lambda: Ok(2)), Bind('d', double), Final(lambda d: Ok(d))]) == Ok(4)

    def test_exceptions_propagate(self):
        """Lifting does not turn exceptions into Err."""

        @lift
        def fail():
            raise ValueError('boom')

        with pytest.raises(ValueError, match='boom'):
            fail()


class TestLiftAsync:
    """Tests for @lift_async."""

    @pytest.mark.asyncio
    async def test_wraps_awaited_value(self):
        """The awaited value is wrapped in Ok."""

        @lift_async
        async def load():
            return {'debug': True}

        assert await load() == Ok({'debug': True})


class TestStrict:
    """Tests for @strict."""

    def test_result_passes(self):
        """Results are returned unchanged."""

        @strict
        def fetch(user_id):
            return Ok(user_id) if user_id else Err('not_found')

        assert fetch(1) == Ok(1)
        assert fetch(0) == Err('not_found')

    def test_non_result_raises(self):
        """Anything else raises BadResultError quoting the call."""

        @strict
        def fetch(user_id):
            return None

        with pytest.raises(BadResultError) as excinfo:
            fetch(1)
        assert excinfo.value.code.endswith('fetch(1)')
        assert excinfo.value.value is None

    def test_keyword_arguments_in_message(self):
        """Keyword arguments are quoted too."""

        @strict
        def fetch(user_id, *, fresh=False):
            return 'oops'

        with pytest.raises(BadResultError) as excinfo:
            fetch(1, fresh=True)
        assert excinfo.value.code.endswith('fetch(1, fresh=True)')

    @pytest.mark.asyncio
    async def test_async_checked_after_await(self):
        """Coroutine functions are checked once awaited."""

        @strict
        async def fetch(user_id):
            return user_id

        with pytest.raises(BadResultError):
            await fetch(1)

    @pytest.mark.asyncio
    async def test_async_result_passes(self):
        """Async Results are returned unchanged."""

        @strict
        async def fetch(user_id):
            return Ok(user_id)

        assert await fetch(1) == Ok(1)
