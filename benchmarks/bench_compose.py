"""Benchmarks for the composition engine against hand-written chains.

Run with: pytest benchmarks/ --benchmark-only -v
"""

from okflow import Bind, Err, Final, Ok, bind, call, compose, map_all, with_


def safe_div(a, b):
    if b == 0:
        return Err('zero_division')
    return Ok(a / b)


STEPS = [
    Bind('a', lambda: safe_div(8, 2)),
    Bind('b', lambda a: safe_div(a, 2)),
    Final(lambda a, b: Ok(a + b)),
]

FAILING_STEPS = [
    Bind('a', lambda: safe_div(8, 0)),
    Bind('b', lambda a: safe_div(a, 2)),
    Final(lambda a, b: Ok(a + b)),
]


def by_hand():
    match safe_div(8, 2):
        case Err() as failed:
            return failed
        case Ok(a):
            pass
    match safe_div(a, 2):
        case Err() as failed:
            return failed
        case Ok(b):
            pass
    return Ok(a + b)


# =============================================================================
# Creation benchmarks
# =============================================================================


class TestCreation:
    """Benchmark Ok/Err creation."""

    def test_ok_creation(self, benchmark):
        """Benchmark Ok creation."""
        benchmark(Ok, 42)

    def test_err_creation(self, benchmark):
        """Benchmark Err creation."""
        benchmark(Err, 'zero_division')


# =============================================================================
# Composition benchmarks
# =============================================================================


class TestComposition:
    """Benchmark composed blocks."""

    def test_compose_success(self, benchmark):
        """Benchmark a three-step block that succeeds."""
        assert benchmark(compose, STEPS) == Ok(6.0)

    def test_compose_short_circuit(self, benchmark):
        """Benchmark a block failing at its first step."""
        assert benchmark(compose, FAILING_STEPS) == Err('zero_division')

    def test_with_recovery(self, benchmark):
        """Benchmark a failing block corrected by recovery."""
        recovery = {"'zero_division'": Ok(0.0)}
        assert benchmark(with_, FAILING_STEPS, recovery) == Ok(0.0)

    def test_by_hand(self, benchmark):
        """Baseline: the same chain written with match statements."""
        assert benchmark(by_hand) == Ok(6.0)


# =============================================================================
# Combinator benchmarks
# =============================================================================


class TestCombinators:
    """Benchmark combinators and the pipe operator."""

    def test_bind(self, benchmark):
        """Benchmark bind."""
        benchmark(bind, Ok(8), lambda x: safe_div(x, 2))

    def test_pipe_chain(self, benchmark):
        """Benchmark a two-step pipe."""
        step = call(safe_div, 2)
        benchmark(lambda: Ok(8) >> step >> step)

    def test_map_all(self, benchmark):
        """Benchmark map_all over 100 items."""
        items = list(range(1, 101))
        benchmark(map_all, items, lambda x: safe_div(100, x))
