"""Decorators: @lift, @lift_async and @strict."""

from okflow.decorators.lift import lift, lift_async
from okflow.decorators.strict import strict

__all__ = [
    'lift',
    'lift_async',
    'strict',
]
