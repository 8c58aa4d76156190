"""Composition: the step engine, its variants, patterns and the pipe operator."""

from okflow.compose.engine import Mode, compose, compose_async
from okflow.compose.pattern import WILDCARD, Pattern
from okflow.compose.pipe import Call, call, pipe_bind, pipe_map
from okflow.compose.steps import Bind, Clause, Expression, Final, Let, Recovery, Step, coerce_steps
from okflow.compose.variants import for_, for_async, try_, try_async, with_, with_async

__all__ = [
    'WILDCARD',
    'Bind',
    'Call',
    'Clause',
    'Expression',
    'Final',
    'Let',
    'Mode',
    'Pattern',
    'Recovery',
    'Step',
    'call',
    'coerce_steps',
    'compose',
    'compose_async',
    'for_',
    'for_async',
    'pipe_bind',
    'pipe_map',
    'try_',
    'try_async',
    'with_',
    'with_async',
]
