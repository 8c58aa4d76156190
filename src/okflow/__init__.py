"""okflow: result values, combinators and sequential composition for Python 3.13+.

Flat imports (preferred):
    from okflow import Ok, Err, Result, bind, map, map_all
    from okflow import Bind, Let, Final, with_, for_, try_, call

Submodule imports (for organization):
    from okflow.result import Ok, Err, Result
    from okflow.compose import compose, Pattern, Recovery
    from okflow.decorators import lift, strict
"""

# Configuration
from okflow._config import OkflowConfig, get_config, init

# Combinators
from okflow.combinators import bind, check, map, map_all, map_all_async, required  # noqa: A004

# Composition
from okflow.compose import (
    Bind,
    Call,
    Clause,
    Final,
    Let,
    Mode,
    Pattern,
    Recovery,
    call,
    compose,
    compose_async,
    for_,
    for_async,
    try_,
    try_async,
    with_,
    with_async,
)

# Decorators
from okflow.decorators import lift, lift_async, strict

# Faults
from okflow.errors import (
    BadResultError,
    BindError,
    ContractError,
    MatchError,
    OkflowError,
    PatternError,
    UnhandledFailureError,
)

# Result types
from okflow.result import (
    Err,
    Ok,
    Result,
    failure,
    is_failure,
    is_result,
    is_success,
    success,
)

__all__ = [
    # Faults
    'BadResultError',
    # Composition
    'Bind',
    'BindError',
    'Call',
    'Clause',
    'ContractError',
    # Result types
    'Err',
    'Final',
    'Let',
    'MatchError',
    'Mode',
    'Ok',
    'OkflowConfig',
    'OkflowError',
    'Pattern',
    'PatternError',
    'Recovery',
    'Result',
    'UnhandledFailureError',
    # Combinators
    'bind',
    'call',
    'check',
    'compose',
    'compose_async',
    'failure',
    'for_',
    'for_async',
    # Configuration
    'get_config',
    'init',
    'is_failure',
    'is_result',
    'is_success',
    # Decorators
    'lift',
    'lift_async',
    'map',
    'map_all',
    'map_all_async',
    'required',
    'strict',
    'success',
    'try_',
    'try_async',
    'with_',
    'with_async',
]
