"""Recover readable source text for step expressions.

Fault messages quote the code that produced a bad value. Steps can carry an
explicit ``source=``; otherwise the text is derived here, lazily, only when a
fault is rendered:

- lambdas render as their body, located through the defining file's AST and
  the code object's instruction positions;
- named callables render as ``name(param, ...)``;
- anything else renders as its ``repr``.
"""

from __future__ import annotations

import ast
import dis
import functools
import inspect
import linecache
from collections.abc import Callable
from types import CodeType
from typing import Any

from okflow._config import get_config

__all__ = ['describe']

# Instructions whose positions point at the function header rather than the body.
_PROLOGUE_OPS = frozenset({'RESUME', 'COPY_FREE_VARS', 'MAKE_CELL', 'RETURN_GENERATOR', 'NOP', 'CACHE'})


@functools.lru_cache(maxsize=64)
def _parse_file(filename: str) -> tuple[str, ast.Module] | None:
    lines = linecache.getlines(filename)
    if not lines:
        return None
    source = ''.join(lines)
    try:
        return source, ast.parse(source, filename)
    except SyntaxError:
        return None


def _body_positions(code: CodeType) -> list[tuple[int, int]]:
    positions = []
    for instruction in dis.get_instructions(code):
        if instruction.opname in _PROLOGUE_OPS:
            continue
        pos = instruction.positions
        if pos is None or pos.lineno is None or pos.col_offset is None:
            continue
        positions.append((pos.lineno, pos.col_offset))
    return positions


def _contains(node: ast.Lambda, point: tuple[int, int]) -> bool:
    start = (node.lineno, node.col_offset)
    end = (node.end_lineno or node.lineno, node.end_col_offset or 0)
    return start <= point <= end


def _arg_names(node: ast.Lambda) -> tuple[str, ...]:
    arguments = node.args
    return tuple(a.arg for a in (*arguments.posonlyargs, *arguments.args, *arguments.kwonlyargs))


def _span(node: ast.Lambda) -> tuple[int, int]:
    return ((node.end_lineno or node.lineno) - node.lineno, (node.end_col_offset or 0) - node.col_offset)


def _lambda_body(func: Callable[..., Any]) -> str | None:
    code = func.__code__
    parsed = _parse_file(code.co_filename)
    if parsed is None:
        return None
    source, tree = parsed

    arg_names = code.co_varnames[: code.co_argcount + code.co_kwonlyargcount]
    candidates = [
        node
        for node in ast.walk(tree)
        if isinstance(node, ast.Lambda)
        and node.lineno == code.co_firstlineno
        and _arg_names(node) == arg_names
    ]
    if not candidates:
        return None

    positions = _body_positions(code)
    fitting = [node for node in candidates if all(_contains(node, point) for point in positions)]
    if not fitting:
        if len(candidates) != 1:
            return None
        fitting = candidates

    node = min(fitting, key=_span)
    segment = ast.get_source_segment(source, node.body)
    if segment is None:
        return None
    if '\n' in segment:
        segment = ' '.join(segment.split())
    return segment


def _call_form(func: Callable[..., Any]) -> str:
    name = getattr(func, '__name__', None) or type(func).__name__
    try:
        parameters = inspect.signature(func).parameters.values()
    except (TypeError, ValueError):
        return f'{name}(...)'
    rendered = []
    for parameter in parameters:
        if parameter.kind is inspect.Parameter.VAR_POSITIONAL:
            rendered.append(f'*{parameter.name}')
        elif parameter.kind is inspect.Parameter.VAR_KEYWORD:
            rendered.append(f'**{parameter.name}')
        else:
            rendered.append(parameter.name)
    return f'{name}({", ".join(rendered)})'


def describe(target: Any, source: str | None = None) -> str:
    """Return the source text used to quote ``target`` in fault messages.

    Args:
        target: A step expression: a callable or a constant.
        source: Explicit text; returned unchanged when given.

    Returns:
        The best available rendering of the expression.
    """
    if source is not None:
        return source
    if not callable(target):
        return repr(target)
    if inspect.isfunction(target) and target.__name__ == '<lambda>':
        if get_config().capture_source:
            body = _lambda_body(target)
            if body is not None:
                return body
        return target.__qualname__
    if inspect.isfunction(target) or inspect.ismethod(target) or inspect.isbuiltin(target):
        return _call_form(target)
    return repr(target)
