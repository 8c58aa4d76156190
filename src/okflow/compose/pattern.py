"""Patterns for composition steps and recovery clauses.

A pattern is written in the same syntax as a ``case`` clause of Python's
``match`` statement and is kept together with its literal source text, so
faults can quote it verbatim:

    Pattern.parse('a')                      # capture anything as ``a``
    Pattern.parse('_')                      # wildcard, binds nothing
    Pattern.parse("'zero_division'")        # literal
    Pattern.parse('(x, y, *rest)')          # sequence
    Pattern.parse("{'id': user_id, **extra}")  # mapping
    Pattern.parse('Ok(inner) | Err(inner)') # class patterns and alternatives
    Pattern.parse('KeyError() as exc')      # class check with capture

Class names and dotted value names are resolved when the pattern is parsed,
against builtins, ``Ok``/``Err`` and an optional caller namespace. Guards are
not supported; put the condition in a later step instead.
"""

from __future__ import annotations

import ast
import builtins
from collections.abc import Mapping, Sequence
from typing import Any, Final

from okflow.errors import PatternError
from okflow.result import Err, Ok

__all__ = ['Pattern', 'WILDCARD']

_MISSING: Final = object()

# Builtin types that match their whole subject for a single positional sub-pattern.
_SELF_MATCHING = (bool, bytearray, bytes, dict, float, frozenset, int, list, set, str, tuple)

_DEFAULT_NAMESPACE: Mapping[str, Any] = {**vars(builtins), 'Ok': Ok, 'Err': Err}


class Pattern:
    """A parsed pattern plus the text it was written as.

    Attributes:
        source: The literal pattern text, used verbatim in fault messages.
    """

    __slots__ = ('_check', 'names', 'source')

    def __init__(self, source: str, check: Any, names: tuple[str, ...]) -> None:
        self.source = source
        self.names = names
        self._check = check

    def __repr__(self) -> str:
        return f'Pattern({self.source!r})'

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Pattern):
            return NotImplemented
        return self.source == other.source

    def __hash__(self) -> int:
        return hash(self.source)

    @classmethod
    def parse(cls, source: str, namespace: Mapping[str, Any] | None = None) -> Pattern:
        """Parse pattern text written in ``case`` syntax.

        Args:
            source: The pattern text.
            namespace: Extra names for class patterns and dotted values.

        Returns:
            The compiled Pattern.

        Raises:
            PatternError: If the text is not a valid, supported pattern.
        """
        text = source.strip()
        if not text:
            raise PatternError(source, 'empty pattern')
        try:
            tree = ast.parse(f'match _:\n    case {text}:\n        pass')
        except SyntaxError as e:
            raise PatternError(source, e.msg) from None

        match_stmt = tree.body[0]
        if len(tree.body) != 1 or not isinstance(match_stmt, ast.Match) or len(match_stmt.cases) != 1:
            raise PatternError(source, 'not a single pattern')
        case = match_stmt.cases[0]
        if case.guard is not None:
            raise PatternError(source, 'guards are not supported')

        scope = {**_DEFAULT_NAMESPACE, **(namespace or {})}
        compiler = _Compiler(source, scope)
        check = compiler.compile(case.pattern)
        return cls(text, check, tuple(compiler.names))

    @classmethod
    def literal(cls, value: Any) -> Pattern:
        """Build a pattern matching values equal to ``value``."""

        def check(subject: Any, bindings: dict[str, Any]) -> bool:
            return subject == value

        return cls(repr(value), check, ())

    @classmethod
    def instance_of(cls, kind: type | tuple[type, ...]) -> Pattern:
        """Build a pattern matching instances of ``kind``."""

        def check(subject: Any, bindings: dict[str, Any]) -> bool:
            return isinstance(subject, kind)

        if isinstance(kind, tuple):
            source = ' | '.join(f'{k.__name__}()' for k in kind)
        else:
            source = f'{kind.__name__}()'
        return cls(source, check, ())

    @classmethod
    def coerce(cls, pattern: Pattern | str | type, namespace: Mapping[str, Any] | None = None) -> Pattern:
        """Turn pattern text, a type or a Pattern into a Pattern.

        Raises:
            PatternError: If ``pattern`` is none of the accepted kinds.
        """
        if isinstance(pattern, Pattern):
            return pattern
        if isinstance(pattern, str):
            return cls.parse(pattern, namespace)
        if isinstance(pattern, type):
            return cls.instance_of(pattern)
        raise PatternError(repr(pattern), 'expected pattern text, a type or a Pattern')

    @property
    def irrefutable(self) -> bool:
        """True if the pattern matches every value, such as a bare capture or ``_``."""
        return getattr(self._check, 'irrefutable', False)

    def match(self, value: Any) -> dict[str, Any] | None:
        """Match ``value`` and return the captured names, or None on mismatch."""
        bindings: dict[str, Any] = {}
        if self._check(value, bindings):
            return bindings
        return None


def _irrefutable(check: Any) -> Any:
    check.irrefutable = True
    return check


class _Compiler:
    """Turns ``ast.pattern`` nodes into nested check closures."""

    def __init__(self, source: str, scope: Mapping[str, Any]) -> None:
        self.source = source
        self.scope = scope
        self.names: list[str] = []

    def fail(self, reason: str) -> PatternError:
        return PatternError(self.source, reason)

    def capture(self, name: str) -> None:
        if name in self.names:
            raise self.fail(f'multiple assignments to name {name!r}')
        self.names.append(name)

    def compile(self, node: ast.pattern) -> Any:
        match node:
            case ast.MatchAs(pattern=None, name=None):
                return _irrefutable(lambda subject, bindings: True)
            case ast.MatchAs(pattern=None, name=str(name)):
                self.capture(name)
                return _irrefutable(_capture_check(name))
            case ast.MatchAs(pattern=inner, name=str(name)):
                check = self.compile(inner)
                self.capture(name)
                if getattr(check, 'irrefutable', False):
                    return _irrefutable(_as_check(check, name))
                return _as_check(check, name)
            case ast.MatchOr(patterns=alternatives):
                return self.compile_or(alternatives)
            case ast.MatchValue(value=expr):
                return _value_check(self.evaluate(expr))
            case ast.MatchSingleton(value=constant):
                return lambda subject, bindings: subject is constant
            case ast.MatchSequence(patterns=items):
                return self.compile_sequence(items)
            case ast.MatchMapping(keys=keys, patterns=items, rest=rest):
                return self.compile_mapping(keys, items, rest)
            case ast.MatchClass():
                return self.compile_class(node)
            case _:
                raise self.fail(f'unsupported pattern node {type(node).__name__}')

    def compile_or(self, alternatives: list[ast.pattern]) -> Any:
        before = list(self.names)
        checks = []
        bound: set[str] | None = None
        last = len(alternatives) - 1
        for index, alternative in enumerate(alternatives):
            self.names = list(before)
            checks.append(self.compile(alternative))
            if index != last and getattr(checks[-1], 'irrefutable', False):
                raise self.fail(f'{_describe_irrefutable(alternative)} makes remaining patterns unreachable')
            names = set(self.names) - set(before)
            if bound is None:
                bound = names
            elif names != bound:
                raise self.fail('alternative patterns bind different names')
        self.names = before + sorted(bound or ())

        def check(subject: Any, bindings: dict[str, Any]) -> bool:
            for alternative in checks:
                trial: dict[str, Any] = {}
                if alternative(subject, trial):
                    bindings.update(trial)
                    return True
            return False

        if getattr(checks[-1], 'irrefutable', False):
            return _irrefutable(check)
        return check

    def compile_sequence(self, items: list[ast.pattern]) -> Any:
        star_index: int | None = None
        star_name: str | None = None
        for index, item in enumerate(items):
            if isinstance(item, ast.MatchStar):
                if star_index is not None:
                    raise self.fail('multiple starred names in sequence pattern')
                star_index, star_name = index, item.name
        if star_index is None:
            checks = [self.compile(item) for item in items]

            def check(subject: Any, bindings: dict[str, Any]) -> bool:
                if not _is_sequence(subject) or len(subject) != len(checks):
                    return False
                return all(c(v, bindings) for c, v in zip(checks, subject, strict=True))

            return check

        head = [self.compile(item) for item in items[:star_index]]
        if star_name is not None:
            self.capture(star_name)
        tail = [self.compile(item) for item in items[star_index + 1 :]]

        def star_check(subject: Any, bindings: dict[str, Any]) -> bool:
            if not _is_sequence(subject) or len(subject) < len(head) + len(tail):
                return False
            values = list(subject)
            split = len(values) - len(tail)
            if not all(c(v, bindings) for c, v in zip(head, values[: len(head)], strict=True)):
                return False
            if not all(c(v, bindings) for c, v in zip(tail, values[split:], strict=True)):
                return False
            if star_name is not None:
                bindings[star_name] = values[len(head) : split]
            return True

        return star_check

    def compile_mapping(self, keys: list[ast.expr], items: list[ast.pattern], rest: str | None) -> Any:
        resolved = [self.evaluate(key) for key in keys]
        if len(set(map(repr, resolved))) != len(resolved):
            raise self.fail('mapping pattern checks duplicate key')
        checks = [self.compile(item) for item in items]
        if rest is not None:
            self.capture(rest)

        def check(subject: Any, bindings: dict[str, Any]) -> bool:
            if not isinstance(subject, Mapping):
                return False
            for key, item_check in zip(resolved, checks, strict=True):
                value = subject.get(key, _MISSING)
                if value is _MISSING or not item_check(value, bindings):
                    return False
            if rest is not None:
                bindings[rest] = {k: v for k, v in subject.items() if k not in resolved}
            return True

        return check

    def compile_class(self, node: ast.MatchClass) -> Any:
        kind = self.evaluate(node.cls)
        if not isinstance(kind, type):
            raise self.fail(f'{ast.unparse(node.cls)} is not a class')
        positional = [self.compile(item) for item in node.patterns]
        keywords = [(attr, self.compile(item)) for attr, item in zip(node.kwd_attrs, node.kwd_patterns, strict=True)]

        if positional and issubclass(kind, _SELF_MATCHING) and '__match_args__' not in vars(kind):
            if len(positional) > 1:
                raise self.fail(f'{kind.__name__}() accepts 1 positional sub-pattern')
            attributes: list[str | None] = [None]
        else:
            match_args = getattr(kind, '__match_args__', ())
            if len(positional) > len(match_args):
                raise self.fail(
                    f'{kind.__name__}() accepts {len(match_args)} positional sub-pattern(s) ({len(positional)} given)'
                )
            attributes = list(match_args[: len(positional)])

        def check(subject: Any, bindings: dict[str, Any]) -> bool:
            if not isinstance(subject, kind):
                return False
            for attribute, item_check in zip(attributes, positional, strict=True):
                value = subject if attribute is None else getattr(subject, attribute, _MISSING)
                if value is _MISSING or not item_check(value, bindings):
                    return False
            for attribute, item_check in keywords:
                value = getattr(subject, attribute, _MISSING)
                if value is _MISSING or not item_check(value, bindings):
                    return False
            return True

        return check

    def evaluate(self, expr: ast.expr) -> Any:
        """Resolve a literal, a signed/complex number or a (dotted) name."""
        match expr:
            case ast.Name(id=name):
                if name not in self.scope:
                    raise self.fail(f'name {name!r} is not defined')
                return self.scope[name]
            case ast.Attribute(value=base, attr=attr):
                owner = self.evaluate(base)
                try:
                    return getattr(owner, attr)
                except AttributeError:
                    raise self.fail(f'{ast.unparse(expr)} is not defined') from None
            case _:
                try:
                    return ast.literal_eval(expr)
                except ValueError:
                    raise self.fail(f'unsupported value {ast.unparse(expr)}') from None


def _describe_irrefutable(node: ast.pattern) -> str:
    match node:
        case ast.MatchAs(pattern=None, name=None):
            return 'wildcard'
        case ast.MatchAs(pattern=None, name=str(name)):
            return f'name capture {name!r}'
        case _:
            return 'irrefutable alternative'


def _is_sequence(subject: Any) -> bool:
    return isinstance(subject, Sequence) and not isinstance(subject, str | bytes | bytearray)


def _capture_check(name: str) -> Any:
    def check(subject: Any, bindings: dict[str, Any]) -> bool:
        bindings[name] = subject
        return True

    return check


def _as_check(inner: Any, name: str) -> Any:
    def check(subject: Any, bindings: dict[str, Any]) -> bool:
        if not inner(subject, bindings):
            return False
        bindings[name] = subject
        return True

    return check


def _value_check(expected: Any) -> Any:
    def check(subject: Any, bindings: dict[str, Any]) -> bool:
        return subject == expected

    return check


WILDCARD = Pattern.parse('_')
