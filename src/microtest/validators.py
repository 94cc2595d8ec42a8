# src/microtest/validators.py

"""
Validators judge the result of a single run.

A validator is either a `Literal`, compared by equality, or a `Predicate`,
called with `(result, run_index, duration_ms)`. Predicates may accept fewer
parameters; only as many positional arguments as they take are passed. Raw
values are wrapped once by `as_validator` and matching then dispatches on
the variant.
"""

import inspect
from collections.abc import Callable
from typing import Any, TypeAlias

from attrs import define, field

PredicateFn: TypeAlias = Callable[..., Any]

_PREDICATE_ARGS = 3
_POSITIONAL_KINDS = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


def _positional_arity(fn: PredicateFn) -> int:
    """Number of leading (result, run, duration) arguments `fn` can take."""
    try:
        signature = inspect.signature(fn)
    except (TypeError, ValueError):
        return 1
    count = 0
    for param in signature.parameters.values():
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            return _PREDICATE_ARGS
        if param.kind in _POSITIONAL_KINDS:
            count += 1
    return min(count, _PREDICATE_ARGS)


@define(frozen=True, slots=True)
class Literal:
    """Passes when the run's result equals `value`, booleans only matching booleans."""

    value: Any = field()

    def matches(self, result: Any, run: int, duration: float | None) -> bool:
        # bool is an int subclass; True must not equal 1.
        if isinstance(result, bool) is not isinstance(self.value, bool):
            return False
        return bool(result == self.value)


@define(frozen=True, slots=True)
class Predicate:
    """Passes when `fn(result, run, duration)` is truthy."""

    fn: PredicateFn = field()
    arity: int = field()

    @arity.default
    def _default_arity(self) -> int:
        return _positional_arity(self.fn)

    def matches(self, result: Any, run: int, duration: float | None) -> bool:
        args = (result, run, duration)[: self.arity]
        return bool(self.fn(*args))


Validator: TypeAlias = Literal | Predicate


def as_validator(value: Any) -> Validator:
    """Wraps a raw expectation: callables become predicates, anything else a literal."""
    if isinstance(value, (Literal, Predicate)):
        return value
    if callable(value):
        return Predicate(value)
    return Literal(value)


def select_validator(validators: list[Validator], group_index: int) -> Validator:
    """Returns the validator for a group, reusing the last one past the end."""
    if not validators:
        return Literal(None)
    return validators[min(group_index, len(validators) - 1)]


# 🔼⚙️
