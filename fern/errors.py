"""Error values for Fern.

Every failure the interpreter can report is a small frozen dataclass.
A single failure renders as ``Kind("arg", 3)``; when two or more sibling
evaluations fail independently they are wrapped in a `MultipleError`,
which renders as ``MultipleError([e1, e2])`` and may itself be nested
inside another aggregate.

Errors are values, but inside the interpreter they travel as the
`FernError` exception so that deeply nested evaluation can unwind.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, List, Sequence, Tuple


def _render_arg(value: Any) -> str:
    if isinstance(value, str):
        return f'"{value}"'
    return str(value)


@dataclass(frozen=True)
class ErrorVal:
    """Base class for Fern error values."""

    @property
    def kind(self) -> str:
        return type(self).__name__

    @property
    def is_aggregate(self) -> bool:
        return False

    def __str__(self) -> str:
        parts = [_render_arg(getattr(self, f.name)) for f in fields(self)]
        if not parts:
            return self.kind
        return f"{self.kind}({', '.join(parts)})"


@dataclass(frozen=True)
class UnknownVariable(ErrorVal):
    name: str


@dataclass(frozen=True)
class TypeMismatch(ErrorVal):
    expected: str
    got: str
    operation: str


@dataclass(frozen=True)
class DivisionByZero(ErrorVal):
    pass


@dataclass(frozen=True)
class IndexOutOfRange(ErrorVal):
    index: int
    length: int


@dataclass(frozen=True)
class UndefinedFunction(ErrorVal):
    name: str


@dataclass(frozen=True)
class ArityMismatch(ErrorVal):
    expected: int
    got: int


@dataclass(frozen=True)
class NotCallable(ErrorVal):
    name: str


@dataclass(frozen=True)
class BreakOutsideLoop(ErrorVal):
    pass


@dataclass(frozen=True)
class ParseError(ErrorVal):
    message: str
    position: str


@dataclass(frozen=True)
class MultipleError(ErrorVal):
    """Two or more independent failures, in evaluation order."""
    errors: Tuple[ErrorVal, ...]

    def __post_init__(self):
        if len(self.errors) < 2:
            raise ValueError('MultipleError needs at least two errors')

    @property
    def is_aggregate(self) -> bool:
        return True

    def __str__(self) -> str:
        inner = ', '.join(str(e) for e in self.errors)
        return f"MultipleError([{inner}])"


def merge_errors(errors: Sequence[ErrorVal]) -> ErrorVal:
    """Collapse sibling failures: one stays as is, several aggregate."""
    if not errors:
        raise ValueError('no errors to merge')
    if len(errors) == 1:
        return errors[0]
    return MultipleError(tuple(errors))


def nest_errors(errors: List[ErrorVal]) -> ErrorVal:
    """Combine the failures of an operator chain right-nested.

    ``[a, b, c]`` becomes ``MultipleError([a, MultipleError([b, c])])``.
    """
    result = errors[-1]
    for err in reversed(errors[:-1]):
        result = MultipleError((err, result))
    return result


class FernError(Exception):
    """Exception type used to propagate Fern errors."""
    def __init__(self, err: ErrorVal):
        super().__init__(str(err))
        self.err = err
