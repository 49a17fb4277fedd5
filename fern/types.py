"""Runtime values for Fern.

Fern is dynamically typed. Integers, booleans and strings are carried as
the corresponding Python objects; lists, functions and the unit value get
small wrapper classes. Because `bool` is a subclass of `int` in Python,
every integer check in the interpreter goes through `is_int`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List


@dataclass(frozen=True)
class UnitVal:
    """The value of statements and calls that produce nothing."""
    def __repr__(self) -> str:
        return 'unit'


UNIT = UnitVal()


@dataclass(frozen=True)
class ListVal:
    """A Fern list.

    Lists have value semantics: concatenation builds a new list and the
    language has no operation that changes a list in place.
    """
    items: List[Any]

    def __len__(self) -> int:
        return len(self.items)

    def __repr__(self) -> str:
        return f"List({self.items!r})"


class FunctionValue:
    """A user-defined function together with the scope it was defined in."""
    def __init__(self, name: str, params: List[str], body, env):
        self.name = name
        self.params = params
        self.body = body
        self.env = env

    def __repr__(self) -> str:
        return f"<fn {self.name}>"


def is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def type_name(value: Any) -> str:
    """Return the Fern type name of a runtime value."""
    if isinstance(value, bool):
        return 'Bool'
    if isinstance(value, int):
        return 'Int'
    if isinstance(value, str):
        return 'Str'
    if isinstance(value, ListVal):
        return 'List'
    if isinstance(value, FunctionValue):
        return 'Function'
    if isinstance(value, UnitVal):
        return 'Unit'
    return type(value).__name__


def repr_value(value: Any) -> str:
    """Render a value the way the shell displays results."""
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str):
        return f'"{value}"'
    if isinstance(value, ListVal):
        return '[' + ', '.join(repr_value(item) for item in value.items) + ']'
    return repr(value)


def to_string(value: Any) -> str:
    """Textual form used by `print`: like `repr_value` but strings are bare."""
    if isinstance(value, str):
        return value
    return repr_value(value)


def values_equal(a: Any, b: Any) -> bool:
    # Values of different kinds are never equal
    if type_name(a) != type_name(b):
        return False
    if isinstance(a, ListVal):
        if len(a.items) != len(b.items):
            return False
        return all(values_equal(x, y) for x, y in zip(a.items, b.items))
    if isinstance(a, FunctionValue):
        return a is b
    return a == b
