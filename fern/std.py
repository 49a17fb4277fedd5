"""Fern standard library: the built-in functions `print` and `len`."""

from typing import Any, Dict, List

from fern.builtin_function import BuiltinFunction
from fern.errors import FernError, TypeMismatch
from fern.types import UNIT, ListVal, to_string, type_name


def std_print(args: List[Any]) -> Any:
    for value in args:
        print(to_string(value))
    return UNIT


def std_len(args: List[Any]) -> Any:
    value = args[0]
    if not isinstance(value, ListVal):
        raise FernError(TypeMismatch('List', type_name(value), 'len'))
    return len(value.items)


def standard_library() -> Dict[str, BuiltinFunction]:
    return {
        'print': BuiltinFunction('print', None, std_print),
        'len': BuiltinFunction('len', 1, std_len),
    }
