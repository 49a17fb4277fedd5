# Fern language package
# This package provides a lexer, parser and tree-walking interpreter for Fern.
from .errors import ErrorVal, FernError
from .interpreter import run_program, run_file, Interpreter
from .lexer import tokenize
from .parser import parse, parse_program

__all__ = [
    'run_program',
    'run_file',
    'Interpreter',
    'FernError',
    'ErrorVal',
    'tokenize',
    'parse',
    'parse_program',
]
