"""Tokenizer for the Fern language.

The terminals are declared as a Lark grammar and scanned with Lark's
basic lexer; the grammar's single rule exists only so that Lark keeps
every terminal. Lark gives us longest-match scanning (``==`` before
``=``), keyword/identifier separation and line/column tracking. The
tokens handed to the parser are plain `lark.Token` objects, whose `type`
is one of the terminal names below and whose `value` is the source text.
"""

from __future__ import annotations

from typing import List

from lark import Lark, Token
from lark.exceptions import UnexpectedCharacters

from .errors import FernError, ParseError


FERN_TOKENS = r"""
    start: _token*
    _token: INT | STRING | IDENT
          | FN | IF | ELSE | LOOP | BREAK | RETURN | TRUE | FALSE
          | EQEQ | LE | GE | LT | GT | ASSIGN
          | PLUS | MINUS | STAR | SLASH
          | LPAR | RPAR | LBRACE | RBRACE | LSQB | RSQB
          | COMMA | SEMICOLON

    // Keywords
    FN: "fn"
    IF: "if"
    ELSE: "else"
    LOOP: "loop"
    BREAK: "break"
    RETURN: "return"
    TRUE: "true"
    FALSE: "false"

    // Operators
    EQEQ: "=="
    LE: "<="
    GE: ">="
    LT: "<"
    GT: ">"
    ASSIGN: "="
    PLUS: "+"
    MINUS: "-"
    STAR: "*"
    SLASH: "/"

    // Punctuation
    LPAR: "("
    RPAR: ")"
    LBRACE: "{"
    RBRACE: "}"
    LSQB: "["
    RSQB: "]"
    COMMA: ","
    SEMICOLON: ";"

    // Literals
    IDENT: /[A-Za-z_][A-Za-z0-9_]*/
    INT: /[0-9]+/
    STRING: /"[^"]*"/

    // Line comments; `///` doc comments are covered as well
    COMMENT: /\/\/[^\n]*/

    %import common.WS
    %ignore WS
    %ignore COMMENT
"""


FERN_LEXER = Lark(
    FERN_TOKENS,
    parser='lalr',
    lexer='basic',
)


def tokenize(source: str) -> List[Token]:
    """Convert source code into a list of tokens.

    Whitespace and comments are dropped. A character that starts no token
    (including the quote of an unterminated string) raises a ParseError.
    """
    try:
        return list(FERN_LEXER.lex(source))
    except UnexpectedCharacters as e:
        raise FernError(ParseError(f"unexpected character {e.char!r}", f"{e.line}:{e.column}"))
