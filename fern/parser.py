"""Parser for the Fern language.

A recursive-descent parser with one method per grammar rule and a single
token of lookahead. Binary operators are parsed by precedence climbing,
lowest first:

    logic -> equality (==) -> comparison (< > <= >=) -> term (+ -)
          -> factor (* /) -> unary (-) -> postfix ([...]) -> primary

Every binary level is left-associative; unary minus is right-recursive
and binds tighter than any binary operator.

Statements dispatch on their first token. Anything that is not a keyword
statement or a block is parsed as an expression; if an ``=`` follows, the
expression must be a bare identifier and the statement becomes an
assignment. Simple statements end with ``;``, which may be left out before
a closing ``}`` or at the end of the input.

Parsing stops at the first syntax error, raised as a `FernError` carrying
a `ParseError` with the line and column of the offending token.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from lark import Token

from .ast import (
    Program, Block, ExprStmt, Assign, ElseIf, IfStmt, LoopStmt, BreakStmt,
    ReturnStmt, FuncDecl, Literal, ListLit, Ident, Index, UnaryOp, BinaryOp,
    Call, Node
)
from .errors import FernError, ParseError
from .lexer import tokenize

# Token types matched by type rather than by their text
LITERAL_TYPES = {'INT', 'STRING', 'IDENT'}


class Parser:
    def __init__(self, tokens: Sequence[Token]):
        self.tokens = list(tokens)
        self.pos = 0

    def peek(self) -> Optional[Token]:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return None

    def error(self, message: str, token: Optional[Token] = None) -> FernError:
        if token is None:
            token = self.peek()
        position = f"{token.line}:{token.column}" if token is not None else 'end of input'
        return FernError(ParseError(message, position))

    @staticmethod
    def describe(token: Optional[Token]) -> str:
        if token is None:
            return 'end of input'
        return repr(token.value)

    def match(self, *expected: str) -> bool:
        token = self.peek()
        if token is None:
            return False
        if token.type in LITERAL_TYPES:
            return token.type in expected
        return token.value in expected

    def consume(self, *expected: str) -> Token:
        token = self.peek()
        if not self.match(*expected):
            wanted = ' or '.join(repr(e) if e not in LITERAL_TYPES else e for e in expected)
            raise self.error(f"expected {wanted}, got {self.describe(token)}")
        self.pos += 1
        return token

    def parse_program(self) -> Program:
        statements: List[Node] = []
        while self.peek() is not None:
            if self.match(';'):
                self.consume(';')
                continue
            statements.append(self.parse_statement())
        return Program(statements)

    def parse_statement(self) -> Node:
        token = self.peek()
        if token is None:
            raise self.error("unexpected end of input")
        if token.type == 'FN':
            return self.parse_func_decl()
        if token.type == 'IF':
            return self.parse_if_stmt()
        if token.type == 'LOOP':
            return self.parse_loop_stmt()
        if token.type == 'BREAK':
            self.consume('break')
            self.end_statement()
            return BreakStmt()
        if token.type == 'RETURN':
            return self.parse_return_stmt()
        if token.type == 'LBRACE':
            return self.parse_block()
        expr = self.parse_expression()
        if self.match('='):
            assign_token = self.consume('=')
            if not isinstance(expr, Ident):
                raise self.error("invalid assignment target", assign_token)
            value = self.parse_expression()
            self.end_statement()
            return Assign(expr.name, value)
        self.end_statement()
        return ExprStmt(expr)

    def end_statement(self):
        # ';' may be omitted before '}' and at the end of the input
        if self.match(';'):
            self.consume(';')
            return
        if self.peek() is None or self.match('}'):
            return
        raise self.error(f"expected ';', got {self.describe(self.peek())}")

    def parse_func_decl(self) -> FuncDecl:
        self.consume('fn')
        name_token = self.consume('IDENT')
        self.consume('(')
        params: List[str] = []
        if not self.match(')'):
            while True:
                param = self.consume('IDENT')
                if param.value in params:
                    raise self.error(f"duplicate parameter {param.value!r}", param)
                params.append(param.value)
                if not self.match(','):
                    break
                self.consume(',')
        self.consume(')')
        body = self.parse_block()
        return FuncDecl(name_token.value, params, body)

    def parse_block(self) -> Block:
        self.consume('{')
        statements: List[Node] = []
        while not self.match('}'):
            if self.peek() is None:
                raise self.error("unterminated block, expected '}'")
            if self.match(';'):
                self.consume(';')
                continue
            statements.append(self.parse_statement())
        self.consume('}')
        return Block(statements)

    def parse_condition(self) -> Node:
        self.consume('(')
        condition = self.parse_expression()
        self.consume(')')
        return condition

    def parse_if_stmt(self) -> IfStmt:
        self.consume('if')
        condition = self.parse_condition()
        then_block = self.parse_block()
        else_ifs: List[ElseIf] = []
        else_block = None
        while self.match('else'):
            self.consume('else')
            if self.match('if'):
                self.consume('if')
                branch_condition = self.parse_condition()
                else_ifs.append(ElseIf(branch_condition, self.parse_block()))
                continue
            else_block = self.parse_block()
            break
        return IfStmt(condition, then_block, else_ifs, else_block)

    def parse_loop_stmt(self) -> LoopStmt:
        self.consume('loop')
        return LoopStmt(self.parse_block())

    def parse_return_stmt(self) -> ReturnStmt:
        self.consume('return')
        if self.match(';', '}') or self.peek() is None:
            self.end_statement()
            return ReturnStmt(None)
        value = self.parse_expression()
        self.end_statement()
        return ReturnStmt(value)

    # Expressions, lowest precedence first
    def parse_expression(self) -> Node:
        return self.parse_logic()

    def parse_logic(self) -> Node:
        # Placeholder level for && and ||, which the language does not have yet
        return self.parse_equality()

    def parse_equality(self) -> Node:
        node = self.parse_comparison()
        while self.match('=='):
            op_token = self.consume('==')
            right = self.parse_comparison()
            node = BinaryOp(op_token.value, node, right)
        return node

    def parse_comparison(self) -> Node:
        node = self.parse_term()
        while self.match('<', '>', '<=', '>='):
            op_token = self.consume('<', '>', '<=', '>=')
            right = self.parse_term()
            node = BinaryOp(op_token.value, node, right)
        return node

    def parse_term(self) -> Node:
        node = self.parse_factor()
        while self.match('+', '-'):
            op_token = self.consume('+', '-')
            right = self.parse_factor()
            node = BinaryOp(op_token.value, node, right)
        return node

    def parse_factor(self) -> Node:
        node = self.parse_unary()
        while self.match('*', '/'):
            op_token = self.consume('*', '/')
            right = self.parse_unary()
            node = BinaryOp(op_token.value, node, right)
        return node

    def parse_unary(self) -> Node:
        if self.match('-'):
            op_token = self.consume('-')
            operand = self.parse_unary()
            return UnaryOp(op_token.value, operand)
        return self.parse_postfix()

    def parse_postfix(self) -> Node:
        node = self.parse_primary()
        while self.match('['):
            self.consume('[')
            index_expr = self.parse_expression()
            self.consume(']')
            node = Index(node, index_expr)
        return node

    def parse_primary(self) -> Node:
        token = self.peek()
        if token is None:
            raise self.error("unexpected end of input in expression")
        if token.type == 'INT':
            self.consume('INT')
            return Literal(int(token.value), 'Int')
        if token.type == 'STRING':
            self.consume('STRING')
            return Literal(token.value[1:-1], 'Str')
        if token.type in ('TRUE', 'FALSE'):
            self.pos += 1
            return Literal(token.type == 'TRUE', 'Bool')
        if token.type == 'IDENT':
            self.consume('IDENT')
            if self.match('('):
                return Call(token.value, self.parse_arguments())
            return Ident(token.value)
        if token.type == 'LSQB':
            self.consume('[')
            elements: List[Node] = []
            if not self.match(']'):
                elements.append(self.parse_expression())
                while self.match(','):
                    self.consume(',')
                    elements.append(self.parse_expression())
            self.consume(']')
            return ListLit(elements)
        if token.type == 'LPAR':
            self.consume('(')
            expr = self.parse_expression()
            self.consume(')')
            return expr
        raise self.error(f"unexpected token {self.describe(token)}", token)

    def parse_arguments(self) -> List[Node]:
        self.consume('(')
        args: List[Node] = []
        if not self.match(')'):
            args.append(self.parse_expression())
            while self.match(','):
                self.consume(',')
                args.append(self.parse_expression())
        self.consume(')')
        return args


def parse(tokens: Sequence[Token]) -> Program:
    """Parse a token sequence into a Program AST."""
    return Parser(tokens).parse_program()


def parse_program(source: str) -> Program:
    """Tokenize and parse Fern source code into a Program AST."""
    return parse(tokenize(source))
