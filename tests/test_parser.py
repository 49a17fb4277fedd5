import pytest
from fern.ast import (
    Program, Block, ExprStmt, Assign, ElseIf, IfStmt, LoopStmt, BreakStmt,
    ReturnStmt, FuncDecl, Literal, ListLit, Ident, Index, UnaryOp, BinaryOp, Call,
)
from fern.errors import FernError, ParseError
from fern.lexer import tokenize
from fern.parser import parse, parse_program


def expr(source):
    program = parse_program(source)
    assert len(program.body) == 1
    return program.body[0].expr


def int_lit(n):
    return Literal(n, 'Int')


def syntax_error(source):
    with pytest.raises(FernError) as info:
        parse_program(source)
    assert isinstance(info.value.err, ParseError)
    return info.value.err


def test_parse_accepts_token_sequence():
    program = parse(tokenize("1 + 2;"))
    assert program == Program([ExprStmt(BinaryOp('+', int_lit(1), int_lit(2)))])


def test_precedence():
    assert expr("1 + 2 * 3") == BinaryOp('+', int_lit(1), BinaryOp('*', int_lit(2), int_lit(3)))
    assert expr("(1 + 2) * 3") == BinaryOp('*', BinaryOp('+', int_lit(1), int_lit(2)), int_lit(3))
    assert expr("1 + 1 == 2") == BinaryOp('==', BinaryOp('+', int_lit(1), int_lit(1)), int_lit(2))
    assert expr("1 < 2 == true") == BinaryOp('==', BinaryOp('<', int_lit(1), int_lit(2)), Literal(True, 'Bool'))


def test_binary_operators_are_left_associative():
    assert expr("1 - 2 - 3") == BinaryOp('-', BinaryOp('-', int_lit(1), int_lit(2)), int_lit(3))
    assert expr("8 / 4 / 2") == BinaryOp('/', BinaryOp('/', int_lit(8), int_lit(4)), int_lit(2))


def test_unary_minus_is_right_recursive_and_binds_tightest():
    assert expr("--1") == UnaryOp('-', UnaryOp('-', int_lit(1)))
    assert expr("-1 + 2") == BinaryOp('+', UnaryOp('-', int_lit(1)), int_lit(2))
    assert expr("-xs[0]") == UnaryOp('-', Index(Ident('xs'), int_lit(0)))


def test_primaries():
    assert expr('"hi"') == Literal('hi', 'Str')
    assert expr('false') == Literal(False, 'Bool')
    assert expr('[]') == ListLit([])
    assert expr('[1, a]') == ListLit([int_lit(1), Ident('a')])
    assert expr('[1, 2, 3][0]') == Index(ListLit([int_lit(1), int_lit(2), int_lit(3)]), int_lit(0))
    assert expr('m[1][2]') == Index(Index(Ident('m'), int_lit(1)), int_lit(2))
    assert expr('f()') == Call('f', [])
    assert expr('f(1, g(x))') == Call('f', [int_lit(1), Call('g', [Ident('x')])])


def test_assignment():
    program = parse_program("a = 1 + 1; b = a")
    assert program.body == [
        Assign('a', BinaryOp('+', int_lit(1), int_lit(1))),
        Assign('b', Ident('a')),
    ]


def test_assignment_target_must_be_identifier():
    err = syntax_error("xs[0] = 1;")
    assert err.message == "invalid assignment target"
    assert err.position == '1:7'
    syntax_error("1 = 2;")


def test_if_else_if_else():
    program = parse_program("""
        if (a) { 1; } else if (b) { 2; } else if (c) { 3; } else { 4; }
    """)
    assert program.body == [IfStmt(
        Ident('a'),
        Block([ExprStmt(int_lit(1))]),
        [ElseIf(Ident('b'), Block([ExprStmt(int_lit(2))])),
         ElseIf(Ident('c'), Block([ExprStmt(int_lit(3))]))],
        Block([ExprStmt(int_lit(4))]),
    )]


def test_if_without_else():
    stmt = parse_program("if (x) { y = 1; }").body[0]
    assert stmt.else_ifs == []
    assert stmt.else_block is None


def test_function_loop_break_return():
    program = parse_program("fn f(a, b) { loop { break; } return a; } f(1, 2)")
    assert program.body == [
        FuncDecl('f', ['a', 'b'], Block([
            LoopStmt(Block([BreakStmt()])),
            ReturnStmt(Ident('a')),
        ])),
        ExprStmt(Call('f', [int_lit(1), int_lit(2)])),
    ]


def test_bare_return():
    assert parse_program("fn f() { return; }").body[0].body.statements == [ReturnStmt(None)]
    assert parse_program("fn f() { return }").body[0].body.statements == [ReturnStmt(None)]


def test_semicolon_optional_before_brace_and_at_end():
    program = parse_program("fn main() { a = [3]; b = a + [1]; return b }\nmain()")
    assert len(program.body) == 2
    assert parse_program(";; 1;; 2;").body == [ExprStmt(int_lit(1)), ExprStmt(int_lit(2))]


def test_nested_block_statement():
    assert parse_program("{ a = 1; }").body == [Block([Assign('a', int_lit(1))])]


def test_missing_semicolon():
    err = syntax_error("a = 1 b = 2")
    assert err.position == '1:7'


def test_first_error_is_reported_with_position():
    err = syntax_error("fn f(a {\n}")
    assert err.position == '1:8'
    err = syntax_error("1 +")
    assert err.position == 'end of input'
    syntax_error("if (x) { 1; ")
    syntax_error("fn f(a, a) { }")
    syntax_error(")")


def test_error_rendering():
    err = syntax_error("a = ;")
    assert str(err) == 'ParseError("unexpected token \';\'", "1:5")'
