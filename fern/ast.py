"""Abstract Syntax Tree (AST) definitions for the Fern language.

The parser builds these nodes and the interpreter walks them. Nodes are
frozen: once the parser hands a tree over, nothing rewrites it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional


@dataclass(frozen=True)
class Node:
    """Base class for all AST nodes."""
    pass


@dataclass(frozen=True)
class Program(Node):
    body: List[Node]


# Statements

@dataclass(frozen=True)
class Block(Node):
    statements: List[Node]


@dataclass(frozen=True)
class ExprStmt(Node):
    expr: Node


@dataclass(frozen=True)
class Assign(Node):
    name: str
    value: Node


@dataclass(frozen=True)
class ElseIf(Node):
    condition: Node
    block: Block


@dataclass(frozen=True)
class IfStmt(Node):
    condition: Node
    then_block: Block
    else_ifs: List[ElseIf]
    else_block: Optional[Block]


@dataclass(frozen=True)
class LoopStmt(Node):
    body: Block


@dataclass(frozen=True)
class BreakStmt(Node):
    pass


@dataclass(frozen=True)
class ReturnStmt(Node):
    value: Optional[Node]


@dataclass(frozen=True)
class FuncDecl(Node):
    name: str
    params: List[str]
    body: Block


# Expressions

@dataclass(frozen=True)
class Literal(Node):
    value: Any
    literal_type: str  # 'Int', 'Bool', 'Str'


@dataclass(frozen=True)
class ListLit(Node):
    elements: List[Node]


@dataclass(frozen=True)
class Ident(Node):
    name: str


@dataclass(frozen=True)
class Index(Node):
    target: Node
    index: Node


@dataclass(frozen=True)
class UnaryOp(Node):
    op: str
    operand: Node


@dataclass(frozen=True)
class BinaryOp(Node):
    op: str
    left: Node
    right: Node


@dataclass(frozen=True)
class Call(Node):
    name: str
    args: List[Node]
