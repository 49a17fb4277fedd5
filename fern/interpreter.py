"""Tree-walking interpreter for the Fern language.

The interpreter executes a `Program` directly against an `Environment`.
Statements produce an `Outcome` (normal, return or break) which block,
if and loop executors inspect after every child statement. Errors travel
as `FernError` exceptions carrying an error value.

Whenever a node has several sub-expressions that can be evaluated
independently (list elements, call arguments, the operands of an operator
chain) all of them are evaluated even after one fails. A single failure
propagates unchanged; two or more are reported together as a
`MultipleError`, in evaluation order.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from .ast import (
    Program, Block, ExprStmt, Assign, IfStmt, LoopStmt, BreakStmt,
    ReturnStmt, FuncDecl, Literal, ListLit, Ident, Index, UnaryOp, BinaryOp,
    Call, Node
)
from .builtin_function import BuiltinFunction
from .environment import Environment
from .errors import (
    ErrorVal, FernError, TypeMismatch, DivisionByZero, IndexOutOfRange,
    UndefinedFunction, ArityMismatch, NotCallable, BreakOutsideLoop,
    merge_errors, nest_errors,
)
from .parser import parse_program
from .signals import Flow, Outcome, NORMAL, BREAK
from .std import standard_library
from .types import (
    UNIT, ListVal, FunctionValue, is_int, type_name, values_equal, repr_value,
)

# Binding strength of each binary operator; equal numbers share a level
PRECEDENCE: Dict[str, int] = {
    '==': 1,
    '<': 2, '>': 2, '<=': 2, '>=': 2,
    '+': 3, '-': 3,
    '*': 4, '/': 4,
}


class Interpreter:
    """Core interpreter that executes Fern ASTs."""
    def __init__(self, debug_level: int = 0, debug_file: str = 'debug.txt'):
        self.global_env = Environment()
        self.builtins: Dict[str, BuiltinFunction] = standard_library()
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w', encoding='utf-8') if debug_level > 0 else None

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp:
                self.debug_fp.write(msg + '\n')
                self.debug_fp.flush()
            else:
                print(msg)

    def close(self):
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    # Public API
    def run(self, program: Program, env: Optional[Environment] = None) -> Any:
        """Execute a program and return the value of its last statement.

        Raises `FernError` if any statement fails.
        """
        if env is None:
            env = self.global_env
        outcome = self.execute_block(program.body, env)
        if outcome.flow is Flow.BREAK:
            raise FernError(BreakOutsideLoop())
        return outcome.value

    def interpret(self, source: str, env: Optional[Environment] = None) -> Union[Any, ErrorVal]:
        """Parse and run one unit of source, returning its value or its error."""
        try:
            return self.run(parse_program(source), env)
        except FernError as ex:
            self.debug(f"error {ex.err}")
            return ex.err

    # Statements
    def execute_block(self, statements: Sequence[Node], env: Environment) -> Outcome:
        last = UNIT
        for stmt in statements:
            outcome = self.execute(stmt, env)
            if not outcome.is_normal:
                return outcome
            last = outcome.value
        return Outcome.normal(last)

    def execute(self, node: Node, env: Environment) -> Outcome:
        if isinstance(node, ExprStmt):
            return Outcome.normal(self.evaluate(node.expr, env))
        if isinstance(node, Assign):
            value = self.evaluate(node.value, env)
            env.assign(node.name, value)
            if self.debug_level >= 2:
                self.debug(f"assign {node.name} = {repr_value(value)}")
            return Outcome.normal(value)
        if isinstance(node, FuncDecl):
            env.define(node.name, FunctionValue(node.name, node.params, node.body, env))
            if self.debug_level >= 2:
                self.debug(f"define function {node.name}")
            return NORMAL
        if isinstance(node, Block):
            outcome = self.execute_block(node.statements, Environment(parent=env))
            return outcome if not outcome.is_normal else NORMAL
        if isinstance(node, IfStmt):
            return self.execute_if(node, env)
        if isinstance(node, LoopStmt):
            while True:
                outcome = self.execute(node.body, env)
                if outcome.flow is Flow.BREAK:
                    return NORMAL
                if outcome.flow is Flow.RETURN:
                    return outcome
        if isinstance(node, BreakStmt):
            return BREAK
        if isinstance(node, ReturnStmt):
            value = self.evaluate(node.value, env) if node.value is not None else UNIT
            return Outcome.returning(value)
        raise NotImplementedError(f"execute: unexpected node type {type(node)}")

    def execute_if(self, node: IfStmt, env: Environment) -> Outcome:
        branches = [(node.condition, node.then_block)]
        branches.extend((branch.condition, branch.block) for branch in node.else_ifs)
        for condition, block in branches:
            if self.is_true(condition, env):
                return self.execute(block, env)
        if node.else_block is not None:
            return self.execute(node.else_block, env)
        return NORMAL

    def is_true(self, condition: Node, env: Environment) -> bool:
        value = self.evaluate(condition, env)
        if not isinstance(value, bool):
            raise FernError(TypeMismatch('Bool', type_name(value), 'if'))
        if self.debug_level >= 3:
            self.debug(f"if condition -> {repr_value(value)}")
        return value

    # Expressions
    def evaluate(self, node: Node, env: Environment) -> Any:
        if isinstance(node, Literal):
            return node.value
        if isinstance(node, Ident):
            return env.get(node.name)
        if isinstance(node, ListLit):
            return ListVal(self.evaluate_all(node.elements, env))
        if isinstance(node, BinaryOp):
            return self.evaluate_chain(node, env)
        if isinstance(node, UnaryOp):
            operand = self.evaluate(node.operand, env)
            if node.op == '-':
                if not is_int(operand):
                    raise FernError(TypeMismatch('Int', type_name(operand), '-'))
                return -operand
            raise FernError(TypeMismatch('Int', type_name(operand), node.op))
        if isinstance(node, Index):
            target, index = self.evaluate_all([node.target, node.index], env)
            return self.index_value(target, index)
        if isinstance(node, Call):
            args = self.evaluate_all(node.args, env)
            return self.call_function(node.name, args, env)
        raise NotImplementedError(f"evaluate: unexpected node type {type(node)}")

    def evaluate_all(self, nodes: Sequence[Node], env: Environment) -> List[Any]:
        """Evaluate every node, collecting all failures before raising."""
        values: List[Any] = []
        errors: List[ErrorVal] = []
        for node in nodes:
            try:
                values.append(self.evaluate(node, env))
            except FernError as ex:
                errors.append(ex.err)
        if errors:
            raise FernError(merge_errors(errors))
        return values

    def evaluate_chain(self, node: BinaryOp, env: Environment) -> Any:
        """Evaluate a run of same-precedence operators such as ``a + b - c``.

        Values are combined left to right. Operand failures are combined
        right-nested, so ``a + b + c`` with three failures reports
        ``MultipleError([a, MultipleError([b, c])])``.
        """
        ops, operands = self.operator_chain(node)
        values: List[Any] = []
        errors: List[ErrorVal] = []
        for operand in operands:
            try:
                values.append(self.evaluate(operand, env))
            except FernError as ex:
                errors.append(ex.err)
        if errors:
            raise FernError(nest_errors(errors))
        result = values[0]
        for op, value in zip(ops, values[1:]):
            result = self.apply_binary_op(op, result, value)
        return result

    @staticmethod
    def operator_chain(node: BinaryOp) -> Tuple[List[str], List[Node]]:
        level = PRECEDENCE[node.op]
        ops: List[str] = []
        operands: List[Node] = []
        current: Node = node
        while isinstance(current, BinaryOp) and PRECEDENCE[current.op] == level:
            ops.append(current.op)
            operands.append(current.right)
            current = current.left
        operands.append(current)
        ops.reverse()
        operands.reverse()
        return ops, operands

    def index_value(self, target: Any, index: Any) -> Any:
        if not isinstance(target, ListVal):
            raise FernError(TypeMismatch('List', type_name(target), 'index'))
        if not is_int(index):
            raise FernError(TypeMismatch('Int', type_name(index), 'index'))
        if index < 0 or index >= len(target.items):
            raise FernError(IndexOutOfRange(index, len(target.items)))
        return target.items[index]

    def call_function(self, name: str, args: List[Any], env: Environment) -> Any:
        builtin = self.builtins.get(name)
        if builtin is not None:
            # Check arity; None means variadic
            if builtin.arity is not None and len(args) != builtin.arity:
                raise FernError(ArityMismatch(builtin.arity, len(args)))
            return builtin.fn(args)
        owner = env.resolve(name)
        if owner is None:
            raise FernError(UndefinedFunction(name))
        func = owner.values[name]
        if not isinstance(func, FunctionValue):
            raise FernError(NotCallable(name))
        if len(args) != len(func.params):
            raise FernError(ArityMismatch(len(func.params), len(args)))
        if self.debug_level >= 1:
            self.debug(f"call {name}({', '.join(repr_value(a) for a in args)})")
        # New scope for the call; the defining scope is its parent
        call_env = Environment(parent=func.env)
        for param, arg in zip(func.params, args):
            call_env.define(param, arg)
        outcome = self.execute_block(func.body.statements, call_env)
        if outcome.flow is Flow.BREAK:
            raise FernError(BreakOutsideLoop())
        if outcome.flow is Flow.RETURN:
            return outcome.value
        return UNIT

    def apply_binary_op(self, op: str, a: Any, b: Any) -> Any:
        if op == '+':
            if is_int(a) and is_int(b):
                return a + b
            if isinstance(a, ListVal) and isinstance(b, ListVal):
                return ListVal(a.items + b.items)
            if isinstance(a, str) and isinstance(b, str):
                return a + b
            if is_int(a) or isinstance(a, (ListVal, str)):
                raise FernError(TypeMismatch(type_name(a), type_name(b), op))
            raise FernError(TypeMismatch('Int', type_name(a), op))
        if op == '==':
            return values_equal(a, b)
        # Remaining operators take two integers
        for value in (a, b):
            if not is_int(value):
                raise FernError(TypeMismatch('Int', type_name(value), op))
        if op == '-':
            return a - b
        if op == '*':
            return a * b
        if op == '/':
            if b == 0:
                raise FernError(DivisionByZero())
            # integer division truncating toward zero
            quotient = abs(a) // abs(b)
            return quotient if (a < 0) == (b < 0) else -quotient
        if op == '<':
            return a < b
        if op == '>':
            return a > b
        if op == '<=':
            return a <= b
        if op == '>=':
            return a >= b
        raise FernError(TypeMismatch('Int', type_name(a), op))


def run_program(source: str, debug_level: int = 0) -> Any:
    """Convenience function to parse and run a Fern program from source string."""
    program = parse_program(source)
    interpreter = Interpreter(debug_level=debug_level)
    try:
        return interpreter.run(program)
    finally:
        interpreter.close()


def run_file(file_path: str, debug_level: int = 0) -> Interpreter:
    """Run a Fern file, returning the interpreter so its globals can be inspected."""
    with open(file_path, 'r', encoding='utf-8') as f:
        source = f.read()
    program = parse_program(source)
    interpreter = Interpreter(debug_level=debug_level)
    try:
        interpreter.run(program)
    finally:
        interpreter.close()
    return interpreter
