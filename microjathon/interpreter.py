"""Tree-walking interpreter for MicroJathon.

The interpreter executes a `Program` AST directly. It owns one flat
`Environment` for the whole run and writes one line to its output stream
for every executed `print`. Operator semantics come from
`microjathon.operators`, the same table the code generator is checked
against.

Any error aborts the run immediately; nothing is caught here.
"""

from __future__ import annotations

import sys
from typing import Any, Dict, List, Optional, TextIO

from .ast import (
    Program, Block, Assign, Print, IfStmt, WhileStmt,
    BinaryOp, UnaryOp, Literal, Ident, Call, Node,
)
from .builtin_function import BuiltinFunction
from .debug import DebugLog
from .environment import Environment
from .errors import InvalidCoercion, TypeMismatch
from .operators import apply_binary_op, apply_unary_op
from .parser import parse_program
from .types import (
    FLOAT, INTEGER, Value,
    is_truthy, round_half_up, to_string, type_name,
)


class Interpreter:
    """Core interpreter that executes a MicroJathon AST."""
    def __init__(self, debug_level: int = 0, debug_file: str = 'debug.txt',
                 out: Optional[TextIO] = None):
        self.env = Environment()
        self.builtins: Dict[str, BuiltinFunction] = {}
        self.debug = DebugLog(debug_level, debug_file)
        self.out = out
        self.load_standard_module()

    def load_standard_module(self):
        def std_round(args: List[Value]) -> Value:
            value = args[0]
            kind = type_name(value)
            if kind != FLOAT:
                raise InvalidCoercion(f'round expects a Float, got {kind} {value!r}')
            return round_half_up(value)

        self.builtins['round'] = BuiltinFunction('round', 1, INTEGER, std_round)

    # Public API
    def run(self, program: Program) -> Environment:
        try:
            self.execute_block(program.body)
        finally:
            self.debug.close()
        return self.env

    def write(self, text: str):
        # resolved at call time so redirected stdout is honoured
        print(text, file=self.out if self.out is not None else sys.stdout)

    def execute_block(self, statements: List[Node]):
        for stmt in statements:
            self.execute(stmt)

    def execute(self, node: Node):
        if isinstance(node, Assign):
            value = self.evaluate(node.value)
            self.env.set(node.name, value)
            self.debug(f"assign {node.name}: {type_name(value)} = {value!r}", 2)
            return
        if isinstance(node, Print):
            value = self.evaluate(node.expr)
            self.write(to_string(value))
            return
        if isinstance(node, IfStmt):
            cond = self.evaluate(node.condition)
            truthy = is_truthy(cond)
            self.debug(f"if condition {cond!r} -> {truthy}", 3)
            if truthy:
                self.execute(node.then_block)
            elif node.else_block is not None:
                self.execute(node.else_block)
            return
        if isinstance(node, WhileStmt):
            while True:
                cond = self.evaluate(node.condition)
                if not is_truthy(cond):
                    break
                self.execute(node.body)
            return
        if isinstance(node, Block):
            # blocks share the single program scope
            self.execute_block(node.statements)
            return
        raise TypeError(f"execute: unexpected node type {type(node).__name__}")

    def evaluate(self, node: Node) -> Value:
        if isinstance(node, Literal):
            return node.value
        if isinstance(node, Ident):
            return self.env.get(node.name)
        if isinstance(node, UnaryOp):
            operand = self.evaluate(node.operand)
            return apply_unary_op(node.op, operand)
        if isinstance(node, BinaryOp):
            # both operands are always evaluated, matching the compiled code
            left = self.evaluate(node.left)
            right = self.evaluate(node.right)
            result = apply_binary_op(node.op, left, right)
            self.debug(f"{left!r} {node.op} {right!r} -> {result!r}", 4)
            return result
        if isinstance(node, Call):
            args = [self.evaluate(arg) for arg in node.args]
            return self.call_function(node.func, args)
        raise TypeError(f"evaluate: unexpected node type {type(node).__name__}")

    def call_function(self, name: str, args: List[Value]) -> Any:
        func = self.builtins.get(name)
        if func is None:
            raise TypeMismatch(f'{name} is not callable')
        if func.arity is not None and len(args) != func.arity:
            raise TypeMismatch(f"{func.name} expects {func.arity} arguments")
        return func.fn(args)


def run_program(source: str, debug_level: int = 0, out: Optional[TextIO] = None) -> Environment:
    """Convenience function to parse and run a MicroJathon program from source."""
    ast_program = parse_program(source)
    interpreter = Interpreter(debug_level=debug_level, out=out)
    return interpreter.run(ast_program)
