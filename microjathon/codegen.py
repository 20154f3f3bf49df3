"""Assembly code generator for MicroJathon.

The generator lowers a `Program` AST into text lines for a register
machine described by a `TargetISA`. Compilation runs in two passes:

1. `plan_storage` assigns every variable a slot and pools every string
   literal that is assigned to a variable.
2. `CodeGenerator` walks the tree again, dispatching on the same statement
   classes as the interpreter. Expression visits emit instructions and
   leave their result in the target's scratch register.

The artifact is laid out as: entry point, translated statements, the
shared `print_int` routine, the division trap routines when `/` is used,
the literal pool, variable storage and the
runtime buffers. The code generator covers the integer and string-literal
subset of the language; floats and `round()` raise `UnsupportedFeature`.
"""

from __future__ import annotations

from typing import List, Optional

from .ast import (
    Program, Block, Assign, Print, IfStmt, WhileStmt,
    BinaryOp, UnaryOp, Literal, Ident, Call, Node,
)
from .debug import DebugLog
from .errors import TypeMismatch, UnsupportedFeature, UnsupportedOperator
from .operators import BINARY_OPS, UNARY_OPS
from .planner import LabelAllocator, StoragePlan, plan_storage
from .target import TargetISA, get_target


class CodeGenerator:
    """Translates one program per `compile` call into assembly lines."""
    def __init__(self, target: Optional[TargetISA] = None, debug_level: int = 0,
                 debug_file: str = 'debug.txt'):
        self.target = target if target is not None else get_target('riscv')
        self.debug = DebugLog(debug_level, debug_file)
        self.labels = LabelAllocator()
        self.plan = StoragePlan()
        self.lines: List[str] = []
        self.traps: List[str] = []
        self.depth = 0
        self.max_depth = 0

    # Public API
    def compile(self, program: Program) -> List[str]:
        # every compilation starts from fresh state
        self.labels = LabelAllocator()
        self.lines = []
        self.traps = []
        self.depth = 0
        self.max_depth = 0
        try:
            self.plan = plan_storage(program, self.labels)
            self.debug(f"plan: slots={list(self.plan.slots)} strings={sorted(self.plan.string_vars)}", 1)
            return self.emit_program(program)
        finally:
            self.debug.close()

    def emit(self, lines: List[str]):
        self.lines.extend(lines)

    def emit_program(self, program: Program) -> List[str]:
        t = self.target
        self.emit(t.prologue())
        for stmt in program.body:
            self.visit_statement(stmt)
        self.emit(t.epilogue())
        self.emit([''])

        self.emit(t.print_int_routine())
        self.emit([''])

        for name in self.traps:
            self.emit(t.trap_routine(name))
            self.emit([''])

        for entry in self.plan.pool:
            self.emit(t.literal_data(entry.label, entry.text))
            self.emit([''])

        for slot in self.plan.slots.values():
            self.emit(t.variable_data(slot))
        if self.plan.slots:
            self.emit([''])

        self.emit(t.runtime_data(self.max_depth))
        return self.lines

    # Statements
    def visit_statement(self, node: Node):
        t = self.target
        if isinstance(node, Assign):
            slot = self.plan.slot(node.name)
            if isinstance(node.value, Literal) and node.value.literal_type == 'Str':
                label = self.plan.literal_label(node.name, node.value.value)
                self.emit(t.store_reference(slot, label))
            else:
                if self.plan.is_string(node.name):
                    raise TypeMismatch(f'variable {node.name} holds a string literal; '
                                       f'cannot also assign it a numeric expression')
                self.visit_expression(node.value)
                self.emit(t.store_variable(slot))
            self.debug(f"assign {node.name} -> {slot}", 2)
            return
        if isinstance(node, Print):
            self.visit_print(node.expr)
            return
        if isinstance(node, IfStmt):
            else_label = self.labels.fresh('L')
            end_label = self.labels.fresh('L')
            self.debug(f"if: else={else_label} end={end_label}", 2)
            self.visit_expression(node.condition)
            self.emit(t.branch_if_false(else_label))
            self.visit_statement(node.then_block)
            self.emit(t.jump(end_label))
            self.emit(t.label(else_label))
            if node.else_block is not None:
                self.visit_statement(node.else_block)
            self.emit(t.label(end_label))
            return
        if isinstance(node, WhileStmt):
            top_label = self.labels.fresh('L')
            end_label = self.labels.fresh('L')
            self.debug(f"while: top={top_label} end={end_label}", 2)
            self.emit(t.label(top_label))
            self.visit_expression(node.condition)
            self.emit(t.branch_if_false(end_label))
            self.visit_statement(node.body)
            self.emit(t.jump(top_label))
            self.emit(t.label(end_label))
            return
        if isinstance(node, Block):
            for stmt in node.statements:
                self.visit_statement(stmt)
            return
        raise TypeError(f"codegen: unexpected node type {type(node).__name__}")

    def visit_print(self, expr: Node):
        t = self.target
        if isinstance(expr, Literal) and expr.literal_type == 'Str':
            for c in expr.value:
                self.emit(t.write_char(ord(c)))
        elif isinstance(expr, Ident) and self.plan.is_string(expr.name):
            loop = self.labels.fresh('PS')
            zero = self.labels.fresh('PS')
            end = self.labels.fresh('PS')
            self.emit(t.print_string(self.plan.slot(expr.name), loop, zero, end))
        else:
            self.visit_expression(expr)
            self.emit(t.call_print_int())
        self.emit(t.write_newline())

    # Expressions
    def is_string_expr(self, node: Node) -> bool:
        if isinstance(node, Literal):
            return node.literal_type == 'Str'
        if isinstance(node, Ident):
            return self.plan.is_string(node.name)
        return False

    def visit_expression(self, node: Node) -> str:
        t = self.target
        if isinstance(node, Literal):
            if node.literal_type == 'Integer':
                self.emit(t.load_immediate(node.value))
                return t.scratch
            if node.literal_type == 'Float':
                raise UnsupportedFeature(f'floating-point literal {node.value!r} is not supported '
                                         f'by the {t.name} code generator')
            raise UnsupportedFeature(f'string literal {node.value!r} can only be assigned or printed')
        if isinstance(node, Ident):
            if self.plan.is_string(node.name):
                raise UnsupportedFeature(f'string variable {node.name} used in a numeric expression')
            self.emit(t.load_variable(self.plan.slot(node.name)))
            return t.scratch
        if isinstance(node, UnaryOp):
            if node.op not in UNARY_OPS:
                raise UnsupportedOperator(f'unknown unary operator {node.op}')
            if self.is_string_expr(node.operand):
                raise UnsupportedFeature(f'string operand for unary {node.op}')
            self.visit_expression(node.operand)
            self.emit(t.unary(node.op))
            return t.scratch
        if isinstance(node, BinaryOp):
            if node.op not in BINARY_OPS:
                raise UnsupportedOperator(f'unknown operator {node.op}')
            if self.is_string_expr(node.left) or self.is_string_expr(node.right):
                raise UnsupportedFeature(f'string operator {node.op} is not supported '
                                         f'by the {t.name} code generator')
            self.visit_expression(node.left)
            self.push()
            self.visit_expression(node.right)
            self.pop()
            self.emit(t.binary(node.op))
            for name in t.traps_for(node.op):
                if name not in self.traps:
                    self.traps.append(name)
            return t.scratch
        if isinstance(node, Call):
            raise UnsupportedFeature(f'{node.func}() is not supported by the {t.name} code generator')
        raise TypeError(f"codegen: unexpected node type {type(node).__name__}")

    def push(self):
        self.emit(self.target.save_scratch())
        self.depth += 1
        self.max_depth = max(self.max_depth, self.depth)

    def pop(self):
        self.emit(self.target.restore_saved())
        self.depth -= 1


def compile_program(program: Program, target: str = 'riscv', debug_level: int = 0) -> str:
    """Compile a program AST and return the assembly artifact text."""
    lines = CodeGenerator(get_target(target), debug_level=debug_level).compile(program)
    return '\n'.join(lines) + '\n'
