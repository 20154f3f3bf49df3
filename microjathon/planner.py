"""Storage and literal planning for the code generator.

Before any instruction is emitted the whole program is walked once to
decide where every variable lives and which string literals must be
embedded in the artifact. Loops can print a variable before its
assignment appears in program order, so the plan has to be complete
before code generation starts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Set

from .ast import (
    Program, Block, Assign, Print, IfStmt, WhileStmt,
    BinaryOp, UnaryOp, Literal, Ident, Call, Node,
)
from .errors import MissingLiteralEntry


class LabelAllocator:
    """Hands out labels from one counter that never resets.

    A single allocator is shared by the planner and the code generator of
    one compilation, so no two allocated labels in an artifact collide
    whatever prefix they use.
    """
    def __init__(self):
        self.count = 0
        self.allocated: List[str] = []

    def fresh(self, prefix: str = 'L') -> str:
        label = f"{prefix}{self.count}"
        self.count += 1
        self.allocated.append(label)
        return label


@dataclass
class LiteralEntry:
    label: str
    text: str


@dataclass
class StoragePlan:
    """Variable slots, string-typed markers and the literal pool.

    `slots` preserves first-appearance order, which is also the order the
    storage section of the artifact is emitted in. `literals` is keyed by
    literal text so identical literals share one pool entry.
    """
    slots: Dict[str, str] = field(default_factory=dict)
    string_vars: Set[str] = field(default_factory=set)
    literals: Dict[str, LiteralEntry] = field(default_factory=dict)

    def slot(self, name: str) -> str:
        return self.slots[name]

    def is_string(self, name: str) -> bool:
        return name in self.string_vars

    def literal_label(self, name: str, text: str) -> str:
        """Return the pool label a string assignment to `name` stores."""
        entry = self.literals.get(text)
        if name not in self.string_vars or entry is None:
            raise MissingLiteralEntry(f'no literal pool entry for variable {name} = {text!r}')
        return entry.label

    @property
    def pool(self) -> List[LiteralEntry]:
        return list(self.literals.values())


def slot_label(name: str) -> str:
    # namespaced so user names never collide with runtime or control labels
    return f"var_{name}"


class StoragePlanner:
    """Builds a `StoragePlan` in a single forward pass over the tree."""
    def __init__(self, labels: LabelAllocator):
        self.labels = labels
        self.plan = StoragePlan()

    def build(self, program: Program) -> StoragePlan:
        for stmt in program.body:
            self.visit_statement(stmt)
        return self.plan

    def register(self, name: str):
        if name not in self.plan.slots:
            self.plan.slots[name] = slot_label(name)

    def visit_statement(self, node: Node):
        if isinstance(node, Assign):
            self.register(node.name)
            if isinstance(node.value, Literal) and node.value.literal_type == 'Str':
                self.plan.string_vars.add(node.name)
                if node.value.value not in self.plan.literals:
                    label = self.labels.fresh('str')
                    self.plan.literals[node.value.value] = LiteralEntry(label, node.value.value)
            else:
                self.visit_expression(node.value)
        elif isinstance(node, Print):
            self.visit_expression(node.expr)
        elif isinstance(node, IfStmt):
            self.visit_expression(node.condition)
            self.visit_statement(node.then_block)
            if node.else_block is not None:
                self.visit_statement(node.else_block)
        elif isinstance(node, WhileStmt):
            self.visit_expression(node.condition)
            self.visit_statement(node.body)
        elif isinstance(node, Block):
            for stmt in node.statements:
                self.visit_statement(stmt)
        else:
            raise TypeError(f"plan: unexpected node type {type(node).__name__}")

    def visit_expression(self, node: Node):
        # names that are only ever read still need a zero-initialised slot
        if isinstance(node, Ident):
            self.register(node.name)
        elif isinstance(node, BinaryOp):
            self.visit_expression(node.left)
            self.visit_expression(node.right)
        elif isinstance(node, UnaryOp):
            self.visit_expression(node.operand)
        elif isinstance(node, Call):
            for arg in node.args:
                self.visit_expression(arg)
        elif not isinstance(node, Literal):
            raise TypeError(f"plan: unexpected node type {type(node).__name__}")


def plan_storage(program: Program, labels: LabelAllocator) -> StoragePlan:
    return StoragePlanner(labels).build(program)
