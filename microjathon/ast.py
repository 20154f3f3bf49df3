"""Abstract Syntax Tree (AST) definitions for MicroJathon.

The AST classes defined in this module represent the syntactic structure
of parsed MicroJathon programs. Statements form a closed set: `Assign`,
`Print`, `IfStmt`, `WhileStmt` and `Block`. Both the interpreter and the
code generator dispatch on these classes rather than on keyword text.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional


@dataclass
class Node:
    """Base class for all AST nodes."""
    pass


@dataclass
class Program(Node):
    body: List[Node]


@dataclass
class Block(Node):
    statements: List[Node]


@dataclass
class Assign(Node):
    name: str
    value: Node


@dataclass
class Print(Node):
    expr: Node


@dataclass
class IfStmt(Node):
    condition: Node
    then_block: Block
    else_block: Optional[Block]


@dataclass
class WhileStmt(Node):
    condition: Node
    body: Block


STATEMENT_TYPES = (Assign, Print, IfStmt, WhileStmt, Block)


@dataclass
class BinaryOp(Node):
    op: str
    left: Node
    right: Node


@dataclass
class UnaryOp(Node):
    op: str
    operand: Node


@dataclass
class Literal(Node):
    value: Any
    literal_type: str  # 'Integer', 'Float', 'Str'


@dataclass
class Ident(Node):
    name: str


@dataclass
class Call(Node):
    func: str  # builtin name, e.g. 'round'
    args: List[Node]
