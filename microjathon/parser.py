"""Parser for the MicroJathon language.

The source text is fed into a Lark LALR parser configured with the
MicroJathon grammar. The resulting parse tree is transformed into the AST
defined in `microjathon.ast` by `ASTTransformer`. Every statement kind is
decided here, once, by the grammar rule that matched it.

The `parse_program` function is the public entry point and returns a
`Program` AST node representing the entire source text.
"""

from __future__ import annotations

import ast as py_ast

from lark import Lark, Transformer

from .ast import (
    Program, Block, Assign, Print, IfStmt, WhileStmt,
    BinaryOp, UnaryOp, Literal, Ident, Call,
)


JATHON_GRAMMAR = r"""
    ?start: program
    program: statement*

    // Statements
    ?statement: assign_stmt
              | print_stmt
              | if_stmt
              | while_stmt
              | block

    assign_stmt: NAME "=" expression ";"
    print_stmt: "print" "(" expression ")" ";"
    if_stmt: "if" "(" expression ")" block ["else" block]
    while_stmt: "while" "(" expression ")" block
    block: "{" statement* "}"

    // Expressions with precedence
    ?expression: logic_or
    ?logic_or: logic_and (OR logic_and)*
    ?logic_and: equality (AND equality)*
    ?equality: compare ((EQ | NE) compare)*
    ?compare: term ((LE | GE | LT | GT) term)*
    ?term: factor ((PLUS | MINUS) factor)*
    ?factor: unary ((STAR | SLASH) unary)*
    ?unary: (BANG | MINUS) unary
          | primary
    ?primary: literal
            | NAME -> var
            | "round" "(" expression ")" -> round_call
            | "(" expression ")"
    literal: INT_LIT | FLOAT_LIT | STRING_LIT

    // Operators
    OR: "||"
    AND: "&&"
    EQ: "=="
    NE: "!="
    LE: "<="
    GE: ">="
    LT: "<"
    GT: ">"
    PLUS: "+"
    MINUS: "-"
    STAR: "*"
    SLASH: "/"
    BANG: "!"

    // Tokens
    FLOAT_LIT.2: /\d+\.\d+/
    INT_LIT: /\d+/
    %import common.ESCAPED_STRING -> STRING_LIT
    %import common.CNAME -> NAME
    %import common.WS
    %ignore WS

    // Comments
    LINE_COMMENT: /#[^\n]*/ | /\/\/[^\n]*/
    %ignore LINE_COMMENT
"""


JATHON_PARSER = Lark(
    JATHON_GRAMMAR,
    parser='lalr',
    propagate_positions=True,
    maybe_placeholders=False,
)


class ASTTransformer(Transformer):
    """Transforms the raw parse tree into an AST."""

    def program(self, items):
        return Program(body=list(items))

    def block(self, items):
        return Block(statements=list(items))

    def assign_stmt(self, items):
        name = str(items[0])
        return Assign(name=name, value=items[1])

    def print_stmt(self, items):
        return Print(expr=items[0])

    def if_stmt(self, items):
        condition = items[0]
        then_block = items[1]
        else_block = items[2] if len(items) > 2 else None
        return IfStmt(condition, then_block, else_block)

    def while_stmt(self, items):
        condition = items[0]
        body = items[1]
        return WhileStmt(condition, body)

    # Expressions
    def binary_expr(self, items):
        # items pattern: expr ( op expr )*, folded left-associatively
        left = items[0]
        i = 1
        while i < len(items):
            op = items[i]
            right = items[i + 1]
            left = BinaryOp(op=str(op), left=left, right=right)
            i += 2
        return left

    logic_or = binary_expr
    logic_and = binary_expr
    equality = binary_expr
    compare = binary_expr
    term = binary_expr
    factor = binary_expr

    def unary(self, items):
        op = str(items[0])
        operand = items[1]
        return UnaryOp(op=op, operand=operand)

    def var(self, items):
        return Ident(str(items[0]))

    def round_call(self, items):
        return Call(func='round', args=[items[0]])

    def literal(self, items):
        token = items[0]
        if token.type == 'INT_LIT':
            return Literal(int(token.value), 'Integer')
        if token.type == 'FLOAT_LIT':
            return Literal(float(token.value), 'Float')
        if token.type == 'STRING_LIT':
            # Use Python ast.literal_eval to unescape
            return Literal(py_ast.literal_eval(token.value), 'Str')
        raise TypeError(f"unknown literal token {token}")


def parse_program(source: str) -> Program:
    """Parse MicroJathon source code into an AST Program.

    Any syntax errors will be raised as exceptions from the parser.
    """
    tree = JATHON_PARSER.parse(source)
    return ASTTransformer().transform(tree)
