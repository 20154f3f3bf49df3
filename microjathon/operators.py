"""Operator table shared by the evaluator and the code generator.

The evaluator calls `apply_binary_op` / `apply_unary_op` to compute
values. The code generator uses the same operator sets to decide which
symbols it may lower and which are rejected, so both strategies recognise
exactly the same operators.
"""

from __future__ import annotations

import operator

from .errors import DivisionByZero, InvalidCoercion, TypeMismatch, UnsupportedOperator
from .types import (
    INTEGER, FLOAT, STRING, Value,
    demote, is_truthy, to_float, type_name,
)

ARITHMETIC_OPS = ('+', '-', '*', '/')
EQUALITY_OPS = ('==', '!=')
RELATIONAL_OPS = EQUALITY_OPS + ('<', '>', '<=', '>=')
LOGICAL_OPS = ('&&', '||')
BINARY_OPS = ARITHMETIC_OPS + RELATIONAL_OPS + LOGICAL_OPS
UNARY_OPS = ('!', '-')

_NUMERIC = (INTEGER, FLOAT)

_COMPARE = {
    '==': operator.eq,
    '!=': operator.ne,
    '<': operator.lt,
    '>': operator.gt,
    '<=': operator.le,
    '>=': operator.ge,
}


def _mismatch(op: str, a: Value, b: Value) -> TypeMismatch:
    return TypeMismatch(f"unsupported {op} for {type_name(a)} and {type_name(b)}")


def _numeric(op: str, a: Value, b: Value) -> Value:
    if op == '/':
        if b == 0:
            raise DivisionByZero(f"{a!r} / {b!r}")
        if isinstance(a, int) and isinstance(b, int) and a % b == 0:
            return a // b
        try:
            # int / int is correctly rounded, even past the float range of either side
            quotient = a / b if isinstance(a, int) and isinstance(b, int) else to_float(a) / to_float(b)
        except OverflowError:
            raise InvalidCoercion(f"{a!r} / {b!r} is too large for a Float") from None
        return demote(quotient)
    if isinstance(a, int) and isinstance(b, int):
        # exact integer arithmetic; already in demoted form
        if op == '+':
            return a + b
        if op == '-':
            return a - b
        return a * b
    x, y = to_float(a), to_float(b)
    if op == '+':
        return demote(x + y)
    if op == '-':
        return demote(x - y)
    return demote(x * y)


def _string_arith(op: str, a: str, b: Value) -> Value:
    kb = type_name(b)
    if op == '+' and kb == STRING:
        return a + b
    if op == '-' and kb == STRING:
        # removes only the first occurrence
        return a.replace(b, '', 1)
    if op == '*' and kb == INTEGER:
        if b < 0:
            raise InvalidCoercion(f"cannot repeat a string {b} times")
        return a * b
    raise _mismatch(op, a, b)


def compare(op: str, a: Value, b: Value) -> int:
    """Relational and equality operators; the result is always 1 or 0."""
    if op not in _COMPARE:
        raise UnsupportedOperator(f"unknown comparison operator {op}")
    ka, kb = type_name(a), type_name(b)
    if ka in _NUMERIC and kb in _NUMERIC:
        # int and float compare exactly
        return 1 if _COMPARE[op](a, b) else 0
    if ka == STRING and kb == STRING:
        if op not in EQUALITY_OPS:
            raise _mismatch(op, a, b)
        return 1 if _COMPARE[op](a, b) else 0
    raise _mismatch(op, a, b)


def apply_binary_op(op: str, a: Value, b: Value) -> Value:
    ka, kb = type_name(a), type_name(b)
    if op in ARITHMETIC_OPS:
        if ka in _NUMERIC and kb in _NUMERIC:
            return _numeric(op, a, b)
        if ka == STRING:
            return _string_arith(op, a, b)
        raise _mismatch(op, a, b)
    if op in LOGICAL_OPS:
        if ka == STRING or kb == STRING:
            raise _mismatch(op, a, b)
        if op == '&&':
            return 1 if is_truthy(a) and is_truthy(b) else 0
        return 1 if is_truthy(a) or is_truthy(b) else 0
    return compare(op, a, b)


def apply_unary_op(op: str, value: Value) -> Value:
    kind = type_name(value)
    if kind == STRING:
        raise TypeMismatch(f"unsupported unary {op} for {kind}")
    if op == '!':
        return 0 if is_truthy(value) else 1
    if op == '-':
        return demote(-value)
    raise UnsupportedOperator(f"unknown unary operator {op}")
