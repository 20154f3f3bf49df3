"""Runtime value model for MicroJathon.

A MicroJathon value is one of three kinds, represented directly by the
matching Python type:

* ``Integer`` -> ``int``
* ``Float``   -> ``float``
* ``Str``     -> ``str``

No other Python type is ever a valid value. The helpers here classify
values, apply the demotion rule shared by every arithmetic operator and
perform the numeric and boolean coercions both execution strategies rely
on.
"""

from __future__ import annotations

from typing import Any, Union
import math

from .errors import InvalidCoercion, TypeMismatch

Value = Union[int, float, str]

INTEGER = 'Integer'
FLOAT = 'Float'
STRING = 'Str'


def type_name(value: Any) -> str:
    """Return the MicroJathon kind of a runtime value."""
    if isinstance(value, bool):
        # bool is a subclass of int; never produced, but never a value either
        raise TypeMismatch(f"not a MicroJathon value: {value!r}")
    if isinstance(value, int):
        return INTEGER
    if isinstance(value, float):
        return FLOAT
    if isinstance(value, str):
        return STRING
    raise TypeMismatch(f"not a MicroJathon value: {value!r}")


def demote(value: float) -> Value:
    """Apply the demotion rule to an arithmetic result.

    A floating result equal to its own floor becomes an Integer; anything
    else (including infinities and NaN) stays a Float.
    """
    if isinstance(value, int):
        return value
    if math.isfinite(value) and value == math.floor(value):
        return int(value)
    return value


def round_half_up(x: float) -> int:
    """Round a floating point number to the nearest integer.

    Python's built-in round uses bankers rounding, so we implement the
    rule MicroJathon uses everywhere: halves round up, towards positive
    infinity (`-2.5` becomes `-2`).
    """
    if not math.isfinite(x):
        raise InvalidCoercion(f"cannot round {x!r} to an Integer")
    return math.floor(x + 0.5)


def to_float(value: Value) -> float:
    kind = type_name(value)
    if kind == INTEGER:
        try:
            return float(value)
        except OverflowError:
            raise InvalidCoercion(f"Integer {value} is too large for a Float") from None
    if kind == FLOAT:
        return value
    raise InvalidCoercion(f"cannot convert {value!r} to a number")


def to_int(value: Value) -> int:
    """Coerce a value to the integer used for truthiness decisions."""
    kind = type_name(value)
    if kind == INTEGER:
        return value
    if kind == FLOAT:
        return round_half_up(value)
    raise InvalidCoercion(f"cannot convert {value!r} to an Integer")


def is_truthy(value: Value) -> bool:
    # Truthiness: nonzero after nearest-integer coercion
    return to_int(value) != 0


def to_string(value: Value) -> str:
    """Convert a value to the text `print` writes for it."""
    kind = type_name(value)
    if kind == INTEGER:
        return str(value)
    if kind == FLOAT:
        # Use repr for a concise round-trip representation
        return repr(value)
    return value
