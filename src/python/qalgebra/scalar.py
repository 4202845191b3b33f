"""
===============================================================================
QALGEBRA - Scalar Capability Layer
===============================================================================
The quaternion algebra is generic over its scalar type. A usable scalar type
provides + - * /, unary negation, abs() and ordering, equality, and a
square-root-like operation. This module gathers the few places where the
algebra has to know more than the arithmetic operators:

    * deciding whether an operand is a scalar (vs. another quaternion),
    * producing typed zeros for padding constructors,
    * taking square roots without losing the scalar's precision,
    * rendering components the way a C output stream renders a double.

Supported out of the box: int, float, numpy floating scalars, Fraction,
Decimal, and any numbers.Real type exposing a ``sqrt()`` method.
===============================================================================
"""

import math
import numbers
from decimal import Decimal
from typing import Any, TypeVar

import numpy as np

T = TypeVar('T')


def is_scalar(value: Any) -> bool:
    """True for real-valued numbers usable as quaternion components."""
    if isinstance(value, bool):
        return False
    return isinstance(value, (numbers.Real, Decimal))


def is_float(value: Any) -> bool:
    """True for binary floating-point scalars (float, numpy floating)."""
    return isinstance(value, (float, np.floating))


def is_finite(value: Any) -> bool:
    """
    False for NaN and infinities.

    int and Fraction are always finite; Decimal has its own NaN and
    Infinity values.
    """
    if is_float(value):
        return math.isfinite(value)
    if isinstance(value, Decimal):
        return value.is_finite()
    return True


def zero_like(value: T) -> T:
    """Zero of the same scalar type as ``value``."""
    return type(value)(0)


def sqrt(value: T) -> T:
    """
    Square root that respects the scalar type.

    Dispatch order:
        1. numpy scalars -> np.sqrt (float32 stays float32)
        2. types with a ``sqrt()`` method (Decimal, user types)
        3. everything else -> math.sqrt (returns float)

    Parameters
    ----------
    value : scalar
        Non-negative value. For the norm this is always a sum of squares.

    Returns
    -------
    scalar
        Square root of ``value``.
    """
    if isinstance(value, np.generic):
        return np.sqrt(value)

    method = getattr(value, 'sqrt', None)
    if callable(method):
        return method()

    return math.sqrt(value)


def format_scalar(value: Any) -> str:
    """
    Render a component with the scalar type's default text.

    Binary floats use the general ('%g') format, which is what a C++ output
    stream prints for a double: 1.0 -> '1', 0.5 -> '0.5', 1e-16 -> '1e-16'.
    Other types (int, Decimal, Fraction, user types) use str().
    """
    if is_float(value):
        return format(value, 'g')
    return str(value)
