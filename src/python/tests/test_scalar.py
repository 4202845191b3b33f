"""
===============================================================================
QALGEBRA - Scalar Type Test Suite
===============================================================================
The algebra is generic over its scalar type. These tests check the scalar
helpers and that int, float, numpy, Fraction and Decimal quaternions keep
their component type through arithmetic.
===============================================================================
"""

import sys
import os
import math
from decimal import Decimal
from fractions import Fraction

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import numpy as np
import pytest

from qalgebra import Quaternion, QuaternionDivisionError, identity
from qalgebra.scalar import (
    format_scalar, is_finite, is_float, is_scalar, sqrt, zero_like
)


# =============================================================================
# Test: Scalar helpers
# =============================================================================

class TestScalarHelpers:
    """Tests for qalgebra.scalar."""

    @pytest.mark.parametrize("value", [
        1, 1.5, Decimal('2.5'), Fraction(1, 3), np.float64(2.0), np.float32(2.0),
    ])
    def test_is_scalar(self, value):
        assert is_scalar(value)

    @pytest.mark.parametrize("value", [
        1 + 2j, np.complex64(1), np.complex128(1 + 1j), True, np.bool_(True),
        "1", None, [1.0], Quaternion(1.0),
    ])
    def test_is_not_scalar(self, value):
        assert not is_scalar(value)

    @pytest.mark.parametrize("value", [
        1, -2.5, np.float32(3.0), Decimal("1e999"), Fraction(7, 3), 10 ** 400,
    ])
    def test_is_finite(self, value):
        assert is_finite(value)

    @pytest.mark.parametrize("value", [
        math.nan, math.inf, -math.inf, np.float64("nan"), np.float32("inf"),
        Decimal("NaN"), Decimal("Infinity"), Decimal("-Infinity"),
    ])
    def test_is_not_finite(self, value):
        assert not is_finite(value)

    def test_is_float(self):
        assert is_float(1.0)
        assert is_float(np.float32(1.0))
        assert not is_float(1)
        assert not is_float(Decimal(1))
        assert not is_float(Fraction(1, 2))

    @pytest.mark.parametrize("value", [3, 2.5, Decimal('1.1'), Fraction(1, 2), np.float32(4.0)])
    def test_zero_like_keeps_type(self, value):
        zero = zero_like(value)
        assert zero == 0
        assert type(zero) is type(value)

    def test_sqrt_float(self):
        assert sqrt(30.0) == math.sqrt(30.0)

    def test_sqrt_int_returns_float(self):
        assert sqrt(16) == 4.0

    def test_sqrt_decimal(self):
        assert sqrt(Decimal(2)) == Decimal(2).sqrt()

    def test_sqrt_numpy_keeps_precision(self):
        assert isinstance(sqrt(np.float32(2.0)), np.float32)

    def test_sqrt_fraction(self):
        assert sqrt(Fraction(1, 4)) == 0.5

    @pytest.mark.parametrize("value,expected", [
        (1.0, '1'),
        (-2.0, '-2'),
        (0.5, '0.5'),
        (1e-16, '1e-16'),
        (math.sqrt(30.0), '5.47723'),
        (np.float64(3.0), '3'),
        (np.float32(0.25), '0.25'),
        (7, '7'),
        (Decimal('1.50'), '1.50'),
        (Fraction(1, 3), '1/3'),
    ])
    def test_format_scalar(self, value, expected):
        assert format_scalar(value) == expected


# =============================================================================
# Test: Decimal quaternions
# =============================================================================

class TestDecimal:
    """Quaternions over decimal.Decimal."""

    @pytest.fixture
    def dq(self):
        return Quaternion(Decimal(1), Decimal(2), Decimal(3), Decimal(4))

    def test_padding_keeps_type(self):
        q = Quaternion(Decimal('2.5'))
        assert all(isinstance(c, Decimal) for c in q.components)

    def test_norm_uses_decimal_sqrt(self, dq):
        n = dq.norm()
        assert isinstance(n, Decimal)
        assert n == Decimal(30).sqrt()

    def test_product(self, dq):
        product = dq * dq
        assert product == Quaternion(Decimal(-28), Decimal(4), Decimal(6), Decimal(8))
        assert all(isinstance(c, Decimal) for c in product.components)

    def test_scalar_division(self, dq):
        assert dq / Decimal(2) == Quaternion(
            Decimal('0.5'), Decimal(1), Decimal('1.5'), Decimal(2))

    @pytest.mark.parametrize("bad", [Decimal("NaN"), Decimal("Infinity"), Decimal("sNaN")])
    def test_non_finite_component_raises(self, bad):
        with pytest.raises(ValueError):
            Quaternion(Decimal(1), bad)

    def test_division_by_zero_raises(self, dq):
        with pytest.raises(QuaternionDivisionError):
            dq / Decimal(0)
        with pytest.raises(QuaternionDivisionError):
            dq / Quaternion(Decimal(0))

    def test_identity_of_type(self, dq):
        one = identity(Decimal)
        assert all(isinstance(c, Decimal) for c in one.components)
        assert dq * one == dq

    def test_str(self):
        q = Quaternion(Decimal('1.5'), Decimal('-2'), Decimal('0'), Decimal('3.25'))
        assert str(q) == "1.5 + -2i + 0j + 3.25k"


# =============================================================================
# Test: Fraction quaternions
# =============================================================================

class TestFraction:
    """Quaternions over fractions.Fraction give exact inverses."""

    @pytest.fixture
    def fq(self):
        return Quaternion(Fraction(1), Fraction(2), Fraction(3), Fraction(4))

    def test_inverse_is_exact(self, fq):
        inv = fq.inverse()
        assert inv == Quaternion(Fraction(1, 30), Fraction(-2, 30),
                                 Fraction(-3, 30), Fraction(-4, 30))
        assert fq * inv == identity()
        assert inv * fq == identity()

    def test_divide_self_is_exact_identity(self, fq):
        assert fq / fq == identity()

    def test_round_trip_is_exact(self, fq):
        other = Quaternion(Fraction(1, 2), Fraction(-1, 3), Fraction(5), Fraction(0))
        assert (fq * other) / other == fq


# =============================================================================
# Test: numpy and builtin numeric types
# =============================================================================

class TestNumericTypes:
    """float32, int and float behave consistently."""

    def test_float32_precision_preserved(self):
        q = Quaternion.from_array(np.array([1.0, 2.0, 3.0, 4.0], dtype=np.float32))
        product = q * q
        assert all(isinstance(c, np.float32) for c in product.components)
        assert isinstance(q.norm(), np.float32)
        assert product == Quaternion(-28.0, 4.0, 6.0, 8.0)

    def test_int_arithmetic_stays_int(self):
        q = Quaternion(1, 2, 3, 4)
        assert all(isinstance(c, int) for c in (q * q).components)
        assert all(isinstance(c, int) for c in (q * 2).components)

    def test_int_division_gives_float(self):
        assert Quaternion(1, 2, 3, 4) / 2 == Quaternion(0.5, 1.0, 1.5, 2.0)

    def test_int_and_float_agree(self):
        qi = Quaternion(1, 2, 3, 4)
        qf = Quaternion(1.0, 2.0, 3.0, 4.0)
        assert qi * qi == qf * qf
        assert qi.norm() == qf.norm()
        assert qi.inverse() == qf.inverse()
        assert str(qi) == str(qf)
