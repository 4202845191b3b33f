"""
===============================================================================
QALGEBRA - Quaternion Algebra
===============================================================================

Quaternion value type over a generic scalar field. A quaternion is the
hyper-complex number

    q = t + u*i + v*j + w*k

where t is the real part and (u, v, w) are the imaginary components. The
imaginary units obey Hamilton's rule

    i^2 = j^2 = k^2 = ijk = -1

which makes multiplication associative and distributive but NOT commutative:
i*j = k while j*i = -k.

Construction
------------
    Quaternion()            -> 0 + 0i + 0j + 0k   (null quaternion)
    Quaternion(x)           -> x + 0i + 0j + 0k   (real embedding)
    Quaternion(x, y)        -> x + yi + 0j + 0k   (complex embedding)
    Quaternion(x, y, z, w)  -> x + yi + zj + wk

Scalar type
-----------
The class is generic: components may be int, float, numpy floating scalars,
Fraction, Decimal, or any type with the usual arithmetic and a ``sqrt()``
method. Arithmetic never coerces components, so a float32 quaternion stays
float32 and a Decimal quaternion stays Decimal.

Mutability
----------
Binary operators return new quaternions. The compound assignment operators
(+=, -=, *=, /=) update the left operand in place, so quaternions are not
hashable.

Division
--------
Dividing by a quaternion whose norm is <= 1e-15, or by a scalar whose
magnitude is <= 1e-15, raises QuaternionDivisionError. The algebra never
returns infinities or NaNs from a division.

References
----------
    [1] Hamilton, "On Quaternions", Philosophical Magazine, 1844.
    [2] Kuipers, "Quaternions and Rotation Sequences", Princeton, 1999.
===============================================================================
"""

from typing import Any, Generic, Sequence, Tuple, Type, TypeVar, Union

import numpy as np

from qalgebra.constants import (
    COMPARISON_TOLERANCE, DIVISION_TOLERANCE, QUATERNION_SIZE, UNIT_TOLERANCE
)
from qalgebra.exceptions import QuaternionDivisionError
from qalgebra.scalar import (
    format_scalar, is_finite, is_float, is_scalar, sqrt, zero_like
)

T = TypeVar('T')


class Quaternion(Generic[T]):
    """
    Quaternion t + u*i + v*j + w*k over a scalar type T.

    Attributes
    ----------
    t : T
        Real part.
    u : T
        First imaginary component (i-axis).
    v : T
        Second imaginary component (j-axis).
    w : T
        Third imaginary component (k-axis).

    Examples
    --------
    >>> q = Quaternion(1, 2, 3, 4)
    >>> str(q * q)
    '-28 + 4i + 6j + 8k'
    """

    __slots__ = ('_t', '_u', '_v', '_w')

    # Divisors at or below this magnitude are rejected.
    _DIVISION_TOLERANCE = DIVISION_TOLERANCE

    # Mutable through compound assignment.
    __hash__ = None

    def __init__(self, *components: T) -> None:
        """
        Initialize a quaternion from 0, 1, 2 or 4 scalar components.

        Parameters
        ----------
        *components : T
            ()            -> null quaternion, float zeros
            (x,)          -> real quaternion x
            (x, y)        -> complex quaternion x + yi
            (x, y, z, w)  -> full quaternion x + yi + zj + wk

            Padding zeros have the scalar type of the first component.

        Raises
        ------
        TypeError
            If the number of components is not 0, 1, 2 or 4, or a
            component is not a real scalar.
        ValueError
            If a component is NaN or infinite.
        """
        for c in components:
            if not is_scalar(c):
                raise TypeError(
                    f"Quaternion components must be real scalars, "
                    f"got {type(c).__name__}"
                )
            if not is_finite(c):
                raise ValueError(
                    f"Quaternion components must be finite, got {c!r}"
                )

        n = len(components)
        if n == 0:
            self._t, self._u, self._v, self._w = 0.0, 0.0, 0.0, 0.0
        elif n == 1:
            zero = zero_like(components[0])
            self._t, self._u, self._v, self._w = components[0], zero, zero, zero
        elif n == 2:
            zero = zero_like(components[0])
            self._t, self._u, self._v, self._w = components[0], components[1], zero, zero
        elif n == QUATERNION_SIZE:
            self._t, self._u, self._v, self._w = components
        else:
            raise TypeError(
                f"Quaternion() takes 0, 1, 2 or 4 components ({n} given)"
            )

    # =========================================================================
    # PROPERTIES - Read access to quaternion components
    # =========================================================================

    @property
    def t(self) -> T:
        """Real part of the quaternion."""
        return self._t

    @property
    def u(self) -> T:
        """First imaginary component (i-axis)."""
        return self._u

    @property
    def v(self) -> T:
        """Second imaginary component (j-axis)."""
        return self._v

    @property
    def w(self) -> T:
        """Third imaginary component (k-axis)."""
        return self._w

    @property
    def real(self) -> T:
        """Real part of the quaternion (alias for t)."""
        return self._t

    @property
    def imaginary(self) -> Tuple[T, T, T]:
        """Imaginary part as a tuple (u, v, w)."""
        return (self._u, self._v, self._w)

    @property
    def components(self) -> Tuple[T, T, T, T]:
        """All four components as a tuple (t, u, v, w)."""
        return (self._t, self._u, self._v, self._w)

    # =========================================================================
    # STATIC FACTORY METHODS
    # =========================================================================

    @classmethod
    def identity(cls, scalar_type: Type[T] = float) -> 'Quaternion[T]':
        """
        Create the identity quaternion 1 + 0i + 0j + 0k.

        It is the multiplicative identity: q * identity = identity * q = q
        for any quaternion q.

        Parameters
        ----------
        scalar_type : type, optional
            Scalar type of the components (default float).

        Returns
        -------
        Quaternion
            The identity quaternion.
        """
        return cls(scalar_type(1), scalar_type(0), scalar_type(0), scalar_type(0))

    @classmethod
    def from_array(cls, values: Sequence[T]) -> 'Quaternion[T]':
        """
        Create a quaternion from a length-4 sequence or numpy array [t, u, v, w].

        numpy arrays yield numpy scalar components of the array's dtype.

        Raises
        ------
        ValueError
            If ``values`` does not hold exactly four elements.
        """
        if len(values) != QUATERNION_SIZE:
            raise ValueError(
                f"Quaternion array must have {QUATERNION_SIZE} elements, "
                f"got {len(values)}"
            )
        return cls(values[0], values[1], values[2], values[3])

    def to_array(self) -> np.ndarray:
        """
        Full quaternion as a 4-element numpy array [t, u, v, w].

        numpy infers the dtype from the components (object for Decimal or
        Fraction components).
        """
        return np.array(self.components)

    def copy(self) -> 'Quaternion[T]':
        """Return an independent copy of this quaternion."""
        return Quaternion(self._t, self._u, self._v, self._w)

    # =========================================================================
    # NORM, CONJUGATE, INVERSE
    # =========================================================================

    def _norm_squared(self) -> T:
        return self._t * self._t + self._u * self._u + self._v * self._v + self._w * self._w

    def norm(self) -> T:
        """
        Euclidean norm (magnitude) of the quaternion.

        Returns
        -------
        T
            sqrt(t^2 + u^2 + v^2 + w^2), always >= 0 and 0 only for the
            null quaternion.

        Notes
        -----
        When the sum of squares overflows a float (|q| above ~1e154), the
        components are first scaled by the largest magnitude, as hypot()
        does.
        """
        n2 = self._norm_squared()
        if is_finite(n2):
            return sqrt(n2)

        largest = max(abs(c) for c in self.components)
        if not is_finite(largest):
            return largest
        t, u, v, w = (c / largest for c in self.components)
        return largest * sqrt(t * t + u * u + v * v + w * w)

    def conjugate(self) -> 'Quaternion[T]':
        """
        Return the quaternion conjugate.

        For q = t + ui + vj + wk, the conjugate is q* = t - ui - vj - wk.
        Conjugation is an involution: (q*)* = q.
        """
        return Quaternion(self._t, -self._u, -self._v, -self._w)

    def inverse(self) -> 'Quaternion[T]':
        """
        Return the multiplicative inverse.

            q^{-1} = q* / |q|^2

        so that q * q^{-1} = q^{-1} * q = 1. The inverse is a positive real
        multiple of the conjugate, which is why both products agree even
        though multiplication is not commutative.

        Returns
        -------
        Quaternion
            The inverse quaternion.

        Raises
        ------
        QuaternionDivisionError
            If |q| <= 1e-15 (null or near-null quaternion).
        """
        n = self.norm()
        if n <= self._DIVISION_TOLERANCE:
            raise QuaternionDivisionError(
                f"Cannot invert near-zero quaternion (norm = {format_scalar(n)})"
            )
        # The threshold applies to |q|, not |q|^2.
        n2 = self._norm_squared()
        if is_finite(n2):
            return Quaternion(self._t / n2, -self._u / n2, -self._v / n2, -self._w / n2)

        # |q|^2 overflowed: divide by |q| twice.
        return Quaternion(self._t / n / n, -self._u / n / n,
                          -self._v / n / n, -self._w / n / n)

    # =========================================================================
    # IN-PLACE ARITHMETIC
    # =========================================================================

    def __iadd__(self, other: 'Quaternion[T]') -> 'Quaternion[T]':
        """Component-wise addition, updating self."""
        if not isinstance(other, Quaternion):
            return NotImplemented
        self._t += other._t
        self._u += other._u
        self._v += other._v
        self._w += other._w
        return self

    def __isub__(self, other: 'Quaternion[T]') -> 'Quaternion[T]':
        """Component-wise subtraction, updating self."""
        if not isinstance(other, Quaternion):
            return NotImplemented
        self._t -= other._t
        self._u -= other._u
        self._v -= other._v
        self._w -= other._w
        return self

    def __imul__(self, other: Union['Quaternion[T]', T]) -> 'Quaternion[T]':
        """
        In-place multiplication.

        - Quaternion -> Hamilton product self * other
        - scalar     -> component-wise scaling

        The Hamilton product formula is:

            (t1 + u1*i + v1*j + w1*k) * (t2 + u2*i + v2*j + w2*k) =

            (t1*t2 - u1*u2 - v1*v2 - w1*w2) +
            (t1*u2 + u1*t2 + v1*w2 - w1*v2) i +
            (t1*v2 - u1*w2 + v1*t2 + w1*u2) j +
            (t1*w2 + u1*v2 - v1*u2 + w1*t2) k
        """
        if isinstance(other, Quaternion):
            # Read both operands first: other may be self.
            t1, u1, v1, w1 = self.components
            t2, u2, v2, w2 = other.components

            self._t = t1 * t2 - u1 * u2 - v1 * v2 - w1 * w2
            self._u = t1 * u2 + u1 * t2 + v1 * w2 - w1 * v2
            self._v = t1 * v2 - u1 * w2 + v1 * t2 + w1 * u2
            self._w = t1 * w2 + u1 * v2 - v1 * u2 + w1 * t2
            return self

        if is_scalar(other):
            if not is_finite(other):
                raise ValueError(f"Cannot scale by non-finite scalar {other!r}")
            self._t *= other
            self._u *= other
            self._v *= other
            self._w *= other
            return self

        return NotImplemented

    def __itruediv__(self, other: Union['Quaternion[T]', T]) -> 'Quaternion[T]':
        """
        In-place division.

        - Quaternion -> self * other^{-1}, computed in closed form:

              denom = t2^2 + u2^2 + v2^2 + w2^2
              t = (t1*t2 + u1*u2 + v1*v2 + w1*w2) / denom
              u = (u1*t2 - t1*u2 - w1*v2 + v1*w2) / denom
              v = (v1*t2 + w1*u2 - t1*v2 - u1*w2) / denom
              w = (w1*t2 - v1*u2 + u1*v2 - t1*w2) / denom

        - scalar -> component-wise division

        Raises
        ------
        QuaternionDivisionError
            If the divisor's norm (quaternion) or magnitude (scalar) is
            <= 1e-15.
        ValueError
            If the divisor is NaN or infinite.
        """
        if isinstance(other, Quaternion):
            divisor_norm = other.norm()
            if divisor_norm <= self._DIVISION_TOLERANCE:
                raise QuaternionDivisionError(
                    f"Division by near-zero quaternion "
                    f"(norm = {format_scalar(divisor_norm)})"
                )

            if not is_finite(divisor_norm):
                raise ValueError("Division by a non-finite quaternion")

            t1, u1, v1, w1 = self.components
            t2, u2, v2, w2 = other.components
            denom = other._norm_squared()

            if is_float(denom):
                # Scale the divisor to unit norm so neither |q2|^2 nor the
                # cross terms overflow; the extra factor goes into denom.
                s = divisor_norm
                t2, u2, v2, w2 = t2 / s, u2 / s, v2 / s, w2 / s
                denom = (t2 * t2 + u2 * u2 + v2 * v2 + w2 * w2) * s

            self._t = (t1 * t2 + u1 * u2 + v1 * v2 + w1 * w2) / denom
            self._u = (u1 * t2 - t1 * u2 - w1 * v2 + v1 * w2) / denom
            self._v = (v1 * t2 + w1 * u2 - t1 * v2 - u1 * w2) / denom
            self._w = (w1 * t2 - v1 * u2 + u1 * v2 - t1 * w2) / denom
            return self

        if is_scalar(other):
            if not is_finite(other):
                raise ValueError(f"Division by non-finite scalar {other!r}")
            if abs(other) <= self._DIVISION_TOLERANCE:
                raise QuaternionDivisionError(
                    f"Division by near-zero scalar ({format_scalar(other)})"
                )
            self._t /= other
            self._u /= other
            self._v /= other
            self._w /= other
            return self

        return NotImplemented

    # =========================================================================
    # OPERATOR OVERLOADS
    # =========================================================================

    def __add__(self, other: 'Quaternion[T]') -> 'Quaternion[T]':
        """Component-wise sum of two quaternions."""
        if not isinstance(other, Quaternion):
            return NotImplemented
        result = self.copy()
        result += other
        return result

    def __sub__(self, other: 'Quaternion[T]') -> 'Quaternion[T]':
        """Component-wise difference of two quaternions."""
        if not isinstance(other, Quaternion):
            return NotImplemented
        result = self.copy()
        result -= other
        return result

    def __mul__(self, other: Union['Quaternion[T]', T]) -> 'Quaternion[T]':
        """
        Multiplication operator.

        - Quaternion * Quaternion -> Hamilton product (non-commutative)
        - Quaternion * scalar     -> component-wise scaling
        """
        if not (isinstance(other, Quaternion) or is_scalar(other)):
            return NotImplemented
        result = self.copy()
        result *= other
        return result

    def __rmul__(self, other: T) -> 'Quaternion[T]':
        """Right-multiplication by a scalar: scalar * Quaternion."""
        if not is_scalar(other):
            return NotImplemented
        result = self.copy()
        result *= other
        return result

    def __truediv__(self, other: Union['Quaternion[T]', T]) -> 'Quaternion[T]':
        """
        Division operator.

        - Quaternion / Quaternion -> self * other^{-1}
        - Quaternion / scalar     -> component-wise division

        Raises
        ------
        QuaternionDivisionError
            If the divisor is near zero.
        """
        if not (isinstance(other, Quaternion) or is_scalar(other)):
            return NotImplemented
        result = self.copy()
        result /= other
        return result

    def __neg__(self) -> 'Quaternion[T]':
        """Negate all components."""
        return Quaternion(-self._t, -self._u, -self._v, -self._w)

    def __abs__(self) -> T:
        """abs(q) is the norm, as for complex numbers."""
        return self.norm()

    def __eq__(self, other: object) -> bool:
        """
        Exact component-wise equality (no tolerance).

        Use is_close() for floating-point results.
        """
        if not isinstance(other, Quaternion):
            return NotImplemented
        return (self._t == other._t and self._u == other._u
                and self._v == other._v and self._w == other._w)

    def __repr__(self) -> str:
        """
        Unambiguous string representation for debugging.

        Format: Quaternion(t, u, v, w)
        """
        return (f"Quaternion({self._t!r}, {self._u!r}, "
                f"{self._v!r}, {self._w!r})")

    def __str__(self) -> str:
        """
        Human-readable form 't + ui + vj + wk'.

        Signs are not folded: 1 - 2i renders as '1 + -2i + 0j + 0k'.
        """
        return (f"{format_scalar(self._t)} + {format_scalar(self._u)}i + "
                f"{format_scalar(self._v)}j + {format_scalar(self._w)}k")

    # =========================================================================
    # NAMED OPERATIONS
    # =========================================================================

    def multiply(self, other: Union['Quaternion[T]', T]) -> 'Quaternion[T]':
        """Hamilton product self * other (or scaling by a scalar)."""
        return self * other

    def divide(self, other: Union['Quaternion[T]', T]) -> 'Quaternion[T]':
        """Quotient self * other^{-1} (or division by a scalar)."""
        return self / other

    # =========================================================================
    # UTILITY METHODS
    # =========================================================================

    def is_close(self, other: 'Quaternion[Any]',
                 tolerance: float = COMPARISON_TOLERANCE) -> bool:
        """
        Approximate equality.

        Parameters
        ----------
        other : Quaternion
            Quaternion to compare against.
        tolerance : float
            Largest acceptable absolute difference in any component.

        Returns
        -------
        bool
            True if every component differs by at most ``tolerance``.
        """
        return all(abs(a - b) <= tolerance
                   for a, b in zip(self.components, other.components))

    def is_unit(self, tolerance: float = UNIT_TOLERANCE) -> bool:
        """
        Check if this quaternion has unit norm.

        Parameters
        ----------
        tolerance : float
            Acceptable deviation from 1.0.

        Returns
        -------
        bool
            True if |q| is within tolerance of 1.0.
        """
        return abs(self.norm() - 1) <= tolerance


# =============================================================================
# FREE FUNCTIONS
# =============================================================================

def identity(scalar_type: Type[T] = float) -> Quaternion[T]:
    """Identity quaternion 1 + 0i + 0j + 0k."""
    return Quaternion.identity(scalar_type)


def norm(q: Quaternion[T]) -> T:
    """Norm of ``q``; same as ``q.norm()``."""
    return q.norm()


def conjugate(q: Quaternion[T]) -> Quaternion[T]:
    """Conjugate of ``q``; same as ``q.conjugate()``."""
    return q.conjugate()


def inverse(q: Quaternion[T]) -> Quaternion[T]:
    """Inverse of ``q``; same as ``q.inverse()``."""
    return q.inverse()
