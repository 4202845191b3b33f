"""Exceptions raised by the quaternion algebra."""


class QuaternionDivisionError(ZeroDivisionError, ValueError):
    """
    Division by a quaternion or scalar whose magnitude is near zero.

    Subclasses both ZeroDivisionError and ValueError so callers can catch
    either the arithmetic builtin or this distinct type.
    """
