"""
qalgebra - quaternion algebra over a generic scalar type.
"""

from qalgebra.exceptions import QuaternionDivisionError
from qalgebra.quaternion import Quaternion, conjugate, identity, inverse, norm

__version__ = '0.1.0'

__all__ = [
    'Quaternion',
    'QuaternionDivisionError',
    'conjugate',
    'identity',
    'inverse',
    'norm',
]
