"""
===============================================================================
QALGEBRA - Numeric Constants
===============================================================================
Central repository for the tolerances used throughout the quaternion algebra.
All values are absolute magnitudes in the units of the scalar type.
===============================================================================
"""


# =============================================================================
# STRUCTURE
# =============================================================================
QUATERNION_SIZE = 4                    # t, u, v, w

# =============================================================================
# TOLERANCES
# =============================================================================
# Any divisor whose magnitude is at or below this value is treated as zero.
# Applies to quaternion division (norm of the divisor), scalar division and
# inversion.
DIVISION_TOLERANCE = 1e-15

# Default tolerance for approximate quaternion comparison (is_close).
COMPARISON_TOLERANCE = 1e-9

# Acceptable deviation of |q| from 1.0 for is_unit().
UNIT_TOLERANCE = 1e-8
