"""
===============================================================================
QUATERNIONS - Numeric Constants and Precision Table
===============================================================================
Central repository for the angle constants and the floating-point precisions
a Quaternion may be stored in. Every quaternion carries one NumPy floating
dtype; its machine epsilon is the tolerance used by approximate equality.
===============================================================================
"""

import numpy as np


# =============================================================================
# MATHEMATICAL CONSTANTS
# =============================================================================
PI = np.pi
TWO_PI = 2.0 * np.pi
DEG2RAD = PI / 180.0
RAD2DEG = 180.0 / PI

# =============================================================================
# PRECISION
# =============================================================================
SUPPORTED_DTYPES = (np.dtype(np.float32), np.dtype(np.float64))

# Names accepted in configuration files and by resolve_dtype()
PRECISION_ALIASES = {
    "float32": np.dtype(np.float32),
    "single": np.dtype(np.float32),
    "f32": np.dtype(np.float32),
    "float64": np.dtype(np.float64),
    "double": np.dtype(np.float64),
    "f64": np.dtype(np.float64),
}

DEFAULT_PRECISION = "float64"


def epsilon(dtype) -> float:
    """Machine epsilon of a floating dtype (spacing between 1.0 and the next value)."""
    return np.finfo(dtype).eps
