"""
Quaternion algebra over single or double floating-point precision.
"""

import logging

from .constants import PI, TWO_PI, DEG2RAD, RAD2DEG, SUPPORTED_DTYPES, epsilon
from .config import (
    QuaternionConfig, load_config, configure,
    get_default_dtype, set_default_dtype, resolve_dtype,
)
from .quaternion import Quaternion

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    'Quaternion',
    'QuaternionConfig', 'load_config', 'configure',
    'get_default_dtype', 'set_default_dtype', 'resolve_dtype',
    'PI', 'TWO_PI', 'DEG2RAD', 'RAD2DEG', 'SUPPORTED_DTYPES', 'epsilon',
]
