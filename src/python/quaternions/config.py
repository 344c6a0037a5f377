"""
===============================================================================
QUATERNIONS - Configuration
===============================================================================
Loads the library configuration from YAML and applies it to the process.

Two settings are recognised, both under a top-level ``quaternions`` section:

    quaternions:
      precision: float64     # float32 | float64 (aliases: single, double)
      log_level: WARNING     # any standard logging level name

The precision becomes the default dtype for every Quaternion constructed
without an explicit ``dtype``. The log level is applied to the package logger.
===============================================================================
"""

import os
import logging
from dataclasses import dataclass, asdict
from typing import Optional, Union

import numpy as np
import yaml

from .constants import PRECISION_ALIASES, SUPPORTED_DTYPES, DEFAULT_PRECISION

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "QUATERNIONS_CONFIG"

_default_dtype = PRECISION_ALIASES[DEFAULT_PRECISION]


def resolve_dtype(spec: Union[str, np.dtype, type, None] = None) -> np.dtype:
    """
    Map a precision specifier to one of the supported NumPy dtypes.

    Parameters
    ----------
    spec : str, numpy dtype, type or None
        A precision name ("float32", "double", ...), anything ``np.dtype``
        accepts, or None for the current default precision.

    Returns
    -------
    np.dtype
        ``float32`` or ``float64``.

    Raises
    ------
    ValueError
        If the specifier does not name a supported floating precision.
    """
    if spec is None:
        return _default_dtype

    if isinstance(spec, str) and spec.lower() in PRECISION_ALIASES:
        return PRECISION_ALIASES[spec.lower()]

    try:
        dtype = np.dtype(spec)
    except TypeError as exc:
        raise ValueError(f"Unknown precision {spec!r}") from exc

    if dtype not in SUPPORTED_DTYPES:
        raise ValueError(
            f"Unsupported precision {dtype.name!r}; expected one of "
            f"{[d.name for d in SUPPORTED_DTYPES]}"
        )
    return dtype


def get_default_dtype() -> np.dtype:
    """Precision used when a Quaternion is built without an explicit dtype."""
    return _default_dtype


def set_default_dtype(spec) -> np.dtype:
    """Set the default precision and return the resolved dtype."""
    global _default_dtype
    _default_dtype = resolve_dtype(spec)
    logger.debug(f"Default quaternion precision set to {_default_dtype.name}")
    return _default_dtype


@dataclass
class QuaternionConfig:
    """
    Library settings.

    Attributes
    ----------
    precision : str
        Name of the default floating precision.
    log_level : str
        Level name applied to the ``quaternions`` logger.
    """
    precision: str = DEFAULT_PRECISION
    log_level: str = "WARNING"

    def __post_init__(self):
        # Validate eagerly so a bad file fails at load time, not at first use
        resolve_dtype(self.precision)
        level = logging.getLevelName(str(self.log_level).upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level {self.log_level!r}")
        self.log_level = str(self.log_level).upper()

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> 'QuaternionConfig':
        """Build a config from a mapping, ignoring keys it does not know."""
        data = dict(data or {})
        known = set(asdict(cls()).keys())
        unknown = sorted(set(data) - known)
        if unknown:
            logger.warning(f"Ignoring unknown configuration keys: {unknown}")
        return cls(**{k: v for k, v in data.items() if k in known})

    @property
    def dtype(self) -> np.dtype:
        return resolve_dtype(self.precision)


def load_config(config_path: Optional[str] = None) -> QuaternionConfig:
    """
    Load library configuration from a YAML file.

    Args:
        config_path: Path to YAML config. Defaults to the file named by the
            QUATERNIONS_CONFIG environment variable; without either, the
            built-in defaults are returned.

    Returns:
        QuaternionConfig with the file's settings
    """
    if config_path is None:
        config_path = os.environ.get(CONFIG_ENV_VAR)
        if not config_path:
            logger.debug("No configuration file given, using defaults")
            return QuaternionConfig()

    logger.info(f"Loading configuration from: {config_path}")
    with open(config_path, 'r') as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise ValueError(f"Configuration root must be a mapping, got {type(raw).__name__}")

    config = QuaternionConfig.from_dict(raw.get('quaternions', {}))
    logger.info(f"Precision: {config.precision}, log level: {config.log_level}")
    return config


def configure(config: Optional[QuaternionConfig] = None) -> QuaternionConfig:
    """
    Apply a configuration to the running process.

    Sets the default quaternion precision and the package log level.
    With no argument, the configuration is loaded via load_config().

    Both settings are process-wide: the default precision is module state
    shared by every thread, and changing it while other threads construct
    quaternions is not thread-safe. Call this once at start-up, or pass an
    explicit ``dtype`` where isolation matters.
    """
    if config is None:
        config = load_config()

    set_default_dtype(config.precision)
    logging.getLogger(__package__).setLevel(config.log_level)
    return config
