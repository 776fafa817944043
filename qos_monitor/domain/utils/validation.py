"""
Validation utilities for numeric data.

Provides utilities for validating float values and parsing raw measurement
strings, with special handling for infinity and NaN.
"""

import logging
import math
from typing import Optional

logger = logging.getLogger(__name__)


def is_valid_float(value: float) -> bool:
    """
    Check if a float value is finite.

    Parameters
    ----------
    value : float
        The float value to check

    Returns
    -------
    bool
        True if the value is finite (not inf, -inf, or nan), False otherwise

    Examples
    --------
    >>> is_valid_float(42.5)
    True
    >>> is_valid_float(float('inf'))
    False
    >>> is_valid_float(float('nan'))
    False
    """
    return math.isfinite(value)


def parse_float(raw: object) -> Optional[float]:
    """
    Parse a raw measurement value into a finite float.

    Parameters
    ----------
    raw : object
        Raw value, usually a string such as ``"12.5"``. Surrounding whitespace
        is ignored. Numbers are accepted as-is; booleans are rejected.

    Returns
    -------
    float or None
        The parsed value, or None if it is not a finite number

    Examples
    --------
    >>> parse_float("12.5")
    12.5
    >>> parse_float(" 1e3 ")
    1000.0
    >>> parse_float("abc") is None
    True
    >>> parse_float("nan") is None
    True
    """
    if isinstance(raw, bool):
        return None
    if isinstance(raw, str):
        raw = raw.strip()
    try:
        value = float(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    if not is_valid_float(value):
        logger.debug("validation.non_finite_rejected", extra={"value": str(raw)})
        return None
    return value
