"""
Input normalization.

Coerces raw slider/form/YAML values into finite floats before they reach
any cost formula.
"""

import math
import numbers
import re
from decimal import Decimal
from typing import Any

# Currency symbols, thousands separators and whitespace are dropped before parsing
_STRIP_PATTERN = re.compile(r"[\s,$€£¥₹]")


def normalize_number(value: Any, fallback: float = 0.0) -> float:
    """Coerce arbitrary input into a finite number.

    Args:
        value: Raw input (number, string such as "$1,234.50", or anything else)
        fallback: Value returned when the input cannot be parsed

    Returns:
        The finite numeric value, or ``fallback``. Never NaN or infinite.
    """
    # bool is an int subclass but is not a numeric input
    if isinstance(value, bool):
        return fallback

    # Decimal is not registered as numbers.Real
    if isinstance(value, (numbers.Real, Decimal)):
        try:
            number = float(value)
        except (OverflowError, ValueError):
            return fallback
        return number if math.isfinite(number) else fallback

    if isinstance(value, str):
        cleaned = _STRIP_PATTERN.sub("", value)
        if not cleaned:
            return fallback
        try:
            parsed = float(cleaned)
        except ValueError:
            return fallback
        return parsed if math.isfinite(parsed) else fallback

    return fallback


def non_negative(value: Any, fallback: float = 0.0) -> float:
    """Normalize and clamp at zero."""
    return max(0.0, normalize_number(value, fallback))


def positive_or_default(value: Any, default: float) -> float:
    """Normalize a divisor, substituting ``default`` for zero or negative values."""
    number = normalize_number(value, default)
    return number if number > 0 else default


def clamp_percent(value: Any, fallback: float = 0.0) -> float:
    """Normalize a percentage into the [0, 100] range."""
    return min(100.0, non_negative(value, fallback))


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """Divide, returning ``default`` instead of raising on a zero denominator."""
    if denominator == 0:
        return default
    return numerator / denominator
