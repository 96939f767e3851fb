"""
Data type conversion utilities.
Single responsibility: convert loosely-typed values to numbers safely.
"""

import math
import re
from decimal import Decimal
from numbers import Real
from typing import Any, Optional, Union

from .normalizers import normalize_string_value


_SEPARATORS = re.compile(r"[,\s]")
_ACCOUNTING_NEGATIVE = re.compile(r"^\((.*)\)$")
_NON_NUMERIC = re.compile(r"[^0-9.+\-]")


def to_number_loose(val: Any) -> Optional[Union[int, float]]:
    """
    Parse a value as a number, tolerating common formatting.

    Handles currency symbols, thousands separators, surrounding whitespace
    and accounting negatives. Strings with no numeric content are rejected.
    This is the only parsing policy used for numeric comparison.

    Args:
        val: Value to convert (string, number, or anything else)

    Returns:
        The number, or None if the value is not numeric

    Examples:
        >>> to_number_loose("$1,234.56")
        1234.56
        >>> to_number_loose("(100)")
        -100.0
        >>> to_number_loose("N/A") is None
        True
    """
    if val is None:
        return None

    # bool is an int subclass but is not a number here
    if isinstance(val, Real) and not isinstance(val, bool):
        try:
            finite = math.isfinite(val)
        except OverflowError:
            # ints beyond float range go through the text path and are rejected
            finite = False
        if finite:
            return val if isinstance(val, (int, float)) else float(val)
    if isinstance(val, Decimal) and val.is_finite():
        return float(val)

    text = normalize_string_value(val)
    if not text:
        return None

    cleaned = _SEPARATORS.sub("", text)
    cleaned = _ACCOUNTING_NEGATIVE.sub(r"-\1", cleaned)
    cleaned = _NON_NUMERIC.sub("", cleaned)

    if cleaned in ("", "+", "-", "."):
        return None

    try:
        num = float(cleaned)
    except ValueError:
        return None

    if not math.isfinite(num):
        return None
    return num
