"""
Value normalization utilities.
Single responsibility: canonicalize loosely-typed cell values into text.
"""

import json
import math
from datetime import date, datetime, timezone
from decimal import Decimal
from numbers import Real
from typing import Any


def normalize_header(header: str) -> str:
    """
    Normalize a column header for use as a row field name.

    Args:
        header: Raw header text

    Returns:
        Header with surrounding whitespace removed
    """
    return header.strip()


def _number_to_text(val: Any) -> str:
    """
    Render a number the way a JSON/JavaScript producer would.

    Integral floats lose their trailing ".0" so that 100 and 100.0 read
    the same; non-finite floats get their conventional names.
    """
    if isinstance(val, Decimal):
        if not val.is_finite():
            return "NaN" if val.is_nan() else ("Infinity" if val > 0 else "-Infinity")
        return str(val)
    if isinstance(val, int):
        return str(val)

    num = float(val)
    if math.isnan(num):
        return "NaN"
    if math.isinf(num):
        return "Infinity" if num > 0 else "-Infinity"
    if num.is_integer() and abs(num) < 1e21:
        return str(int(num))
    return repr(num)


def _date_to_text(val: date) -> str:
    """
    Render a date-like value as fixed ISO-8601 text.

    Datetimes are expressed in UTC with millisecond precision and a "Z"
    suffix; naive datetimes are taken to already be UTC. Plain dates keep
    their YYYY-MM-DD form.
    """
    if isinstance(val, datetime):
        if val.tzinfo is not None:
            val = val.astimezone(timezone.utc).replace(tzinfo=None)
        return val.isoformat(timespec="milliseconds") + "Z"
    return val.isoformat()


def normalize_string_value(val: Any) -> str:
    """
    Canonicalize any cell value into comparison-ready text.

    - None -> ""
    - str -> trimmed
    - bool -> "true" / "false"
    - numbers -> canonical text ("100" for 100.0)
    - dates/datetimes -> ISO-8601
    - anything else -> compact JSON, or str() if it cannot be serialized

    Args:
        val: Input value

    Returns:
        Normalized text, never None
    """
    if val is None:
        return ""
    if isinstance(val, str):
        return val.strip()
    # bool is an int subclass, so it must be checked first
    if isinstance(val, bool):
        return "true" if val else "false"
    if isinstance(val, (Real, Decimal)):
        return _number_to_text(val)
    if isinstance(val, date):
        return _date_to_text(val)
    try:
        return json.dumps(val, separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError):
        return str(val)


def normalize_for_key(val: Any, case_insensitive: bool = True) -> str:
    """
    Normalize a value for use as one component of a join key.

    Args:
        val: Key column value
        case_insensitive: Lower-case the normalized text

    Returns:
        Normalized key component ("" means the component is missing)
    """
    base = normalize_string_value(val)
    return base.lower() if case_insensitive else base
