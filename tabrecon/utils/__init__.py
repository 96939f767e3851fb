"""Utility functions and helpers."""

from .logger import get_logger, configure_logger, StructuredLogger
from .normalizers import (
    normalize_header,
    normalize_string_value,
    normalize_for_key,
)
from .converters import to_number_loose

__all__ = [
    "get_logger",
    "configure_logger",
    "StructuredLogger",
    "normalize_header",
    "normalize_string_value",
    "normalize_for_key",
    "to_number_loose",
]
