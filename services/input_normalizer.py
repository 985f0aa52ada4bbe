"""
Field normalization for tool requests.

Converts a field value supplied as a native JSON number, boolean or string
into the canonical text consumed by services.parsers. Only conversions that
preserve the value exactly are defined; anything else raises
NormalizationError.
"""

from typing import Any

from services.errors import NormalizationError


def format_number(value: float) -> str:
    """Render a number as decimal text: 15000000.0 -> '15000000', 12.5 -> '12.5'."""
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else repr(value)
    return str(value)


def normalize_number_field(value: Any) -> str:
    """Number or string -> canonical number text."""
    # bool is a subclass of int and has no defined numeric conversion here
    if isinstance(value, bool):
        raise NormalizationError("expected a number or a string representing a number")
    if isinstance(value, (int, float)):
        return format_number(value)
    if isinstance(value, str):
        return value
    raise NormalizationError("expected a number or a string representing a number")


def normalize_integer_field(value: Any) -> str:
    """
    Integer, whole float or string -> canonical integer text.

    A float with a fractional part is a type error, never truncated.
    """
    if isinstance(value, bool):
        raise NormalizationError("expected an integer or a string representing an integer")
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        raise NormalizationError(f"Expected integer, got float: {value!r}")
    if isinstance(value, str):
        return value
    raise NormalizationError("expected an integer or a string representing an integer")


def normalize_boolean_field(value: Any) -> str:
    """Boolean or string -> canonical boolean text."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    raise NormalizationError("expected a boolean or a string representing a boolean")
