"""
Typed parsers for normalized field text.

All parsers follow the same steps:
1. Trim surrounding whitespace
2. Run the security checks
3. Reject the empty string
4. Strip known formatting characters
5. Parse, rejecting non-finite numbers

Failure messages only ever contain the sanitized input.
"""

import math
import re

from services.errors import FormatError
from services.input_security import sanitize_for_error_message, validate_input_security

# Thousands separators, currency and percent signs
NUMBER_FORMATTING_CHARS = (',', '$', '€', '£', '¥', '%')
INTEGER_FORMATTING_CHARS = (',',)

TRUE_VALUES = frozenset({'true', 't', 'yes', 'y', '1', 'on'})
FALSE_VALUES = frozenset({'false', 'f', 'no', 'n', '0', 'off'})

INT32_MIN = -2 ** 31
INT32_MAX = 2 ** 31 - 1

_DECIMAL_RE = re.compile(r'[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?', re.ASCII)
_NON_FINITE_RE = re.compile(r'[+-]?(inf|infinity|nan)', re.IGNORECASE)
_INTEGER_RE = re.compile(r'[+-]?\d+', re.ASCII)

# Unicode White_Space only; U+001C..U+001F are controls, not whitespace
_EDGE_WHITESPACE_RE = re.compile(r"^[^\S\x1c-\x1f]+|[^\S\x1c-\x1f]+$")


def _strip_chars(text: str, chars) -> str:
    for char in chars:
        text = text.replace(char, '')
    return text


def _prepare(text: str, type_name: str) -> str:
    trimmed = _EDGE_WHITESPACE_RE.sub("", text)
    validate_input_security(trimmed, type_name)
    if not trimmed:
        raise FormatError(
            f"Empty string cannot be parsed as {type_name}",
            code="empty",
        )
    return trimmed


def parse_number(text: str) -> float:
    """
    Parse text as a finite float.

    Accepts thousands separators, currency signs and percent signs,
    e.g. "$15,000,000" or "12.5%".

    Raises:
        SecurityViolation: If the security checks fail
        FormatError: If the text is empty, malformed or not finite
    """
    trimmed = _prepare(text, "number")
    sanitized = sanitize_for_error_message(trimmed)
    cleaned = _strip_chars(trimmed, NUMBER_FORMATTING_CHARS)

    if not (_DECIMAL_RE.fullmatch(cleaned) or _NON_FINITE_RE.fullmatch(cleaned)):
        raise FormatError(f"Cannot parse '{sanitized}' as a number", code="unparseable")

    value = float(cleaned)
    if math.isinf(value) or math.isnan(value):
        raise FormatError(f"Invalid number: '{sanitized}'", code="non_finite")
    return value


def parse_integer(text: str) -> int:
    """
    Parse text as a signed 32-bit integer.

    Thousands separators are allowed; fractional values are not.

    Raises:
        SecurityViolation: If the security checks fail
        FormatError: If the text is empty, not a whole number or out of range
    """
    trimmed = _prepare(text, "integer")
    sanitized = sanitize_for_error_message(trimmed)
    cleaned = _strip_chars(trimmed, INTEGER_FORMATTING_CHARS)

    if not _INTEGER_RE.fullmatch(cleaned):
        raise FormatError(f"Cannot parse '{sanitized}' as an integer", code="unparseable")

    value = int(cleaned)
    if value < INT32_MIN or value > INT32_MAX:
        raise FormatError(f"Cannot parse '{sanitized}' as an integer", code="unparseable")
    return value


def parse_boolean(text: str) -> bool:
    """Parse a case-insensitive boolean synonym (true/false, yes/no, 1/0, on/off, t/f, y/n)."""
    trimmed = _prepare(text, "boolean")
    sanitized = sanitize_for_error_message(trimmed)

    lowered = trimmed.lower()
    if lowered in TRUE_VALUES:
        return True
    if lowered in FALSE_VALUES:
        return False
    raise FormatError(
        f"Cannot parse '{sanitized}' as a boolean (expected: true/false, yes/no, 1/0, etc.)",
        code="unparseable",
    )
