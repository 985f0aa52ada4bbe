"""
Input security checks for untrusted field values.

Every raw string is checked here before any parsing happens, and any
untrusted text that ends up in an error message goes through
sanitize_for_error_message() first. The sanitized form is the only
rendering of caller input that is ever echoed back.
"""

import unicodedata

from services.errors import SecurityViolation

MAX_INPUT_LENGTH = 100
MAX_CONTROL_CHARS = 2

# Error message display limits
MAX_DISPLAY_LENGTH = 50
TRUNCATED_DISPLAY_LENGTH = 47

_SPACE_CHARS = {'\n', '\r', '\t'}
_MASKED_CHARS = {'"', "'", '`', '\\', '<', '>'}


def _is_control(char: str) -> bool:
    return unicodedata.category(char) == 'Cc'


def _is_printable_ascii(char: str) -> bool:
    return char == ' ' or '!' <= char <= '~'


def sanitize_for_error_message(text: str) -> str:
    """
    Render untrusted text safely for inclusion in an error message.

    Text longer than 50 characters is cut to 47 characters plus "...".
    Line breaks and tabs become spaces; quotes, backticks, backslashes and
    angle brackets become "?"; any other non-printable or non-ASCII
    character also becomes "?".

    Args:
        text: Untrusted input

    Returns:
        Sanitized text
    """
    if len(text) > MAX_DISPLAY_LENGTH:
        text = text[:TRUNCATED_DISPLAY_LENGTH] + "..."

    out = []
    for char in text:
        if char in _SPACE_CHARS:
            out.append(' ')
        elif char in _MASKED_CHARS:
            out.append('?')
        elif _is_printable_ascii(char):
            out.append(char)
        else:
            out.append('?')
    return ''.join(out)


def validate_input_security(text: str, field_name: str) -> None:
    """
    Reject oversized or hostile input before parsing.

    Checks, in order: length, null bytes, control character count.
    A couple of control characters are tolerated for legitimate formatting.

    Args:
        text: Raw (already trimmed) input
        field_name: Target type name used in the message ("number", "integer", ...)

    Raises:
        SecurityViolation: If any check fails
    """
    if len(text) > MAX_INPUT_LENGTH:
        raise SecurityViolation(
            f"Invalid {field_name}: input too long (max {MAX_INPUT_LENGTH} characters)",
            code="too_long",
        )

    if '\0' in text:
        raise SecurityViolation(
            f"Invalid {field_name}: input contains null bytes",
            code="null_byte",
        )

    control_count = sum(1 for char in text if _is_control(char))
    if control_count > MAX_CONTROL_CHARS:
        raise SecurityViolation(
            f"Invalid {field_name}: input contains too many control characters",
            code="too_many_control_chars",
        )
