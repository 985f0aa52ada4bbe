"""
Exception types for the input pipeline and response assembly.

Domain constraint violations are not exceptions: calculators collect them
as strings on the response so the caller sees every problem at once.
"""


class ComplianceEngineError(Exception):
    """Base class for compliance engine errors."""
    pass


class InputParseError(ComplianceEngineError):
    """Raised when a raw field value cannot become a typed value."""

    def __init__(self, message: str, code: str):
        super().__init__(message)
        self.message = message
        self.code = code


class FormatError(InputParseError):
    """Text is not a valid representation of its target type."""
    pass


class SecurityViolation(InputParseError):
    """Text exceeds the length, null byte or control character limits."""
    pass


class NormalizationError(ValueError):
    """A native value has no defined conversion for the target field."""
    pass


class SerializationError(ComplianceEngineError):
    """Raised when a response envelope cannot be encoded."""
    pass
