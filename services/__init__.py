"""
Services for input validation, calculation and response assembly.

Submodules are imported directly (services.tool_service, services.parsers, ...).
"""

from .errors import (
    ComplianceEngineError,
    InputParseError,
    FormatError,
    SecurityViolation,
    NormalizationError,
    SerializationError,
)

__all__ = [
    "ComplianceEngineError",
    "InputParseError",
    "FormatError",
    "SecurityViolation",
    "NormalizationError",
    "SerializationError",
]
