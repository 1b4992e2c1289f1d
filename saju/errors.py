"""
Exception hierarchy for the Saju engine.

InputValidationError and CalendarConversionError carry messages that are
safe to show to an end user. ComputationError means an internal invariant
broke; callers should log it and surface a generic failure.
"""


class SajuError(Exception):
    """Base class for every error raised by the engine."""


class InputValidationError(SajuError, ValueError):
    """Malformed or out-of-range birth date/time input."""


class CalendarConversionError(SajuError):
    """Lunar to solar (or solar to lunar) conversion failed."""


class ComputationError(SajuError):
    """An internal invariant was violated while computing a chart or analysis."""

    def __init__(self, message: str, context: dict = None):
        super().__init__(message)
        self.context = context or {}
