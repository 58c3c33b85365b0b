"""
errors.py
=========
Exception types raised by the chart engine.

  KundaliError               — base class for everything below
  InputValidationError       — malformed birth data, table indices, options
  EphemerisUnavailableError  — the position provider could not supply data
"""


class KundaliError(Exception):
    """Base class for chart engine failures."""


class InputValidationError(KundaliError, ValueError):
    """A caller-supplied value is out of range or malformed."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class EphemerisUnavailableError(KundaliError):
    """Planetary positions could not be computed from the configured source."""
