"""
Error types raised by the dispersion and triage models.

Both derive from ValueError so callers can catch either the specific
condition or any bad-value error.
"""


class InvalidInputError(ValueError):
    """A caller-supplied physical or epidemiological value is invalid."""


class OutOfBoundsError(ValueError):
    """A geographic coordinate or angle falls outside its valid range."""
