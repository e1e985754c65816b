"""
REALSCAN Kernel — Exceptions

ValidationError and NotFoundError are caller mistakes and never mutate state.
StorageReadError is recovered inside the store; StorageWriteError and
CodeSpaceExhaustedError mean the operation failed and nothing is durable.
"""

from __future__ import annotations


class CodeError(Exception):
    """Base class for all access code errors."""
    pass


class ValidationError(CodeError):
    """Bad input from the caller."""
    pass


class InvalidDurationError(ValidationError):
    """Duration is not a positive finite number."""

    def __init__(self, value: object):
        super().__init__(f"Duration must be a number greater than 0 (got {value!r})")
        self.value = value


class InvalidUnitError(ValidationError):
    """Duration unit is not one of the accepted units."""

    def __init__(self, value: object):
        super().__init__(f"Unit must be 'minutes' or 'hours' (got {value!r})")
        self.value = value


class EmptyCodeError(ValidationError):
    """Validate was called with no code."""

    def __init__(self):
        super().__init__("No code given")


class NotFoundError(CodeError):
    """Referenced entity does not exist."""
    pass


class CodeNotFoundError(NotFoundError):
    def __init__(self, code: str):
        super().__init__(f"Code {code} not found")
        self.code = code


class StorageReadError(CodeError):
    """Persisted state exists but cannot be read or parsed."""
    pass


class StorageWriteError(CodeError):
    """Persisted state could not be written."""
    pass


class CodeSpaceExhaustedError(CodeError):
    """No free code was found within the attempt cap."""

    def __init__(self, attempts: int):
        super().__init__(f"Could not find a free code after {attempts} attempts")
        self.attempts = attempts
