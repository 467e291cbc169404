"""Exception types raised by entitytrace.

Each error also derives from the closest builtin exception so that callers
catching `ValueError`, `TypeError` or `RuntimeError` keep working.
"""


class EntityTraceError(Exception):
    """Base class for all entitytrace errors."""


class ArgumentInvalidError(EntityTraceError, ValueError):
    """An argument was rejected before any computation (bad name, label or function)."""


class ArgumentNullError(ArgumentInvalidError):
    """A required argument was None."""


class UnsupportedOperationError(EntityTraceError, TypeError):
    """No native implementation or capability exists for an operator on a value type."""


class InvalidStateError(EntityTraceError, RuntimeError):
    """An operation is illegal for the entity's kind, e.g. resetting a derived entity."""
