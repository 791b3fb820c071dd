"""
Error taxonomy for the smart office core.

ValidationRejection: the caller asked for something malformed (bad count,
unknown room, unparseable time).
StateConflict: the request is well-formed but impossible right now
(double booking, cancelling a free room).
"""


class SmartOfficeError(Exception):
    """Base class for all smart office errors."""


class ValidationRejection(SmartOfficeError, ValueError):
    """Malformed or out-of-range input."""


class NotConfiguredError(ValidationRejection):
    """The room registry has not been configured yet."""


class StateConflict(SmartOfficeError):
    """Operation inconsistent with the current room state."""
