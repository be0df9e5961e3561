"""
Prequel Errors - Exceptions raised by helpers when given out-of-contract input.

The checker itself never raises for a well-formed syntax tree; problems found
in the checked script are reported as SqlWarning records instead.
"""


class PrequelError(Exception):
    """Base class for all Prequel exceptions."""

    pass


class TypeNameError(PrequelError):
    """Raised when a data type's textual form cannot be parsed."""

    pass


class InvalidWarningLevelError(PrequelError):
    """Raised when a warning level is outside 0..3 or not a number."""

    pass
