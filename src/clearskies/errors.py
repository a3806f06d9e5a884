"""
Exceptions raised by the clear sky detection.

The validation errors subclass ValueError so that callers catching bad input
the usual way keep working.
"""


class ClearSkiesError(Exception):
    """Base class for all clearskies errors."""


class LengthMismatch(ClearSkiesError, ValueError):
    """Observed and predicted series differ in length."""


class InvalidWindowLength(ClearSkiesError, ValueError):
    """Window length is not a positive integer no larger than the series."""


class InvalidThresholdCount(ClearSkiesError, ValueError):
    """Threshold table does not hold exactly one entry per criterion."""


class ScanCancelled(ClearSkiesError, RuntimeError):
    """The window scan was cancelled before it finished."""
