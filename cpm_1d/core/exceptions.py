"""Exception hierarchy for the collision-probability engine.

All errors are raised synchronously and carry enough context (region or
group index) to locate the offending input. None of them is transient.
"""

from typing import Optional


class CpmError(Exception):
    """Base class for all cpm_1d errors."""

    pass


class ConfigurationError(CpmError, ValueError):
    """Invalid geometry, material or engine configuration.

    Raised at construction time: mismatched region/material counts, fewer
    than two regions, non-positive or unsorted radii, a missing material,
    inconsistent group counts, or invalid numerical settings.
    """

    def __init__(self, message: str, index: Optional[int] = None):
        super().__init__(message)
        self.index = index

    def __reduce__(self):
        return (self.__class__, (str(self), self.index))


class NumericalError(CpmError, ArithmeticError):
    """Failure of the numerical pipeline during solve().

    Typically a singular or degenerate response matrix for one group.
    """

    def __init__(self, message: str, group: Optional[int] = None):
        super().__init__(message)
        self.group = group

    def __reduce__(self):
        return (self.__class__, (str(self), self.group))


class UsageError(CpmError, RuntimeError):
    """Results were requested before solve() completed successfully."""

    pass
