"""Errors raised by gridbayes.

Every condition here is local and recoverable by the caller (widen a prior,
change the grid resolution, draw more samples, ...). Each class also derives
from the builtin exception a caller would naturally catch for it.
"""

__all__ = [
    "GridBayesError",
    "InvalidGridSpec",
    "DegeneratePosterior",
    "InvalidSampleCount",
    "InsufficientSamples",
    "UnsupportedDistribution",
]


class GridBayesError(Exception):
    """Base class for all gridbayes errors."""


class InvalidGridSpec(GridBayesError, ValueError):
    """Axis bounds or point count do not describe a valid grid."""


class DegeneratePosterior(GridBayesError, ArithmeticError):
    """Prior times likelihood has no positive mass anywhere on the grid."""


class InvalidSampleCount(GridBayesError, ValueError):
    """Requested number of draws is negative or not an integer."""


class InsufficientSamples(GridBayesError, ValueError):
    """A summary was requested on an empty sample collection."""


class UnsupportedDistribution(GridBayesError, KeyError):
    """Density requested for a family that is not in the library."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the message readable.
        return str(self.args[0]) if self.args else ""
