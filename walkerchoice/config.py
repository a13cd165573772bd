"""
Default parameters shared by the table builders and samplers.

Every value here can be overridden per call with the matching keyword argument.
"""

from enum import Enum


class CutoffKind(Enum):
    """Numeric representation of the cutoff values stored in an alias table."""

    FLOAT64 = "float64"
    UINT32 = "uint32"
    UINT64 = "uint64"

    @property
    def width(self) -> int:
        """Bit width of an integer cutoff (0 for floating point)."""
        return _WIDTHS[self]


_WIDTHS = {CutoffKind.FLOAT64: 0, CutoffKind.UINT32: 32, CutoffKind.UINT64: 64}

INTEGER_WIDTHS = (32, 64)

# Tolerance for check_table, multiplied by the number of weights
CHECK_TOL = 1.0e-10

# Early stop of the O(N^2) builder once sum(|b|) falls below this
WALKER1977_TOL = 1.0e-10

DEFAULT_METHOD = "ft2009"
METHODS = ("ft2009", "walker1977")
