"""
Alias table construction and checking.

Thin Python layer over the numba kernels: validates the weights, chooses the
table size and cutoff representation, and converts between integer and
fractional cutoffs.
"""

import logging
import math
from typing import Optional, Tuple

import numpy as np

from ..config import CHECK_TOL, DEFAULT_METHOD, INTEGER_WIDTHS, METHODS, WALKER1977_TOL, CutoffKind
from .numba_alias import fill_ft2009, fill_walker1977, implied_mass, quantize_cutoffs
from .weights import as_weights

logger = logging.getLogger(__name__)


def next_power_of_two(n: int) -> int:
    """Smallest power of two >= n, and at least 2."""
    m = 2
    while m < n:
        m <<= 1
    return m


def shift_bits(m: int, width: int) -> int:
    """
    Number of low bits to drop from a ``width``-bit integer to index m buckets.

    For a power of two m this is ``width - log2(m)``.
    """
    return (width - 1) - int(math.floor(math.log2(m - 0.5)))


def uint_max(width: int) -> int:
    """Largest value of an unsigned integer of the given width."""
    if width not in INTEGER_WIDTHS:
        raise ValueError(f"Unsupported integer width: {width}")
    return (1 << width) - 1


def build_alias_table(
    weights,
    cutoff: CutoffKind = CutoffKind.FLOAT64,
    method: str = DEFAULT_METHOD,
    tol: float = WALKER1977_TOL,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Build the cutoff and alias arrays of a Walker alias table.

    Args:
        weights: Non-negative weights with a positive sum
        cutoff: Representation of the cutoffs. FLOAT64 gives a table of
            len(weights) buckets; integer kinds give a power-of-two table with
            cutoffs quantized to the full integer range.
        method: "ft2009" (O(N)) or "walker1977" (O(N^2), float cutoffs only)
        tol: Early termination threshold of the walker1977 method

    Returns:
        cutoff: float64 or uint64 array
        alias: int64 array

    Raises:
        InvalidInput: if the weights do not define a distribution
        ValueError: for an unknown method or an unsupported combination
    """
    cutoff = CutoffKind(cutoff)
    if method not in METHODS:
        raise ValueError(f"Unknown alias table method: {method!r}")
    if method == "walker1977" and cutoff is not CutoffKind.FLOAT64:
        raise ValueError("The walker1977 method only builds float cutoffs")

    w = as_weights(weights)
    n = w.shape[0]

    if cutoff is CutoffKind.FLOAT64:
        if method == "walker1977":
            frac, alias = fill_walker1977(w, float(tol))
        else:
            frac, alias = fill_ft2009(w, n)
        logger.debug("Built %s alias table with %d buckets", method, n)
        return frac, alias

    width = cutoff.width
    m = next_power_of_two(n)
    frac, alias = fill_ft2009(w, m)
    top = uint_max(width)
    quantized = quantize_cutoffs(frac, np.uint64(top), float(top))
    logger.debug("Built %d-bit alias table with %d buckets for %d weights", width, m, n)
    return quantized, alias


def _fractions(cutoff: np.ndarray, top: Optional[int]) -> np.ndarray:
    if top is None:
        return np.asarray(cutoff, dtype=np.float64)
    return np.asarray(cutoff, dtype=np.float64) * (1.0 / top)


def implied_probabilities(weights, cutoff, alias, max_uint: Optional[int] = None) -> np.ndarray:
    """
    Probability of each original outcome implied by a table.

    Args:
        weights: The weights the table was built from (only their count is used)
        cutoff: Cutoff array of the table
        alias: Alias array of the table
        max_uint: Scale of integer cutoffs, None for fractional ones

    Returns:
        (len(weights),) float64 array summing to 1 over the table
    """
    n = as_weights(weights).shape[0]
    frac = _fractions(cutoff, max_uint)
    return implied_mass(n, frac, np.asarray(alias, dtype=np.int64)) / frac.shape[0]


def check_table(weights, cutoff, alias, tol: float = CHECK_TOL, max_uint: Optional[int] = None) -> bool:
    """
    Check that a table reproduces the weights.

    The mass each outcome receives from the table is compared, in bucket
    units, with ``len(table) * (w / sum(w))``. The tolerance is scaled by the
    number of weights.

    Args:
        weights: The weights the table was built from
        cutoff: Cutoff array of the table
        alias: Alias array of the table
        tol: Per-weight tolerance
        max_uint: Scale of integer cutoffs, None for fractional ones. The
            tolerance is raised to the quantization step (4 / max_uint) when
            it is smaller.

    Returns:
        True if every outcome is within tolerance
    """
    w = as_weights(weights)
    n = w.shape[0]
    frac = _fractions(cutoff, max_uint)
    m = frac.shape[0]
    if m < n:
        return False
    if max_uint is not None:
        tol = max(tol, 4.0 / max_uint)

    mass = implied_mass(n, frac, np.asarray(alias, dtype=np.int64))
    deviation = np.abs(mass - m * (w / np.sum(w)))
    ok = bool(np.all(deviation < tol * n))
    if not ok:
        worst = int(np.argmax(deviation))
        logger.debug("Alias table check failed: outcome %d off by %g", worst, deviation[worst])
    return ok
