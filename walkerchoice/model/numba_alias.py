"""
Numba-compiled construction and checking of Walker alias tables.

An alias table has one bucket per outcome. Each bucket keeps a fraction
``cutoff`` of its own outcome and redirects the rest to ``alias``. Two
builders are provided:

- ``fill_ft2009``: O(N) construction. Buckets are split once into deficit and
  surplus groups and every deficit is paired with the current surplus.
- ``fill_walker1977``: the original O(N^2) construction from A. J. Walker,
  ACM Trans. Math. Software 3, 253 (1977). Kept as a reference for
  cross-checking.

Weights must be validated before calling any kernel here; the kernels assume a
non-empty, non-negative float64 array with a positive sum.
"""

import numpy as np
from numba import njit


@njit(cache=True)
def fill_ft2009(weights, m):
    """
    Build an alias table in O(m) time.

    The scaled excess ``b = m * (w / sum(w)) - 1`` of every bucket is written into a
    scratch arena: deficits (b < 0) fill it from the front and surpluses from
    the back. The arena is then walked front to back, pairing each entry with
    the current surplus. Surplus entries that have been drained are reached
    later by the same walk and paired in turn.

    Args:
        weights: Non-negative weights (length n <= m)
        m: Table size. Slots n..m-1 are padding with zero weight.

    Returns:
        cutoff: (m,) float64 array, fraction kept by each bucket
        alias: (m,) int64 array, bucket receiving the rest
    """
    n = weights.shape[0]
    # Normalize before scaling: m / sum(w) overflows for subnormal weights
    total = np.sum(weights)

    cutoff = np.empty(m, dtype=np.float64)
    alias = np.empty(m, dtype=np.int64)

    # Scratch arena: deficits from the front, surpluses from the back
    arena_b = np.empty(m, dtype=np.float64)
    arena_idx = np.empty(m, dtype=np.int64)
    neg = 0
    pos = m
    for i in range(m):
        w = weights[i] if i < n else 0.0
        b = m * (w / total) - 1.0
        if b < 0.0:
            arena_b[neg] = b
            arena_idx[neg] = i
            neg += 1
        else:
            pos -= 1
            arena_b[pos] = b
            arena_idx[pos] = i

    # pos now points at the first surplus entry
    for k in range(m):
        i = arena_idx[k]
        if pos < m:
            cutoff[i] = 1.0 + arena_b[k]
            alias[i] = arena_idx[pos]
            arena_b[pos] += arena_b[k]
            if arena_b[pos] <= 0.0:
                pos += 1
        else:
            # Surplus exhausted by rounding: keep the bucket for itself
            cutoff[i] = 1.0
            alias[i] = i

    return cutoff, alias


@njit(cache=True)
def fill_walker1977(weights, tol):
    """
    Build an alias table with Walker's original O(N^2) algorithm.

    Each pass pairs the most negative excess with the most positive one and
    zeroes the former. Stops once the total absolute excess is below tol.

    Args:
        weights: Non-negative weights
        tol: Early termination threshold on sum(|b|)

    Returns:
        cutoff: (n,) float64 array
        alias: (n,) int64 array
    """
    n = weights.shape[0]
    total = np.sum(weights)

    cutoff = np.ones(n, dtype=np.float64)
    alias = np.arange(n)
    b = n * (weights / total) - 1.0

    for _ in range(n):
        excess = 0.0
        minval = 0.0
        maxval = 0.0
        minpos = 0
        maxpos = 0
        for j in range(n):
            excess += abs(b[j])
            if b[j] <= minval:
                minval = b[j]
                minpos = j
            if b[j] >= maxval:
                maxval = b[j]
                maxpos = j

        if excess < tol:
            break

        cutoff[minpos] = 1.0 + minval
        alias[minpos] = maxpos
        b[maxpos] += minval
        b[minpos] = 0.0

    return cutoff, alias


@njit(cache=True)
def quantize_cutoffs(cutoff, max_uint, max_uint_f):
    """
    Convert fractional cutoffs to unsigned integers spanning [0, max_uint].

    Values are truncated, and clamped at both ends of the integer range
    rather than at the real interval [0, 1].

    Args:
        cutoff: Fractional cutoffs
        max_uint: Largest value of the integer type (as uint64)
        max_uint_f: Same value as float64 (may round up for 64-bit widths)

    Returns:
        (m,) uint64 array of quantized cutoffs
    """
    m = cutoff.shape[0]
    out = np.empty(m, dtype=np.uint64)
    for i in range(m):
        v = max_uint_f * cutoff[i]
        if v >= max_uint_f:
            out[i] = max_uint
        elif v <= 0.0:
            out[i] = np.uint64(0)
        else:
            out[i] = np.uint64(v)
    return out


@njit(cache=True)
def implied_mass(n, frac, alias):
    """
    Reconstruct the mass each original outcome receives from a table.

    Outcome i gets the retained part of its own bucket plus ``1 - frac[j]``
    from every bucket j aliased to it. Masses are in bucket units, so they
    sum to the table length.

    Args:
        n: Number of original outcomes
        frac: Fractional cutoffs of the whole table
        alias: Aliases of the whole table

    Returns:
        (n,) float64 array of masses
    """
    m = frac.shape[0]
    mass = np.empty(n, dtype=np.float64)
    for i in range(n):
        p = frac[i]
        for j in range(m):
            if alias[j] == i:
                p += 1.0 - frac[j]
        mass[i] = p
    return mass


@njit(cache=True)
def alias_draw_float(cutoff, alias, draws):
    """
    Map pairs of uniform reals to outcomes.

    Args:
        cutoff: Fractional cutoffs
        alias: Aliases
        draws: Uniform reals in [0, 1); draws[2k] picks the bucket and
            draws[2k + 1] is compared with its cutoff

    Returns:
        (len(draws) // 2,) int64 array of outcomes
    """
    n = cutoff.shape[0]
    size = draws.shape[0] // 2
    out = np.empty(size, dtype=np.int64)
    for k in range(size):
        x = int(n * draws[2 * k])
        if draws[2 * k + 1] < cutoff[x]:
            out[k] = x
        else:
            out[k] = alias[x]
    return out


@njit(cache=True)
def alias_draw_integer(cutoff, alias, bits, draws):
    """
    Map pairs of raw unsigned integers to outcomes.

    The high bits of draws[2k] select the bucket; draws[2k + 1] is compared
    with the quantized cutoff. No floating point is involved.

    Args:
        cutoff: Quantized cutoffs (uint64)
        alias: Aliases
        bits: Number of low bits to discard (uint64)
        draws: Raw integers (uint64)

    Returns:
        (len(draws) // 2,) int64 array of outcomes
    """
    size = draws.shape[0] // 2
    out = np.empty(size, dtype=np.int64)
    for k in range(size):
        x = draws[2 * k] >> bits
        if draws[2 * k + 1] < cutoff[x]:
            out[k] = np.int64(x)
        else:
            out[k] = alias[x]
    return out
