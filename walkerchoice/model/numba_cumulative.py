"""
Numba-compiled cumulative-array sampling.

A cumulative array holds the normalized partial sums of the weights. A uniform
draw p selects the first entry strictly greater than p, found either by binary
search (O(log N)) or by a linear scan (O(N)).
"""

import numpy as np
from numba import njit


@njit(cache=True)
def build_cumulative(weights):
    """
    Normalize weights into a non-decreasing cumulative array.

    Args:
        weights: Non-negative weights with a positive sum

    Returns:
        (n,) float64 array, entry i = sum(weights[:i + 1]) / sum(weights)
    """
    n = weights.shape[0]
    norm = np.sum(weights)
    accum = np.empty(n, dtype=np.float64)
    a = 0.0
    for i in range(n):
        a += weights[i] / norm
        accum[i] = a
    return accum


@njit(cache=True)
def upper_bound(accum, p):
    """Index of the first entry of accum strictly greater than p (len(accum) if none)."""
    first = 0
    last = accum.shape[0]
    while first < last:
        mid = first + ((last - first) >> 1)
        if p < accum[mid]:
            last = mid
        else:
            first = mid + 1
    return first


@njit(cache=True)
def upper_bound_unrolled(accum, p):
    """
    Same result as upper_bound with the last three candidates compared directly.

    The answer is kept in the inclusive range [first, last]; halving stops once
    at most three comparisons remain.
    """
    first = 0
    last = accum.shape[0]
    while last - first > 3:
        mid = first + ((last - first) >> 1)
        if p < accum[mid]:
            last = mid
        else:
            first = mid + 1

    if last - first == 3:
        if p < accum[first]:
            return first
        first += 1
    if last - first == 2:
        if p < accum[first]:
            return first
        first += 1
    if last - first == 1:
        if p < accum[first]:
            return first
        first += 1
    return first


@njit(cache=True)
def bisect_draw(accum, draws):
    """
    Map uniform reals to outcomes by binary search.

    A draw above the last cumulative value (rounding residue) maps to the
    last outcome.
    """
    n = accum.shape[0]
    out = np.empty(draws.shape[0], dtype=np.int64)
    for k in range(draws.shape[0]):
        out[k] = min(upper_bound_unrolled(accum, draws[k]), n - 1)
    return out


@njit(cache=True)
def linear_draw(accum, draws):
    """Map uniform reals to outcomes by scanning the cumulative array."""
    n = accum.shape[0]
    out = np.empty(draws.shape[0], dtype=np.int64)
    for k in range(draws.shape[0]):
        r = n - 1
        for i in range(n):
            if accum[i] > draws[k]:
                r = i
                break
        out[k] = r
    return out
