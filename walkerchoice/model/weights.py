"""Validation of weight vectors before any table is built."""

import numpy as np

from ..errors import InvalidInput


def as_weights(weights) -> np.ndarray:
    """
    Copy weights into a float64 array after checking they define a distribution.

    Args:
        weights: Sequence or array of non-negative numbers

    Returns:
        1-D float64 array, independent of the caller's object

    Raises:
        InvalidInput: if weights are empty, not one-dimensional, negative,
            not finite, or sum to zero
    """
    try:
        w = np.array(weights, dtype=np.float64)
    except (TypeError, ValueError, OverflowError) as e:
        raise InvalidInput(f"Weights are not numeric: {e}") from e

    if w.ndim != 1:
        raise InvalidInput(f"Weights must be one-dimensional, got shape {w.shape}")
    if w.size == 0:
        raise InvalidInput("Weight vector is empty.")
    if not np.all(np.isfinite(w)):
        raise InvalidInput("Weights must be finite.")
    if np.any(w < 0.0):
        i = int(np.argmax(w < 0.0))
        raise InvalidInput(f"Negative weight {w[i]} at index {i}.")

    total = np.sum(w)
    if not total > 0.0 or not np.isfinite(total):
        raise InvalidInput(f"Sum of weights must be finite and > 0, got {total}.")
    return w
