"""
Random sources accepted by the samplers.

A sampler only needs a callable engine: ``eng()`` returns either a uniform real
in [0, 1) or a raw unsigned integer uniform over its full bit range. Engines
may also provide ``draws(size)`` returning the next ``size`` values as an
array, which the vectorized ``sample`` methods use. Both paths must produce
the same stream.
"""

from typing import Callable, Optional

import numpy as np


class UniformRealEngine:
    """Uniform reals in [0, 1) from a numpy Generator."""

    def __init__(self, seed: Optional[int] = None):
        self.rng = np.random.default_rng(seed)

    def __call__(self) -> float:
        return float(self.rng.random())

    def draws(self, size: int) -> np.ndarray:
        return self.rng.random(size)


class RawIntegerEngine:
    """
    Raw unsigned integers uniform on [0, 2**width).

    Args:
        seed: Seed of the underlying numpy Generator
        width: Bit width of the output (32 or 64)
    """

    def __init__(self, seed: Optional[int] = None, width: int = 32):
        if width not in (32, 64):
            raise ValueError(f"Unsupported engine width: {width}")
        self.width = width
        self.max = (1 << width) - 1
        self.rng = np.random.default_rng(seed)

    def __call__(self) -> int:
        return int(self.draws(1)[0])

    def draws(self, size: int) -> np.ndarray:
        # One 64-bit word per value keeps single and batched draws on the same stream
        raw = self.rng.integers(0, np.iinfo(np.uint64).max, size=size, dtype=np.uint64, endpoint=True)
        return raw >> np.uint64(64 - self.width)


def collect(eng: Callable, size: int, dtype) -> np.ndarray:
    """
    Take the next ``size`` values of an engine as an array.

    Uses ``eng.draws`` when available, otherwise calls ``eng()`` repeatedly.
    """
    if size < 0:
        raise ValueError(f"Sample size must be non-negative, got {size}")
    draws = getattr(eng, "draws", None)
    if draws is not None:
        return np.asarray(draws(size), dtype=dtype)
    return np.fromiter((eng() for _ in range(size)), dtype=dtype, count=size)
