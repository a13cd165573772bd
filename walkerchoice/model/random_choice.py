"""
Samplers drawing indices from a fixed discrete distribution.

Each sampler is built once from a weight vector and then called with a random
engine, either one draw at a time (``sampler(eng)``) or in batches
(``sampler.sample(eng, size)``, run by the numba kernels). The engine is never
stored, so one sampler can serve several threads that each own an engine.

- ``AliasSampler``: Walker alias method with float cutoffs, O(1) per draw,
  two uniform reals per draw.
- ``IntegerAliasSampler``: alias method with quantized cutoffs, O(1) per draw,
  two raw integers per draw and no floating point.
- ``BisectSampler``: cumulative array and binary search, O(log N) per draw.
- ``LinearSampler``: cumulative array and linear scan, O(N) per draw.
"""

import logging
from typing import Callable, List, Tuple, Union

import numpy as np

from ..config import CHECK_TOL, DEFAULT_METHOD, WALKER1977_TOL, CutoffKind
from .alias_table import build_alias_table, check_table, implied_probabilities, shift_bits, uint_max
from .engines import collect
from .numba_alias import alias_draw_float, alias_draw_integer
from .numba_cumulative import bisect_draw, build_cumulative, linear_draw, upper_bound_unrolled
from .weights import as_weights

logger = logging.getLogger(__name__)


def _frozen(a: np.ndarray) -> np.ndarray:
    a = np.ascontiguousarray(a)
    a.flags.writeable = False
    return a


class _AliasTableSampler:
    """Shared storage and diagnostics of the alias samplers."""

    max_uint = None

    def __init__(self, n: int, cutoff: np.ndarray, alias: np.ndarray):
        self.n = n
        self.cutoff = _frozen(cutoff)
        self.alias = _frozen(alias)
        # Plain lists for the single-draw path
        self._cutoffs = cutoff.tolist()
        self._aliases = alias.tolist()

    def __len__(self) -> int:
        return self.n

    @property
    def size(self) -> int:
        """Number of buckets in the table."""
        return self.cutoff.shape[0]

    @property
    def table(self) -> List[Tuple[Union[float, int], int]]:
        """The table as (cutoff, alias) pairs."""
        return list(zip(self._cutoffs, self._aliases))

    def check(self, weights, tol: float = CHECK_TOL) -> bool:
        """Whether the table reproduces ``weights`` within ``tol * len(weights)``."""
        return check_table(weights, self.cutoff, self.alias, tol=tol, max_uint=self.max_uint)

    def implied_probabilities(self) -> np.ndarray:
        """Probability of each outcome according to the table."""
        return implied_probabilities(np.ones(self.n), self.cutoff, self.alias, max_uint=self.max_uint)


class AliasSampler(_AliasTableSampler):
    """
    Walker alias sampler with floating point cutoffs.

    Args:
        weights: Non-negative weights with a positive sum
        method: Table builder, "ft2009" (O(N)) or "walker1977" (O(N^2))
        tol: Early termination threshold of the walker1977 builder

    Raises:
        InvalidInput: if the weights do not define a distribution
    """

    def __init__(self, weights, method: str = DEFAULT_METHOD, tol: float = WALKER1977_TOL):
        w = as_weights(weights)
        cutoff, alias = build_alias_table(w, CutoffKind.FLOAT64, method=method, tol=tol)
        super().__init__(w.shape[0], cutoff, alias)

    def __call__(self, eng: Callable[[], float]) -> int:
        x = int(self.n * eng())
        return x if eng() < self._cutoffs[x] else self._aliases[x]

    def sample(self, eng: Callable[[], float], size: int) -> np.ndarray:
        """Draw ``size`` indices, consuming ``2 * size`` uniform reals."""
        draws = collect(eng, 2 * size, np.float64)
        return alias_draw_float(self.cutoff, self.alias, draws)


class IntegerAliasSampler(_AliasTableSampler):
    """
    Walker alias sampler with cutoffs quantized to unsigned integers.

    The table is padded to a power of two so that the high bits of a raw
    integer draw select a bucket with a single shift. A second raw draw is
    compared with the bucket's integer cutoff.

    Args:
        weights: Non-negative weights with a positive sum
        width: Bit width of the engine's output (32 or 64)

    Raises:
        InvalidInput: if the weights do not define a distribution

    Drawing raises ValueError when the engine returns a value wider than
    ``width`` bits.
    """

    def __init__(self, weights, width: int = 32):
        self.max_uint = uint_max(width)
        self.width = width
        w = as_weights(weights)
        kind = CutoffKind.UINT32 if width == 32 else CutoffKind.UINT64
        cutoff, alias = build_alias_table(w, kind)
        super().__init__(w.shape[0], cutoff, alias)
        self.bits = shift_bits(self.size, width)
        logger.debug("Integer alias sampler discards %d low bits", self.bits)

    def _raw(self, value) -> int:
        r = int(value)
        if r < 0 or r > self.max_uint:
            raise ValueError(f"Engine value {r} does not fit in {self.width} bits")
        return r

    def __call__(self, eng: Callable[[], int]) -> int:
        x = self._raw(eng()) >> self.bits
        return x if self._raw(eng()) < self._cutoffs[x] else self._aliases[x]

    def sample(self, eng: Callable[[], int], size: int) -> np.ndarray:
        """Draw ``size`` indices, consuming ``2 * size`` raw integers."""
        draws = collect(eng, 2 * size, np.uint64)
        if size and int(draws.max()) > self.max_uint:
            raise ValueError(f"Engine values do not fit in {self.width} bits")
        return alias_draw_integer(self.cutoff, self.alias, np.uint64(self.bits), draws)


class _CumulativeSampler:
    """Shared construction of the cumulative-array samplers."""

    def __init__(self, weights):
        w = as_weights(weights)
        self.accum = _frozen(build_cumulative(w))

    def __len__(self) -> int:
        return self.accum.shape[0]


class BisectSampler(_CumulativeSampler):
    """
    Cumulative-array sampler using binary search, O(log N) per draw.

    Returns the first index whose cumulative weight exceeds a uniform draw. A
    draw beyond the last cumulative value, possible only through rounding,
    maps to the last index.
    """

    def __call__(self, eng: Callable[[], float]) -> int:
        return min(int(upper_bound_unrolled(self.accum, eng())), len(self) - 1)

    def sample(self, eng: Callable[[], float], size: int) -> np.ndarray:
        return bisect_draw(self.accum, collect(eng, size, np.float64))


class LinearSampler(_CumulativeSampler):
    """Cumulative-array sampler using a linear scan, O(N) per draw."""

    def __call__(self, eng: Callable[[], float]) -> int:
        p = eng()
        for i, a in enumerate(self.accum):
            if a > p:
                return i
        return len(self) - 1

    def sample(self, eng: Callable[[], float], size: int) -> np.ndarray:
        return linear_draw(self.accum, collect(eng, size, np.float64))


def random_choice(
    weights,
    cutoff: Union[CutoffKind, str] = CutoffKind.FLOAT64,
    method: str = DEFAULT_METHOD,
    tol: float = WALKER1977_TOL,
) -> _AliasTableSampler:
    """
    Build an alias sampler with the requested cutoff representation.

    Use FLOAT64 with engines returning uniform reals, UINT32 or UINT64 with
    engines returning raw integers of that width.

    Args:
        weights: Non-negative weights with a positive sum
        cutoff: CutoffKind member or its value ("float64", "uint32", "uint64")
        method: Table builder for float cutoffs
        tol: Early termination threshold of the walker1977 builder

    Returns:
        AliasSampler or IntegerAliasSampler
    """
    cutoff = CutoffKind(cutoff)
    if cutoff is CutoffKind.FLOAT64:
        return AliasSampler(weights, method=method, tol=tol)
    if method != DEFAULT_METHOD:
        raise ValueError(f"Integer cutoffs are only built with {DEFAULT_METHOD}")
    return IntegerAliasSampler(weights, width=cutoff.width)
