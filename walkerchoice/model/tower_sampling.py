"""Tower sampling: cumulative table plus a standard upper-bound search."""

from typing import Callable, Iterable, Optional

import numpy as np

from .engines import collect
from .weights import as_weights


class TowerSampler:
    """
    Draw an index with probability proportional to its weight in O(log N).

    Construction is O(N). Without weights the sampler has a single bucket and
    always returns 0.

    Args:
        weights: Any iterable of non-negative weights, consumed once
    """

    def __init__(self, weights: Optional[Iterable[float]] = None):
        w = [] if weights is None else list(weights)
        if not w:
            self.total = 1.0
            self.table = np.ones(1)
        else:
            w = as_weights(w)
            self.total = float(np.sum(w))
            self.table = np.cumsum(w) / self.total
        self.table.flags.writeable = False

    def __len__(self) -> int:
        return self.table.shape[0]

    def __call__(self, eng: Callable[[], float]) -> int:
        i = int(np.searchsorted(self.table, eng(), side="right"))
        return min(i, len(self) - 1)

    def sample(self, eng: Callable[[], float], size: int) -> np.ndarray:
        idx = np.searchsorted(self.table, collect(eng, size, np.float64), side="right")
        return np.minimum(idx, len(self) - 1).astype(np.int64)
