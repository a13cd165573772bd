import numpy as np
import pytest

from walkerchoice import RawIntegerEngine, UniformRealEngine


class SequenceEngine:
    """Engine replaying a fixed list of values, for exact draw-level tests."""

    def __init__(self, values):
        self.values = list(values)
        self.pos = 0

    def __call__(self):
        v = self.values[self.pos % len(self.values)]
        self.pos += 1
        return v


@pytest.fixture
def real_engine():
    return UniformRealEngine(29411)


@pytest.fixture
def int_engine():
    return RawIntegerEngine(29411, width=32)


@pytest.fixture
def sequence_engine():
    return SequenceEngine


@pytest.fixture
def random_weights():
    """Weight vectors of several sizes, reproducible across runs."""
    rng = np.random.default_rng(12345)
    return {n: rng.random(n) for n in (1, 2, 3, 7, 16, 100, 1000)}


@pytest.fixture
def check_frequencies():
    def check(samples, weights, k=5.0):
        weights = np.asarray(weights, dtype=np.float64)
        p = weights / weights.sum()
        total = len(samples)
        counts = np.bincount(samples, minlength=len(weights))
        assert len(counts) == len(weights)
        sigma = np.sqrt(total * p * (1.0 - p))
        assert np.all(np.abs(counts - total * p) <= k * sigma + 1.0), (counts, total * p)
        return counts

    return check
