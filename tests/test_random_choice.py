import random

import numpy as np
import pytest

from walkerchoice import (
    AliasSampler,
    BisectSampler,
    CutoffKind,
    IntegerAliasSampler,
    InvalidInput,
    LinearSampler,
    RawIntegerEngine,
    UniformRealEngine,
    random_choice,
)

SAMPLES = 100000


def make_sampler(name, weights):
    if name == "alias":
        return AliasSampler(weights), UniformRealEngine(7)
    if name == "walker1977":
        return AliasSampler(weights, method="walker1977"), UniformRealEngine(7)
    if name == "uint32":
        return IntegerAliasSampler(weights, width=32), RawIntegerEngine(7, width=32)
    if name == "uint64":
        return IntegerAliasSampler(weights, width=64), RawIntegerEngine(7, width=64)
    if name == "bisect":
        return BisectSampler(weights), UniformRealEngine(7)
    if name == "linear":
        return LinearSampler(weights), UniformRealEngine(7)
    raise ValueError(name)


SAMPLERS = ["alias", "walker1977", "uint32", "uint64", "bisect", "linear"]


@pytest.mark.parametrize("name", SAMPLERS)
def test_one_two_three_four(name, check_frequencies):
    weights = [1, 2, 3, 4]
    sampler, eng = make_sampler(name, weights)
    counts = check_frequencies(sampler.sample(eng, SAMPLES), weights)

    np.testing.assert_allclose(counts, [10000, 20000, 30000, 40000], rtol=0.05)


@pytest.mark.parametrize("name", SAMPLERS)
def test_random_weights_converge(name, random_weights, check_frequencies):
    weights = random_weights[16]
    sampler, eng = make_sampler(name, weights)
    samples = sampler.sample(eng, SAMPLES)

    assert samples.dtype == np.int64
    assert samples.min() >= 0 and samples.max() < 16
    check_frequencies(samples, weights)


@pytest.mark.parametrize("name", SAMPLERS)
def test_single_weight_always_zero(name):
    sampler, eng = make_sampler(name, [3.5])

    assert len(sampler) == 1
    assert np.all(sampler.sample(eng, 1000) == 0)
    assert all(sampler(eng) == 0 for _ in range(100))


@pytest.mark.parametrize("name", SAMPLERS)
def test_uniform_weights(name, check_frequencies):
    weights = np.ones(10)
    sampler, eng = make_sampler(name, weights)
    check_frequencies(sampler.sample(eng, SAMPLES), weights)


@pytest.mark.parametrize("name", SAMPLERS)
def test_dominant_weight(name):
    sampler, eng = make_sampler(name, [0, 0, 0, 0, 1000])

    assert np.all(sampler.sample(eng, 10000) == 4)


@pytest.mark.parametrize("name", SAMPLERS)
def test_single_and_batched_draws_agree(name):
    weights = [0.5, 2.0, 0.0, 1.25, 3.0, 0.75, 0.1]
    sampler, eng = make_sampler(name, weights)
    _, other = make_sampler(name, weights)

    singles = [sampler(eng) for _ in range(2000)]
    assert singles == sampler.sample(other, 2000).tolist()


@pytest.mark.parametrize("name", SAMPLERS)
def test_plain_callable_engine(name):
    weights = [1, 2, 3]
    sampler, _ = make_sampler(name, weights)
    if isinstance(sampler, IntegerAliasSampler):
        width = sampler.width
        rng_a, rng_b = random.Random(3), random.Random(3)
        eng_a = lambda: rng_a.getrandbits(width)
        eng_b = lambda: rng_b.getrandbits(width)
    else:
        eng_a = random.Random(3).random
        eng_b = random.Random(3).random

    batch = sampler.sample(eng_a, 500)
    assert batch.tolist() == [sampler(eng_b) for _ in range(500)]
    assert set(batch.tolist()) <= {0, 1, 2}


@pytest.mark.parametrize("name", SAMPLERS)
def test_invalid_weights_raise(name):
    for weights in ([], [1, -1, 2], [0.0, 0.0]):
        with pytest.raises(InvalidInput):
            make_sampler(name, weights)


def test_float_alias_draw_level(sequence_engine):
    sampler = AliasSampler([1, 3])

    assert sampler.table == [(0.5, 1), (1.0, 1)]
    assert sampler(sequence_engine([0.1, 0.4])) == 0
    assert sampler(sequence_engine([0.1, 0.6])) == 1
    assert sampler(sequence_engine([0.9, 0.99])) == 1
    assert sampler.sample(sequence_engine([0.1, 0.4, 0.1, 0.6]), 2).tolist() == [0, 1]


def test_integer_alias_draw_level(sequence_engine):
    sampler = IntegerAliasSampler([1, 1, 1, 1], width=32)
    top = 2**32 - 1

    assert sampler.size == 4
    assert sampler.bits == 30
    assert sampler.table == [(top, i) for i in range(4)]
    for x in range(4):
        assert sampler(sequence_engine([x << 30, 0])) == x
        assert sampler(sequence_engine([(x << 30) | 12345, top - 1])) == x


def test_integer_alias_single_weight_extremes(sequence_engine):
    sampler = IntegerAliasSampler([7], width=32)
    top = 2**32 - 1

    assert sampler.size == 2
    assert sampler.bits == 31
    for draws in ([0, 0], [0, top], [top, 0], [top, top]):
        assert sampler(sequence_engine(draws)) == 0


def test_integer_alias_padded_table():
    weights = [5, 1, 1]
    sampler = IntegerAliasSampler(weights, width=32)

    assert len(sampler) == 3
    assert sampler.size == 4
    assert sampler.bits == 30
    assert sampler.check(weights)
    np.testing.assert_allclose(sampler.implied_probabilities(), [5 / 7, 1 / 7, 1 / 7], atol=1e-8)
    assert sampler.sample(RawIntegerEngine(1), 20000).max() < 3


def test_alias_check_and_implied_probabilities():
    weights = [1, 2, 3, 4]
    sampler = AliasSampler(weights)

    assert sampler.check(weights)
    assert not sampler.check([4, 3, 2, 1])
    np.testing.assert_allclose(sampler.implied_probabilities(), [0.1, 0.2, 0.3, 0.4])


def test_tables_are_read_only():
    sampler = AliasSampler([1, 2, 3])
    with pytest.raises(ValueError):
        sampler.cutoff[0] = 0.0
    with pytest.raises(ValueError):
        sampler.alias[0] = 1

    bisect = BisectSampler([1, 2, 3])
    with pytest.raises(ValueError):
        bisect.accum[0] = 0.0


def test_facade_selects_representation():
    weights = [1, 2, 3]

    assert isinstance(random_choice(weights), AliasSampler)
    assert isinstance(random_choice(weights, cutoff="float64"), AliasSampler)

    rc32 = random_choice(weights, cutoff=CutoffKind.UINT32)
    assert isinstance(rc32, IntegerAliasSampler)
    assert rc32.width == 32
    assert rc32.bits == 30

    rc64 = random_choice(weights, cutoff="uint64")
    assert rc64.width == 64
    assert rc64.bits == 62
    assert rc64.check(weights)


def test_facade_reference_builder():
    weights = [1, 2, 3]
    rc = random_choice(weights, method="walker1977")

    assert rc.check(weights)
    with pytest.raises(ValueError):
        random_choice(weights, cutoff=CutoffKind.UINT32, method="walker1977")
    with pytest.raises(ValueError):
        random_choice(weights, cutoff="float32")


def test_unsupported_width():
    with pytest.raises(ValueError):
        IntegerAliasSampler([1, 2], width=16)


def test_negative_sample_size():
    with pytest.raises(ValueError):
        AliasSampler([1, 2]).sample(UniformRealEngine(1), -1)


@pytest.mark.parametrize("name", SAMPLERS)
def test_subnormal_weights_never_draw_zero_weights(name):
    weights = [5e-324, 0.0, 0.0]
    sampler, eng = make_sampler(name, weights)
    samples = sampler.sample(eng, 10000)

    assert np.all(samples == 0)
    assert all(sampler(eng) == 0 for _ in range(200))


@pytest.mark.parametrize("name", SAMPLERS)
def test_subnormal_weights_frequencies(name, check_frequencies):
    weights = [1e-310, 2e-310, 0.0, 3e-310]
    sampler, eng = make_sampler(name, weights)
    counts = check_frequencies(sampler.sample(eng, SAMPLES), weights)

    assert counts[2] == 0


def test_engine_wider_than_table_is_rejected(sequence_engine):
    sampler = IntegerAliasSampler([1, 2, 3], width=32)

    with pytest.raises(ValueError):
        sampler.sample(RawIntegerEngine(1, width=64), 1000)
    with pytest.raises(ValueError):
        sampler.sample(sequence_engine([2**32, 0]), 1)
    with pytest.raises(ValueError):
        sampler(sequence_engine([2**32, 0]))
    with pytest.raises(ValueError):
        sampler(sequence_engine([0, 2**40]))
    with pytest.raises(ValueError):
        sampler(sequence_engine([-1, 0]))


def test_engine_at_full_width_is_accepted(sequence_engine):
    sampler = IntegerAliasSampler([1, 2, 3], width=32)
    top = 2**32 - 1

    assert sampler.sample(sequence_engine([top, top]), 3).max() < 3
    assert sampler(sequence_engine([top, top])) < 3
    assert sampler.sample(RawIntegerEngine(1, width=32), 0).shape == (0,)
