"""
Benchmark script comparing the per-draw throughput of the samplers.

For every table size the draw count is doubled until one batch takes longer
than the time budget; the throughput of that batch is reported.

Usage:
    python benchmark_random_choice.py
"""

import time

import matplotlib.pyplot as plt
import numpy as np
from walkerchoice import (
    AliasSampler,
    BisectSampler,
    IntegerAliasSampler,
    LinearSampler,
    RawIntegerEngine,
    TowerSampler,
    UniformRealEngine,
)


def make_samplers(weights):
    """Samplers to compare, each paired with an engine of the right kind."""
    return {
        "alias (float)": (AliasSampler(weights), UniformRealEngine(29411)),
        "alias (uint32)": (IntegerAliasSampler(weights, width=32), RawIntegerEngine(29411, width=32)),
        "bisect": (BisectSampler(weights), UniformRealEngine(29411)),
        "linear": (LinearSampler(weights), UniformRealEngine(29411)),
        "tower": (TowerSampler(weights), UniformRealEngine(29411)),
    }


def benchmark_sampler(sampler, eng, n, duration):
    """
    Time batched draws.

    Args:
        sampler: Sampler instance
        eng: Engine matching the sampler
        n: Number of outcomes
        duration: Time budget in seconds

    Returns:
        Number of draws and elapsed time of the last batch
    """
    # first call compiles the kernels
    r = sampler.sample(eng, 2)

    loop = 1
    elapsed = 0.0
    while elapsed < duration and loop < (1 << 30):
        loop *= 2
        start_time = time.time()
        r = sampler.sample(eng, loop)
        elapsed = time.time() - start_time

    if np.any(r < 0) or np.any(r >= n):
        raise RuntimeError("range error")
    return loop, elapsed


def create_throughput_plot(sizes, results):
    fig, ax = plt.subplots(figsize=(7, 5))
    for name, perf in results.items():
        ax.plot(sizes, perf, marker="o", label=name)
    ax.set_xscale("log")
    ax.set_yscale("log")
    ax.set_xlabel("Number of outcomes")
    ax.set_ylabel("Draws per second")
    ax.legend()
    ax.grid(True, alpha=0.3)
    plt.tight_layout()
    plt.show()


def main():
    """Run benchmark comparison."""
    print("=" * 70)
    print("walkerchoice sampler benchmark")
    print("=" * 70)
    print()

    duration = 0.2
    sizes = [2, 8, 64, 512, 4096]
    rng = UniformRealEngine(29411)
    results = {}

    for n in sizes:
        weights = rng.draws(n)
        print(f"Benchmarking with {n} outcomes...")
        print("-" * 70)
        for name, (sampler, eng) in make_samplers(weights).items():
            loop, elapsed = benchmark_sampler(sampler, eng, n, duration)
            perf = loop / elapsed
            results.setdefault(name, []).append(perf)
            print(f"  {name:16s} {loop:>12d} draws  {elapsed:8.3f} s  {perf:14.1f} draws/s")
        print()

    create_throughput_plot(sizes, results)


if __name__ == "__main__":
    main()
