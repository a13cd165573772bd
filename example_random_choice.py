"""Draw from random weights with the float and integer alias samplers and report the bins."""

import sys

import numpy as np
from walkerchoice import CutoffKind, RawIntegerEngine, UniformRealEngine, random_choice

n = 9
samples = 100000


def report(weights, counts):
    tw = np.sum(weights)
    print("bin\tweight\t\tresult\t\tdiff\t\tsigma\t\tdiff/sigma")
    for i in range(n):
        diff = abs(weights[i] / tw - counts[i] / samples)
        sigma = np.sqrt(counts[i]) / samples
        print(f"{i}\t{weights[i] / tw:.6f}\t{counts[i] / samples:.6f}\t{diff:.6f}\t{sigma:.6f}\t{diff / sigma:.3f}")


print(f"number of bins = {n}")
print(f"number of samples = {samples}")

weights = UniformRealEngine(29411).draws(n)

for kind, eng in [
    (CutoffKind.FLOAT64, UniformRealEngine(29411)),
    (CutoffKind.UINT32, RawIntegerEngine(29411, width=32)),
]:
    print()
    print(f"=== {kind.value} cutoffs ===")
    rc = random_choice(weights, cutoff=kind)

    if rc.check(weights):
        print("check succeeded")
    else:
        print("check failed")
        sys.exit(-1)

    counts = np.bincount(rc.sample(eng, samples), minlength=n)
    report(weights, counts)
