"""Walker alias method and cumulative-array sampling of discrete distributions."""

import logging

from .config import CutoffKind
from .errors import InvalidInput
from .model import (
    AliasSampler,
    BisectSampler,
    IntegerAliasSampler,
    LinearSampler,
    RawIntegerEngine,
    TowerSampler,
    UniformRealEngine,
    build_alias_table,
    check_table,
    implied_probabilities,
    random_choice,
)

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())
