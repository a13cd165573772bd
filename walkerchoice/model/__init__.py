from .alias_table import build_alias_table, check_table, implied_probabilities
from .engines import RawIntegerEngine, UniformRealEngine
from .random_choice import AliasSampler, BisectSampler, IntegerAliasSampler, LinearSampler, random_choice
from .tower_sampling import TowerSampler
