from .bloom_filter import BloomFilter
from .hashing import CorrelatedHashPair, IndependentHashPair, derive_indices
from .sizing import FilterParameters, expected_false_positive_rate, optimal_parameters

__all__ = [
    "BloomFilter",
    "CorrelatedHashPair",
    "IndependentHashPair",
    "derive_indices",
    "FilterParameters",
    "expected_false_positive_rate",
    "optimal_parameters",
]
