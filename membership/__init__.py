"""
Probabilistic set membership over strings.

This package provides:
- algorithms: Bloom Filter with double hashing, hash pairs, sizing, independence checks
- detectors: word-list screening of text
- evaluation: false-positive experiments
"""

from .algorithms.bloom_filter import BloomFilter
from .errors import InvalidConfig

__all__ = ["BloomFilter", "InvalidConfig"]
