import numbers
from typing import Iterable, List, Optional

from membership.algorithms.hashing import HashPair, IndependentHashPair, derive_indices, to_bytes
from membership.algorithms.sizing import FilterParameters, optimal_parameters
from membership.errors import InvalidConfig


class BloomFilter:
    """
    Bloom Filter for probabilistic membership testing.

    Parameters:
      m: number of bits in the array
      k: number of index-derivation rounds per item
      hash_pair: source of the two base hashes (defaults to independent keyed BLAKE2b)

    Methods:
      add(item), add_many(items), might_contain(item), __contains__(item), indices(item)

    A False answer is certain ("definitely not in set"); a True answer may be a
    false positive. Bits are never cleared, so there is no delete operation.
    Not thread-safe: callers sharing a filter must serialize add() and keep
    queries from racing an in-flight add().
    """

    def __init__(self, m: int, k: int, hash_pair: Optional[HashPair] = None) -> None:
        if isinstance(m, bool) or isinstance(k, bool):
            raise TypeError("m and k must be integers")
        if not isinstance(m, numbers.Integral) or not isinstance(k, numbers.Integral):
            raise InvalidConfig("m and k must be whole numbers")
        if m <= 0 or k <= 0:
            raise InvalidConfig("m and k must be positive")
        self._m = int(m)
        self._k = int(k)
        self.hash_pair = hash_pair if hash_pair is not None else IndependentHashPair()
        self.parameters: Optional[FilterParameters] = None
        self.inserted_count = 0
        self._bits = bytearray((self._m + 7) // 8)

    @classmethod
    def from_expected(
        cls, expected_items: int, error_rate: float, hash_pair: Optional[HashPair] = None
    ) -> "BloomFilter":
        """
        Build a filter sized for expected_items at error_rate.
        The derived m and k are kept on .parameters (and logged by the sizing layer).
        """
        params = optimal_parameters(expected_items, error_rate)
        bloom = cls(params.m, params.k, hash_pair=hash_pair)
        bloom.parameters = params
        return bloom

    @property
    def m(self) -> int:
        return self._m

    @property
    def k(self) -> int:
        return self._k

    def indices(self, item) -> List[int]:
        h1, h2 = self.hash_pair.base_hashes(to_bytes(item))
        return derive_indices(h1, h2, self._k, self._m)

    def _set_bit(self, idx: int) -> None:
        self._bits[idx >> 3] |= 1 << (idx & 7)

    def _get_bit(self, idx: int) -> bool:
        return bool(self._bits[idx >> 3] & (1 << (idx & 7)))

    def add(self, item) -> None:
        for idx in self.indices(item):
            self._set_bit(idx)
        self.inserted_count += 1

    def add_many(self, items: Iterable) -> None:
        for it in items:
            self.add(it)

    def might_contain(self, item) -> bool:
        return all(self._get_bit(idx) for idx in self.indices(item))

    def __contains__(self, item) -> bool:
        return self.might_contain(item)

    def bits(self) -> List[bool]:
        """Snapshot of the bit array as booleans (a copy; the filter keeps its own buffer)."""
        return [self._get_bit(i) for i in range(self._m)]

    @property
    def set_bit_count(self) -> int:
        return sum(int(b).bit_count() for b in self._bits)

    @property
    def fill_ratio(self) -> float:
        return self.set_bit_count / self._m

    @property
    def estimated_false_positive_rate(self) -> float:
        """Probability that a fresh item hits k set bits given the current fill."""
        return self.fill_ratio ** self._k

    def __repr__(self) -> str:
        return f"BloomFilter(m={self._m}, k={self._k}, inserted={self.inserted_count}, hash_pair={self.hash_pair!r})"
