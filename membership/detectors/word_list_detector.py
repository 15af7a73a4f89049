import logging
from typing import Dict, Iterable, List, Optional, Tuple

from membership.algorithms.bloom_filter import BloomFilter
from membership.algorithms.hashing import IndependentHashPair
from membership.utils.token_handler import split_preprocessed_tokens

logger = logging.getLogger(__name__)


class WordListDetector:
    """
    Screens text against a word list (e.g. a "bad words" list) held in a Bloom Filter.

    Each token of the text is checked against the filter. A token reported as
    present may be a false positive; a token reported absent is certainly not
    on the list.

    If m and k are not given, the filter is sized from len(words) and error_rate.
    """

    def __init__(
        self,
        words: Iterable[str],
        error_rate: float = 0.02,
        m: Optional[int] = None,
        k: Optional[int] = None,
        seed: int = 0,
    ) -> None:
        vocabulary = [w.strip().lower() for w in words if w and w.strip()]
        hash_pair = IndependentHashPair(seed=seed)
        if m is not None and k is not None:
            self.bloom = BloomFilter(m, k, hash_pair=hash_pair)
        else:
            self.bloom = BloomFilter.from_expected(max(1, len(vocabulary)), error_rate, hash_pair=hash_pair)
        self.bloom.add_many(vocabulary)
        logger.info("Loaded %d words into %r", len(vocabulary), self.bloom)

    def hits(self, text: str) -> Tuple[List[str], int]:
        tokens = split_preprocessed_tokens(text)
        return [t for t in tokens if t in self.bloom], len(tokens)

    def is_flagged(self, text: str) -> bool:
        return any(t in self.bloom for t in split_preprocessed_tokens(text))

    def screen(self, text: str) -> Dict:
        """
        Check a message and return a dict with the matching tokens and their share.
        """
        found, total = self.hits(text)
        return {
            "flagged": bool(found),
            "hits": found,
            "token_count": total,
            "hit_ratio": (len(found) / total) if total else 0.0,
        }

    def __repr__(self) -> str:
        return f"WordListDetector(m={self.bloom.m}, k={self.bloom.k}, words={self.bloom.inserted_count})"
