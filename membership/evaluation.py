import logging
import random
import string
from typing import Dict, Iterable, List, Optional, Sequence, Set

from membership.algorithms.bloom_filter import BloomFilter
from membership.algorithms.hashing import HashPair
from membership.algorithms.sizing import expected_false_positive_rate

logger = logging.getLogger(__name__)


def random_probes(count: int, exclude: Iterable[str] = (), length: int = 8, seed: int = 0) -> List[str]:
    """
    Generate `count` distinct random lowercase strings not present in `exclude`.
    """
    if count < 0:
        raise ValueError("count must be non-negative")
    rng = random.Random(seed)
    excluded: Set[str] = set(exclude)
    probes: List[str] = []
    seen: Set[str] = set()
    while len(probes) < count:
        candidate = "".join(rng.choices(string.ascii_lowercase, k=length))
        if candidate in excluded or candidate in seen:
            continue
        seen.add(candidate)
        probes.append(candidate)
    return probes


def measure_false_positive_rate(bloom: BloomFilter, probes: Sequence[str]) -> float:
    """Fraction of known non-members the filter reports as possibly present."""
    if not probes:
        return 0.0
    hits = sum(1 for p in probes if bloom.might_contain(p))
    return hits / len(probes)


def false_negatives(bloom: BloomFilter, members: Iterable[str]) -> List[str]:
    """Inserted items the filter rejects. Always empty for a correctly built filter."""
    return [item for item in members if not bloom.might_contain(item)]


class FalsePositiveExperiment:
    """
    Inserts a word list into a filter and measures the observed false-positive
    rate against random non-member probes at a number of checkpoints.

    Use run() to get the summary dict.
    """

    def __init__(
        self,
        m: int,
        k: int,
        probe_count: int = 10_000,
        hash_pair: Optional[HashPair] = None,
        seed: int = 0,
    ) -> None:
        self.bloom = BloomFilter(m, k, hash_pair=hash_pair)
        self.probe_count = int(probe_count)
        self.seed = int(seed)

    def run(self, words: Sequence[str], checkpoints: int = 10, probes: Optional[Sequence[str]] = None) -> Dict:
        if probes is None:
            probes = random_probes(self.probe_count, exclude=words, seed=self.seed)
        n = len(words)
        count = min(max(1, checkpoints), n)
        # ceil(j * n / count) for j in 1..count
        positions = {-(-j * n // count) for j in range(1, count + 1)}

        snapshots: List[Dict] = []
        for i, word in enumerate(words, start=1):
            self.bloom.add(word)
            if i in positions:
                snapshots.append(self._snapshot(i, probes))

        missed = false_negatives(self.bloom, words)
        if missed:
            logger.error("Filter rejected %d inserted items", len(missed))

        final = snapshots[-1] if snapshots else self._snapshot(0, probes)
        return {
            "m": self.bloom.m,
            "k": self.bloom.k,
            "inserted": n,
            "probes": len(probes),
            "false_negatives": len(missed),
            "observed_fp_rate": final["observed_fp_rate"],
            "expected_fp_rate": final["expected_fp_rate"],
            "fill_ratio": final["fill_ratio"],
            "snapshots": snapshots,
        }

    def _snapshot(self, inserted: int, probes: Sequence[str]) -> Dict:
        return {
            "inserted": inserted,
            "fill_ratio": self.bloom.fill_ratio,
            "observed_fp_rate": measure_false_positive_rate(self.bloom, probes),
            "expected_fp_rate": expected_false_positive_rate(self.bloom.m, self.bloom.k, inserted),
        }

    def __repr__(self) -> str:
        return f"FalsePositiveExperiment(bloom={self.bloom!r}, probes={self.probe_count})"


def run_experiment(
    words: Sequence[str],
    m: int,
    k: int,
    probe_count: int = 10_000,
    hash_pair: Optional[HashPair] = None,
    seed: int = 0,
    checkpoints: int = 10,
) -> Dict:
    experiment = FalsePositiveExperiment(m, k, probe_count=probe_count, hash_pair=hash_pair, seed=seed)
    return experiment.run(words, checkpoints=checkpoints)
