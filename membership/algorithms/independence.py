"""
Checks that a hash pair really produces two independent base hashes.

Double hashing only approximates k independent hash functions when h2 is
computed from the input rather than from h1. When h2 = H(h1), any two inputs
that collide on h1 share every derived index, and the filter behaves as if
k were 1 for those inputs.
"""
import logging
from collections import defaultdict
from typing import Dict, Iterable, List

import pandas as pd

from membership.algorithms.hashing import HashPair, derive_indices, to_bytes
from membership.errors import InvalidConfig

logger = logging.getLogger(__name__)

# h1/h2 are reduced into this range before computing a correlation coefficient
_CORRELATION_MODULUS = 1 << 32
# h1 is reduced into this range to force collisions between distinct samples
COLLISION_MODULUS = 256


def index_overlap(hash_pair: HashPair, a, b, k: int, m: int) -> List[int]:
    """Rounds i for which a and b derive the same index."""
    idx_a = derive_indices(*hash_pair.base_hashes(to_bytes(a)), k, m)
    idx_b = derive_indices(*hash_pair.base_hashes(to_bytes(b)), k, m)
    return [i for i, (x, y) in enumerate(zip(idx_a, idx_b)) if x == y]


def correlation_report(hash_pair: HashPair, samples: Iterable, k: int, m: int) -> Dict:
    """
    Group samples by h1 and count colliding pairs, and how many of those
    collisions also share every derived index.
    """
    by_h1: Dict[int, List[bytes]] = defaultdict(list)
    for sample in samples:
        data = to_bytes(sample)
        h1, _ = hash_pair.base_hashes(data)
        by_h1[h1].append(data)

    h1_collisions = 0
    full_index_collisions = 0
    for group in by_h1.values():
        for i in range(len(group)):
            for j in range(i + 1, len(group)):
                a, b = group[i], group[j]
                if a == b:
                    continue
                h1_collisions += 1
                if len(index_overlap(hash_pair, a, b, k, m)) == k:
                    full_index_collisions += 1

    return {
        "distinct_h1": len(by_h1),
        "h1_collisions": h1_collisions,
        "full_index_collisions": full_index_collisions,
        "collapsed": h1_collisions > 0 and full_index_collisions == h1_collisions,
    }


def h1_h2_correlation(hash_pair: HashPair, samples: Iterable) -> float:
    """Pearson correlation of (h1 mod 2^32, h2 mod 2^32) over the samples."""
    rows = []
    for sample in samples:
        h1, h2 = hash_pair.base_hashes(to_bytes(sample))
        rows.append((h1 % _CORRELATION_MODULUS, h2 % _CORRELATION_MODULUS))
    if len(rows) < 2:
        return 0.0
    frame = pd.DataFrame(rows, columns=["h1", "h2"], dtype="float64")
    corr = frame["h1"].corr(frame["h2"])
    if pd.isna(corr):
        # constant column(s): no linear relationship can be measured
        return 0.0
    return float(corr)


def shares_h2_on_h1_collision(hash_pair: HashPair, samples: Iterable[bytes]) -> bool:
    """True if two distinct samples with the same h1 also have the same h2."""
    seen: Dict[int, tuple] = {}
    for data in samples:
        h1, h2 = hash_pair.base_hashes(data)
        if h1 in seen:
            other_data, other_h2 = seen[h1]
            if other_data != data and other_h2 == h2:
                return True
        else:
            seen[h1] = (data, h2)
    return False


def check_independence(
    hash_pair: HashPair,
    samples: Iterable,
    max_abs_correlation: float = 0.2,
    collision_modulus: int = COLLISION_MODULUS,
) -> float:
    """
    Raise InvalidConfig if the pair looks correlated on the given samples.

    Two signals are used: distinct inputs sharing h1 must not also share h2
    (which is what h2 = H(h1) always does), and the linear correlation of the
    two hashes must stay under max_abs_correlation. Returns the correlation.

    Full-width h1 values practically never collide, so pairs that provide
    narrowed() are also checked with h1 reduced mod collision_modulus.
    """
    samples = [to_bytes(s) for s in samples]
    if shares_h2_on_h1_collision(hash_pair, samples):
        raise InvalidConfig(f"{hash_pair!r}: h2 follows h1 on colliding inputs")
    narrowed = getattr(hash_pair, "narrowed", None)
    if narrowed is not None and shares_h2_on_h1_collision(narrowed(collision_modulus), samples):
        raise InvalidConfig(f"{hash_pair!r}: h2 follows h1 when h1 is forced to collide")

    corr = h1_h2_correlation(hash_pair, samples)
    logger.debug("h1/h2 correlation for %r over %d samples: %.4f", hash_pair, len(samples), corr)
    if abs(corr) > max_abs_correlation:
        raise InvalidConfig(f"{hash_pair!r}: h1/h2 correlation {corr:.3f} exceeds {max_abs_correlation}")
    return corr
