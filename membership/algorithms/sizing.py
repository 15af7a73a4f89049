import logging
import math
from dataclasses import dataclass

from membership.errors import InvalidConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FilterParameters:
    m: int
    k: int
    expected_items: int
    error_rate: float

    def as_dict(self) -> dict:
        return {
            "m": self.m,
            "k": self.k,
            "expected_items": self.expected_items,
            "error_rate": self.error_rate,
        }


def optimal_parameters(expected_items: int, error_rate: float) -> FilterParameters:
    """
    Translate "expected items + desired error rate" into bit count and hash rounds.

    m = ceil(-n * ln(p) / ln(2)^2)
    k = max(1, round(m / n * ln(2)))

    The derived values are returned (and logged) so callers always see what they
    are getting; nothing here is applied implicitly.
    """
    if expected_items <= 0:
        raise InvalidConfig("expected_items must be positive")
    if not (0 < error_rate < 1):
        raise InvalidConfig("error_rate must be in (0,1)")
    n = int(expected_items)
    p = float(error_rate)
    m = int(math.ceil(-n * math.log(p) / (math.log(2) ** 2)))
    k = max(1, int(round((m / n) * math.log(2))))
    params = FilterParameters(m=m, k=k, expected_items=n, error_rate=p)
    logger.info("Sized filter for n=%d p=%.4f: m=%d bits, k=%d", n, p, m, k)
    return params


def expected_false_positive_rate(m: int, k: int, n: int) -> float:
    """Standard approximation (1 - e^(-k*n/m))^k for n inserted items."""
    if m <= 0 or k <= 0:
        raise InvalidConfig("m and k must be positive")
    if n <= 0:
        return 0.0
    return (1.0 - math.exp(-k * n / m)) ** k
