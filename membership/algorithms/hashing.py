import hashlib
from typing import Callable, List, Optional, Protocol, Tuple

from membership.errors import InvalidConfig

DIGEST_SIZE = 16
DIGEST_BITS = DIGEST_SIZE * 8

PrimaryHash = Callable[[bytes], int]


def to_bytes(item) -> bytes:
    """Items are hashed as opaque byte sequences; non-bytes are UTF-8 encoded via str()."""
    if isinstance(item, (bytes, bytearray)):
        return bytes(item)
    return str(item).encode("utf-8", errors="surrogatepass")


def to_unsigned(value: int, bits: int = DIGEST_BITS) -> int:
    """Reinterpret a possibly signed hash value as an unsigned integer of the given width."""
    if value < 0:
        return value & ((1 << bits) - 1)
    return value


def _digest_int(digest: bytes) -> int:
    return int.from_bytes(digest[:DIGEST_SIZE], "big")


def blake2b_hash(data: bytes, key: bytes = b"") -> int:
    return _digest_int(hashlib.blake2b(data, digest_size=DIGEST_SIZE, key=key).digest())


def named_hash(algorithm: str, data: bytes, salt: bytes = b"") -> int:
    return _digest_int(hashlib.new(algorithm, salt + data).digest())


def derive_indices(h1: int, h2: int, k: int, m: int) -> List[int]:
    """
    Kirsch-Mitzenmacher double hashing: index_i = (h1 + i * h2) mod m for i in 0..k-1.

    Only a valid stand-in for k independent hashes when h2 is computed from the
    input itself rather than from h1.
    """
    h1 = to_unsigned(h1)
    h2 = to_unsigned(h2)
    return [(h1 + i * h2) % m for i in range(k)]


class HashPair(Protocol):
    def base_hashes(self, data: bytes) -> Tuple[int, int]:
        ...


class IndependentHashPair:
    """
    Two base hashes computed directly from the input bytes.

    By default both come from BLAKE2b under distinct keys. Passing
    ``algorithms=("md5", "sha1")`` uses two distinct hashlib algorithms instead.
    ``primary`` replaces the first hash only (used to force h1 collisions).
    """

    def __init__(
        self,
        seed: int = 0,
        algorithms: Optional[Tuple[str, str]] = None,
        primary: Optional[PrimaryHash] = None,
    ) -> None:
        self.seed = int(seed)
        if algorithms is not None:
            first, second = algorithms
            if first == second:
                raise InvalidConfig("independent hashing needs two distinct algorithms")
            for name in algorithms:
                if name not in hashlib.algorithms_available:
                    raise InvalidConfig(f"unknown hash algorithm: {name}")
        self.algorithms = algorithms
        self.primary = primary
        suffix = b"" if self.seed == 0 else f":{self.seed}".encode()
        self._keys = (b"h1" + suffix, b"h2" + suffix)
        self._salt = self.seed.to_bytes(8, "big", signed=True) if self.seed else b""

    def _h1(self, data: bytes) -> int:
        if self.primary is not None:
            return to_unsigned(self.primary(data))
        if self.algorithms is not None:
            return named_hash(self.algorithms[0], data, self._salt)
        return blake2b_hash(data, key=self._keys[0])

    def _h2(self, data: bytes) -> int:
        if self.algorithms is not None:
            return named_hash(self.algorithms[1], data, self._salt)
        return blake2b_hash(data, key=self._keys[1])

    def base_hashes(self, data: bytes) -> Tuple[int, int]:
        return self._h1(data), self._h2(data)

    def narrowed(self, modulus: int = 256) -> "IndependentHashPair":
        """Same pair with h1 reduced mod `modulus`, so distinct inputs collide on h1."""
        return IndependentHashPair(
            seed=self.seed,
            algorithms=self.algorithms,
            primary=lambda data: self._h1(data) % modulus,
        )

    def __repr__(self) -> str:
        algos = self.algorithms or ("blake2b/h1", "blake2b/h2")
        return f"IndependentHashPair(seed={self.seed}, algorithms={algos})"


class CorrelatedHashPair:
    """
    Derives h2 by re-hashing h1, so h2 depends on the input only through h1.

    This is the independence defect: two inputs that collide on h1 also share
    h2 and therefore every derived index. Kept for experiments and tests.
    """

    def __init__(self, primary: Optional[PrimaryHash] = None, rehash: str = "sha256", seed: int = 0) -> None:
        self.primary = primary
        self.rehash = rehash
        self.seed = int(seed)
        self._key = b"h1" if self.seed == 0 else f"h1:{self.seed}".encode()

    def _h1(self, data: bytes) -> int:
        if self.primary is not None:
            return to_unsigned(self.primary(data))
        return blake2b_hash(data, key=self._key)

    def base_hashes(self, data: bytes) -> Tuple[int, int]:
        h1 = self._h1(data)
        h1_bytes = h1.to_bytes(max(1, (h1.bit_length() + 7) // 8), "big")
        h2 = named_hash(self.rehash, h1_bytes)
        return h1, h2

    def narrowed(self, modulus: int = 256) -> "CorrelatedHashPair":
        """Same pair with h1 reduced mod `modulus`, so distinct inputs collide on h1."""
        return CorrelatedHashPair(
            primary=lambda data: self._h1(data) % modulus,
            rehash=self.rehash,
            seed=self.seed,
        )

    def __repr__(self) -> str:
        return f"CorrelatedHashPair(seed={self.seed}, rehash={self.rehash})"
