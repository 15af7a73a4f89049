import pytest

from membership import BloomFilter, InvalidConfig
from membership.algorithms.hashing import IndependentHashPair
from membership.evaluation import measure_false_positive_rate, random_probes


@pytest.mark.parametrize("m,k", [(0, 3), (10, 0), (-1, 3), (10, -5), (0.5, 3), (10, 0.5), (10.0, 3)])
def test_invalid_config(m, k):
    with pytest.raises(InvalidConfig):
        BloomFilter(m, k)


def test_invalid_config_is_value_error():
    with pytest.raises(ValueError):
        BloomFilter(0, 1)


def test_m_and_k_are_read_only():
    bloom = BloomFilter(64, 3)
    with pytest.raises(AttributeError):
        bloom.m = 128
    with pytest.raises(AttributeError):
        bloom.k = 1


def test_no_false_negatives_after_more_inserts():
    bloom = BloomFilter(512, 4)
    bloom.add("first")
    assert bloom.might_contain("first")
    for i in range(200):
        bloom.add(f"other-{i}")
        assert "first" in bloom
    assert all(bloom.might_contain(f"other-{i}") for i in range(200))


def test_queries_are_deterministic():
    bloom = BloomFilter(256, 5)
    bloom.add_many(["a", "b", "c"])
    for item in ["a", "z", "", "longer item"]:
        results = {bloom.might_contain(item) for _ in range(5)}
        assert len(results) == 1


def test_set_bits_are_monotonic():
    bloom = BloomFilter(128, 3)
    previous = bloom.set_bit_count
    for i in range(100):
        bloom.add(str(i))
        assert bloom.set_bit_count >= previous
        previous = bloom.set_bit_count
    assert bloom.inserted_count == 100


def test_empty_filter_rejects_everything():
    bloom = BloomFilter(100, 3)
    assert bloom.set_bit_count == 0
    assert not any(bloom.bits())
    for item in ["", "a", "hello", b"\x00\xff", "x" * 1000]:
        assert not bloom.might_contain(item)


def test_indices_within_bounds():
    bloom = BloomFilter(10, 3)
    for i in range(1000):
        idx = bloom.indices(f"item-{i}")
        assert len(idx) == 3
        assert all(0 <= x < 10 for x in idx)


def test_signed_primary_hash_gives_valid_indices():
    bloom = BloomFilter(10, 3, hash_pair=IndependentHashPair(primary=lambda data: -len(data) - 1))
    for item in ["", "a", "abc"]:
        assert all(0 <= x < 10 for x in bloom.indices(item))
        bloom.add(item)
        assert item in bloom


def test_empty_string_and_bytes_are_valid_items():
    bloom = BloomFilter(64, 3)
    bloom.add("")
    bloom.add(b"raw bytes")
    assert bloom.might_contain("")
    assert bloom.might_contain(b"raw bytes")
    # str and its UTF-8 bytes hash identically
    assert bloom.indices("raw bytes") == bloom.indices(b"raw bytes")


def test_bits_snapshot_is_a_copy():
    bloom = BloomFilter(16, 2)
    bloom.add("x")
    snapshot = bloom.bits()
    snapshot[:] = [False] * 16
    assert bloom.might_contain("x")
    assert sum(bloom.bits()) == bloom.set_bit_count


def test_fill_ratio_and_estimate():
    bloom = BloomFilter(8, 1, hash_pair=IndependentHashPair(primary=lambda data: 0))
    bloom.add("anything")
    assert bloom.set_bit_count == 1
    assert bloom.fill_ratio == pytest.approx(1 / 8)
    assert bloom.estimated_false_positive_rate == pytest.approx(1 / 8)


def test_from_expected_exposes_parameters(caplog):
    with caplog.at_level("INFO", logger="membership"):
        bloom = BloomFilter.from_expected(1000, 0.01)
    assert bloom.parameters is not None
    assert (bloom.m, bloom.k) == (bloom.parameters.m, bloom.parameters.k)
    assert "m=9586" in caplog.text


def test_end_to_end_false_positive_rate():
    words = [f"badword-{i}" for i in range(300)]
    bloom = BloomFilter(2000, 7)
    bloom.add_many(words)
    assert all(w in bloom for w in words)

    probes = random_probes(10_000, exclude=words, seed=1)
    observed = measure_false_positive_rate(bloom, probes)
    assert observed < 3 * 0.02
