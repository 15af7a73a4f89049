import pytest

from membership.algorithms.bloom_filter import BloomFilter
from membership.algorithms.hashing import CorrelatedHashPair
from membership.evaluation import (
    FalsePositiveExperiment,
    false_negatives,
    measure_false_positive_rate,
    random_probes,
    run_experiment,
)


def test_random_probes_are_distinct_and_exclude_members():
    probes = random_probes(500, exclude=["aaaa"], length=4, seed=3)
    assert len(probes) == len(set(probes)) == 500
    assert "aaaa" not in probes
    assert probes == random_probes(500, exclude=["aaaa"], length=4, seed=3)


def test_random_probes_rejects_negative_count():
    with pytest.raises(ValueError):
        random_probes(-1)


def test_measure_on_empty_filter_and_empty_probes():
    bloom = BloomFilter(100, 3)
    assert measure_false_positive_rate(bloom, random_probes(100)) == 0.0
    assert measure_false_positive_rate(bloom, []) == 0.0


def test_false_negatives_always_empty():
    bloom = BloomFilter(50, 4)
    words = [f"w{i}" for i in range(100)]
    bloom.add_many(words)
    assert false_negatives(bloom, words) == []


def test_experiment_snapshots():
    words = [f"badword-{i}" for i in range(300)]
    result = run_experiment(words, m=2000, k=7, probe_count=10_000, checkpoints=6)
    assert result["false_negatives"] == 0
    assert result["inserted"] == 300
    assert [s["inserted"] for s in result["snapshots"]] == [50, 100, 150, 200, 250, 300]
    fills = [s["fill_ratio"] for s in result["snapshots"]]
    assert fills == sorted(fills)
    assert result["observed_fp_rate"] < 3 * 0.02


def test_correlated_hashing_inflates_false_positives():
    first_byte = lambda data: data[0] if data else 0
    words = [f"a{i}" for i in range(50)]
    probes = [f"a-probe-{i}" for i in range(200)]
    experiment = FalsePositiveExperiment(1 << 16, 7, hash_pair=CorrelatedHashPair(primary=first_byte))
    result = experiment.run(words, checkpoints=1, probes=probes)
    assert result["observed_fp_rate"] == 1.0
    assert result["false_negatives"] == 0


def test_snapshot_count_matches_checkpoints_when_uneven():
    words = [f"w{i}" for i in range(52)]
    result = run_experiment(words, m=1000, k=3, probe_count=50, checkpoints=5)
    assert [s["inserted"] for s in result["snapshots"]] == [11, 21, 32, 42, 52]


def test_more_checkpoints_than_words():
    result = run_experiment(["a", "b", "c"], m=100, k=2, probe_count=10, checkpoints=10)
    assert [s["inserted"] for s in result["snapshots"]] == [1, 2, 3]
