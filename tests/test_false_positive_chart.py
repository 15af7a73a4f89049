from plot.false_positive_chart import plot_false_positive_rate, snapshots_to_frame

SNAPSHOTS = [
    {"inserted": 20, "fill_ratio": 0.2, "observed_fp_rate": 0.01, "expected_fp_rate": 0.012},
    {"inserted": 10, "fill_ratio": 0.1, "observed_fp_rate": 0.0, "expected_fp_rate": 0.001},
]


def test_snapshots_to_frame_sorted_by_inserted():
    df = snapshots_to_frame(SNAPSHOTS)
    assert list(df.index) == [10, 20]
    assert list(df.columns) == ["fill_ratio", "observed_fp_rate", "expected_fp_rate"]


def test_plot_writes_file(tmp_path):
    out = tmp_path / "fp.png"
    df = plot_false_positive_rate(SNAPSHOTS, save_path=str(out))
    assert out.exists() and out.stat().st_size > 0
    assert len(df) == 2
