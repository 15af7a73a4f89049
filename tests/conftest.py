import matplotlib

matplotlib.use("Agg")

import pytest


@pytest.fixture
def word_list_file(tmp_path):
    path = tmp_path / "bad_words.txt"
    lines = ["# bad words", ""] + [f"badword{i}" for i in range(50)] + ["BadWord3", "darn", "heck"]
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path
