import json

import numpy as np

from topk_classifier.cli import main


def _write_labels(tmp_path):
    path = tmp_path / "labels.json"
    path.write_text(json.dumps({"0": "cat", "1": "dog", "2": "bird"}), encoding="utf-8")
    return path


def test_cli_prints_ranked_labels(tmp_path, capsys):
    scores = tmp_path / "scores.json"
    scores.write_text("[1.0, 2.0, 3.0]", encoding="utf-8")
    code = main(["--scores", str(scores), "--labels", str(_write_labels(tmp_path)), "-k", "2"])
    assert code == 0
    lines = capsys.readouterr().out.strip().splitlines()
    assert lines[0].startswith("bird\t")
    assert lines[1].startswith("dog\t")


def test_cli_reads_npy(tmp_path, capsys):
    scores = tmp_path / "scores.npy"
    np.save(scores, np.array([3.0, 1.0, 2.0]))
    code = main(["--scores", str(scores), "--labels", str(_write_labels(tmp_path)), "-k", "1"])
    assert code == 0
    assert capsys.readouterr().out.startswith("cat\t")


def test_cli_exit_code_on_invalid_k(tmp_path):
    scores = tmp_path / "scores.json"
    scores.write_text("[1.0, 2.0]", encoding="utf-8")
    code = main(["--scores", str(scores), "--labels", str(_write_labels(tmp_path)), "-k", "5"])
    assert code == 2
