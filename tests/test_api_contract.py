from fastapi.testclient import TestClient

from topk_classifier.api import app


client = TestClient(app)

LABELS = {"0": "cat", "1": "dog", "2": "bird"}


def test_health_endpoint():
    resp = client.get("/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "healthy"


def test_classify_returns_ranked_classes():
    resp = client.post("/classify", json={"scores": [1.0, 2.0, 3.0], "top_k": 2, "labels": LABELS})
    assert resp.status_code == 200
    data = resp.json()
    assert list(data["classes"]) == ["bird", "dog"]
    assert [r["index"] for r in data["ranking"]] == [2, 1]
    assert abs(data["classes"]["bird"] - 0.665) < 1e-3


def test_classify_uses_default_label_table(monkeypatch):
    monkeypatch.setattr("topk_classifier.api._label_table", {1: "a", 2: "b"})
    resp = client.post("/classify", json={"scores": [0.3, 0.1], "top_k": 2, "offset": 1})
    assert resp.status_code == 200
    assert set(resp.json()["classes"]) == {"a", "b"}


def test_classify_without_any_labels_is_unavailable(monkeypatch):
    monkeypatch.setattr("topk_classifier.api._label_table", {})
    resp = client.post("/classify", json={"scores": [0.3, 0.1], "top_k": 1})
    assert resp.status_code == 503


def test_k_larger_than_vector_is_400():
    resp = client.post("/classify", json={"scores": [1.0, 2.0], "top_k": 3, "labels": LABELS})
    assert resp.status_code == 400
    assert resp.json()["detail"]["error"] == "invalid_input"


def test_missing_label_is_404():
    resp = client.post("/classify", json={"scores": [1.0, 2.0, 3.0], "top_k": 1, "labels": {"0": "cat"}})
    assert resp.status_code == 404
    assert resp.json()["detail"]["error"] == "label_lookup_error"


def test_nan_score_is_numeric_error():
    body = '{"scores": [NaN, 1.0], "top_k": 1, "labels": {"0": "a", "1": "b"}}'
    resp = client.post("/classify", content=body, headers={"Content-Type": "application/json"})
    assert resp.status_code == 422
    assert resp.json()["detail"]["error"] == "numeric_error"


def test_negative_top_k_rejected_by_schema():
    resp = client.post("/classify", json={"scores": [1.0], "top_k": -1, "labels": LABELS})
    assert resp.status_code == 422


def test_startup_loads_configured_label_table(monkeypatch, tmp_path):
    from topk_classifier import _singletons, api

    path = tmp_path / "labels.txt"
    path.write_text("cat\ndog\n", encoding="utf-8")
    monkeypatch.setattr(_singletons, "LABELS_PATH", path)
    monkeypatch.setattr(api, "_label_table", {})
    _singletons.get_label_table.cache_clear()
    try:
        api.startup_event()
        resp = client.get("/health")
        assert resp.json()["labels_loaded"] == 2
    finally:
        _singletons.get_label_table.cache_clear()


def test_bad_parameters_without_labels_are_still_400(monkeypatch):
    monkeypatch.setattr("topk_classifier.api._label_table", {})
    resp = client.post("/classify", json={"scores": [1.0, 2.0], "top_k": 5})
    assert resp.status_code == 400
    assert resp.json()["detail"]["error"] == "invalid_input"


def test_nan_scores_without_labels_are_numeric_error(monkeypatch):
    monkeypatch.setattr("topk_classifier.api._label_table", {})
    body = '{"scores": [NaN, 1.0], "top_k": 1}'
    resp = client.post("/classify", content=body, headers={"Content-Type": "application/json"})
    assert resp.status_code == 422
    assert resp.json()["detail"]["error"] == "numeric_error"


def test_k_zero_without_labels_is_empty(monkeypatch):
    monkeypatch.setattr("topk_classifier.api._label_table", {})
    resp = client.post("/classify", json={"scores": [1.0, 2.0], "top_k": 0})
    assert resp.status_code == 200
    assert resp.json()["classes"] == {}
