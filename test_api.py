"""Tests for the HTTP API using Flask's test client."""

import io

import cv2
import numpy as np
import pytest

from api import create_app


class FakeClassifier:
    def __init__(self, candidates=None, error=None):
        self.candidates = candidates or []
        self.error = error
        self.frames = []

    def classify(self, frame):
        self.frames.append(frame)
        if self.error:
            raise self.error
        return self.candidates


def png_bytes():
    ok, buf = cv2.imencode(".png", np.zeros((32, 64, 3), dtype=np.uint8))
    assert ok
    return buf.tobytes()


@pytest.fixture
def client():
    return create_app().test_client()


def observe(client, *candidates):
    return client.post("/api/observe", json={
        "candidates": [{"label": lbl, "confidence": conf} for lbl, conf in candidates]
    })


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.get_json() == {"status": "ok"}


def test_observe_confirms_and_reports_events(client):
    first = observe(client, ("10-tl", 0.97)).get_json()
    assert first["events"] == []
    assert first["result"]["path"] == "FAST"
    assert first["result"]["meets_threshold"]

    second = observe(client, ("10-tl", 0.97)).get_json()
    assert second["confirmed_label"] == "10-tl"
    assert [e["kind"] for e in second["events"]] == ["confirmed"]
    assert second["events"][0]["route"] == "fast"

    third = observe(client, ("10-tl", 0.97)).get_json()
    assert third["events"] == []


def test_observe_rejects_bad_body(client):
    assert client.post("/api/observe", json={"candidates": "nope"}).status_code == 400
    assert client.post("/api/observe", data="not json").status_code == 400


def test_observe_skips_malformed_candidates(client):
    resp = client.post("/api/observe", json={"candidates": [{"label": 5}, {"label": "5-tl"}]})
    body = resp.get_json()
    assert resp.status_code == 200
    assert body["result"]["path"] == "SKIPPED"


def test_pause_and_resume(client):
    observe(client, ("10-tl", 0.97))
    observe(client, ("10-tl", 0.97))

    paused = client.post("/api/pause").get_json()
    assert paused["changed"]
    assert [e["kind"] for e in paused["events"]] == ["cleared"]
    assert paused["state"]["label_history"] == ["10-tl", "10-tl"]

    assert observe(client, ("10-tl", 0.97)).status_code == 409

    resumed = client.post("/api/resume").get_json()
    assert resumed["state"]["status"] == "ACTIVE"

    observe(client, ("10-tl", 0.97))
    body = observe(client, ("10-tl", 0.97)).get_json()
    assert body["confirmed_label"] == "10-tl"


def test_pause_can_clear_history(client):
    observe(client, ("10-tl", 0.97))
    state = client.post("/api/pause?clear_history=1").get_json()["state"]
    assert state["label_history"] == []


def test_classify_without_classifier(client):
    resp = client.post("/api/classify", data={"image": (io.BytesIO(png_bytes()), "note.png")},
                       content_type="multipart/form-data")
    assert resp.status_code == 503


def test_classify_returns_candidates():
    classifier = FakeClassifier([("5-tl", 0.9), ("10-tl", 0.05)])
    client = create_app(classifier).test_client()

    resp = client.post("/api/classify", data={"image": (io.BytesIO(png_bytes()), "note.png")},
                       content_type="multipart/form-data")

    assert resp.status_code == 200
    assert resp.get_json()["candidates"][0] == {"label": "5-tl", "confidence": 0.9}
    assert classifier.frames[0].shape == (32, 64, 3)


def test_classify_requires_image():
    client = create_app(FakeClassifier()).test_client()

    assert client.post("/api/classify").status_code == 400
    resp = client.post("/api/classify", data={"image": (io.BytesIO(b"garbage"), "x.png")},
                       content_type="multipart/form-data")
    assert resp.status_code == 400


def test_classify_failure_is_reported():
    client = create_app(FakeClassifier(error=RuntimeError("boom"))).test_client()
    resp = client.post("/api/classify", data={"image": (io.BytesIO(png_bytes()), "note.png")},
                       content_type="multipart/form-data")
    assert resp.status_code == 500
