from __future__ import annotations

import sys

import pytest
from fastapi.testclient import TestClient


def _purge_api_modules() -> None:
    for name in [
        "api.main",
        "api.routes",
        "api.ratelimit",
    ]:
        sys.modules.pop(name, None)


def _build_client(monkeypatch, env_overrides: dict[str, str] | None = None) -> TestClient:
    monkeypatch.setenv("APP_ENV", "test")
    monkeypatch.setenv("CORS_ORIGINS", "http://localhost:5173")
    for key in ("HEAT_GRID_PATH", "AGE_GRADE_PATH", "CV_MODEL_PATH", "RATE_LIMIT_ENABLED", "COMPUTE_RATE_LIMIT"):
        monkeypatch.delenv(key, raising=False)
    if env_overrides:
        for key, value in env_overrides.items():
            monkeypatch.setenv(key, value)

    from runpace.config import get_settings

    get_settings.cache_clear()
    _purge_api_modules()

    from api.main import create_app

    return TestClient(create_app())


@pytest.fixture(autouse=True)
def _reset_settings():
    yield
    from runpace.config import get_settings

    get_settings.cache_clear()


def test_health_echoes_or_generates_request_id_header(monkeypatch):
    with _build_client(monkeypatch) as client:
        custom_request_id = "req-test-123"
        resp = client.get("/api/v1/health", headers={"X-Request-ID": custom_request_id})
        assert resp.status_code == 200, resp.text
        assert resp.json() == {"status": "ok"}
        assert resp.headers["X-Request-ID"] == custom_request_id

        generated = client.get("/api/v1/health")
        assert generated.status_code == 200, generated.text
        assert generated.headers.get("X-Request-ID")


def test_pacing_with_every_stressor(monkeypatch):
    with _build_client(monkeypatch) as client:
        resp = client.post("/api/v1/pacing", json={
            "distance_m": 5000,
            "time_seconds": "20:00",
            "temp_c": 22,
            "dew_c": 16,
            "wind_kmh": 15,
            "base_altitude_m": 0,
            "target_altitude_m": 1500,
        })
        assert resp.status_code == 200, resp.text
        body = resp.json()
        assert body["valid"] is True
        assert body["vdot"] == pytest.approx(49.8, abs=0.1)
        assert body["heat"]["valid"] is True
        assert body["heat"]["impact_percent"] == pytest.approx(3.9, abs=0.01)
        assert body["heat_category"] == "Warning"
        assert body["headwind"]["impact_percent"] > 0
        assert body["tailwind"]["impact_percent"] < 0
        assert body["altitude"]["valid"] is True
        assert set(body["paces"]) == {"threshold", "p10min", "p6min", "p3min", "p1min", "easy"}
        assert body["paces_display"]["easy"] == "5:43/km"


def test_pacing_zero_trial_is_not_an_error(monkeypatch):
    with _build_client(monkeypatch) as client:
        resp = client.post("/api/v1/pacing", json={"distance_m": 0, "time_seconds": 0})
        assert resp.status_code == 200, resp.text
        body = resp.json()
        assert body["valid"] is False
        assert body["heat_category"] is None
        assert body["paces_display"]["threshold"] == "n/a"


def test_pacing_rejects_invalid_payload(monkeypatch):
    with _build_client(monkeypatch) as client:
        resp = client.post("/api/v1/pacing", json={"distance_m": -5, "time_seconds": 1200})
        assert resp.status_code == 422
        resp = client.post("/api/v1/pacing", json={"distance_m": 5000, "time_seconds": "soon"})
        assert resp.status_code == 422


def test_age_grade_endpoint(monkeypatch):
    with _build_client(monkeypatch) as client:
        resp = client.post("/api/v1/age-grade", json={
            "distance_m": 5000, "time_seconds": 1200, "age": 50, "gender": "male",
        })
        assert resp.status_code == 200, resp.text
        body = resp.json()
        assert body["available"] is True
        assert body["result"]["class_label"] == "Regional Class"
        assert body["result"]["score"] == pytest.approx(71.16, abs=0.05)

        missing = client.post("/api/v1/age-grade", json={
            "distance_m": 5000, "time_seconds": 1200, "age": 10, "gender": "F",
        })
        assert missing.status_code == 200
        assert missing.json() == {"available": False, "result": None}


def test_training_range_endpoint(monkeypatch):
    with _build_client(monkeypatch) as client:
        resp = client.post("/api/v1/training-range", json={"distance_m": 5000, "time_seconds": 1200})
        assert resp.status_code == 200, resp.text
        body = resp.json()
        assert body["available"] is True
        assert body["result"]["age_used"] == 25
        assert body["result"]["cv"]["median_sec_per_km"] == pytest.approx(252.63, abs=0.01)
        assert body["threshold_range"]["faster_sec_per_km"] < body["threshold_range"]["slower_sec_per_km"]

        slow = client.post("/api/v1/training-range", json={"distance_m": 800, "time_seconds": 19200})
        assert slow.json()["available"] is False


def test_wbgt_endpoint(monkeypatch):
    with _build_client(monkeypatch) as client:
        resp = client.post("/api/v1/wbgt", json={"temp_c": 20, "humidity_pct": 50})
        assert resp.status_code == 200, resp.text
        body = resp.json()
        assert body["wbgt_c"] == pytest.approx(15.6, abs=0.05)
        assert body["globe_c"] == 20
        assert body["risk"] == "Low"


def test_altitude_impact_is_cached(monkeypatch):
    with _build_client(monkeypatch) as client:
        assert client.app.state.cache_backend == "memory"
        first = client.get("/api/v1/altitude/impact", params={"target_m": 2000})
        second = client.get("/api/v1/altitude/impact", params={"target_m": 2000})
        assert first.status_code == 200, first.text
        assert first.json() == second.json()
        assert first.json()["applied"] is True
        assert first.json()["impact_pct"] == pytest.approx(16.29, abs=0.1)

        small = client.get("/api/v1/altitude/impact", params={"base_m": 1000, "target_m": 1050})
        assert small.json()["applied"] is False


def test_equivalents_endpoint(monkeypatch):
    with _build_client(monkeypatch) as client:
        resp = client.get("/api/v1/equivalents", params={"distance_m": 5000, "time": "20:00"})
        assert resp.status_code == 200, resp.text
        body = resp.json()
        assert body["available"] is True
        assert len(body["items"]) == 19
        assert body["items"][0]["distance_label"] == "50 km"

        by_seconds = client.get("/api/v1/equivalents", params={"distance_m": 5000, "time_seconds": 1200})
        assert by_seconds.json()["items"] == body["items"]

        assert client.get("/api/v1/equivalents", params={"distance_m": 5000}).status_code == 422
        assert client.get("/api/v1/equivalents", params={"distance_m": 5000, "time": "abc"}).status_code == 422


def test_compute_rate_limit_returns_429_when_enabled(monkeypatch):
    env = {
        "APP_ENV": "dev",
        "RATE_LIMIT_ENABLED": "true",
        "COMPUTE_RATE_LIMIT": "2/minute",
    }
    with _build_client(monkeypatch, env_overrides=env) as client:
        for _ in range(2):
            resp = client.post("/api/v1/wbgt", json={"temp_c": 20, "humidity_pct": 50})
            assert resp.status_code == 200, resp.text
        limited = client.post("/api/v1/wbgt", json={"temp_c": 20, "humidity_pct": 50})
        assert limited.status_code == 429, limited.text
        assert limited.json()["detail"]["code"] == "RATE_LIMITED"


def test_docs_hidden_in_production(monkeypatch):
    with _build_client(monkeypatch, env_overrides={"APP_ENV": "production"}) as client:
        assert client.app.openapi_url is None
        assert client.get("/docs").status_code == 404
        assert client.get("/api/v1/health").status_code == 200


def test_docs_served_outside_production(monkeypatch):
    with _build_client(monkeypatch) as client:
        assert client.app.docs_url == "/docs"
        assert client.app.openapi_url == "/openapi.json"
