from __future__ import annotations

from fastapi.testclient import TestClient

from devsel.app.main import create_app
from devsel.app.settings import Settings


def _build_test_app(default_backend: str = "sycl"):
    settings = Settings(host="127.0.0.1", port=8686, default_backend=default_backend)
    return create_app(settings=settings)


def test_api_smoke_endpoints():
    app = _build_test_app()
    with TestClient(app) as client:
        health = client.get("/healthz")
        assert health.status_code == 200
        assert health.json()["ok"] is True

        backends = client.get("/api/v1/system/backends")
        assert backends.status_code == 200
        sycl = backends.json()["backends"][0]
        assert sycl == {
            "family": "sycl",
            "variable_name": "ONEAPI_DEVICE_SELECTOR",
            "value_prefix": "level_zero:",
        }

        selector = client.post(
            "/api/v1/selectors/env",
            json={
                "devices": [
                    {"id": "0", "library": "sycl"},
                    {"id": "1", "library": "cuda"},
                    {"id": "2", "library": "sycl"},
                ],
            },
        )
        assert selector.status_code == 200
        assert selector.json() == {"name": "ONEAPI_DEVICE_SELECTOR", "value": "level_zero:0,2"}


def test_selector_env_empty_list_uses_default_backend():
    with TestClient(_build_test_app(default_backend="cuda")) as client:
        resp = client.post("/api/v1/selectors/env", json={"devices": []})
        assert resp.status_code == 200
        assert resp.json() == {"name": "CUDA_VISIBLE_DEVICES", "value": ""}

        explicit = client.post("/api/v1/selectors/env", json={"devices": [], "backend": "sycl"})
        assert explicit.json() == {"name": "ONEAPI_DEVICE_SELECTOR", "value": "level_zero:"}


def test_selector_env_rejects_unknown_backend():
    with TestClient(_build_test_app()) as client:
        resp = client.post("/api/v1/selectors/env", json={"devices": [], "backend": "metal"})
        assert resp.status_code == 400
        assert "metal" in resp.json()["detail"]


def test_selector_env_rejects_malformed_descriptor():
    with TestClient(_build_test_app()) as client:
        resp = client.post("/api/v1/selectors/env", json={"devices": [{"id": "0"}]})
        assert resp.status_code == 422
