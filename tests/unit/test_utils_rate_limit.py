# Import section
import time
import pytest
from fastapi import FastAPI, Depends, Request
from fastapi.testclient import TestClient
from fastapi_limiter import FastAPILimiter
from storefront.utils.rate_limit import optional_rate_limit, rate_limit_health_info


def _make_app(times=2, seconds=60):
    app = FastAPI()

    @app.post("/limited", dependencies=[Depends(optional_rate_limit(times, seconds))])
    def limited():
        return {"ok": True}

    @app.post("/limitedA", dependencies=[Depends(optional_rate_limit(times, seconds))])
    def limited_a():
        return {"ok": True}

    @app.post("/limitedB", dependencies=[Depends(optional_rate_limit(times, seconds))])
    def limited_b():
        return {"ok": True}

    @app.get("/rl_info")
    def rl_info(request: Request):
        return rate_limit_health_info(request)

    return app


@pytest.fixture
def local_fallback(monkeypatch):
    monkeypatch.setenv("LOCAL_RATE_LIMIT_FALLBACK", "1")


def test_rate_limit_fallback_blocks_after_limit(local_fallback):
    client = TestClient(_make_app(times=2, seconds=60))

    assert client.post("/limited").status_code == 200
    assert client.post("/limited").status_code == 200
    assert client.post("/limited").status_code == 429


def test_rate_limit_is_per_path_and_session(local_fallback):
    client = TestClient(_make_app(times=2, seconds=60))
    client.cookies.set("storefront_session", "some-session")

    assert client.post("/limitedA").status_code == 200
    assert client.post("/limitedA").status_code == 200
    assert client.post("/limitedA").status_code == 429

    # path B: indépendant de A
    assert client.post("/limitedB").status_code == 200
    assert client.post("/limitedB").status_code == 200
    assert client.post("/limitedB").status_code == 429

    # autre session: compteur neuf
    client.cookies.set("storefront_session", "other-session")
    assert client.post("/limitedA").status_code == 200


def test_rate_limit_resets_after_window_sleep(local_fallback):
    client = TestClient(_make_app(times=2, seconds=1))

    assert client.post("/limited").status_code == 200
    assert client.post("/limited").status_code == 200
    assert client.post("/limited").status_code == 429

    time.sleep(1.1)
    assert client.post("/limited").status_code == 200


def test_rate_limit_disabled_flag_bypasses_limit(monkeypatch):
    monkeypatch.delenv("LOCAL_RATE_LIMIT_FALLBACK", raising=False)
    app = _make_app(times=2, seconds=60)
    app.state.rate_limit_enabled = False
    client = TestClient(app)

    for _ in range(4):
        assert client.post("/limited").status_code == 200


def test_rate_limit_uninitialised_limiter_does_not_block(monkeypatch):
    monkeypatch.delenv("LOCAL_RATE_LIMIT_FALLBACK", raising=False)
    monkeypatch.setattr(FastAPILimiter, "redis", None)
    app = _make_app(times=1, seconds=60)
    app.state.rate_limit_enabled = True
    client = TestClient(app)

    assert client.post("/limited").status_code == 200
    assert client.post("/limited").status_code == 200


def test_rate_limit_health_info(monkeypatch):
    app = _make_app()
    client = TestClient(app)
    app.state.rate_limit_enabled = True

    monkeypatch.setattr(FastAPILimiter, "redis", None)
    info = client.get("/rl_info").json()
    assert info == {"enabled": True, "ready": False, "backend": None}

    monkeypatch.setattr(FastAPILimiter, "redis", object())
    info2 = client.get("/rl_info").json()
    assert info2["ready"] is True
    assert info2["backend"] == "redis"
