import logging

import pytest

from kasir import create_app
from kasir.middleware import REQUEST_ID_HEADER, RateLimiter


class FakeClock:
    def __init__(self, start=1000.0):
        self.value = start

    def advance(self, seconds):
        self.value += seconds

    def __call__(self):
        return self.value


class TestRateLimiter:
    def test_burst_then_reject(self):
        limiter = RateLimiter(rate=1, burst=3, clock=FakeClock())

        assert [limiter.allow("a") for _ in range(4)] == [True, True, True, False]

    def test_refills_over_time(self):
        clock = FakeClock()
        limiter = RateLimiter(rate=2, burst=2, clock=clock)
        limiter.allow("a")
        limiter.allow("a")
        assert limiter.allow("a") is False

        clock.advance(0.5)

        assert limiter.allow("a") is True
        assert limiter.allow("a") is False

    def test_refill_capped_at_burst(self):
        clock = FakeClock()
        limiter = RateLimiter(rate=10, burst=2, clock=clock)
        limiter.allow("a")

        clock.advance(60)

        assert [limiter.allow("a") for _ in range(3)] == [True, True, False]

    def test_clients_are_independent(self):
        limiter = RateLimiter(rate=1, burst=1, clock=FakeClock())

        assert limiter.allow("a") is True
        assert limiter.allow("a") is False
        assert limiter.allow("b") is True

    def test_idle_buckets_swept(self):
        clock = FakeClock()
        limiter = RateLimiter(rate=1, burst=1, idle_seconds=180, clock=clock)
        limiter.allow("a")
        limiter.allow("b")
        assert len(limiter) == 2

        clock.advance(181)
        limiter.allow("c")

        assert len(limiter) == 1


@pytest.fixture()
def limited_client():
    app = create_app({
        "TESTING": True,
        "LOG_LEVEL": "WARNING",
        "RATE_LIMIT_ENABLED": True,
        "RATE_LIMIT_RPS": 0.001,
        "RATE_LIMIT_BURST": 2,
    })
    return app.test_client()


class TestRateLimitHook:
    def test_third_request_is_429(self, limited_client):
        assert limited_client.get("/health").status_code == 200
        assert limited_client.get("/health").status_code == 200

        response = limited_client.get("/health")

        assert response.status_code == 429
        assert response.get_json() == {
            "status": "ERROR",
            "message": "Rate limit exceeded. Please try again later.",
        }

    def test_keyed_by_forwarded_client(self, limited_client):
        headers_a = {"X-Forwarded-For": "10.0.0.1, 172.16.0.1"}
        headers_b = {"X-Real-IP": "10.0.0.2"}
        for _ in range(2):
            limited_client.get("/health", headers=headers_a)

        assert limited_client.get("/health", headers=headers_a).status_code == 429
        assert limited_client.get("/health", headers=headers_b).status_code == 200

    def test_disabled_limiter(self, app, client):
        assert app.extensions["kasir.rate_limiter"] is None
        assert all(client.get("/health").status_code == 200 for _ in range(50))


class TestRequestHooks:
    def test_request_id_generated(self, client):
        response = client.get("/health")

        request_id = response.headers.get(REQUEST_ID_HEADER)
        assert request_id
        assert len(request_id) == 16

    def test_request_id_echoed(self, client):
        response = client.get("/api/categories", headers={REQUEST_ID_HEADER: "abc-123"})

        assert response.headers[REQUEST_ID_HEADER] == "abc-123"

    def test_request_logged(self, app, client, caplog):
        app.logger.setLevel(logging.INFO)

        with caplog.at_level(logging.INFO, logger=app.logger.name):
            client.get("/health", headers={REQUEST_ID_HEADER: "req-1"})

        assert any("GET /health 200" in r.getMessage() and "request_id=req-1" in r.getMessage()
                   for r in caplog.records)

    def test_body_too_large_is_413(self):
        app = create_app({"TESTING": True, "RATE_LIMIT_ENABLED": False, "MAX_CONTENT_LENGTH": 64})
        client = app.test_client()

        response = client.post("/api/categories", json={"name": "x" * 200})

        assert response.status_code == 413
        assert response.get_json() == {"status": "ERROR", "message": "Request body too large"}

    def test_method_not_allowed(self, client):
        response = client.patch("/api/categories")

        assert response.status_code == 405
        assert response.get_json()["status"] == "ERROR"
