# Overview: Request hooks for request ids, per-client rate limiting and request logging.

from __future__ import annotations

import secrets
import threading
import time

from flask import Flask, current_app, g, request

from .routes.responses import error

REQUEST_ID_HEADER = "X-Request-ID"


class RateLimiter:
    """
    Per-client token bucket.

    Each client starts with `burst` tokens and regains `rate` tokens per
    second up to `burst`. A request costs one token. Buckets idle for longer
    than `idle_seconds` are dropped on the next sweep.
    """

    def __init__(self, rate: float, burst: int, idle_seconds: float = 180, clock=time.monotonic):
        self.rate = float(rate)
        self.burst = int(burst)
        self.idle_seconds = idle_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._buckets: dict[str, tuple[float, float]] = {}  # key -> (tokens, last_seen)
        self._last_sweep = clock()

    def allow(self, key: str) -> bool:
        with self._lock:
            now = self._clock()
            self._sweep(now)

            tokens, last_seen = self._buckets.get(key, (float(self.burst), now))
            tokens = min(float(self.burst), tokens + (now - last_seen) * self.rate)

            if tokens < 1:
                self._buckets[key] = (tokens, now)
                return False

            self._buckets[key] = (tokens - 1, now)
            return True

    def _sweep(self, now: float) -> None:
        if now - self._last_sweep < self.idle_seconds:
            return
        self._last_sweep = now
        stale = [k for k, (_, seen) in self._buckets.items() if now - seen > self.idle_seconds]
        for k in stale:
            del self._buckets[k]

    def __len__(self) -> int:
        with self._lock:
            return len(self._buckets)


def client_ip() -> str:
    """X-Forwarded-For, then X-Real-IP, then the socket address."""
    forwarded = request.headers.get("X-Forwarded-For", "")
    if forwarded.strip():
        return forwarded.split(",")[0].strip()
    real_ip = request.headers.get("X-Real-IP", "")
    if real_ip.strip():
        return real_ip.strip()
    return request.remote_addr or "unknown"


def register_middleware(app: Flask) -> None:
    limiter = None
    if app.config.get("RATE_LIMIT_ENABLED", True):
        limiter = RateLimiter(
            rate=app.config["RATE_LIMIT_RPS"],
            burst=app.config["RATE_LIMIT_BURST"],
            idle_seconds=app.config.get("RATE_LIMIT_IDLE_SECONDS", 180),
        )
    app.extensions["kasir.rate_limiter"] = limiter

    @app.before_request
    def assign_request_id():
        g.request_id = request.headers.get(REQUEST_ID_HEADER) or secrets.token_hex(8)
        g.request_started = time.perf_counter()

    @app.before_request
    def enforce_rate_limit():
        if limiter is not None and not limiter.allow(client_ip()):
            return error("Rate limit exceeded. Please try again later.", 429)
        return None

    @app.after_request
    def finish_request(response):
        request_id = getattr(g, "request_id", None)
        if request_id:
            response.headers[REQUEST_ID_HEADER] = request_id
        started = getattr(g, "request_started", None)
        elapsed_ms = (time.perf_counter() - started) * 1000 if started is not None else 0.0
        current_app.logger.info(
            "%s %s %s %.2fms request_id=%s",
            request.method, request.path, response.status_code, elapsed_ms, request_id,
        )
        return response

    @app.errorhandler(413)
    def payload_too_large(_e):
        return error("Request body too large", 413)

    @app.errorhandler(404)
    def not_found(_e):
        return error("Not found", 404)

    @app.errorhandler(405)
    def method_not_allowed(_e):
        return error("Method not allowed", 405)
