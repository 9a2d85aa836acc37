# tests/test_debug.py

from __future__ import annotations

import asyncio

import pytest

from taskpulse.services import debug


@pytest.mark.parametrize(
    "raw, expected",
    [
        (None, 3000),
        ("", 3000),
        ("abc", 3000),
        ("1500", 1500),
        ("0", 0),
        ("-20", 0),
        ("50000", 30000),
    ],
)
def test_delay_parameter_is_clamped(raw, expected) -> None:
    assert debug.clamp_param(raw, debug.DEFAULT_DELAY_MS, debug.MAX_DELAY_MS) == expected


def test_fib() -> None:
    assert [debug.fib(n) for n in range(10)] == [0, 1, 1, 2, 3, 5, 8, 13, 21, 34]
    assert debug.fib(20) == 6765


def test_slow_response_sleeps_for_delay() -> None:
    result = asyncio.run(debug.slow_response(20))
    assert result.delay_ms == 20
    assert result.message == "Slow response completed"


def test_slow_endpoint(client) -> None:
    r = client.get("/api/debug/slow", params={"delay": 25})
    assert r.status_code == 200
    body = r.json()
    assert body["message"] == "Slow response completed"
    assert body["delay_ms"] == 25
    assert body["timestamp"].endswith("Z")


def test_slow_endpoint_clamps_to_30_seconds(client, monkeypatch) -> None:
    seen = []

    async def fake_slow_response(delay_ms: int):
        seen.append(delay_ms)
        return debug.SlowResult(message="Slow response completed", delay_ms=delay_ms, timestamp="now")

    monkeypatch.setattr(debug, "slow_response", fake_slow_response)
    r = client.get("/api/debug/slow", params={"delay": 50000})
    assert r.status_code == 200
    assert r.json()["delay_ms"] == 30000
    assert seen == [30000]


def test_error_endpoint_never_succeeds(client) -> None:
    r = client.get("/api/debug/error")
    assert r.status_code == 500
    body = r.json()
    assert body["error"] == "Internal server error"
    assert "timestamp" in body
    assert "Intentional" not in r.text


def test_cpu_endpoint(client) -> None:
    r = client.get("/api/debug/cpu", params={"n": 20})
    assert r.status_code == 200
    body = r.json()
    assert body["message"] == "CPU-intensive operation completed"
    assert body["fibonacci_n"] == 20
    assert body["result"] == 6765
    assert body["duration_ms"] >= 0


def test_cpu_endpoint_clamps_to_45(client, monkeypatch) -> None:
    monkeypatch.setattr(debug, "fib", lambda n: -1)
    r = client.get("/api/debug/cpu", params={"n": 50})
    assert r.json()["fibonacci_n"] == 45


def test_db_heavy_endpoint(seeded_client) -> None:
    r = seeded_client.get("/api/debug/db-heavy")
    assert r.status_code == 200
    body = r.json()
    assert body["message"] == "Heavy DB operation completed"
    assert body["queries_executed"] == 20
    # 20 seeded rows, each query samples at most 10
    assert body["total_rows"] == 200
    assert body["duration_ms"] >= 50


def test_db_heavy_reports_storage_failure(client, broken_engine) -> None:
    client.app.state.engine = broken_engine
    r = client.get("/api/debug/db-heavy")
    assert r.status_code == 500
    assert r.json()["error"] == "Heavy DB query failed"
