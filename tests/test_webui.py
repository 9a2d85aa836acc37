# tests/test_webui.py

from __future__ import annotations

import pytest

from taskpulse.client import ApiError
from taskpulse.webui import (
    DEBUG_OPERATIONS,
    PREVIEW_CHARS,
    DebugOperation,
    DebugRun,
    format_date,
    format_uptime,
    queue_debug_run,
    recent_tasks,
    run_debug_operation,
    task_counts,
)


def _task(i: int, status: str = "todo", priority: str = "medium") -> dict:
    return {"id": i, "title": f"t{i}", "status": status, "priority": priority}


def test_task_counts() -> None:
    tasks = [
        _task(1, "todo", "critical"),
        _task(2, "in_progress"),
        _task(3, "done", "critical"),
        _task(4, "done"),
    ]
    assert task_counts(tasks) == {"total": 4, "todo": 1, "in_progress": 1, "done": 2, "critical": 2}
    assert task_counts([])["total"] == 0


def test_recent_tasks_keeps_api_order() -> None:
    tasks = [_task(i) for i in range(8, 0, -1)]
    assert [t["id"] for t in recent_tasks(tasks)] == [8, 7, 6, 5, 4]


@pytest.mark.parametrize(
    "seconds, expected",
    [(0, "0s"), (59, "59s"), (61, "1m 1s"), (3599, "59m 59s"), (3725, "1h 2m"), (90000, "25h 0m")],
)
def test_format_uptime(seconds, expected) -> None:
    assert format_uptime(seconds) == expected


def test_format_date() -> None:
    assert format_date("2026-10-18T09:15:00.123456") == "2026-10-18"
    assert format_date(None) == ""
    assert format_date("not a date") == "not a date"


def test_debug_panel_offers_six_operations() -> None:
    assert len(DEBUG_OPERATIONS) == 6
    assert len({op.label for op in DEBUG_OPERATIONS}) == 6


class FakeClient:
    def __init__(self) -> None:
        self.calls = []

    def trigger_cpu(self, n: int) -> dict:
        self.calls.append(("cpu", n))
        return {"message": "ok", "result": 1}

    def trigger_error(self) -> dict:
        raise ApiError(500, "Internal server error")

    def trigger_db_heavy(self) -> dict:
        raise ConnectionError("refused")


def _op(label: str) -> DebugOperation:
    return next(op for op in DEBUG_OPERATIONS if op.label == label)


def test_run_debug_operation_success() -> None:
    client = FakeClient()
    entry = run_debug_operation(client, _op("CPU Intensive"))
    assert client.calls == [("cpu", 40)]
    assert entry.status == "success"
    assert entry.data == {"message": "ok", "result": 1}
    assert entry.duration_ms is not None
    assert '"result": 1' in entry.preview


def test_run_debug_operation_failure_is_recorded() -> None:
    entry = run_debug_operation(FakeClient(), _op("Server Error (500)"))
    assert entry.status == "error"
    assert entry.error == "Internal server error"
    assert entry.preview == ""

    entry = run_debug_operation(FakeClient(), _op("Heavy DB Queries"))
    assert entry.status == "error"
    assert entry.error == "refused"


def test_run_fills_existing_entry() -> None:
    entry = DebugRun(label="CPU Intensive")
    assert entry.status == "running"
    same = run_debug_operation(FakeClient(), _op("CPU Intensive"), entry)
    assert same is entry
    assert entry.status == "success"


def test_preview_is_truncated() -> None:
    entry = DebugRun(label="big", data=[{"title": "x" * 100} for _ in range(20)])
    assert len(entry.preview) == PREVIEW_CHARS


def test_queued_entry_shows_running_until_run_completes() -> None:
    log: list = []
    op = _op("CPU Intensive")
    entry = queue_debug_run(log, op)
    assert log == [entry]
    assert entry.status == "running"
    assert entry.duration_ms is None

    run_debug_operation(FakeClient(), op, entry)
    assert log[0].status == "success"
