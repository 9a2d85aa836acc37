# tests/test_client.py

from __future__ import annotations

import pytest

from taskpulse.client import ApiError, TaskpulseClient


@pytest.fixture()
def api(client) -> TaskpulseClient:
    return TaskpulseClient(base_url="http://testserver/api", session=client)


def test_crud_round_trip(api: TaskpulseClient) -> None:
    created = api.create_task("Via client", description="desc", priority="high")
    assert created["status"] == "todo"
    assert created["priority"] == "high"

    assert api.get_task(created["id"]) == created

    updated = api.update_task(created["id"], status="in_progress")
    assert updated["status"] == "in_progress"
    assert updated["description"] == "desc"

    assert [t["id"] for t in api.get_tasks(status="in_progress")] == [created["id"]]
    assert api.get_tasks(status="done") == []

    deleted = api.delete_task(created["id"])
    assert deleted["message"] == "Task deleted"
    assert deleted["task"]["id"] == created["id"]


def test_server_error_message_is_raised(api: TaskpulseClient) -> None:
    with pytest.raises(ApiError) as exc:
        api.get_task(12345)
    assert exc.value.status_code == 404
    assert exc.value.message == "Task not found"

    with pytest.raises(ApiError) as exc:
        api.create_task("  ")
    assert exc.value.status_code == 400
    assert exc.value.message == "Title is required"


def test_unhealthy_body_is_returned(api: TaskpulseClient, client, broken_engine) -> None:
    assert api.get_health()["status"] == "healthy"
    client.app.state.engine = broken_engine
    health = api.get_health()
    assert health["status"] == "unhealthy"
    assert health["database"]["connected"] is False


def test_dashboard_fetches_tasks_and_health(api: TaskpulseClient) -> None:
    api.create_task("one")
    tasks, health = api.dashboard()
    assert [t["title"] for t in tasks] == ["one"]
    assert health["database"]["connected"] is True


def test_debug_helpers(api: TaskpulseClient) -> None:
    assert api.trigger_slow(10)["delay_ms"] == 10
    assert api.trigger_cpu(15)["result"] == 610
    with pytest.raises(ApiError) as exc:
        api.trigger_error()
    assert exc.value.status_code == 500


def test_burst_runs_parallel_list_requests(api: TaskpulseClient) -> None:
    api.create_task("x")
    results = api.burst(3)
    assert len(results) == 3
    assert all(len(r) == 1 for r in results)
