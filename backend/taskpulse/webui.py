"""View logic for the Streamlit client, kept free of Streamlit so it can be tested."""
from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from dateutil import parser as dtparser

from .client import ApiError, TaskpulseClient

STATUS_LABELS = {"todo": "To Do", "in_progress": "In Progress", "done": "Done"}
PRIORITY_LABELS = {"low": "Low", "medium": "Medium", "high": "High", "critical": "Critical"}
STATUS_ICONS = {"todo": "🔵", "in_progress": "🟠", "done": "🟢"}
PRIORITY_ICONS = {"low": "⚪", "medium": "🔵", "high": "🟠", "critical": "🔴"}

PREVIEW_CHARS = 500


def task_counts(tasks: List[Dict[str, Any]]) -> Dict[str, int]:
    counts = {"total": len(tasks), "todo": 0, "in_progress": 0, "done": 0, "critical": 0}
    for t in tasks:
        if t.get("status") in counts:
            counts[t["status"]] += 1
        if t.get("priority") == "critical":
            counts["critical"] += 1
    return counts


def recent_tasks(tasks: List[Dict[str, Any]], limit: int = 5) -> List[Dict[str, Any]]:
    # the API already returns newest first
    return tasks[:limit]


def format_uptime(seconds: int) -> str:
    if seconds < 60:
        return f"{seconds}s"
    if seconds < 3600:
        return f"{seconds // 60}m {seconds % 60}s"
    return f"{seconds // 3600}h {(seconds % 3600) // 60}m"


def format_date(value: Optional[str]) -> str:
    if not value:
        return ""
    try:
        return dtparser.isoparse(value).strftime("%Y-%m-%d")
    except (ValueError, OverflowError):
        return value


@dataclass
class DebugOperation:
    label: str
    description: str
    run: Callable[[TaskpulseClient], Any]


DEBUG_OPERATIONS = [
    DebugOperation("Slow Response (3s)", "Triggers a 3-second delayed API response",
                   lambda c: c.trigger_slow(3000)),
    DebugOperation("Slow Response (8s)", "Triggers an 8-second delayed API response",
                   lambda c: c.trigger_slow(8000)),
    DebugOperation("Server Error (500)", "Triggers an intentional unhandled server error",
                   lambda c: c.trigger_error()),
    DebugOperation("CPU Intensive", "Runs a Fibonacci(40) calculation on the server",
                   lambda c: c.trigger_cpu(40)),
    DebugOperation("Heavy DB Queries", "Runs 20 concurrent database queries that sleep server-side",
                   lambda c: c.trigger_db_heavy()),
    DebugOperation("Rapid API Burst (10x)", "Sends 10 task list requests in parallel",
                   lambda c: c.burst(10)),
]


@dataclass
class DebugRun:
    """One entry in the debug panel's result log."""
    label: str
    started_at: datetime = field(default_factory=datetime.now)
    status: str = "running"  # running / success / error
    duration_ms: Optional[int] = None
    data: Any = None
    error: Optional[str] = None

    @property
    def preview(self) -> str:
        if self.data is None:
            return ""
        return json.dumps(self.data, indent=2, default=str)[:PREVIEW_CHARS]


def run_debug_operation(client: TaskpulseClient, op: DebugOperation, entry: Optional[DebugRun] = None) -> DebugRun:
    """Run `op` and fill in `entry` (or a fresh one) with its outcome."""
    entry = entry or DebugRun(label=op.label)
    start = time.perf_counter()
    try:
        entry.data = op.run(client)
        entry.status = "success"
    except ApiError as e:
        entry.status = "error"
        entry.error = e.message
    except Exception as e:  # connection errors, timeouts
        entry.status = "error"
        entry.error = str(e)
    entry.duration_ms = int((time.perf_counter() - start) * 1000)
    return entry


def queue_debug_run(log: List[DebugRun], op: DebugOperation) -> DebugRun:
    """Append a running entry for `op` so it can be drawn before the call starts."""
    entry = DebugRun(label=op.label)
    log.append(entry)
    return entry
