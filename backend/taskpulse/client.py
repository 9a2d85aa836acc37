import os
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Optional

import requests

API = os.getenv("API_URL", "http://localhost:4000/api")


class ApiError(Exception):
    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class TaskpulseClient:
    """
    Thin wrapper over the REST API.

    `session` is anything with a requests-style ``request`` method; the
    tests hand in FastAPI's TestClient.
    """

    def __init__(self, base_url: str = API, session=None, timeout: float = 60):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(self, method: str, path: str, accept: tuple = (), **kwargs) -> Any:
        r = self.session.request(method, f"{self.base_url}{path}", timeout=self.timeout, **kwargs)
        if r.status_code >= 400 and r.status_code not in accept:
            try:
                message = r.json().get("error")
            except ValueError:
                message = None
            raise ApiError(r.status_code, message or f"Request failed: {r.status_code}")
        return r.json()

    # tasks
    def get_tasks(self, status: Optional[str] = None, priority: Optional[str] = None,
                  search: Optional[str] = None) -> list[dict]:
        params = {k: v for k, v in (("status", status), ("priority", priority), ("search", search)) if v}
        return self._request("GET", "/tasks", params=params)

    def get_task(self, task_id: int) -> dict:
        return self._request("GET", f"/tasks/{task_id}")

    def create_task(self, title: str, description: Optional[str] = None,
                    status: Optional[str] = None, priority: Optional[str] = None) -> dict:
        body = {"title": title, "description": description}
        if status:
            body["status"] = status
        if priority:
            body["priority"] = priority
        return self._request("POST", "/tasks", json=body)

    def update_task(self, task_id: int, **changes) -> dict:
        return self._request("PUT", f"/tasks/{task_id}", json=changes)

    def delete_task(self, task_id: int) -> dict:
        return self._request("DELETE", f"/tasks/{task_id}")

    # health / debug
    def get_health(self) -> dict:
        # 503 still carries the health body
        return self._request("GET", "/health", accept=(503,))

    def trigger_slow(self, delay: int = 3000) -> dict:
        return self._request("GET", "/debug/slow", params={"delay": delay})

    def trigger_error(self) -> dict:
        return self._request("GET", "/debug/error")

    def trigger_cpu(self, n: int = 40) -> dict:
        return self._request("GET", "/debug/cpu", params={"n": n})

    def trigger_db_heavy(self) -> dict:
        return self._request("GET", "/debug/db-heavy")

    # fan-out helpers
    def dashboard(self) -> tuple[list[dict], dict]:
        """Tasks and health fetched side by side. Raises if either fails."""
        with ThreadPoolExecutor(max_workers=2) as pool:
            tasks = pool.submit(self.get_tasks)
            health = pool.submit(self.get_health)
            return tasks.result(), health.result()

    def burst(self, count: int = 10) -> list[list[dict]]:
        with ThreadPoolExecutor(max_workers=count) as pool:
            futures = [pool.submit(self.get_tasks) for _ in range(count)]
            return [f.result() for f in futures]
