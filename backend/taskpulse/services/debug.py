"""
Synthetic load generators for exercising monitoring tools.

None of these do useful work. The Fibonacci is deliberately naive and the
db-heavy probe deliberately sleeps inside the database.
"""
import asyncio
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from sqlalchemy import text
from sqlalchemy.engine import Engine

from ..core.errors import IntentionalFailure, timestamp
from ..schemas.debug import CpuResult, DbHeavyResult, SlowResult

log = logging.getLogger(__name__)

DEFAULT_DELAY_MS = 3000
MAX_DELAY_MS = 30000
DEFAULT_FIB_N = 40
MAX_FIB_N = 45
HEAVY_QUERY_COUNT = 20
HEAVY_SLEEP_SQL = "SELECT pg_sleep(0.05)"
HEAVY_QUERY_SQL = "SELECT * FROM tasks ORDER BY random() LIMIT 10"

ERROR_MESSAGE = "Intentional server error for observability testing - this error is expected"


def clamp_param(raw: Optional[str], default: int, maximum: int, minimum: int = 0) -> int:
    """Parse a query value; junk falls back to `default`, the rest is clamped."""
    try:
        value = int(raw) if raw not in (None, "") else default
    except (TypeError, ValueError):
        value = default
    return max(minimum, min(value, maximum))


def fib(n: int) -> int:
    if n <= 1:
        return n
    return fib(n - 1) + fib(n - 2)


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


async def slow_response(delay_ms: int) -> SlowResult:
    log.info("Debug: slow endpoint triggered with %dms delay", delay_ms)
    await asyncio.sleep(delay_ms / 1000)
    return SlowResult(message="Slow response completed", delay_ms=delay_ms, timestamp=timestamp())


def intentional_failure():
    log.error("Debug: intentional error endpoint triggered")
    raise IntentionalFailure(ERROR_MESSAGE)


def cpu_burn(n: int) -> CpuResult:
    log.info("Debug: CPU-intensive endpoint triggered with fib(%d)", n)
    start = time.perf_counter()
    result = fib(n)
    return CpuResult(
        message="CPU-intensive operation completed",
        fibonacci_n=n,
        result=result,
        duration_ms=_elapsed_ms(start),
        timestamp=timestamp(),
    )


def _heavy_query(engine: Engine) -> int:
    # the sleep runs on the same checkout so the connection stays busy
    with engine.connect() as conn:
        conn.execute(text(HEAVY_SLEEP_SQL))
        return len(conn.execute(text(HEAVY_QUERY_SQL)).all())


def db_heavy(engine: Engine, queries: int = HEAVY_QUERY_COUNT) -> DbHeavyResult:
    """
    Run `queries` copies of the sleepy random-sample query at once.

    Every query holds a pooled connection while it sleeps, so with the
    default pool this saturates it and later requests queue behind.
    """
    log.info("Debug: heavy database query endpoint triggered")
    start = time.perf_counter()
    with ThreadPoolExecutor(max_workers=queries) as pool:
        counts = list(pool.map(lambda _: _heavy_query(engine), range(queries)))
    return DbHeavyResult(
        message="Heavy DB operation completed",
        queries_executed=len(counts),
        total_rows=sum(counts),
        duration_ms=_elapsed_ms(start),
        timestamp=timestamp(),
    )
