import logging
import time
from datetime import datetime

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from ..schemas.health import DatabaseStatus, HealthOut

log = logging.getLogger(__name__)

STARTED_AT = time.monotonic()

PROBE_SQL = "SELECT CURRENT_TIMESTAMP AS time, version() AS version"


def uptime_seconds(started_at: float = STARTED_AT) -> int:
    return int(time.monotonic() - started_at)


def probe_database(engine: Engine) -> DatabaseStatus:
    """Round-trip a trivial query. Failures are reported, not raised."""
    try:
        with engine.connect() as conn:
            row = conn.execute(text(PROBE_SQL)).one()
    except SQLAlchemyError as e:
        log.error("Health check failed: %s", e)
        return DatabaseStatus(connected=False, error=str(e))

    server_time = row.time.isoformat() if isinstance(row.time, datetime) else str(row.time)
    return DatabaseStatus(connected=True, server_time=server_time, version=str(row.version))


def check_health(engine: Engine, environment: str) -> HealthOut:
    db = probe_database(engine)
    return HealthOut(
        status="healthy" if db.connected else "unhealthy",
        uptime_seconds=uptime_seconds(),
        database=db,
        environment=environment,
    )
