import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from ..db.session import get_engine
from ..schemas.debug import CpuResult, DbHeavyResult, SlowResult
from ..services import debug

log = logging.getLogger(__name__)

router = APIRouter(prefix="/debug", tags=["debug"])

@router.get("/slow", response_model=SlowResult)
async def slow(delay: Optional[str] = None):
    # async so the sleep only parks this request
    ms = debug.clamp_param(delay, debug.DEFAULT_DELAY_MS, debug.MAX_DELAY_MS)
    return await debug.slow_response(ms)

@router.get("/error")
def error():
    debug.intentional_failure()

@router.get("/cpu", response_model=CpuResult)
def cpu(n: Optional[str] = None):
    return debug.cpu_burn(debug.clamp_param(n, debug.DEFAULT_FIB_N, debug.MAX_FIB_N))

@router.get("/db-heavy", response_model=DbHeavyResult)
def db_heavy(engine: Engine = Depends(get_engine)):
    try:
        return debug.db_heavy(engine)
    except SQLAlchemyError as e:
        log.error("Debug db-heavy error: %s", e)
        raise HTTPException(status_code=500, detail="Heavy DB query failed")
