from fastapi import APIRouter, Depends, Response
from sqlalchemy.engine import Engine

from ..core.config import Settings, get_settings
from ..db.session import get_engine
from ..schemas.health import HealthOut
from ..services.health import check_health

router = APIRouter(tags=["health"])

@router.get("/health", response_model=HealthOut, response_model_exclude_none=True)
def health(
    response: Response,
    engine: Engine = Depends(get_engine),
    settings: Settings = Depends(get_settings),
):
    result = check_health(engine, settings.ENVIRONMENT)
    if not result.healthy:
        response.status_code = 503
    return result
