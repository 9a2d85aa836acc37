from typing import Optional
from pydantic import BaseModel

class DatabaseStatus(BaseModel):
    connected: bool
    server_time: Optional[str] = None
    version: Optional[str] = None
    error: Optional[str] = None

class HealthOut(BaseModel):
    status: str
    uptime_seconds: int
    database: DatabaseStatus
    environment: str

    @property
    def healthy(self) -> bool:
        return self.status == "healthy"
