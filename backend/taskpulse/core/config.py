from fastapi import Request
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_NAME: str = "Taskpulse API"
    API_PREFIX: str = "/api"

    # HTTP
    HOST: str = "0.0.0.0"
    PORT: int = 4000
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # DB
    DATABASE_URL: str = "sqlite:///./data/taskpulse.db"
    DB_POOL_SIZE: int = 20
    DB_POOL_TIMEOUT: float = 30.0
    DB_CONNECT_RETRIES: int = 10
    DB_CONNECT_BACKOFF_SECONDS: float = 2.0
    SEED_ON_STARTUP: bool = True

settings = Settings()

def get_settings(request: Request) -> Settings:
    return request.app.state.settings
