# fleet_engine/config.py
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

class Settings(BaseSettings):
    # MongoDB settings; without a URI the store lives in memory only
    MONGODB_URI: Optional[str] = None
    MONGODB_DB_NAME: str = "fleet_service"

    # Server settings
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    RELOAD: bool = True

    # API settings
    API_PREFIX: str = "/api"

    # Engine settings
    LOG_LEVEL: str = "INFO"
    JOB_NUMBER_PREFIX: str = "SJ"
    LOAD_SAMPLE_DATA: bool = False

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

@lru_cache()
def get_settings():
    return Settings()
