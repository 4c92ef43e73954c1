from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    SERVICE_PORT: int = 8080
    LOG_JSON: bool = True
    # Request bodies above this many bytes are rejected before parsing
    MAX_PAYLOAD_SIZE: int = 65536
    # Nesting allowed by full condition validation
    CONDITION_MAX_DEPTH: int = 5
    # Run the safety guard before validating condition expressions
    ENFORCE_SAFETY_GUARD: bool = True

@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
