from typing import List
from pydantic_settings import BaseSettings
from functools import lru_cache

class Settings(BaseSettings):
    # App Settings
    APP_NAME: str = "EcoTrack"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False

    # Server Settings
    HOST: str = "0.0.0.0"
    PORT: int = 8080

    # CORS
    ALLOWED_ORIGINS: List[str] = [
        "http://localhost:3000",  # Mobile web client development
        "https://app.ecotrack.app",  # Production client
    ]

    # Storage backend: "memory" keeps users in process, "redis" uses the KV store
    STORE_BACKEND: str = "memory"

    # Redis Settings
    REDIS_URL: str = "redis://localhost:6379/0"
    REDIS_MAX_CONNECTIONS: int = 10

    # Remote API Settings
    API_BASE_URL: str = "http://localhost:8080/api/v1"
    PUBLIC_ANON_KEY: str = "public-anon-key"
    HTTP_DEFAULT_TIMEOUT: float = 10.0
    HTTP_MAX_CONNECTIONS: int = 20
    HTTP_MAX_KEEPALIVE_CONNECTIONS: int = 5

    # Session Settings
    TOKEN_PREFIX: str = "mock-token-"
    OTP_CODE_LENGTH: int = 6
    ADMIN_API_KEY: str = "admin-secret"

    # Points Settings
    TRAINING_COMPLETION_BONUS: int = 100

    class Config:
        env_file = ".env"
        case_sensitive = True

@lru_cache()
def get_settings() -> Settings:
    return Settings()

settings = get_settings()
