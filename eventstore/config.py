from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from typing import Literal

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    SERVICE_PORT: int = 8080
    LOG_JSON: bool = True
    LOG_LEVEL: str = "INFO"
    # DynamoDB rejects items over 400 KB
    MAX_EVENT_SIZE: int = 400_000
    # Store backend selection: "dynamodb" or "memory"
    STORE_BACKEND: Literal["dynamodb", "memory"] = "dynamodb"
    TABLE_NAME: str = "Event"
    # AWS credentials and endpoint
    AWS_ACCESS_KEY_ID: str | None = None
    AWS_SECRET_ACCESS_KEY: str | None = None
    AWS_REGION: str = "us-east-1"
    DYNAMODB_ENDPOINT: str | None = None  # e.g. http://localhost:8000 for DynamoDB Local
    DYNAMODB_CONNECT_TIMEOUT: float = 5.0
    DYNAMODB_READ_TIMEOUT: float = 10.0

@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
