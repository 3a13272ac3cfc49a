import os
from typing import List

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()


class Settings(BaseModel):
    app_name: str = "String Analyzer Service"
    app_version: str = "1.0.0"
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: List[str] = ["*"]


def get_settings() -> Settings:
    """Build settings from environment variables (and .env for local development)."""
    cors_origins = os.getenv("CORS_ORIGINS", "*")
    return Settings(
        app_name=os.getenv("APP_NAME", "String Analyzer Service"),
        app_version=os.getenv("APP_VERSION", "1.0.0"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", 8000)),
        cors_origins=[origin.strip() for origin in cors_origins.split(",") if origin.strip()],
    )
