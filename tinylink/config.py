from typing import List

from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    DATABASE_URL: str
    ENVIRONMENT: str = "development"
    HOST: str = "0.0.0.0"
    PORT: int = 4000
    LOG_LEVEL: str = "INFO"

    # Startup connection attempt, in seconds
    DB_CONNECT_TIMEOUT: float = 5.0
    DB_CREATE_TABLES: bool = True

    CORS_ORIGINS: List[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
        "https://tiny-link-xi.vercel.app",
    ]

    CODE_LENGTH: int = 6
    CODE_GENERATION_ATTEMPTS: int = 1

    class Config:
        env_file = ".env"
        extra = "ignore"

settings = Settings()
