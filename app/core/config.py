from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # JWT
    JWT_SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # Banco de dados
    DATABASE_URL: str
    DATABASE_ECHO: bool = False

    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["*"]

    # auto-submit job
    AUTO_SUBMIT_INTERVAL_SECONDS: int = 60

    class Config:
        env_file = ".env"


settings = Settings()
