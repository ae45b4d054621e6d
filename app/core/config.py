from decimal import Decimal
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    APP_NAME: str = "Splitter Backend"
    DATABASE_URL: str = "sqlite+aiosqlite:///./splitter.db"
    DB_CONNECT_RETRIES: int = 5
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: list[str] = ["*"]

    # balances within this distance of zero count as settled
    SETTLEMENT_TOLERANCE: Decimal = Decimal("0.01")

    class Config:
        env_file = ".env"

settings = Settings()
