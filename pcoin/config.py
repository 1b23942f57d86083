from decimal import Decimal
from typing import List, Optional
from urllib.parse import quote_plus

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file="pcoin/.env",
        env_file_encoding="utf-8",
        extra="allow",
    )
    # Application
    APP_NAME: str = "P COIN API"
    PROJECT_NAME: str = "P COIN Casino"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    ALLOWED_ORIGINS: List[str] = Field(default_factory=lambda: ["*"])

    # Database
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USERNAME: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_DATABASE: str = "pcoin"

    # Full URL wins over POSTGRES_* when set (sqlite for local runs/tests)
    DATABASE_URL: Optional[str] = None
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20

    @property
    def database_url(self) -> str:
        """Construct database URL from individual components"""
        if self.DATABASE_URL:
            return self.DATABASE_URL

        # URL encode the password to handle special characters
        encoded_password = quote_plus(self.POSTGRES_PASSWORD)
        return f"postgresql+psycopg2://{self.POSTGRES_USERNAME}:{encoded_password}@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DATABASE}"

    # Security
    SECRET_KEY: str = "change-me"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 1440

    # Wallet
    MAX_BALANCE: Decimal = Decimal("99999999.99")
    WELCOME_BONUS: Decimal = Decimal("10.00")

    # Bank
    BANK_DEFAULT_INTEREST_RATE: Decimal = Decimal("0.0500")  # 연 5%
    BANK_INTEREST_INTERVAL_HOURS: int = 24

    # Redeem codes
    REDEEM_CODE_LENGTH: int = 6
    REDEEM_CODE_MAX_ATTEMPTS: int = 20

    # Games
    MAX_BET: Decimal = Decimal("1000000.00")
    JACKPOT_SEED: Decimal = Decimal("100.00")
    JACKPOT_CONTRIBUTION_RATE: Decimal = Decimal("0.01")
    JACKPOT_MIN_BET: Decimal = Decimal("1.00")


settings = Settings()
