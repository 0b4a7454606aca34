from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "sqlite:///./ledgerbook.db"

    # Shown in the statement header and footer
    BUSINESS_NAME: str = "A R ENTERPRISES"
    # Core PDF fonts are latin-1 only, so the rupee sign is spelled out
    CURRENCY_PREFIX: str = "Rs."

    # Customer activity report
    ACTIVITY_WINDOW_DAYS: int = 30

    CORS_ORIGINS: list[str] = ["http://localhost:3000"]

    LOG_LEVEL: str = "INFO"


settings = Settings()
