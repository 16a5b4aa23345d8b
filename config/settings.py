from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # Sweep
    SWEEP_INTERVAL_SECONDS: int = 3600
    GRACE_PERIOD_DAYS: int = 2

    # Purchases
    MAX_EFFECTS_PER_BATCH: int = 10
    MAX_VIEW_COUNT: int = 10_000_000
    DEFAULT_PRICE_PER_VIEW_CENTS: int = 1

    # Simulated payment confirmation; 0 confirms immediately
    PAYMENT_CONFIRM_DELAY_SECONDS: float = 0.0

    # App
    APP_NAME: str = "Listing Ledger"
    LOG_LEVEL: str = "INFO"


settings = Settings()
