from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # App
    APP_NAME: str = "Market Execution Desk"
    DEBUG: bool = False  # Safe default for production; set DEBUG=True in .env for local dev
    LOG_LEVEL: str = "INFO"

    # Order desk defaults (request options override these)
    HISTORY_WINDOW_DAYS: int = 7  # days requested from the history source
    DEFAULT_TARGET_ETA_DAYS: float = 3.0
    DEFAULT_WARN_EXPIRY_DAYS: int = 2
    PRICE_TICK: float = 0.01

    # Impact calibration
    DEFAULT_IMPACT_DAYS: int = 30
    DEFAULT_URGENCY: float = 0.5


settings = Settings()
