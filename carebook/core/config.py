from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    CLINIC_TIMEZONE: str = "Asia/Manila"
    LOOKAHEAD_DAYS: int = 14
    PREVIEW_DATE_COUNT: int = 5
    SESSION_IDLE_TIMEOUT_MINUTES: int = 30
    TRANSCRIPT_LIMIT: int = 50

    RECOMMENDER_URL: str | None = None
    RECOMMENDER_TIMEOUT_SECONDS: float = 10.0
    RECOMMENDER_DEFAULT_CONSULTANT_ID: str = "dr_reyes"

    DATA_DIR: str = "./data"


settings = Settings()
