from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

class Settings(BaseSettings):

    PAYSTACK_SECRET_KEY: str
    PAYSTACK_BASE_URL: str = "https://api.paystack.co"
    # None leaves gateway calls without a client-side timeout
    PAYSTACK_TIMEOUT_SECONDS: float | None = None

    APP_URL: str
    PLAN_CODE_OVERRIDES: dict[str, str] = {}

    CORS_ALLOW_ORIGINS: list[str] = ["*"]
    ROOT_PATH: str = ""
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @property
    def callback_url(self) -> str:
        return f"{self.APP_URL.rstrip('/')}/donation/callback"

@lru_cache()
def get_settings() -> Settings:
    return Settings()
