# enquiry-lifecycle-service/app/core/config.py

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Values come from the environment provided by Docker Compose.
    model_config = SettingsConfigDict(extra="ignore")

    # The environment mode: 'local' or 'prod'
    ENV: str

    # --- Production URLs (for inside Docker) ---
    DATABASE_URL_PROD: str
    REDIS_URL_PROD: str

    # --- Local Development URLs (for running locally) ---
    DATABASE_URL_LOCAL: str
    REDIS_URL_LOCAL: str

    # Secrets
    JWT_SECRET: str
    INTERNAL_API_KEY: str

    # --- Replacement alert channels (all optional) ---
    RESEND_API_KEY: Optional[str] = None
    RESEND_FROM_DOMAIN: str = "partysnap.co.uk"
    OPS_ALERT_EMAIL: Optional[str] = None
    SLACK_WEBHOOK_URL: Optional[str] = None
    NOTIFICATION_TIMEOUT_SECONDS: float = 5.0

    # Statement timeout for the party/user batch reads during hydration
    HYDRATION_QUERY_TIMEOUT_MS: int = 3000

    FRONTEND_URL: str = "http://localhost:3000"
    LOG_LEVEL: str = "INFO"

    # --- Dynamic Properties ---
    @property
    def DATABASE_URL(self) -> str:
        return (
            self.DATABASE_URL_LOCAL if self.ENV == "local" else self.DATABASE_URL_PROD
        )

    @property
    def REDIS_URL(self) -> str:
        return self.REDIS_URL_LOCAL if self.ENV == "local" else self.REDIS_URL_PROD


# Create a single instance of the settings
settings = Settings()
