from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_NAME: str = "backoffice"
    version: str = "0.1.0"
    DEBUG: bool = False
    APP_DOMAIN: str = "example.com"
    APP_DATABASE_DSN: str = "sqlite:////tmp/backoffice.db"

    # Access tokens issued by the identity provider
    AUTH_JWT_SECRET: str = "change-me"
    AUTH_JWT_ALGORITHM: str = "HS256"
    AUTH_TOKEN_TTL_MINUTES: int = 60

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    # Notification listing
    NOTIFICATIONS_PAGE_SIZE: int = 50
    NOTIFICATIONS_MAX_PAGE_SIZE: int = 200
    # Same type for the same entity is not re-sent to a user within this window
    NOTIFICATIONS_DEDUPE_WINDOW_SECONDS: int = 300

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
