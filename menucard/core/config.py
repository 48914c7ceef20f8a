from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    ENV: str = "dev"
    SERVICE_PORT: int = 8080
    LOG_LEVEL: str = "INFO"

    # Full URL wins over the PG_* parts (tests point this at sqlite)
    DATABASE_URL: str | None = None
    PG_HOST: str = "localhost"
    PG_PORT: int = 5432
    PG_DB: str = "menucard"
    PG_USER: str = "menucard"
    PG_PASSWORD: str = ""

    SESSION_TTL_DAYS: int = 30
    SESSION_COOKIE_NAME: str = "session_token"
    COOKIE_SECURE: bool | None = None

    VERIFY_CODE_TTL_MINUTES: int = 10

    SMTP_HOST: str | None = None
    SMTP_PORT: int = 587
    SMTP_USER: str | None = None
    SMTP_PASSWORD: str | None = None
    SMTP_TLS: bool = True
    MAIL_FROM: str | None = None

    EMAIL_ENABLED: bool = True
    SMTP_TIMEOUT_SECONDS: int = 10

    PUBLIC_MENU_BASE_URL: str = "http://localhost:3000"
    QR_SERVICE_URL: str = "https://api.qrserver.com/v1/create-qr-code/"

    CORS_ORIGINS: list[str] = ["http://localhost:3000"]

    CLEANUP_ENABLED: bool = True
    CLEANUP_INTERVAL_MINUTES: int = 60

    SENTRY_DSN: str | None = None
    GIT_SHA: str | None = None

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+asyncpg://{self.PG_USER}:{self.PG_PASSWORD}"
            f"@{self.PG_HOST}:{self.PG_PORT}/{self.PG_DB}"
        )

    @property
    def cookie_secure(self) -> bool:
        if self.COOKIE_SECURE is not None:
            return self.COOKIE_SECURE
        return self.ENV == "production"

    @property
    def session_max_age(self) -> int:
        return self.SESSION_TTL_DAYS * 24 * 60 * 60

settings = Settings()
