from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"
    STUDIO_TIMEZONE: str = "America/Los_Angeles"

    SUPABASE_URL: str | None = None
    SUPABASE_SERVICE_ROLE_KEY: str | None = None
    SUPABASE_ANON_KEY: str | None = None

    BREVO_API_KEY: str | None = None
    BREVO_API_URL: str = "https://api.brevo.com/v3/smtp/email"
    SENDER_EMAIL: str | None = None
    ADMIN_EMAIL: str | None = None

    # When unset, reminders are rendered and sent in-process instead of calling the deployed function.
    BOOKING_EMAIL_FUNCTION_URL: str | None = None
    REMINDER_SEND_DELAY_SECONDS: float = 5.0

    SETTINGS_FILE: str = "./data/settings.json"
    CORS_ALLOW_ORIGINS: str = "*"

    @property
    def is_dev(self) -> bool:
        return self.ENV.lower() in {"dev", "local"}

    @property
    def cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.CORS_ALLOW_ORIGINS.split(",") if origin.strip()]


settings = Settings()
