from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

from portfolio.core.errors import ConfigurationError


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""  # anon key; row level security decides what the admin session may write

    # App
    app_name: str = "portfolio-cms"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000,http://127.0.0.1:5173"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"
    login_rate_limit: str = "10/minute"
    session_cookie_name: str = "portfolio_session"

    # Admin forms
    max_image_bytes: int = 5 * 1024 * 1024

    # Hidden admin login shortcut on the public footer
    reveal_clicks: int = 3
    reveal_window_seconds: float = 2.0

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    def validate_backend(self) -> None:
        """Fail fast when the Supabase endpoint or key is missing."""
        missing = [
            name for name, value in (("SUPABASE_URL", self.supabase_url), ("SUPABASE_KEY", self.supabase_key))
            if not value or not value.strip()
        ]
        if missing:
            raise ConfigurationError(
                f"Missing Supabase configuration: {', '.join(missing)}. Set them in the environment or .env file."
            )

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore"
    )


settings = Settings()
