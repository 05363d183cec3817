"""Application configuration."""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database (local mirror of submitted orders)
    database_url: str

    # Admin dashboard
    dashboard_password: str

    # Remote spreadsheet script endpoint
    sheets_api_url: str = ""
    sheets_timeout_seconds: float = 15.0
    menu_cache_seconds: float = 30.0

    # OpenAI (menu assistant is disabled when empty)
    openai_api_key: str = ""
    assistant_model: str = "gpt-4o-mini"

    # Restaurant
    restaurant_name: str = "無名牛排"

    # Cart sessions
    cart_cookie_name: str = "cart_session"
    cart_ttl_hours: float = 12.0

    # Logging
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )


settings = Settings()
