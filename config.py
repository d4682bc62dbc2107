import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


class ConfigurationError(RuntimeError):
    """Raised when a required setting is missing at startup."""


def _env(*names: str, default: Optional[str] = None) -> Optional[str]:
    # First non-empty value wins (VITE_* names are accepted for old .env files)
    for name in names:
        value = os.getenv(name)
        if value:
            return value
    return default


def _env_bool(name: str, default: str = "False") -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


@dataclass
class Settings:
    # Supabase
    supabase_url: Optional[str] = None
    supabase_anon_key: Optional[str] = None
    supabase_table: str = "books"
    supabase_timeout: float = 10.0

    # API
    api_host: str = "127.0.0.1"
    api_port: int = 8000

    # Application
    app_name: str = "My Library Management"
    log_level: str = "INFO"
    debug: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            supabase_url=_env("SUPABASE_URL", "VITE_SUPABASE_URL"),
            supabase_anon_key=_env("SUPABASE_ANON_KEY", "SUPABASE_KEY", "VITE_ANON_KEY"),
            supabase_table=os.getenv("SUPABASE_TABLE", "books"),
            supabase_timeout=float(os.getenv("SUPABASE_TIMEOUT", "10")),
            api_host=os.getenv("API_HOST", "127.0.0.1"),
            api_port=int(os.getenv("API_PORT", "8000")),
            app_name=os.getenv("APP_NAME", "My Library Management"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            debug=_env_bool("DEBUG"),
        )

    def require_backend(self) -> None:
        """Abort startup unless both the endpoint URL and the access key are set."""
        if not self.supabase_url or not self.supabase_anon_key:
            raise ConfigurationError("Missing SUPABASE_URL or SUPABASE_ANON_KEY environment variable")


def setup_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(
        level=level or settings.log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


settings = Settings.from_env()
