import os
import re
from functools import lru_cache
from pathlib import Path
from typing import Literal

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, TypeAdapter
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env early so env vars are available for YAML interpolation
_env_file = Path(__file__).parent.parent / ".env"
load_dotenv(_env_file)

# Matches $VAR_NAME environment variable references
ENV_VAR_PATTERN = re.compile(r"\$([A-Z_][A-Z0-9_]*)")


def interpolate_env_vars(value):
    """Recursively replace $VAR_NAME with os.environ values."""
    if isinstance(value, str):

        def replace(match):
            var = match.group(1)
            val = os.environ.get(var)
            if val is None:
                raise ValueError(f"Environment variable ${var} not set")
            return val

        return ENV_VAR_PATTERN.sub(replace, value)
    elif isinstance(value, dict):
        return {k: interpolate_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [interpolate_env_vars(item) for item in value]
    return value


def get_config_path() -> Path:
    """Location of the YAML config, overridable with BLOCKCMS_CONFIG."""
    override = os.environ.get("BLOCKCMS_CONFIG")
    if override:
        return Path(override)
    return Path.cwd() / "app.yaml"


def load_app_config(config_path: Path | None = None) -> dict:
    """Load and parse app.yaml with environment variable interpolation."""
    config_path = config_path or get_config_path()

    if not config_path.exists():
        raise FileNotFoundError(f"app.yaml not found at {config_path}")

    with open(config_path, "r") as f:
        config = yaml.safe_load(f) or {}

    return interpolate_env_vars(config)


class DatabaseConfig(BaseModel):
    """Database connection configuration."""

    url: str = "sqlite+aiosqlite:///./blockcms.db"
    pool_size: int = 5
    pool_overflow: int = 10
    pool_timeout: int = 30
    echo: bool = False
    create_all: bool = True


class SessionConfig(BaseModel):
    """Session cookie configuration."""

    max_age: int = 60 * 60 * 24 * 7
    cookie_domain: str | None = None


class SiteConfig(BaseModel):
    """Public site identity used for titles and canonical URLs."""

    name: str = "blockcms"
    base_url: str = "http://localhost:8080"


class RenderingConfig(BaseModel):
    """Page rendering behaviour.

    ``collection_failure_policy`` decides what happens when fetching a
    collection (services, projects, news) fails during a page render:
    ``"empty"`` renders the affected blocks with an empty list, ``"raise"``
    propagates the error and fails the request.
    """

    collection_failure_policy: Literal["empty", "raise"] = "empty"
    fallback_collection_limit: int = 100


class LogfireConfig(BaseModel):
    """Pydantic Logfire observability configuration."""

    enabled: bool = False
    service_name: str = "blockcms"
    environment: str | None = None
    sample_rate: float = 1.0
    console: bool = False


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Application
    debug: bool = False
    secret_key: str

    db: DatabaseConfig = DatabaseConfig()
    session: SessionConfig = SessionConfig()
    site: SiteConfig = SiteConfig()
    rendering: RenderingConfig = RenderingConfig()
    logfire: LogfireConfig = LogfireConfig()


_SECTIONS: dict[str, type[BaseModel]] = {
    "db": DatabaseConfig,
    "session": SessionConfig,
    "site": SiteConfig,
    "rendering": RenderingConfig,
    "logfire": LogfireConfig,
}


def build_settings(app_config: dict | None = None) -> Settings:
    """Create settings from .env and merge the given YAML sections over them."""
    base_settings = Settings()
    if not app_config:
        return base_settings

    updates = {
        key: model(**app_config[key])
        for key, model in _SECTIONS.items()
        if key in app_config
    }
    if "debug" in app_config:
        debug_field = Settings.model_fields["debug"].annotation
        updates["debug"] = TypeAdapter(debug_field).validate_python(app_config["debug"])

    if updates:
        return base_settings.model_copy(update=updates)
    return base_settings


@lru_cache
def get_settings() -> Settings:
    """Load settings from .env and app.yaml."""
    try:
        app_config = load_app_config()
    except FileNotFoundError:
        app_config = None
    return build_settings(app_config)
