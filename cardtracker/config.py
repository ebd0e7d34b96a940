import json
import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from cardtracker.models.failure import ConfigError
from cardtracker.models.source import TrackerConfig


class Settings(BaseSettings):
    """Refresher settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Relay that forwards ?url=<target> to Moxfield, which has no CORS headers
    gateway_url: str = "https://moxfield-proxy.faguaz.workers.dev"

    moxfield_api: str = "https://api2.moxfield.com"
    scryfall_api: str = "https://api.scryfall.com"

    config_path: Path = Path("config.json")
    output_path: Path = Path("data/cards.json")

    user_agent: str = "MTG-Card-Tracker-Fetcher/1.0"
    request_timeout: float = 30.0

    fetch_prices: bool = True


settings = Settings()


# =============================================================================
# PACING (seconds)
# =============================================================================

# Backoff before retrying a rate-limited (429) response
RATE_LIMIT_BACKOFF = 5.0

# Backoff before retrying a 5xx response
SERVER_ERROR_BACKOFF = 2.0

# Pause between collection pages (not after the last page)
PAGE_DELAY = 0.3

# Pause after each source URL
SOURCE_DELAY = 1.0

# Scryfall allows ~10 requests/second
PRICE_DELAY = 0.1

MAX_RETRIES = 2

COLLECTION_PAGE_SIZE = 50


def load_tracker_config(path: Path | None = None) -> TrackerConfig:
    """
    Load the tracker configuration document.

    Args:
        path: Path to config.json. Defaults to settings.config_path

    Returns:
        Validated TrackerConfig

    Raises:
        ConfigError: If the file cannot be read or is not a valid config
    """
    if path is None:
        path = settings.config_path

    try:
        with open(path, encoding="utf-8") as f:
            raw = json.load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read config {path}: {e}") from e
    except ValueError as e:
        raise ConfigError(f"Config {path} is not valid JSON: {e}") from e

    try:
        return TrackerConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigError(f"Invalid config {path}: {e}") from e


def resolve_phone(
    owner: str,
    phone_secret_names: Mapping[str, str],
    environ: Mapping[str, str] | None = None,
) -> str:
    """Phone number for an owner from the env var named in phoneSecretNames, or ""."""
    if environ is None:
        environ = os.environ

    secret_name = phone_secret_names.get(owner)
    if not secret_name:
        return ""
    return environ.get(secret_name, "")
