"""Application configuration helpers."""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "ShelterFinder/1.0"


class ConfigError(RuntimeError):
    """Raised when an environment variable cannot be parsed."""


@dataclass(frozen=True)
class Settings:
    nominatim_url: str = "https://nominatim.openstreetmap.org"
    overpass_url: str = "https://overpass-api.de/api/interpreter"
    user_agent: str = DEFAULT_USER_AGENT
    http_timeout_seconds: float = 10.0
    http_max_retries: int = 2
    nominatim_delay_seconds: float = 0.2
    nominatim_result_limit: int = 50
    default_latitude: float = 39.8283
    default_longitude: float = -98.5795
    map_tiles_url: str = "https://tile.openstreetmap.org/{z}/{x}/{y}.png"
    map_tiles_attribution: str = "© OpenStreetMap contributors"


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be numeric, got {raw!r}") from exc


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from exc


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""
    load_dotenv()
    defaults = Settings()

    user_agent = os.getenv("HTTP_USER_AGENT", "").strip()
    if not user_agent:
        logger.warning(
            "HTTP_USER_AGENT is not configured; using %s. Public OSM services expect an identifying client.",
            DEFAULT_USER_AGENT,
        )
        user_agent = DEFAULT_USER_AGENT

    return Settings(
        nominatim_url=os.getenv("NOMINATIM_URL", defaults.nominatim_url).rstrip("/"),
        overpass_url=os.getenv("OVERPASS_URL", defaults.overpass_url),
        user_agent=user_agent,
        http_timeout_seconds=_env_float("HTTP_TIMEOUT_SECONDS", defaults.http_timeout_seconds),
        http_max_retries=_env_int("HTTP_MAX_RETRIES", defaults.http_max_retries),
        nominatim_delay_seconds=_env_float("NOMINATIM_DELAY_SECONDS", defaults.nominatim_delay_seconds),
        nominatim_result_limit=_env_int("NOMINATIM_RESULT_LIMIT", defaults.nominatim_result_limit),
        default_latitude=_env_float("DEFAULT_LATITUDE", defaults.default_latitude),
        default_longitude=_env_float("DEFAULT_LONGITUDE", defaults.default_longitude),
        map_tiles_url=os.getenv("MAP_TILES_URL", defaults.map_tiles_url),
        map_tiles_attribution=os.getenv("MAP_TILES_ATTRIBUTION", defaults.map_tiles_attribution),
    )
