"""Configuration for news_feed.

Settings are read from NEWS_FEED_* environment variables, after loading a
.env file from the working directory if one exists. Variables already set in
the environment take precedence over the file. The defaults point at a public
dataset layout; only the project id has to be supplied.
"""

import os
import re
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import find_dotenv, load_dotenv

from news_feed.exceptions import ConfigurationError


@dataclass
class Section:
    """A navigation section backed by one category tag."""

    slug: str
    title: str
    category: str


DEFAULT_SECTIONS = [
    Section(slug="headlines", title="Headlines", category="headline"),
    Section(slug="business", title="Business", category="business"),
    Section(slug="sports", title="Sports", category="sports"),
    Section(slug="entertainment", title="Entertainment", category="entertainment"),
]

_DATASET_PATTERN = re.compile(r"^[a-z0-9][a-z0-9_-]{0,63}$")
_API_VERSION_PATTERN = re.compile(r"^(\d{4}-\d{2}-\d{2}|1|X)$")

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class ServerConfig:
    """Runtime configuration for the query client and the server."""

    name: str = "news_feed"
    log_level: str = "INFO"
    project_id: str = ""
    dataset: str = "production"
    api_version: str = "2024-01-01"
    use_cdn: bool = True
    token: str = ""
    request_timeout: float = 30.0
    cache_ttl: float = 60.0
    document_type: str = "news"
    asset_base_url: str = "https://cdn.sanity.io"
    placeholder_image_url: str = ""
    sections: List[Section] = field(default_factory=lambda: list(DEFAULT_SECTIONS))


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_float(name: str, default: float) -> float:
    value = os.environ.get(name)
    if not value:
        return default
    try:
        return float(value)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from e


def load_config(env_file: Optional[str] = None) -> ServerConfig:
    """Build a ServerConfig from the environment.

    Args:
        env_file: Path of a .env file (default: .env found from the working directory)

    Returns:
        ServerConfig with environment overrides applied
    """
    load_dotenv(env_file or find_dotenv(usecwd=True))

    return ServerConfig(
        name=os.environ.get("NEWS_FEED_SERVER_NAME", "news_feed"),
        log_level=os.environ.get("NEWS_FEED_LOG_LEVEL", "INFO").upper(),
        project_id=os.environ.get("NEWS_FEED_PROJECT_ID", ""),
        dataset=os.environ.get("NEWS_FEED_DATASET", "production"),
        api_version=os.environ.get("NEWS_FEED_API_VERSION", "2024-01-01").lstrip("v"),
        use_cdn=_env_bool("NEWS_FEED_USE_CDN", True),
        token=os.environ.get("NEWS_FEED_TOKEN", ""),
        request_timeout=_env_float("NEWS_FEED_TIMEOUT", 30.0),
        cache_ttl=_env_float("NEWS_FEED_CACHE_TTL", 60.0),
        document_type=os.environ.get("NEWS_FEED_DOCUMENT_TYPE", "news"),
        asset_base_url=os.environ.get("NEWS_FEED_ASSET_BASE_URL", "https://cdn.sanity.io").rstrip("/"),
        placeholder_image_url=os.environ.get("NEWS_FEED_PLACEHOLDER_IMAGE", ""),
    )


_config: Optional[ServerConfig] = None


def get_config() -> ServerConfig:
    """Get the process-wide configuration, loading it on first use."""
    global _config

    if _config is None:
        _config = load_config()

    return _config


def validate_config(config: ServerConfig) -> bool:
    """Validate that all required settings are properly configured.

    Raises:
        ConfigurationError: If required settings are missing or invalid.
    """
    errors = []

    if not config.project_id:
        errors.append("Missing required environment variable: NEWS_FEED_PROJECT_ID")
    elif not re.match(r"^[a-z0-9-]+$", config.project_id):
        errors.append(f"Project id may only contain a-z, 0-9 and dashes, got {config.project_id!r}")

    if not _DATASET_PATTERN.match(config.dataset):
        errors.append(f"Invalid dataset name: {config.dataset!r}")

    if not _API_VERSION_PATTERN.match(config.api_version):
        errors.append(f"API version must be a YYYY-MM-DD date, got {config.api_version!r}")

    if config.request_timeout <= 0:
        errors.append(f"NEWS_FEED_TIMEOUT must be positive, got {config.request_timeout}")

    if config.cache_ttl < 0:
        errors.append(f"NEWS_FEED_CACHE_TTL must not be negative, got {config.cache_ttl}")

    if config.log_level not in LOG_LEVELS:
        errors.append(f"Unknown log level: {config.log_level}")

    if not config.sections:
        errors.append("At least one section must be configured")

    # Raise all errors at once
    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ConfigurationError(error_msg)

    return True
