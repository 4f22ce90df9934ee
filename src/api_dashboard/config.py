"""Dashboard settings loaded from YAML with environment overrides."""

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, ValidationError

from api_dashboard.cache import CacheMode
from api_dashboard.errors import ConfigError
from api_dashboard.generator.metadata import NO_DESCRIPTION
from api_dashboard.generator.template import DEFAULT_DEPTH_LIMIT

DEFAULT_BASE_URL = "http://localhost:8080"
DEFAULT_EXCLUDED_PATHS = ["/error", "/api-dashboard", "/api-dashboard/meta", "/api-dashboard/debugger"]

ENV_BASE_URL = "API_DASHBOARD_BASE_URL"
ENV_CACHE_MODE = "API_DASHBOARD_CACHE_MODE"


class DashboardSettings(BaseModel):
    depth_limit: int = DEFAULT_DEPTH_LIMIT
    cache_mode: CacheMode = CacheMode.CACHED
    source_root: str = "src"
    base_url: str = DEFAULT_BASE_URL
    excluded_paths: list[str] = list(DEFAULT_EXCLUDED_PATHS)
    no_description: str = NO_DESCRIPTION


def load_settings(path: Path | None = None) -> DashboardSettings:
    """Load settings from a YAML file (optional) and apply environment overrides.

    A missing ``path`` means defaults. ``API_DASHBOARD_BASE_URL`` and
    ``API_DASHBOARD_CACHE_MODE`` win over the file.
    """
    data: dict = {}
    if path is not None:
        try:
            loaded = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
        except OSError as e:
            raise ConfigError(f"Cannot read settings file {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e
        if loaded is not None and not isinstance(loaded, dict):
            raise ConfigError(f"Settings file {path} must contain a mapping")
        data = loaded or {}

    if os.getenv(ENV_BASE_URL):
        data["base_url"] = os.environ[ENV_BASE_URL]
    if os.getenv(ENV_CACHE_MODE):
        data["cache_mode"] = os.environ[ENV_CACHE_MODE]

    try:
        return DashboardSettings(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings: {e}") from e
