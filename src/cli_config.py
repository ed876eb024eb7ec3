"""Runtime configuration: defaults, optional YAML file, and environment.

Loaded once by the entrypoint and passed explicitly to the components that
need it, so nothing below the CLI reads the environment on its own.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

import yaml

from constants import Constants
from common.errors import ConfigError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BrewverConfig:
    """Settings for the GitHub client, resolver, and installer."""

    owner: str = Constants.TAP_OWNER
    repo: str = Constants.TAP_REPO
    api_base: str = Constants.GITHUB_API_BASE
    raw_base: str = Constants.GITHUB_RAW_BASE
    user_agent: str = Constants.USER_AGENT
    request_timeout: float = Constants.REQUEST_TIMEOUT
    max_pages: int = Constants.HISTORY_MAX_PAGES
    brew_binary: str = Constants.BREW_BINARY
    token: Optional[str] = None


def _read_config_file(config_path: str) -> Dict[str, Any]:
    """Load a YAML config file; a missing file yields an empty mapping."""
    if not os.path.isfile(config_path):
        logger.warning("Config file not found: %s", config_path)
        return {}
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Failed to load config {config_path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config {config_path} must be a mapping at the top level")
    return data


def _section(data: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    value = data.get(name) or {}
    if not isinstance(value, dict):
        raise ConfigError(f"Config section '{name}' must be a mapping")
    return value


def _as_text(value: Any, key: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"Config value '{key}' must be a non-empty string")
    return value.strip()


def _as_positive_int(value: Any, key: str) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"Config value '{key}' must be an integer")
    if isinstance(value, float) and not value.is_integer():
        raise ConfigError(f"Config value '{key}' must be an integer")
    number = int(value)
    if number < 1:
        raise ConfigError(f"Config value '{key}' must be at least 1")
    return number


def _as_positive_float(value: Any, key: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"Config value '{key}' must be a number")
    number = float(value)
    if number <= 0:
        raise ConfigError(f"Config value '{key}' must be positive")
    return number


def load_config(
    config_path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> BrewverConfig:
    """Build the run configuration.

    Precedence: YAML file values over built-in defaults. The GitHub token is
    read only from the GITHUB_TOKEN environment variable.

    Args:
        config_path: Optional path to a YAML config file.
        environ: Environment mapping; defaults to os.environ.

    Raises:
        ConfigError: If the file cannot be parsed or holds invalid values.
    """
    env = os.environ if environ is None else environ
    data = _read_config_file(config_path) if config_path else {}
    if data:
        logger.info("Loaded config from: %s", config_path)

    repository = _section(data, "repository")
    http = _section(data, "http")
    history = _section(data, "history")
    brew = _section(data, "brew")

    defaults = BrewverConfig()
    token = (env.get(Constants.ENV_GITHUB_TOKEN) or "").strip() or None

    return BrewverConfig(
        owner=_as_text(repository.get("owner", defaults.owner), "repository.owner"),
        repo=_as_text(repository.get("name", defaults.repo), "repository.name"),
        api_base=_as_text(repository.get("api_base", defaults.api_base), "repository.api_base"),
        raw_base=_as_text(repository.get("raw_base", defaults.raw_base), "repository.raw_base"),
        user_agent=_as_text(http.get("user_agent", defaults.user_agent), "http.user_agent"),
        request_timeout=_as_positive_float(
            http.get("timeout", defaults.request_timeout), "http.timeout"
        ),
        max_pages=_as_positive_int(
            history.get("max_pages", defaults.max_pages), "history.max_pages"
        ),
        brew_binary=_as_text(brew.get("binary", defaults.brew_binary), "brew.binary"),
        token=token,
    )


def show_github_token_info(config: BrewverConfig) -> None:
    """Log whether requests will be authenticated and how to enable it."""
    if config.token:
        logger.info("Personal Access Token is used.")
        return
    logger.info(
        "This program uses the GitHub API to fetch data. To increase the rate "
        "limit, you can set a %s environment variable.",
        Constants.ENV_GITHUB_TOKEN,
    )
    logger.info("To set the %s, use the following command in your terminal:", Constants.ENV_GITHUB_TOKEN)
    logger.info("export %s=your_personal_access_token", Constants.ENV_GITHUB_TOKEN)
    logger.info("You can create a personal access token at %s", Constants.GITHUB_TOKEN_URL)
