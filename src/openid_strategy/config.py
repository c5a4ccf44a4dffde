"""Configuration loading with XDG paths and precedence resolution.

This module handles configuration for the strategy and the CLI:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.openid-strategy/`` on macOS and Windows. See :func:`get_data_dir`,
  which also hosts the default file-backed association store.
* **Config files** -- JSON or YAML documents deserialised into a
  :class:`~openid_strategy.models.StrategyConfig` by
  :func:`load_config_file`.
* **Precedence resolution** -- :func:`resolve_config` merges explicit
  overrides, ``OPENID_STRATEGY_*`` environment variables, and a config file
  into the effective configuration.
"""

from __future__ import annotations

import json
import logging
import os
import platform
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from openid_strategy.exceptions import ConfigError
from openid_strategy.models import StrategyConfig

logger = logging.getLogger(__name__)

_APP_NAME = "openid-strategy"
_ENV_PREFIX = "OPENID_STRATEGY_"
_CONFIG_FILE_ENV = "OPENID_STRATEGY_CONFIG"

# Scalar fields that may be set from the environment.
_ENV_FIELDS = (
    "return_url",
    "realm",
    "provider_url",
    "identifier_field",
    "pass_req_to_callback",
    "profile",
    "name",
    "stateless",
    "store",
    "immediate",
    "timeout",
    "verify_ssl",
)


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def get_data_dir() -> Path:
    """Return the data directory, creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/openid-strategy/`` (default
    ``~/.local/share/openid-strategy/``). On macOS/Windows:
    ``~/.openid-strategy/``.

    Returns:
        Absolute path to the data directory (guaranteed to exist).
    """
    if _is_xdg_platform():
        env_value = os.environ.get("XDG_DATA_HOME", "")
        base = Path(env_value) if env_value else Path.home() / ".local" / "share"
        path = base / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Config files ---


def load_config_file(path: str | Path) -> dict[str, Any]:
    """Read a JSON or YAML config file into a plain dict.

    The format is chosen from the extension (``.json``, ``.yaml``,
    ``.yml``); unknown extensions are tried as JSON first, then YAML.
    A top-level ``openid`` key, when present, is unwrapped so the
    strategy settings can live inside a larger application config.

    Args:
        path: Path to the config file.

    Returns:
        The raw settings mapping (not yet validated).

    Raises:
        ConfigError: If the file is missing, unreadable, or not a mapping.
    """
    file_path = Path(path)
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {file_path}: {exc}") from exc

    suffix = file_path.suffix.lower()
    try:
        if suffix == ".json":
            data = json.loads(text)
        elif suffix in (".yaml", ".yml"):
            data = yaml.safe_load(text)
        else:
            try:
                data = json.loads(text)
            except json.JSONDecodeError:
                data = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"Invalid config file {file_path}: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(
            f"Config file {file_path} must contain a mapping, got {type(data).__name__}"
        )
    if isinstance(data.get("openid"), dict):
        data = data["openid"]
    return data


def _env_overrides() -> dict[str, str]:
    """Collect ``OPENID_STRATEGY_<FIELD>`` values from the environment."""
    overrides: dict[str, str] = {}
    for field_name in _ENV_FIELDS:
        value = os.environ.get(_ENV_PREFIX + field_name.upper())
        if value:
            overrides[field_name] = value
    return overrides


def build_config(data: StrategyConfig | dict[str, Any]) -> StrategyConfig:
    """Validate *data* into a :class:`StrategyConfig`.

    Raises:
        ConfigError: If validation fails.
    """
    if isinstance(data, StrategyConfig):
        return data
    try:
        return StrategyConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid OpenID strategy configuration: {exc}") from exc


def resolve_config(
    config_file: Optional[str | Path] = None, **overrides: Any
) -> StrategyConfig:
    """Resolve the effective strategy configuration.

    Precedence (highest first):

    1. Explicit keyword *overrides* whose value is not ``None``.
    2. ``OPENID_STRATEGY_<FIELD>`` environment variables.
    3. The config file given by *config_file* or ``$OPENID_STRATEGY_CONFIG``.

    Args:
        config_file: Optional path to a JSON/YAML config file.
        **overrides: Field values that win over every other source.

    Returns:
        The validated :class:`StrategyConfig`.

    Raises:
        ConfigError: If the file cannot be read or the merged settings
            are invalid.
    """
    data: dict[str, Any] = {}

    path = config_file or os.environ.get(_CONFIG_FILE_ENV)
    if path:
        logger.debug("Loading OpenID strategy config from %s", path)
        data.update(load_config_file(path))

    data.update(_env_overrides())
    data.update({k: v for k, v in overrides.items() if v is not None})

    return build_config(data)
