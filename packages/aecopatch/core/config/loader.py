"""Configuration loading utilities with JSON and YAML support."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from aecopatch.core.config.models import AppConfig
from aecopatch.core.utils.json import read_json
from aecopatch.core.utils.logging import configure_logging as _configure_logging

logger = logging.getLogger(__name__)

ARCHIVE_BACKEND_ENV_VAR = "AECOPATCH_ARCHIVE_BACKEND"

_FORMATS_BY_SUFFIX = {".json": "json", ".yaml": "yaml", ".yml": "yaml"}


def detect_format(file_path: Path | str) -> str:
    """Map a config file name to "json" or "yaml" by its extension.

    >>> detect_format("aecopatch.yml")
    'yaml'

    Raises:
        ValueError: For any other extension
    """
    suffix = Path(file_path).suffix.lower()
    try:
        return _FORMATS_BY_SUFFIX[suffix]
    except KeyError:
        raise ValueError(f"Unsupported config format: {suffix}") from None


def load_config(path: str | Path) -> dict[str, Any]:
    """Read an aecopatch config file into a plain mapping.

    An empty YAML file reads as ``{}``. Validation is left to AppConfig.

    Raises:
        FileNotFoundError: If path does not exist
        ValueError: If the extension is unknown, the content does not parse,
            or the top level is not a mapping
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file does not exist: {path}")

    fmt = detect_format(path)
    try:
        if fmt == "json":
            content = read_json(path)
        else:
            with path.open("r", encoding="utf-8") as f:
                content = yaml.safe_load(f)
    except (ValueError, yaml.YAMLError) as e:
        raise ValueError(f"Invalid {fmt.upper()} in {path}: {e}") from e

    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ValueError(f"Invalid {fmt.upper()} in {path}: expected a mapping")
    return content


def load_app_config(path: str | Path | None = None) -> AppConfig:
    """Load and validate application configuration.

    A missing default config file yields the built-in defaults; an explicit
    path must exist. The archive backend falls back to the
    AECOPATCH_ARCHIVE_BACKEND environment variable when not configured.

    Args:
        path: Path to app config file (.json, .yaml, or .yml).
              Defaults to aecopatch.yaml in the working directory.

    Returns:
        Validated AppConfig instance

    Raises:
        FileNotFoundError: If an explicit config path does not exist
        ValidationError: If config is invalid
    """
    if path is None:
        default_path = AppConfig.default_path()
        config = (
            AppConfig.model_validate(load_config(default_path))
            if default_path.exists()
            else AppConfig()
        )
    else:
        config = AppConfig.model_validate(load_config(path))

    return _load_env_vars_into_config(config)


def _load_env_vars_into_config(config: AppConfig) -> AppConfig:
    """Fill unset values from the environment."""
    if config.processing.archive_backend is not None:
        return config

    backend = os.getenv(ARCHIVE_BACKEND_ENV_VAR)
    if not backend:
        return config

    logger.debug(f"Loaded archive backend from {ARCHIVE_BACKEND_ENV_VAR}")
    processing = config.processing.model_copy(update={"archive_backend": backend})
    return config.model_copy(update={"processing": processing})


def configure_logging(config: AppConfig | None = None) -> None:
    """Configure Python logging from app config.

    Args:
        config: AppConfig instance (loads default if None)
    """
    if config is None:
        config = load_app_config()

    _configure_logging(
        level=config.logging.level,
        format_string=config.logging.format,
        structured=config.logging.structured,
    )
