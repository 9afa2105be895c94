"""Configuration management for aecopatch."""

from aecopatch.core.config.loader import (
    configure_logging,
    detect_format,
    load_app_config,
    load_config,
)
from aecopatch.core.config.models import (
    AppConfig,
    ArchiveNaming,
    LoggingConfig,
    PatchLayout,
    ProcessingConfig,
)

__all__ = [
    # Loaders
    "detect_format",
    "load_config",
    "load_app_config",
    "configure_logging",
    # Models
    "AppConfig",
    "ArchiveNaming",
    "LoggingConfig",
    "PatchLayout",
    "ProcessingConfig",
]
