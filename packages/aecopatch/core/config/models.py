"""Configuration models for aecopatch."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from aecopatch.core.utils.digest import DEFAULT_DIGEST_ALGORITHM, is_supported_algorithm


class ConfigBase(BaseModel):
    """Base class for aecopatch configurations.

    Subclasses name the file looked up when no explicit path is given.
    """

    model_config = ConfigDict(extra="ignore")  # Forward compatibility

    @classmethod
    def default_path(cls) -> Path:
        """Return the default config file path for this config type."""
        raise NotImplementedError(f"{cls.__name__} must implement default_path()")


class PatchLayout(BaseModel):
    """Names of the fixed entries in a generated patch directory."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    patch_dir_name: str = Field(default="patch", min_length=1, description="Mirror root")
    metadata_dir_name: str = Field(default="meta", min_length=1, description="Manifest folder")
    manifest_filename: str = Field(default="patchlist.json", min_length=1)
    status_filename: str = Field(default="status.json", min_length=1)


class ArchiveNaming(BaseModel):
    """File extensions used to detect archives (without leading dots)."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    header_extension: str = Field(default="hed", pattern=r"^[^./\\]+$")
    payload_extension: str = Field(default="dat", pattern=r"^[^./\\]+$")
    unpacked_extension: str = Field(default="archive", pattern=r"^[^./\\]+$")

    @property
    def header_suffix(self) -> str:
        return f".{self.header_extension}"

    @property
    def payload_suffix(self) -> str:
        return f".{self.payload_extension}"

    @property
    def unpacked_suffix(self) -> str:
        return f".{self.unpacked_extension}"


class ProcessingConfig(BaseModel):
    """Tree walk and extraction settings."""

    model_config = ConfigDict(extra="forbid")

    max_workers: int | None = Field(
        default=None, ge=1, description="Worker threads (default: CPU count)"
    )
    digest_algorithm: str = Field(
        default=DEFAULT_DIGEST_ALGORITHM, description="hashlib algorithm for file digests"
    )
    archive_backend: str | None = Field(
        default=None,
        description="Dotted path ('package.module:attr') of the archive backend",
    )

    @field_validator("digest_algorithm")
    @classmethod
    def _validate_digest_algorithm(cls, value: str) -> str:
        value = value.lower()
        if not is_supported_algorithm(value):
            raise ValueError(f"Unsupported digest algorithm: {value}")
        return value


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    structured: bool = Field(default=False, description="Emit JSON-lines log records")


class AppConfig(ConfigBase):
    """Application-level configuration."""

    model_config = ConfigDict(extra="ignore")

    layout: PatchLayout = PatchLayout()
    archives: ArchiveNaming = ArchiveNaming()
    processing: ProcessingConfig = ProcessingConfig()
    logging: LoggingConfig = LoggingConfig()

    @classmethod
    def default_path(cls) -> Path:
        """Default path for application config."""
        return Path("aecopatch.yaml")
