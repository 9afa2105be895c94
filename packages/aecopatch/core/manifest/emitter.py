"""Manifest and server-status persistence.

Writes ``patchlist.json`` (the serialized root Directory) and ``status.json``
(the serialized ServerStatus) into the metadata directory, and reads them back.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path

from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from aecopatch.core.config.models import PatchLayout
from aecopatch.core.errors import (
    MetadataSerializationError,
    ReadMetadataError,
    WriteMetadataError,
)
from aecopatch.core.manifest.models import Directory, ServerStatus

logger = logging.getLogger(__name__)

_STATUS_ADAPTER: TypeAdapter[ServerStatus] = TypeAdapter(ServerStatus)


@dataclass(frozen=True)
class EmittedMetadata:
    """Paths of the metadata files written by ``emit``."""

    manifest_path: Path
    status_path: Path


def serialize_manifest(tree: Directory) -> str:
    """Encode the manifest tree as compact JSON.

    Raises:
        MetadataSerializationError: If the tree cannot be encoded
    """
    try:
        return tree.model_dump_json()
    except PydanticSerializationError as e:
        raise MetadataSerializationError("Failed to serialize metadata", cause=e) from e


def serialize_status(status: ServerStatus) -> str:
    """Encode the server status as a JSON string value.

    Raises:
        MetadataSerializationError: If the status cannot be encoded
    """
    try:
        return _STATUS_ADAPTER.dump_json(status).decode("utf-8")
    except PydanticSerializationError as e:
        raise MetadataSerializationError("Failed to serialize metadata", cause=e) from e


def _write_metadata_file(path: Path, content: str) -> None:
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise WriteMetadataError(
            f"Unable to write metadata file {path}", path=path, cause=e
        ) from e


def emit(
    tree: Directory,
    status: ServerStatus,
    metadata_dir: Path,
    layout: PatchLayout | None = None,
) -> EmittedMetadata:
    """Write the manifest and server status under ``metadata_dir``.

    Both values are serialized before anything is written, so an encoding
    failure never leaves a half-written metadata directory.

    Args:
        tree: Root directory of the mirrored output
        status: Server status to publish
        metadata_dir: Existing metadata directory
        layout: File naming (defaults to patchlist.json/status.json)

    Returns:
        Paths of the written files

    Raises:
        MetadataSerializationError: If either value cannot be encoded
        WriteMetadataError: If a file cannot be written
    """
    layout = layout or PatchLayout()

    manifest_json = serialize_manifest(tree)
    status_json = serialize_status(status)

    manifest_path = metadata_dir / layout.manifest_filename
    status_path = metadata_dir / layout.status_filename

    _write_metadata_file(manifest_path, manifest_json)
    _write_metadata_file(status_path, status_json)

    logger.debug(
        "Wrote manifest (%d bytes) to %s and status %s to %s",
        len(manifest_json),
        manifest_path,
        status.value,
        status_path,
    )

    return EmittedMetadata(manifest_path=manifest_path, status_path=status_path)


def _read_metadata_file(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        raise ReadMetadataError(f"Unable to read metadata file {path}", path=path, cause=e) from e


def read_manifest(path: Path) -> Directory:
    """Decode a manifest file back into its Directory tree.

    Raises:
        ReadMetadataError: If the file is unreadable or not a valid manifest
    """
    content = _read_metadata_file(path)
    try:
        return Directory.model_validate_json(content)
    except ValidationError as e:
        raise ReadMetadataError(f"Invalid manifest {path}", path=path, cause=e) from e


def read_status(path: Path) -> ServerStatus:
    """Decode a status file.

    Raises:
        ReadMetadataError: If the file is unreadable or holds an unknown status
    """
    content = _read_metadata_file(path)
    try:
        return _STATUS_ADAPTER.validate_json(content)
    except ValidationError as e:
        raise ReadMetadataError(f"Invalid server status {path}", path=path, cause=e) from e
