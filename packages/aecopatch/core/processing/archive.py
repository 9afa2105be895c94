"""Archive extraction.

Packed archives (header + payload pair) are unpacked through the configured
backend; pre-unpacked archive directories are mirrored and checked to hold
only files.
"""

from __future__ import annotations

import logging
from pathlib import Path

from aecopatch.core.errors import (
    ArchiveComponentMissingError,
    ArchiveContainsDirectoryError,
    CreateTargetDirectoryError,
    OpenArchiveError,
    ReadArchiveError,
    WriteTargetFileError,
)
from aecopatch.core.manifest.models import Archive, File
from aecopatch.core.processing.context import ProcessingContext

logger = logging.getLogger(__name__)


def extract_packed(
    header_path: Path,
    target_dir: Path,
    logical_name: str,
    ctx: ProcessingContext,
) -> Archive:
    """Unpack a header/payload pair into ``target_dir``.

    Members are read, hashed and written in parallel; the returned files keep
    the backend's member order.

    Args:
        header_path: Header component; the payload sits next to it
        target_dir: Extraction directory (must not exist yet)
        logical_name: Name of the resulting Archive node
        ctx: Processing context

    Returns:
        Archive listing every extracted member

    Raises:
        ArchiveComponentMissingError: If the header or payload file is missing
        OpenArchiveError: If the backend cannot open the pair
        CreateTargetDirectoryError: If target_dir cannot be created
        ReadArchiveError: If a member cannot be read
        WriteTargetFileError: If a member cannot be written
    """
    payload_path = header_path.with_suffix(ctx.naming.payload_suffix)

    for component in (header_path, payload_path):
        if not component.exists():
            raise ArchiveComponentMissingError(
                f"Missing archive component {component}", path=component
            )

    try:
        archive = ctx.backend.open_pair(payload_path, header_path)
    except Exception as e:
        raise OpenArchiveError(
            f"Couldn't open archive {payload_path} + {header_path}", path=header_path, cause=e
        ) from e

    try:
        target_dir.mkdir()
    except OSError as e:
        raise CreateTargetDirectoryError(
            f"Unable to create target directory {target_dir}", path=target_dir, cause=e
        ) from e

    def extract_member(member_name: str) -> File:
        try:
            data = archive.read_file(member_name)
        except Exception as e:
            raise ReadArchiveError(
                f"Couldn't read file {member_name} from archive {payload_path} + {header_path}",
                path=header_path,
                cause=e,
            ) from e

        file_info = File.from_bytes(member_name, data, ctx.digest_algorithm)

        target_file_path = target_dir / member_name
        try:
            target_file_path.write_bytes(data)
        except OSError as e:
            raise WriteTargetFileError(
                f"Failed to write file {target_file_path}", path=target_file_path, cause=e
            ) from e

        return file_info

    files = ctx.pool.map_ordered(extract_member, list(archive.file_names()))

    logger.debug("Extracted %d files from %s into %s", len(files), header_path, target_dir)
    return Archive(name=logical_name, files=files)


def reconcile_unpacked(
    source_dir: Path,
    target_dir: Path,
    logical_name: str,
    ctx: ProcessingContext,
) -> Archive:
    """Mirror an already-unpacked archive directory and package it as an Archive.

    Raises:
        ArchiveContainsDirectoryError: If the directory holds anything but files
        PatchConfigError: Any failure from mirroring the directory
    """
    # Deferred import: the walker dispatches back into this module
    from aecopatch.core.processing.directory import process_dir

    directory = process_dir(source_dir, target_dir, logical_name, ctx)

    files: list[File] = []
    for child in directory.children:
        if not isinstance(child, File):
            raise ArchiveContainsDirectoryError(
                f"The archive directory {source_dir} does not contain exclusively files",
                path=source_dir,
            )
        files.append(child)

    return Archive(name=logical_name, files=files)
