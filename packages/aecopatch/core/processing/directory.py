"""Recursive directory mirroring."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from aecopatch.core.errors import (
    CreateTargetDirectoryError,
    ReadSourceDirectoryEntryError,
    ReadSourceDirectoryError,
    SourceFileNameInvalidError,
)
from aecopatch.core.manifest.models import Directory, FSObject
from aecopatch.core.processing.archive import reconcile_unpacked
from aecopatch.core.processing.context import ProcessingContext
from aecopatch.core.processing.file import process_entry

logger = logging.getLogger(__name__)


def unpacked_archive_stem(name: str, ctx: ProcessingContext) -> str | None:
    """Return the archive name for a ``<stem>.archive`` directory name, else None."""
    path = Path(name)
    if path.suffix == ctx.naming.unpacked_suffix:
        return path.stem
    return None


def _entry_name(entry: os.DirEntry[str]) -> str:
    # Undecodable bytes come back as lone surrogates, which cannot round-trip to UTF-8
    try:
        entry.name.encode("utf-8")
    except UnicodeEncodeError as e:
        raise SourceFileNameInvalidError(
            f"The object at {entry.path!r} has an invalid name", path=entry.path, cause=e
        ) from e
    return entry.name


def _make_target_dir(target_path: Path) -> None:
    try:
        target_path.mkdir()
    except OSError as e:
        raise CreateTargetDirectoryError(
            f"Unable to create target subdirectory {target_path}", path=target_path, cause=e
        ) from e


def _process_dir_entry(
    entry: os.DirEntry[str],
    target_dir: Path,
    ctx: ProcessingContext,
) -> FSObject | None:
    object_name = _entry_name(entry)
    object_path = Path(entry.path)
    target_path = target_dir / object_name

    # Symlinks are followed, matching a plain is_dir()/is_file() check
    try:
        is_dir = entry.is_dir()
        is_file = not is_dir and entry.is_file()
    except OSError as e:
        raise ReadSourceDirectoryEntryError(
            f"Couldn't read entry {object_path}", path=object_path, cause=e
        ) from e

    if is_dir:
        _make_target_dir(target_path)

        archive_name = unpacked_archive_stem(object_name, ctx)
        if archive_name is not None:
            return reconcile_unpacked(object_path, target_path, archive_name, ctx)

        return process_dir(object_path, target_path, object_name, ctx)

    if is_file:
        return process_entry(object_path, target_path, object_name, ctx)

    logger.debug("Skipping special file %s", object_path)
    return None


def process_dir(
    source_dir: Path,
    target_dir: Path,
    logical_name: str,
    ctx: ProcessingContext,
) -> Directory:
    """Mirror ``source_dir`` into the existing ``target_dir``.

    Entries are processed in parallel on the context's pool; children keep
    the order in which the directory was enumerated.

    Args:
        source_dir: Readable source directory
        target_dir: Existing, writable target directory
        logical_name: Name of the resulting Directory node
        ctx: Processing context

    Returns:
        Directory node for the mirrored contents

    Raises:
        ReadSourceDirectoryError: If the directory cannot be listed
        ReadSourceDirectoryEntryError: If an entry cannot be read
        PatchConfigError: Any failure from a child entry
    """
    try:
        scanner = os.scandir(source_dir)
    except OSError as e:
        raise ReadSourceDirectoryError(
            f"Failed to read directory {source_dir}", path=source_dir, cause=e
        ) from e

    with scanner:
        try:
            entries = list(scanner)
        except OSError as e:
            raise ReadSourceDirectoryEntryError(
                f"Couldn't read entry from directory {source_dir}", path=source_dir, cause=e
            ) from e

    results = ctx.pool.map_ordered(
        lambda entry: _process_dir_entry(entry, target_dir, ctx),
        entries,
    )
    children = [child for child in results if child is not None]

    logger.debug("Mirrored %s (%d of %d entries)", source_dir, len(children), len(entries))
    return Directory(name=logical_name, children=children)
