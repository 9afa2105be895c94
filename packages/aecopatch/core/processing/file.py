"""Single-file processing: plain copies and packed archive dispatch."""

from __future__ import annotations

from pathlib import Path

from aecopatch.core.errors import (
    CreateTargetDirectoryError,
    ReadSourceFileError,
    WriteTargetFileError,
)
from aecopatch.core.manifest.models import File, FSObject
from aecopatch.core.processing.archive import extract_packed
from aecopatch.core.processing.context import ProcessingContext


def archive_target_dir(target_path: Path, ctx: ProcessingContext) -> Path:
    """Extraction directory for a header file: ``<stem>`` with the unpacked suffix.

    Example: ``patch/b.hed`` -> ``patch/b.archive``, ``patch/x.y.hed`` -> ``patch/x.archive``.

    Raises:
        CreateTargetDirectoryError: If the header name leaves no usable stem (``..hed``)
    """
    try:
        dir_name = Path(target_path.stem).with_suffix(ctx.naming.unpacked_suffix)
    except ValueError as e:
        raise CreateTargetDirectoryError(
            f"Unable to create target directory for {target_path}", path=target_path, cause=e
        ) from e
    return target_path.parent / dir_name


def process_entry(
    source_path: Path,
    target_path: Path,
    logical_name: str,
    ctx: ProcessingContext,
) -> FSObject | None:
    """Mirror one regular file into the target tree.

    Payload files yield None; they are consumed when their header is processed,
    and orphaned payloads are dropped. Header files are unpacked into a sibling
    archive directory. Anything else is copied byte for byte.

    Args:
        source_path: File in the source tree
        target_path: Destination path in the target tree
        logical_name: Entry name recorded in the manifest
        ctx: Processing context

    Returns:
        File or Archive node, or None for payload files

    Raises:
        ReadSourceFileError: If the source file cannot be read
        WriteTargetFileError: If the target file cannot be written
        PatchConfigError: Any archive extraction failure
    """
    suffix = source_path.suffix
    if suffix == ctx.naming.payload_suffix:
        return None

    if suffix == ctx.naming.header_suffix:
        return extract_packed(
            source_path,
            archive_target_dir(target_path, ctx),
            logical_name.split(".")[0],
            ctx,
        )

    # Read once into memory so the bytes hashed are the bytes written
    try:
        data = source_path.read_bytes()
    except OSError as e:
        raise ReadSourceFileError(
            f"Failed to read file {source_path}", path=source_path, cause=e
        ) from e

    file_info = File.from_bytes(logical_name, data, ctx.digest_algorithm)

    try:
        target_path.write_bytes(data)
    except OSError as e:
        raise WriteTargetFileError(
            f"Failed to write file {target_path}", path=target_path, cause=e
        ) from e

    return file_info
