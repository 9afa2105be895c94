"""Check a generated patch directory against its manifest."""

from __future__ import annotations

from collections.abc import Iterator
import logging
import os
from pathlib import Path, PurePosixPath

from pydantic import BaseModel, Field

from aecopatch.core.config.models import AppConfig
from aecopatch.core.errors import ReadSourceDirectoryError
from aecopatch.core.manifest.emitter import read_manifest
from aecopatch.core.manifest.models import Archive, Directory, File
from aecopatch.core.utils.digest import compute_digest
from aecopatch.core.utils.logging import log_performance

logger = logging.getLogger(__name__)


class DigestMismatch(BaseModel):
    """A manifest entry whose file on disk is missing or differs."""

    path: str = Field(description="Path relative to the patch directory")
    expected: str
    actual: str | None = Field(default=None, description="None if the file is missing")


class VerificationReport(BaseModel):
    """Outcome of verifying a patch directory."""

    checked: int = 0
    mismatches: list[DigestMismatch] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.mismatches


def find_archive_dir(parent: Path, archive: Archive, unpacked_suffix: str = ".archive") -> str:
    """Name of the directory under ``parent`` that holds ``archive``'s members.

    Extracted headers are named after the text before their first dot, but
    land in ``<stem minus last suffix><unpacked_suffix>``; ``a.b.c.hed`` is
    stored in ``a.b.archive`` as an Archive named ``a``. The exact
    ``<name><unpacked_suffix>`` folder is tried first, then every other
    ``*<unpacked_suffix>`` folder whose first dotted segment is the name. The
    first candidate holding every member wins. Falls back to the exact name,
    so missing members are reported against it.

    Raises:
        ReadSourceDirectoryError: If ``parent`` exists but cannot be listed
    """
    exact = f"{archive.name}{unpacked_suffix}"
    if not parent.is_dir():
        return exact

    try:
        with os.scandir(parent) as it:
            others = sorted(
                entry.name
                for entry in it
                if entry.name != exact
                and entry.name.endswith(unpacked_suffix)
                and entry.name.split(".")[0] == archive.name
                and entry.is_dir()
            )
    except OSError as e:
        raise ReadSourceDirectoryError(
            f"Failed to read directory {parent}", path=parent, cause=e
        ) from e

    for candidate in [exact, *others]:
        if all((parent / candidate / member.name).is_file() for member in archive.files):
            return candidate
    return exact


def iter_manifest_files(
    tree: Directory,
    unpacked_suffix: str = ".archive",
    patch_dir: Path | None = None,
) -> Iterator[tuple[PurePosixPath, File]]:
    """Yield every File in the tree with its path relative to the patch root.

    Archive members live in ``<archive name><unpacked_suffix>/``. When
    ``patch_dir`` is given, archive folders are located on disk with
    find_archive_dir instead.
    """
    stack: list[tuple[PurePosixPath, Directory]] = [(PurePosixPath(), tree)]
    while stack:
        prefix, directory = stack.pop()
        for child in directory.children:
            if isinstance(child, Directory):
                stack.append((prefix / child.name, child))
            elif isinstance(child, Archive):
                if patch_dir is None:
                    dir_name = f"{child.name}{unpacked_suffix}"
                else:
                    dir_name = find_archive_dir(
                        patch_dir.joinpath(*prefix.parts), child, unpacked_suffix
                    )
                for member in child.files:
                    yield prefix / dir_name / member.name, member
            else:
                yield prefix / child.name, child


@log_performance
def verify_target(target_dir: Path, config: AppConfig | None = None) -> VerificationReport:
    """Recompute every digest listed in a generated patch directory's manifest.

    Args:
        target_dir: Root produced by generate_config
        config: Layout, naming and digest settings used for generation

    Returns:
        Report listing missing files and digest mismatches

    Raises:
        ReadMetadataError: If the manifest cannot be read or decoded
        ReadSourceDirectoryError: If a patch subdirectory cannot be listed
    """
    config = config or AppConfig()
    layout = config.layout

    manifest_path = target_dir / layout.metadata_dir_name / layout.manifest_filename
    patch_dir = target_dir / layout.patch_dir_name
    tree = read_manifest(manifest_path)

    report = VerificationReport()
    for relative_path, file_info in iter_manifest_files(
        tree, config.archives.unpacked_suffix, patch_dir
    ):
        report.checked += 1
        file_path = patch_dir.joinpath(*relative_path.parts)
        try:
            data = file_path.read_bytes()
        except OSError:
            report.mismatches.append(
                DigestMismatch(path=str(relative_path), expected=file_info.digest)
            )
            continue

        actual = compute_digest(data, config.processing.digest_algorithm)
        if actual != file_info.digest:
            report.mismatches.append(
                DigestMismatch(path=str(relative_path), expected=file_info.digest, actual=actual)
            )

    logger.info(
        "Verified %d files in %s (%d mismatches)",
        report.checked,
        patch_dir,
        len(report.mismatches),
    )
    return report
