"""Patch configuration generation.

Builds ``<target>/patch`` (a mirror of the source tree with archives unpacked)
and ``<target>/meta`` (the manifest and server status) in one synchronous call.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import time

from aecopatch.core.archive import ArchiveBackend, resolve_archive_backend
from aecopatch.core.config.models import AppConfig
from aecopatch.core.errors import (
    CreateTargetDirectoryError,
    MetadataDirectoryError,
    OpenArchiveError,
    SourceNotDirectoryError,
    TargetAlreadyExistsError,
)
from aecopatch.core.manifest import (
    Directory,
    EmittedMetadata,
    ServerStatus,
    TreeSummary,
    emit,
    summarize,
)
from aecopatch.core.processing import ProcessingContext, WorkerPool, process_dir
from aecopatch.core.utils.logging import get_logger


@dataclass(frozen=True)
class GenerationResult:
    """Outcome of a successful generation run."""

    tree: Directory
    status: ServerStatus
    patch_dir: Path
    metadata: EmittedMetadata
    summary: TreeSummary
    duration_ms: float


def _create_dir(path: Path) -> None:
    try:
        path.mkdir()
    except OSError as e:
        raise CreateTargetDirectoryError(
            f"Unable to create target directory {path}", path=path, cause=e
        ) from e


def generate_config(
    source_dir: str | Path,
    target_dir: str | Path,
    maintenance: bool = False,
    *,
    config: AppConfig | None = None,
    backend: ArchiveBackend | None = None,
) -> GenerationResult:
    """Generate patch server configuration from a client asset tree.

    The target must not exist; every run is a full rebuild. On failure the
    partially written target is left in place.

    Args:
        source_dir: Client asset folder to mirror
        target_dir: Output folder to create
        maintenance: Publish the Maintenance status instead of Online
        config: Layout, naming and processing settings (defaults if None)
        backend: Archive backend; defaults to config.processing.archive_backend

    Returns:
        GenerationResult with the manifest tree and written paths

    Raises:
        SourceNotDirectoryError: If source_dir is not a directory
        TargetAlreadyExistsError: If target_dir already exists
        PatchConfigError: Any failure during the walk or metadata output

    Example:
        >>> result = generate_config("eco", "out/aeco-patch", maintenance=False)
        >>> result.metadata.manifest_path
        PosixPath('out/aeco-patch/meta/patchlist.json')
    """
    config = config or AppConfig()
    source_dir = Path(source_dir)
    target_dir = Path(target_dir)
    layout = config.layout

    if not source_dir.is_dir():
        raise SourceNotDirectoryError(f"Source is not a directory: {source_dir}", path=source_dir)

    if target_dir.exists():
        raise TargetAlreadyExistsError(f"Target already exists: {target_dir}", path=target_dir)

    if backend is None:
        try:
            backend = resolve_archive_backend(config.processing.archive_backend)
        except Exception as e:
            raise OpenArchiveError(
                f"Unable to load archive backend {config.processing.archive_backend}", cause=e
            ) from e

    start_time = time.perf_counter()

    _create_dir(target_dir)

    patch_dir = target_dir / layout.patch_dir_name
    _create_dir(patch_dir)

    metadata_dir = target_dir / layout.metadata_dir_name
    try:
        metadata_dir.mkdir()
    except OSError as e:
        raise MetadataDirectoryError(
            f"Unable to create metadata directory {metadata_dir}", path=metadata_dir, cause=e
        ) from e

    run_logger = get_logger(__name__, source=str(source_dir), target=str(target_dir))
    run_logger.info("Generating patch config from %s into %s", source_dir, target_dir)

    with WorkerPool(max_workers=config.processing.max_workers) as pool:
        ctx = ProcessingContext(
            pool=pool,
            backend=backend,
            naming=config.archives,
            digest_algorithm=config.processing.digest_algorithm,
        )
        tree = process_dir(source_dir, patch_dir, layout.patch_dir_name, ctx)

    status = ServerStatus.from_maintenance(maintenance)
    metadata = emit(tree, status, metadata_dir, layout)

    summary = summarize(tree)
    duration_ms = (time.perf_counter() - start_time) * 1000

    run_logger.info(
        "Generated manifest with %d files, %d archives (%d members), %d directories in %.0fms",
        summary.files,
        summary.archives,
        summary.archive_files,
        summary.directories,
        duration_ms,
    )

    return GenerationResult(
        tree=tree,
        status=status,
        patch_dir=patch_dir,
        metadata=metadata,
        summary=summary,
        duration_ms=duration_ms,
    )
