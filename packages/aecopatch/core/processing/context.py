"""Settings and shared services threaded through a tree walk."""

from __future__ import annotations

from dataclasses import dataclass, field

from aecopatch.core.archive.protocols import ArchiveBackend
from aecopatch.core.config.models import ArchiveNaming
from aecopatch.core.processing.pool import WorkerPool
from aecopatch.core.utils.digest import DEFAULT_DIGEST_ALGORITHM


@dataclass(frozen=True)
class ProcessingContext:
    """Everything a unit of work needs besides its own source and target paths.

    The pool is the only shared resource; it is safe to use from any thread.
    """

    pool: WorkerPool
    backend: ArchiveBackend
    naming: ArchiveNaming = field(default_factory=ArchiveNaming)
    digest_algorithm: str = DEFAULT_DIGEST_ALGORITHM
