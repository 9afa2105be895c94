"""Parallel tree walk that mirrors a source tree and builds its manifest."""

from aecopatch.core.processing.archive import extract_packed, reconcile_unpacked
from aecopatch.core.processing.context import ProcessingContext
from aecopatch.core.processing.directory import process_dir
from aecopatch.core.processing.file import process_entry
from aecopatch.core.processing.pool import WorkerPool

__all__ = [
    "ProcessingContext",
    "WorkerPool",
    "extract_packed",
    "process_dir",
    "process_entry",
    "reconcile_unpacked",
]
