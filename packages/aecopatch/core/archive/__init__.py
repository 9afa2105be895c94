"""Archive backend abstraction for header/payload archive pairs.

The binary archive format is parsed outside this package. Backends are
plugged in as objects or loaded from a dotted path:

Example:
    >>> from aecopatch.core.archive import load_archive_backend
    >>> backend = load_archive_backend("eco_archive.backend:EcoArchiveBackend")
    >>> archive = backend.open_pair(Path("data.dat"), Path("data.hed"))
    >>> names = archive.file_names()
"""

from .backends import (
    ArchiveBackendUnavailable,
    MissingArchiveBackend,
    load_archive_backend,
    resolve_archive_backend,
)
from .impl_fake import FakeArchiveBackend, FakeArchiveHandle
from .protocols import ArchiveBackend, ArchiveHandle

__all__ = [
    # Protocols
    "ArchiveBackend",
    "ArchiveHandle",
    # Implementations
    "MissingArchiveBackend",
    "FakeArchiveBackend",
    "FakeArchiveHandle",
    # Resolution
    "ArchiveBackendUnavailable",
    "load_archive_backend",
    "resolve_archive_backend",
]
