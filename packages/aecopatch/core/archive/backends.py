"""Archive backend resolution."""

from __future__ import annotations

import importlib
import logging
from pathlib import Path

from aecopatch.core.archive.protocols import ArchiveBackend, ArchiveHandle

logger = logging.getLogger(__name__)


class ArchiveBackendUnavailable(RuntimeError):
    """No archive backend is configured."""

    pass


class MissingArchiveBackend:
    """Backend used when none is configured; refuses to open any pair."""

    def open_pair(self, payload_path: Path, header_path: Path) -> ArchiveHandle:
        raise ArchiveBackendUnavailable(
            "no archive backend configured (set processing.archive_backend "
            "or AECOPATCH_ARCHIVE_BACKEND)"
        )


def load_archive_backend(dotted_path: str) -> ArchiveBackend:
    """Import an archive backend from ``package.module:attr``.

    ``attr`` may name a backend instance, or a class/factory that is called
    with no arguments to build one.

    Args:
        dotted_path: Import path, e.g. "eco_archive.backend:EcoArchiveBackend"

    Returns:
        Backend exposing ``open_pair``

    Raises:
        ValueError: If the path is malformed or the object is not a backend
        ImportError: If the module cannot be imported

    Example:
        >>> backend = load_archive_backend("eco_archive.backend:EcoArchiveBackend")
    """
    module_name, sep, attr_name = dotted_path.partition(":")
    if not sep or not module_name or not attr_name:
        raise ValueError(f"Archive backend must look like 'package.module:attr': {dotted_path}")

    module = importlib.import_module(module_name)
    try:
        target = getattr(module, attr_name)
    except AttributeError as e:
        raise ValueError(f"Module {module_name!r} has no attribute {attr_name!r}") from e

    if isinstance(target, type) or (callable(target) and not hasattr(target, "open_pair")):
        backend = target()
    else:
        backend = target

    if not callable(getattr(backend, "open_pair", None)):
        raise ValueError(f"{dotted_path} does not provide an open_pair() method")

    logger.debug("Loaded archive backend %s", dotted_path)
    return backend


def resolve_archive_backend(dotted_path: str | None) -> ArchiveBackend:
    """Load the configured backend, or fall back to MissingArchiveBackend."""
    if dotted_path is None:
        return MissingArchiveBackend()
    return load_archive_backend(dotted_path)
