"""Shared pytest fixtures for aecopatch tests."""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
import logging
from pathlib import Path
from typing import Any

import pytest

from aecopatch.core.archive import FakeArchiveBackend
from aecopatch.core.config.models import AppConfig, ProcessingConfig
from aecopatch.core.processing import ProcessingContext, WorkerPool

TreeEntries = Mapping[str, Any]


@pytest.fixture(autouse=True)
def restore_root_logging() -> Iterator[None]:
    """Undo configure_logging calls made by a test."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers[:]:
        # configure_logging installs plain stream/file handlers
        if handler not in handlers and type(handler) in (logging.StreamHandler, logging.FileHandler):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


# ============================================================================
# Filesystem Fixtures
# ============================================================================


def write_tree(root: Path, entries: TreeEntries) -> Path:
    """Create files and folders under ``root``.

    Bytes values become files; mapping values become subdirectories.
    """
    root.mkdir(parents=True, exist_ok=True)
    for name, content in entries.items():
        path = root / name
        if isinstance(content, Mapping):
            write_tree(path, content)
        else:
            path.write_bytes(content)
    return root


@pytest.fixture
def make_tree(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing a source tree below tmp_path."""

    def _make(entries: TreeEntries, name: str = "source") -> Path:
        return write_tree(tmp_path / name, entries)

    return _make


@pytest.fixture
def target_dir(tmp_path: Path) -> Path:
    """Target path that does not exist yet."""
    return tmp_path / "aeco-patch"


# ============================================================================
# Processing Fixtures
# ============================================================================


@pytest.fixture
def fake_backend() -> FakeArchiveBackend:
    """Empty in-memory archive backend."""
    return FakeArchiveBackend()


@pytest.fixture
def pool() -> Iterator[WorkerPool]:
    """Small worker pool, shut down after the test."""
    with WorkerPool(max_workers=2) as worker_pool:
        yield worker_pool


@pytest.fixture
def ctx(pool: WorkerPool, fake_backend: FakeArchiveBackend) -> ProcessingContext:
    """Processing context with default naming and MD5 digests."""
    return ProcessingContext(pool=pool, backend=fake_backend)


@pytest.fixture
def app_config() -> AppConfig:
    """App config with a fixed worker count."""
    return AppConfig(processing=ProcessingConfig(max_workers=2))
