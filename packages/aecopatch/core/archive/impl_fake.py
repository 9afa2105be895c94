"""In-memory archive backend for tests.

Archives are registered by header path; the files on disk only need to exist
so that component checks pass.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
import threading


class FakeArchiveHandle:
    """Handle over registered members."""

    def __init__(self, members: Mapping[str, bytes], unreadable: frozenset[str]) -> None:
        self._members = dict(members)
        self._unreadable = unreadable
        self._lock = threading.Lock()
        self.reads: list[str] = []

    def file_names(self) -> Sequence[str]:
        return list(self._members)

    def read_file(self, name: str) -> bytes:
        with self._lock:
            self.reads.append(name)
        if name in self._unreadable:
            raise OSError(f"corrupt member {name}")
        try:
            return self._members[name]
        except KeyError as e:
            raise KeyError(f"no member named {name}") from e


class FakeArchiveBackend:
    """Archive backend serving members registered with ``add_archive``."""

    def __init__(self) -> None:
        self._archives: dict[Path, tuple[dict[str, bytes], frozenset[str]]] = {}
        self._broken: set[Path] = set()
        self.opened: list[tuple[Path, Path]] = []

    def add_archive(
        self,
        header_path: Path,
        members: Mapping[str, bytes],
        *,
        unreadable: set[str] | None = None,
    ) -> None:
        """Register members for the pair whose header is ``header_path``."""
        self._archives[Path(header_path).resolve()] = (
            dict(members),
            frozenset(unreadable or ()),
        )

    def break_archive(self, header_path: Path) -> None:
        """Make open_pair fail for this header."""
        self._broken.add(Path(header_path).resolve())

    def open_pair(self, payload_path: Path, header_path: Path) -> FakeArchiveHandle:
        key = Path(header_path).resolve()
        self.opened.append((Path(payload_path), Path(header_path)))

        if key in self._broken:
            raise OSError(f"bad header {header_path}")
        if key not in self._archives:
            raise FileNotFoundError(f"no archive registered for {header_path}")

        members, unreadable = self._archives[key]
        return FakeArchiveHandle(members, unreadable)
