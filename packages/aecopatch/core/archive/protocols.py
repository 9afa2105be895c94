"""Protocols for archive backends.

The header/payload archive format is parsed by a pluggable backend. The
generator only needs the member names of an opened pair and each member's
bytes.
"""

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol


class ArchiveHandle(Protocol):
    """
    An opened header/payload archive pair.

    ``read_file`` is called concurrently from worker threads, so
    implementations must not share unsynchronized cursor state between calls.
    """

    def file_names(self) -> Sequence[str]:
        """
        Member names in archive order.

        Returns:
            Ordered member names (flat, no directory components)
        """
        ...

    def read_file(self, name: str) -> bytes:
        """
        Read the full payload of a member.

        Args:
            name: Member name as returned by file_names()

        Returns:
            Complete member bytes

        Raises:
            Exception: Any failure; the caller reports it as a read failure
        """
        ...


class ArchiveBackend(Protocol):
    """Factory opening header/payload pairs."""

    def open_pair(self, payload_path: Path, header_path: Path) -> ArchiveHandle:
        """
        Open an archive from its two component files.

        Args:
            payload_path: Path of the payload (.dat) file
            header_path: Path of the header (.hed) file

        Returns:
            Opened archive handle

        Raises:
            Exception: Any failure; the caller reports it as an open failure
        """
        ...
