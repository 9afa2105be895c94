"""Manifest tree model, persistence and verification.

Example:
    >>> from aecopatch.core.manifest import Directory, File, serialize_manifest
    >>> tree = Directory(name="patch", children=[File.from_bytes("a.txt", b"hi")])
    >>> serialize_manifest(tree)
    '{"name":"patch","children":[{"File":{"name":"a.txt","digest":"49f68a5c8493ec2c0bf489821c21fc3b"}}]}'
"""

from aecopatch.core.manifest.emitter import (
    EmittedMetadata,
    emit,
    read_manifest,
    read_status,
    serialize_manifest,
    serialize_status,
)
from aecopatch.core.manifest.models import (
    Archive,
    Directory,
    File,
    FSObject,
    ServerStatus,
    TreeSummary,
    summarize,
)
from aecopatch.core.manifest.verify import (
    DigestMismatch,
    VerificationReport,
    find_archive_dir,
    iter_manifest_files,
    verify_target,
)

__all__ = [
    # Tree model
    "Archive",
    "Directory",
    "File",
    "FSObject",
    "ServerStatus",
    "TreeSummary",
    "summarize",
    # Persistence
    "EmittedMetadata",
    "emit",
    "read_manifest",
    "read_status",
    "serialize_manifest",
    "serialize_status",
    # Verification
    "DigestMismatch",
    "VerificationReport",
    "find_archive_dir",
    "iter_manifest_files",
    "verify_target",
]
