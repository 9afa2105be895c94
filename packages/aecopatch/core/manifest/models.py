"""Tree model for the mirrored patch output.

The manifest is a tree of three node kinds. On the wire a node is
externally tagged by its kind, e.g. ``{"File": {"name": ..., "digest": ...}}``;
the manifest root is an untagged Directory and Archive members are untagged
Files.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from aecopatch.core.utils.digest import DEFAULT_DIGEST_ALGORITHM, compute_digest


class File(BaseModel):
    """A mirrored file and the digest of its contents."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    digest: str = Field(pattern=r"^[0-9a-f]+$", description="Lowercase hex content digest")

    @classmethod
    def from_bytes(
        cls, name: str, data: bytes, algorithm: str = DEFAULT_DIGEST_ALGORITHM
    ) -> File:
        """Build a File node by hashing ``data``."""
        return cls(name=name, digest=compute_digest(data, algorithm))


class Archive(BaseModel):
    """Flat collection of files extracted from an archive."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    files: list[File] = Field(default_factory=list)


class Directory(BaseModel):
    """A mirrored directory with its children in source enumeration order."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    children: list[FSObject] = Field(default_factory=list)

    @field_validator("children", mode="before")
    @classmethod
    def _untag_children(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return value
        return [untag_node(child) for child in value]

    @field_serializer("children")
    def _tag_children(self, children: list[FSObject]) -> list[dict[str, Any]]:
        return [tag_node(child) for child in children]


FSObject = File | Directory | Archive

_NODE_TYPES: dict[str, type[BaseModel]] = {
    "File": File,
    "Directory": Directory,
    "Archive": Archive,
}

Directory.model_rebuild()


def tag_node(node: FSObject) -> dict[str, Any]:
    """Encode a node as ``{<kind>: <fields>}``."""
    return {type(node).__name__: node.model_dump(mode="json")}


def untag_node(value: Any) -> Any:
    """Decode a ``{<kind>: <fields>}`` object into its node model.

    Model instances pass through untouched.

    Raises:
        ValueError: If the value is not a single-key object with a known tag
    """
    if isinstance(value, (File, Directory, Archive)):
        return value

    if not isinstance(value, dict) or len(value) != 1:
        raise ValueError("Expected a node object with exactly one kind tag")

    ((tag, body),) = value.items()
    node_cls = _NODE_TYPES.get(tag)
    if node_cls is None:
        raise ValueError(f"Unknown node kind: {tag!r}")

    return node_cls.model_validate(body)


class ServerStatus(str, Enum):
    """Patch server availability published next to the manifest."""

    ONLINE = "Online"
    MAINTENANCE = "Maintenance"

    @classmethod
    def from_maintenance(cls, maintenance: bool) -> ServerStatus:
        return cls.MAINTENANCE if maintenance else cls.ONLINE


@dataclass(frozen=True)
class TreeSummary:
    """Node counts for a manifest tree (root directory excluded)."""

    directories: int = 0
    files: int = 0
    archives: int = 0
    archive_files: int = 0


def summarize(tree: Directory) -> TreeSummary:
    """Count the nodes below ``tree``."""
    directories = files = archives = archive_files = 0

    stack: list[Directory] = [tree]
    while stack:
        directory = stack.pop()
        for child in directory.children:
            if isinstance(child, Directory):
                directories += 1
                stack.append(child)
            elif isinstance(child, Archive):
                archives += 1
                archive_files += len(child.files)
            else:
                files += 1

    return TreeSummary(
        directories=directories,
        files=files,
        archives=archives,
        archive_files=archive_files,
    )
