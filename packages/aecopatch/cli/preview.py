"""Source folder preview rendered as a rich tree."""

from __future__ import annotations

import os
from pathlib import Path

from rich.markup import escape
from rich.tree import Tree

from aecopatch.core.errors import ReadSourceDirectoryError, SourceNotDirectoryError


def build_source_tree(path: Path) -> Tree:
    """Build a tree of every entry below ``path``, in enumeration order.

    Symlinked directories are listed but not expanded.

    Raises:
        SourceNotDirectoryError: If path is not a directory
        ReadSourceDirectoryError: If a directory cannot be listed
    """
    if not path.is_dir():
        raise SourceNotDirectoryError(f"{path} is not a directory.", path=path)

    root = Tree(f"📁 {escape(path.name or str(path))}")
    _add_children(root, path)
    return root


def _add_children(node: Tree, directory: Path) -> None:
    try:
        with os.scandir(directory) as it:
            entries = list(it)
    except OSError as e:
        raise ReadSourceDirectoryError(
            f"Failed to read directory {directory}", path=directory, cause=e
        ) from e

    for entry in entries:
        label = escape(entry.name)
        if entry.is_dir(follow_symlinks=False):
            child = node.add(f"📁 {label}")
            _add_children(child, Path(entry.path))
        elif entry.is_symlink() and entry.is_dir():
            # Not descended; the link may point at an ancestor
            node.add(f"📁 {label}")
        else:
            node.add(f"📝 {label}")
