"""Tests for recursive directory mirroring."""

from __future__ import annotations

import os
import sys

import pytest

from aecopatch.core.errors import (
    CreateTargetDirectoryError,
    ReadSourceDirectoryError,
    SourceFileNameInvalidError,
)
from aecopatch.core.manifest import Archive, Directory, File
from aecopatch.core.processing import process_dir
from aecopatch.core.processing.directory import unpacked_archive_stem


def _by_name(directory: Directory) -> dict:
    return {child.name: child for child in directory.children}


@pytest.fixture
def target(tmp_path):
    path = tmp_path / "patch"
    path.mkdir()
    return path


class TestProcessDir:
    """Test suite for process_dir."""

    def test_mirrors_nested_tree(self, make_tree, target, ctx):
        source = make_tree({"a.txt": b"A", "sub": {"c.txt": b"C", "deeper": {"d": b"D"}}})

        tree = process_dir(source, target, "patch", ctx)

        assert tree.name == "patch"
        children = _by_name(tree)
        assert children["a.txt"] == File.from_bytes("a.txt", b"A")
        sub = children["sub"]
        assert isinstance(sub, Directory)
        assert _by_name(_by_name(sub)["deeper"])["d"] == File.from_bytes("d", b"D")
        assert (target / "sub" / "deeper" / "d").read_bytes() == b"D"

    def test_children_follow_enumeration_order(self, make_tree, target, ctx):
        source = make_tree({f"f{i:02d}": bytes([i]) for i in range(20)})

        tree = process_dir(source, target, "patch", ctx)

        expected = [entry.name for entry in os.scandir(source)]
        assert [child.name for child in tree.children] == expected

    def test_empty_directories_are_kept(self, make_tree, target, ctx):
        source = make_tree({"empty": {}})

        tree = process_dir(source, target, "patch", ctx)

        assert tree.children == [Directory(name="empty")]
        assert (target / "empty").is_dir()

    def test_orphan_payload_is_dropped(self, make_tree, target, ctx):
        source = make_tree({"orphan.dat": b"D"})

        tree = process_dir(source, target, "patch", ctx)

        assert tree.children == []
        assert list(target.iterdir()) == []

    def test_packed_archive_pair_becomes_one_node(self, make_tree, target, ctx, fake_backend):
        source = make_tree({"b.hed": b"h", "b.dat": b"d"})
        fake_backend.add_archive(source / "b.hed", {"x.bin": b"X"})

        tree = process_dir(source, target, "patch", ctx)

        assert tree.children == [Archive(name="b", files=[File.from_bytes("x.bin", b"X")])]
        assert sorted(p.name for p in target.iterdir()) == ["b.archive"]

    def test_unpacked_archive_directory(self, make_tree, target, ctx):
        source = make_tree({"a.b.archive": {"m": b"M"}})

        tree = process_dir(source, target, "patch", ctx)

        assert tree.children == [Archive(name="a.b", files=[File.from_bytes("m", b"M")])]
        assert (target / "a.b.archive" / "m").read_bytes() == b"M"

    def test_missing_source(self, tmp_path, target, ctx):
        with pytest.raises(ReadSourceDirectoryError):
            process_dir(tmp_path / "missing", target, "patch", ctx)

    def test_target_subdirectory_collision(self, make_tree, target, ctx):
        source = make_tree({"sub": {"c.txt": b"C"}})
        (target / "sub").mkdir()

        with pytest.raises(CreateTargetDirectoryError):
            process_dir(source, target, "patch", ctx)

    @pytest.mark.skipif(not sys.platform.startswith("linux"), reason="needs byte file names")
    def test_undecodable_name(self, tmp_path, target, ctx):
        source = tmp_path / "source"
        source.mkdir()
        with open(os.path.join(os.fsencode(source), b"bad\xff.txt"), "wb") as f:
            f.write(b"x")

        with pytest.raises(SourceFileNameInvalidError):
            process_dir(source, target, "patch", ctx)

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="needs symlinks")
    def test_symlinks_are_followed(self, make_tree, target, ctx):
        source = make_tree({"real": {"f": b"F"}, "data.txt": b"T"})
        (source / "linked").symlink_to(source / "real", target_is_directory=True)
        (source / "alias.txt").symlink_to(source / "data.txt")

        tree = process_dir(source, target, "patch", ctx)

        children = _by_name(tree)
        assert children["linked"] == Directory(name="linked", children=[File.from_bytes("f", b"F")])
        assert children["alias.txt"] == File.from_bytes("alias.txt", b"T")
        assert not (target / "linked").is_symlink()


class TestUnpackedArchiveStem:
    """Test suite for unpacked_archive_stem."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("b.archive", "b"),
            ("a.b.archive", "a.b"),
            ("archive", None),
            ("b.archived", None),
            ("sub", None),
        ],
    )
    def test_stem(self, ctx, name, expected):
        assert unpacked_archive_stem(name, ctx) == expected
