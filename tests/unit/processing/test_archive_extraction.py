"""Tests for packed and unpacked archive handling."""

from __future__ import annotations

import pytest

from aecopatch.core.archive import MissingArchiveBackend
from aecopatch.core.errors import (
    ArchiveComponentMissingError,
    ArchiveContainsDirectoryError,
    CreateTargetDirectoryError,
    OpenArchiveError,
    ReadArchiveError,
)
from aecopatch.core.manifest import Archive, File
from aecopatch.core.processing import ProcessingContext, extract_packed, reconcile_unpacked


@pytest.fixture
def packed(tmp_path, fake_backend):
    """Header/payload pair registered with three members."""
    source = tmp_path / "source"
    source.mkdir()
    header = source / "b.hed"
    header.write_bytes(b"header")
    (source / "b.dat").write_bytes(b"payload")
    fake_backend.add_archive(header, {"x.bin": b"X", "y.bin": b"Y", "z.bin": b"Z"})
    return header


class TestExtractPacked:
    """Test suite for extract_packed."""

    def test_members_written_and_hashed_in_archive_order(self, packed, tmp_path, ctx):
        target = tmp_path / "b.archive"

        archive = extract_packed(packed, target, "b", ctx)

        assert archive == Archive(
            name="b",
            files=[
                File.from_bytes("x.bin", b"X"),
                File.from_bytes("y.bin", b"Y"),
                File.from_bytes("z.bin", b"Z"),
            ],
        )
        assert sorted(p.name for p in target.iterdir()) == ["x.bin", "y.bin", "z.bin"]
        assert (target / "y.bin").read_bytes() == b"Y"

    def test_backend_receives_payload_then_header(self, packed, tmp_path, ctx, fake_backend):
        extract_packed(packed, tmp_path / "b.archive", "b", ctx)

        assert fake_backend.opened == [(packed.with_suffix(".dat"), packed)]

    def test_empty_archive(self, tmp_path, ctx, fake_backend):
        header = tmp_path / "e.hed"
        header.write_bytes(b"")
        (tmp_path / "e.dat").write_bytes(b"")
        fake_backend.add_archive(header, {})

        archive = extract_packed(header, tmp_path / "e.archive", "e", ctx)

        assert archive.files == []
        assert (tmp_path / "e.archive").is_dir()

    def test_missing_payload(self, tmp_path, ctx):
        header = tmp_path / "b.hed"
        header.write_bytes(b"header")

        with pytest.raises(ArchiveComponentMissingError) as exc_info:
            extract_packed(header, tmp_path / "b.archive", "b", ctx)

        assert exc_info.value.path == str(tmp_path / "b.dat")
        assert not (tmp_path / "b.archive").exists()

    def test_backend_cannot_open(self, packed, tmp_path, ctx, fake_backend):
        fake_backend.break_archive(packed)

        with pytest.raises(OpenArchiveError) as exc_info:
            extract_packed(packed, tmp_path / "b.archive", "b", ctx)

        assert isinstance(exc_info.value.cause, OSError)
        assert not (tmp_path / "b.archive").exists()

    def test_no_backend_configured(self, packed, tmp_path, pool):
        ctx = ProcessingContext(pool=pool, backend=MissingArchiveBackend())

        with pytest.raises(OpenArchiveError, match="no archive backend configured"):
            extract_packed(packed, tmp_path / "b.archive", "b", ctx)

    def test_unreadable_member(self, tmp_path, ctx, fake_backend):
        header = tmp_path / "b.hed"
        header.write_bytes(b"")
        (tmp_path / "b.dat").write_bytes(b"")
        fake_backend.add_archive(header, {"ok": b"1", "bad": b"2"}, unreadable={"bad"})

        with pytest.raises(ReadArchiveError, match="Couldn't read file bad"):
            extract_packed(header, tmp_path / "b.archive", "b", ctx)

    def test_target_already_exists(self, packed, tmp_path, ctx):
        (tmp_path / "b.archive").mkdir()

        with pytest.raises(CreateTargetDirectoryError):
            extract_packed(packed, tmp_path / "b.archive", "b", ctx)


class TestReconcileUnpacked:
    """Test suite for reconcile_unpacked."""

    def test_files_become_archive_members(self, make_tree, tmp_path, ctx):
        source = make_tree({"pack.archive": {"a.bin": b"A", "b.bin": b"B"}})
        target = tmp_path / "target"
        target.mkdir()

        archive = reconcile_unpacked(source / "pack.archive", target, "pack", ctx)

        assert archive.name == "pack"
        assert sorted(archive.files, key=lambda f: f.name) == [
            File.from_bytes("a.bin", b"A"),
            File.from_bytes("b.bin", b"B"),
        ]
        assert (target / "b.bin").read_bytes() == b"B"

    def test_subdirectory_is_rejected(self, make_tree, tmp_path, ctx):
        source = make_tree({"pack.archive": {"a.bin": b"A", "inner": {"z": b"Z"}}})
        target = tmp_path / "target"
        target.mkdir()

        with pytest.raises(ArchiveContainsDirectoryError) as exc_info:
            reconcile_unpacked(source / "pack.archive", target, "pack", ctx)

        assert exc_info.value.path == str(source / "pack.archive")

    def test_nested_packed_archive_is_rejected(self, make_tree, tmp_path, ctx, fake_backend):
        source = make_tree({"pack.archive": {"n.hed": b"", "n.dat": b""}})
        fake_backend.add_archive(source / "pack.archive" / "n.hed", {"m": b""})
        target = tmp_path / "target"
        target.mkdir()

        with pytest.raises(ArchiveContainsDirectoryError):
            reconcile_unpacked(source / "pack.archive", target, "pack", ctx)

    def test_payload_files_are_dropped(self, make_tree, tmp_path, ctx):
        source = make_tree({"pack.archive": {"a.bin": b"A", "orphan.dat": b"D"}})
        target = tmp_path / "target"
        target.mkdir()

        archive = reconcile_unpacked(source / "pack.archive", target, "pack", ctx)

        assert [f.name for f in archive.files] == ["a.bin"]
