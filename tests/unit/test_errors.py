"""Tests for the generation error taxonomy."""

from __future__ import annotations

from pathlib import Path

import pytest

from aecopatch.core import errors
from aecopatch.core.errors import ErrorKind, PatchConfigError


def _error_classes() -> list[type[PatchConfigError]]:
    return [
        obj
        for obj in vars(errors).values()
        if isinstance(obj, type) and issubclass(obj, PatchConfigError) and obj is not PatchConfigError
    ]


class TestPatchConfigError:
    """Test suite for PatchConfigError and its subclasses."""

    def test_every_kind_has_exactly_one_class(self):
        kinds = [cls.kind for cls in _error_classes()]

        assert sorted(kinds) == sorted(ErrorKind)

    def test_message_only(self):
        err = errors.TargetAlreadyExistsError("Target already exists: out")

        assert str(err) == "Target already exists: out"
        assert err.kind is ErrorKind.TARGET_ALREADY_EXISTS
        assert err.path is None
        assert err.cause is None

    def test_cause_is_appended(self):
        cause = PermissionError(13, "Permission denied")
        err = errors.ReadSourceFileError("Failed to read file a.txt", path=Path("a.txt"), cause=cause)

        assert str(err) == f"Failed to read file a.txt: {cause}"
        assert err.path == "a.txt"
        assert err.cause is cause

    def test_structured_data(self):
        err = errors.OpenArchiveError("Couldn't open archive", path="b.hed")

        assert err.data.kind is ErrorKind.OPEN_ARCHIVE_FAILED
        assert err.data.model_dump(exclude={"cause"}) == {
            "kind": ErrorKind.OPEN_ARCHIVE_FAILED,
            "message": "Couldn't open archive",
            "path": "b.hed",
        }

    def test_caught_as_base_class(self):
        with pytest.raises(PatchConfigError):
            raise errors.ArchiveContainsDirectoryError("nested")

    def test_kind_values(self):
        assert ErrorKind.NO_ARCHIVE_FILE.value == "NoArchiveFile"
        assert ErrorKind.METADATA_FAILED.value == "MetadataFailed"
