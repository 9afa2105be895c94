"""Tests for JSON utility functions."""

from __future__ import annotations

from pathlib import Path

import pytest

from aecopatch.core.utils.json import read_json, write_json


@pytest.fixture
def temp_json_file(tmp_path):
    """Create a temporary JSON file path."""
    return tmp_path / "test.json"


def test_write_and_read_json(temp_json_file):
    """Test writing and reading JSON files."""
    data = {
        "string": "value",
        "number": 42,
        "bool": True,
        "list": [1, 2, 3],
        "nested": {"key": "value"},
    }

    write_json(temp_json_file, data)

    assert read_json(temp_json_file) == data


def test_write_json_creates_parent_dirs(tmp_path):
    """Test that write_json creates parent directories."""
    nested_path = tmp_path / "subdir" / "nested" / "test.json"

    write_json(nested_path, {"test": "value"})

    assert nested_path.exists()


def test_write_json_stringifies_paths(temp_json_file):
    """Test that non-JSON values such as paths are written as strings."""
    write_json(temp_json_file, {"path": Path("patch/a.txt")})

    assert read_json(temp_json_file) == {"path": str(Path("patch/a.txt"))}


def test_write_json_keeps_unicode(temp_json_file):
    """Test that non-ASCII text is written unescaped."""
    write_json(temp_json_file, {"name": "Übersicht"})

    assert "Übersicht" in temp_json_file.read_text(encoding="utf-8")


def test_read_json_rejects_non_object(temp_json_file):
    """Test that a JSON array is rejected."""
    temp_json_file.write_text("[1, 2]", encoding="utf-8")

    with pytest.raises(ValueError, match="Expected JSON object"):
        read_json(temp_json_file)


def test_read_json_missing_file(tmp_path):
    """Test that reading a missing file raises FileNotFoundError."""
    with pytest.raises(FileNotFoundError):
        read_json(tmp_path / "missing.json")
