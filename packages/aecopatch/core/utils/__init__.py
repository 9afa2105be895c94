"""Shared utilities for aecopatch."""

from aecopatch.core.utils.digest import compute_digest, is_supported_algorithm
from aecopatch.core.utils.json import read_json, write_json

__all__ = [
    "compute_digest",
    "is_supported_algorithm",
    "read_json",
    "write_json",
]
