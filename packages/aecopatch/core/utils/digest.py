"""Content digests recorded in the manifest."""

from __future__ import annotations

import hashlib

DEFAULT_DIGEST_ALGORITHM = "md5"


def is_supported_algorithm(algorithm: str) -> bool:
    """Return True for fixed-length algorithms guaranteed by hashlib."""
    return algorithm in hashlib.algorithms_guaranteed and not algorithm.startswith("shake")


def compute_digest(data: bytes, algorithm: str = DEFAULT_DIGEST_ALGORITHM) -> str:
    """Compute the lowercase hex digest of ``data``.

    Args:
        data: File contents
        algorithm: hashlib algorithm name (default MD5, as used by the patch server)

    Returns:
        Fixed-length lowercase hex string

    Raises:
        ValueError: If the algorithm is unknown or variable-length

    Example:
        >>> compute_digest(b"")
        'd41d8cd98f00b204e9800998ecf8427e'
    """
    if not is_supported_algorithm(algorithm):
        raise ValueError(f"Unsupported digest algorithm: {algorithm}")

    return hashlib.new(algorithm, data, usedforsecurity=False).hexdigest()
