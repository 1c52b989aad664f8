"""
Hash Primitives
Stateless hashing and hex utilities for the full binary hash tree.

This module provides:
- SHA-256 hashing over one or more byte strings
- Lowercase hex encoding/decoding (the slice wire form)
- Random 32-byte nonces for never-mutated leaves
- Streaming file digests for committing file contents

Security/Determinism Notes:
- Hash functions hold no state and never log
- Hex decoding is strict: a slice that decodes "loosely" could hide tampering
"""
from __future__ import annotations

import hashlib
import os
import re
from pathlib import Path
from typing import Callable


# Size of every digest produced by this module
DIGEST_SIZE: int = 32

# Read size used when streaming files through the hash
FILE_CHUNK_SIZE: int = 64 * 1024

_HEX_PATTERN = re.compile(r"(?:[0-9a-f]{2})*")

# Injected hashing capability: sha256-compatible callable over byte strings
HashFunction = Callable[..., bytes]


def sha256(*parts: bytes) -> bytes:
    """
    Compute the SHA-256 hash of the concatenation of ``parts``.

    Calling with no arguments hashes the empty concatenation.

    Args:
        *parts: Raw byte strings, hashed in the given order

    Returns:
        32-byte SHA-256 digest

    Example:
        >>> sha256(b"hel", b"lo") == sha256(b"hello")
        True
    """
    md = hashlib.sha256()
    for part in parts:
        md.update(part)
    return md.digest()


def hash_concat(left: bytes, right: bytes, hash_fn: HashFunction = sha256) -> bytes:
    """
    Hash the concatenation of two child digests.

    This is the internal-node rule: parent = hash_fn(left || right)
    """
    return hash_fn(left, right)


def to_hex(data: bytes) -> str:
    """Convert bytes to a lowercase hex string without prefix."""
    return data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert a lowercase hex string (no prefix) to bytes.

    Args:
        hex_string: Even-length string of ``[0-9a-f]``

    Returns:
        Decoded bytes

    Raises:
        ValueError: If the string has a 0x prefix, odd length,
                   uppercase or non-hex characters

    Example:
        >>> from_hex("deadbeef").hex()
        'deadbeef'
    """
    if hex_string.startswith("0x"):
        raise ValueError(
            f"Hex string must not carry a '0x' prefix, got: {hex_string[:10]}..."
        )

    if len(hex_string) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length, got length {len(hex_string)}"
        )

    if not _HEX_PATTERN.fullmatch(hex_string):
        raise ValueError(f"Invalid hex characters in string: {hex_string[:10]}...")

    return bytes.fromhex(hex_string)


def random_digest() -> bytes:
    """Return 32 fresh random bytes, used as a leaf nonce."""
    return os.urandom(DIGEST_SIZE)


def hash_file(path: str | Path) -> bytes:
    """
    Compute the SHA-256 digest of a file's contents.

    The file is streamed in chunks so large files are never fully loaded.

    Args:
        path: Path to a regular file

    Returns:
        32-byte SHA-256 digest of the file contents

    Raises:
        FileNotFoundError: If the file does not exist
    """
    md = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(FILE_CHUNK_SIZE), b""):
            md.update(chunk)
    return md.digest()


__all__ = [
    "DIGEST_SIZE",
    "HashFunction",
    "sha256",
    "hash_concat",
    "to_hex",
    "from_hex",
    "random_digest",
    "hash_file",
]
