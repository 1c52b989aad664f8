"""
Core cryptographic utilities.

Stateless hash primitives used by the full binary hash tree.
"""
from .hashing import (
    DIGEST_SIZE,
    HashFunction,
    sha256,
    hash_concat,
    to_hex,
    from_hex,
    random_digest,
    hash_file,
)

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
