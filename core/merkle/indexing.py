"""
Heap Indexing and Key Routing
Index arithmetic for the 1-indexed array-backed complete binary tree,
plus the deterministic key-to-leaf router.

Layout for height h (root at index 1, slot 0 unused):
- children of i: 2i (left) and 2i + 1 (right)
- parent of i: i // 2
- leaves: [2^(h-1), 2^h - 1], internal nodes: [1, 2^(h-1) - 1]

Routing rule:
    digest = hash(key.encode("utf-8"))
    packed = sum(digest[i] << (8 * i) for i in 0..3)   # unsigned bytes
    leaf   = 2^(h-1) + abs(packed) % 2^(h-1)

Bytes are packed unsigned, so ``packed`` is always in [0, 2^32) and the
resulting leaf index can never be negative.
"""
from __future__ import annotations

from typing import Iterator

from core.crypto.hashing import HashFunction, sha256


ROOT_INDEX = 1

# Number of digest bytes folded into the routing value
ROUTING_BYTES = 4


def leaf_base(height: int) -> int:
    """Index of the leftmost leaf."""
    return 1 << (height - 1)


def leaf_count(height: int) -> int:
    """Number of leaves in a tree of ``height``."""
    return 1 << (height - 1)


def node_count(height: int) -> int:
    """Number of nodes in a tree of ``height`` (2^h - 1)."""
    return (1 << height) - 1


def parent(index: int) -> int:
    return index >> 1


def left_child(index: int) -> int:
    return index << 1


def right_child(index: int) -> int:
    return (index << 1) + 1


def sibling(index: int) -> int:
    """Index of the other child under the same parent."""
    return index ^ 1


def is_left_child(index: int) -> bool:
    """Left children sit at even indices under 1-indexed layout."""
    return index % 2 == 0


def is_leaf_index(index: int, height: int) -> bool:
    return leaf_base(height) <= index <= node_count(height)


def ancestors(index: int) -> Iterator[int]:
    """Yield ``index`` and every ancestor up to and including the root."""
    while index >= ROOT_INDEX:
        yield index
        index = parent(index)


def calc_leaf_index(key: str, height: int, hash_fn: HashFunction = sha256) -> int:
    """
    Map ``key`` to the index of its leaf slot.

    Args:
        key: Arbitrary string key, hashed as UTF-8
        height: Tree height (the leaf range depends only on this)
        hash_fn: Injected hashing capability

    Returns:
        Leaf index in [2^(h-1), 2^h - 1]
    """
    digest = hash_fn(key.encode("utf-8"))
    packed = 0
    for i in range(ROUTING_BYTES):
        packed |= digest[i] << (8 * i)
    return leaf_base(height) + abs(packed) % leaf_count(height)


__all__ = [
    "ROOT_INDEX",
    "ROUTING_BYTES",
    "leaf_base",
    "leaf_count",
    "node_count",
    "parent",
    "left_child",
    "right_child",
    "sibling",
    "is_left_child",
    "is_leaf_index",
    "ancestors",
    "calc_leaf_index",
]
