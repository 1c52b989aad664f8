"""
Exclusive-lock wrapper around FBHTree.

FBHTree itself does no locking. When several threads share a tree, wrap it
here: every call, reads included, runs under one re-entrant lock, since a
lazy digest read writes to the node cache.
"""
from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator, Optional

from core.merkle.fbh_tree import FBHTree


class SynchronizedFBHTree:
    """Thread-safe facade over a single FBHTree."""

    def __init__(self, tree: FBHTree) -> None:
        self._tree = tree
        self._lock = threading.RLock()

    @contextmanager
    def locked(self) -> Iterator[FBHTree]:
        """
        Hold the tree lock across several calls.

        Example:
            >>> with shared.locked() as tree:
            ...     tree.put("a", value)
            ...     root, proof = tree.get_root_hash(), tree.extract_slice("a")
        """
        with self._lock:
            yield self._tree

    @property
    def height(self) -> int:
        return self._tree.height

    def put(self, key: str, value: bytes) -> None:
        with self._lock:
            self._tree.put(key, value)

    def remove(self, key: str) -> bool:
        with self._lock:
            return self._tree.remove(key)

    def contains(self, key: str) -> bool:
        with self._lock:
            return self._tree.contains(key)

    def get(self, key: str) -> Optional[bytes]:
        with self._lock:
            return self._tree.get(key)

    def get_root_hash(self) -> bytes:
        with self._lock:
            return self._tree.get_root_hash()

    def get_root_hash_hex(self) -> str:
        with self._lock:
            return self._tree.get_root_hash_hex()

    def extract_slice(self, key: str) -> str:
        with self._lock:
            return self._tree.extract_slice(key)

    def __len__(self) -> int:
        with self._lock:
            return len(self._tree)


__all__ = ["SynchronizedFBHTree"]
