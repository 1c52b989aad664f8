"""
Full Binary Hash Tree
Array-backed complete binary hash tree with keyed leaf buckets, lazy digest
caching, and slice (membership proof) extraction.

Structure:
- A tree of height h owns 2^h - 1 nodes in a fixed 1-indexed arena
- Keys are routed to one of the 2^(h-1) leaves by calc_leaf_index()
- Each leaf holds an insertion-ordered bucket of key -> value entries

Commitment Rules:
1. Leaf digest: hash(concat(bucket values in insertion order))
2. Internal digest: hash(left.digest || right.digest)
3. A never-mutated leaf holds a random 32-byte nonce instead of a digest,
   so two fresh trees almost surely have different roots
4. A leaf emptied by remove() digests to hash() of the empty concatenation;
   it does not get a fresh nonce

Caching:
- put()/remove() mark the leaf and every ancestor dirty
- Lazy trees (default) recompute dirty digests on the next read
- Eager trees recompute the dirty chain before put()/remove() return

Concurrency:
- No internal locking. One mutator at a time, and no readers while it runs.
  See core.merkle.locking.SynchronizedFBHTree for an exclusive-lock wrapper.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Iterator, Optional

from core.crypto.hashing import (
    DIGEST_SIZE,
    HashFunction,
    hash_concat,
    random_digest,
    sha256,
    to_hex,
)
from core.merkle.indexing import (
    ROOT_INDEX,
    ancestors,
    calc_leaf_index,
    is_leaf_index,
    is_left_child,
    leaf_base,
    leaf_count,
    left_child,
    node_count,
    parent,
    right_child,
    sibling,
)
from core.merkle.nodes import Node
from core.merkle.slice_codec import SliceStep, format_slice
from core.schemas.errors import ConfigurationException, NotFoundException

if TYPE_CHECKING:
    from core.config.runtime import TreeConfig


MIN_TREE_HEIGHT = 2

# Height used by the original deployment: 65536 leaves
DEFAULT_TREE_HEIGHT = 17

# Arena size doubles per level; 30 is already ~1e9 nodes
MAX_TREE_HEIGHT = 30


class FBHTree:
    """
    Full binary hash tree over keyed content digests.

    Example:
        >>> tree = FBHTree(3)
        >>> tree.put("a", sha256(b"content of a"))
        >>> proof = tree.extract_slice("a")
        >>> eval_root_hash_from_slice(proof) == tree.get_root_hash()
        True
    """

    def __init__(
        self,
        height: int = DEFAULT_TREE_HEIGHT,
        *,
        eager: bool = False,
        hash_fn: HashFunction = sha256,
        nonce_fn: Callable[[], bytes] = random_digest,
        max_height: int = MAX_TREE_HEIGHT,
    ) -> None:
        """
        Allocate the arena bottom-up.

        Args:
            height: Tree height, at least 2
            eager: Recompute digests on write instead of on read
            hash_fn: Hashing capability used for every digest and for routing
            nonce_fn: Source of the initial digest of each leaf
            max_height: Upper bound on ``height``

        Raises:
            ConfigurationException: If height is not an int in [2, max_height]
        """
        if isinstance(height, bool) or not isinstance(height, int):
            raise ConfigurationException(
                f"Tree height must be an integer, got {type(height).__name__}",
                setting="height",
            )
        if height < MIN_TREE_HEIGHT:
            raise ConfigurationException(
                f"The minimum value for tree height is {MIN_TREE_HEIGHT}, got {height}",
                setting="height",
            )
        if height > max_height:
            raise ConfigurationException(
                f"Tree height {height} exceeds the maximum of {max_height}",
                setting="height",
            )

        self._height = height
        self._eager = eager
        self._hash_fn = hash_fn
        self._size = 0

        total = node_count(height)
        arena: list[Optional[Node]] = [None] * (total + 1)

        # Children before parents so every internal digest is computable
        for i in range(total, 0, -1):
            if is_leaf_index(i, height):
                arena[i] = Node.leaf(i, nonce_fn())
            else:
                left, right = left_child(i), right_child(i)
                digest = hash_concat(arena[left].digest, arena[right].digest, hash_fn)
                arena[i] = Node.internal(i, left, right, digest)

        # Slot 0 is unused; a tuple keeps the arena length fixed
        self._nodes: tuple[Optional[Node], ...] = tuple(arena)

    @classmethod
    def from_config(cls, config: "TreeConfig", **kwargs) -> "FBHTree":
        """Build a tree from a TreeConfig (height, eager, max_height)."""
        return cls(
            config.height,
            eager=config.eager,
            max_height=config.max_height,
            **kwargs,
        )

    # -------------------------------------------------------------------------
    # Shape
    # -------------------------------------------------------------------------

    @property
    def height(self) -> int:
        return self._height

    @property
    def leaf_count(self) -> int:
        return leaf_count(self._height)

    @property
    def node_count(self) -> int:
        return node_count(self._height)

    @property
    def eager(self) -> bool:
        return self._eager

    def node(self, index: int) -> Node:
        """
        Return the node at ``index``.

        Raises:
            IndexError: If index is outside [1, 2^h - 1]
        """
        if not ROOT_INDEX <= index <= self.node_count:
            raise IndexError(
                f"Node index {index} out of range for {self.node_count} nodes"
            )
        return self._nodes[index]

    def leaf_index(self, key: str) -> int:
        """Index of the leaf ``key`` routes to."""
        if not isinstance(key, str):
            raise TypeError(f"Key must be a string, got {type(key).__name__}")
        return calc_leaf_index(key, self._height, self._hash_fn)

    # -------------------------------------------------------------------------
    # Bucket mutation and membership
    # -------------------------------------------------------------------------

    def put(self, key: str, value: bytes) -> None:
        """
        Associate ``value`` with ``key``.

        An existing entry is replaced in place (it keeps its bucket
        position); otherwise the entry is appended to the bucket.

        Raises:
            ValueError: If key is empty or value is not a 32-byte digest
            TypeError: If key is not a string or value is not bytes
        """
        if isinstance(key, str) and not key:
            raise ValueError("Key must be a non-empty string")
        if not isinstance(value, (bytes, bytearray)):
            raise TypeError(f"Value must be bytes, got {type(value).__name__}")
        if len(value) != DIGEST_SIZE:
            raise ValueError(
                f"Value must be a {DIGEST_SIZE}-byte digest, got {len(value)} bytes"
            )

        index = self.leaf_index(key)
        bucket = self._nodes[index].bucket
        if key not in bucket:
            self._size += 1
        bucket[key] = bytes(value)

        self._mark_dirty(index)

    def remove(self, key: str) -> bool:
        """
        Remove ``key`` if present.

        Returns:
            True if the key was in the tree, False otherwise
        """
        index = self.leaf_index(key)
        bucket = self._nodes[index].bucket
        if key not in bucket:
            return False

        del bucket[key]
        self._size -= 1
        self._mark_dirty(index)
        return True

    def contains(self, key: str) -> bool:
        """Return True if ``key`` is committed in this tree."""
        return key in self._nodes[self.leaf_index(key)].bucket

    def get(self, key: str) -> Optional[bytes]:
        """Return the value stored for ``key``, or None."""
        return self._nodes[self.leaf_index(key)].bucket.get(key)

    def keys(self) -> Iterator[str]:
        """Iterate committed keys, leaf by leaf, in bucket order."""
        for index in range(leaf_base(self._height), self.node_count + 1):
            yield from self._nodes[index].bucket

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.contains(key)

    def __len__(self) -> int:
        return self._size

    def __repr__(self) -> str:
        return (
            f"FBHTree(height={self._height}, keys={self._size}, "
            f"eager={self._eager})"
        )

    # -------------------------------------------------------------------------
    # Digest maintenance
    # -------------------------------------------------------------------------

    def _mark_dirty(self, leaf: int) -> None:
        chain = list(ancestors(leaf))
        for i in chain:
            self._nodes[i].dirty = True
        if self._eager:
            for i in chain:
                self._refresh(i)

    def _refresh(self, index: int) -> bytes:
        # A dirty node always has dirty ancestors, so a clean node's
        # whole subtree is clean and its cached digest can be returned.
        node = self._nodes[index]
        if node.dirty:
            if node.is_leaf:
                node.digest = self._hash_fn(*node.bucket.values())
            else:
                left, right = node.children
                node.digest = hash_concat(
                    self._refresh(left), self._refresh(right), self._hash_fn
                )
            node.dirty = False
        return node.digest

    def node_digest(self, index: int) -> bytes:
        """Current digest of the node at ``index``, recomputing if stale."""
        self.node(index)
        return self._refresh(index)

    def is_dirty(self, index: int) -> bool:
        return self.node(index).dirty

    def refresh(self) -> None:
        """Recompute every pending digest so no node is left dirty."""
        self._refresh(ROOT_INDEX)

    @property
    def has_pending_updates(self) -> bool:
        """True if some digest is stale (the root is dirty whenever any node is)."""
        return self._nodes[ROOT_INDEX].dirty

    def get_root_hash(self) -> bytes:
        """Return the 32-byte root digest."""
        return self._refresh(ROOT_INDEX)

    def get_root_hash_hex(self) -> str:
        return to_hex(self.get_root_hash())

    # -------------------------------------------------------------------------
    # Slice extraction
    # -------------------------------------------------------------------------

    def extract_slice(self, key: str) -> str:
        """
        Extract the slice proving that ``key`` is a member of this tree.

        The slice carries the key's leaf bucket values and one sibling digest
        per level below the root; see core.merkle.slice_codec for the grammar.

        Raises:
            NotFoundException: If the key is not in the tree
        """
        index = self.leaf_index(key)
        bucket = self._nodes[index].bucket
        if key not in bucket:
            raise NotFoundException(
                f"The key {key!r} does not exist in this tree",
                key=key,
            )

        path: list[SliceStep] = []
        while index > ROOT_INDEX:
            path.append(
                SliceStep(
                    sibling=self._refresh(sibling(index)),
                    sibling_on_left=not is_left_child(index),
                )
            )
            index = parent(index)

        return format_slice(list(bucket.values()), path)


__all__ = [
    "MIN_TREE_HEIGHT",
    "DEFAULT_TREE_HEIGHT",
    "MAX_TREE_HEIGHT",
    "FBHTree",
]
