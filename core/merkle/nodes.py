"""
Tree Nodes
A single tagged node type for the array-backed tree.

Leaf and internal nodes share only ``digest`` and ``dirty``. The payload is
either a bucket (leaf) or a pair of child indices (internal); reading the
wrong payload for a node's kind raises IllegalStateException.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from core.schemas.errors import IllegalStateException


class NodeKind(str, Enum):
    INTERNAL = "internal"
    LEAF = "leaf"


@dataclass
class Node:
    """
    One slot of the tree arena.

    Attributes:
        id: The node's array index
        kind: NodeKind.LEAF or NodeKind.INTERNAL
        digest: Cached 32-byte digest
        dirty: True when ``digest`` is stale
    """
    id: int
    kind: NodeKind
    digest: bytes
    dirty: bool = False
    _bucket: Optional[dict[str, bytes]] = field(default=None, repr=False)
    _children: Optional[tuple[int, int]] = field(default=None, repr=False)

    @classmethod
    def leaf(cls, index: int, nonce: bytes) -> "Node":
        """Create an empty leaf holding its construction-time nonce."""
        return cls(id=index, kind=NodeKind.LEAF, digest=nonce, _bucket={})

    @classmethod
    def internal(cls, index: int, left: int, right: int, digest: bytes) -> "Node":
        return cls(
            id=index,
            kind=NodeKind.INTERNAL,
            digest=digest,
            _children=(left, right),
        )

    @property
    def is_leaf(self) -> bool:
        return self.kind is NodeKind.LEAF

    @property
    def bucket(self) -> dict[str, bytes]:
        """Insertion-ordered ``key -> value`` entries of a leaf."""
        if self._bucket is None:
            raise IllegalStateException(
                "Internal node does not have a bucket",
                node_id=self.id,
            )
        return self._bucket

    @property
    def children(self) -> tuple[int, int]:
        """``(left, right)`` child indices of an internal node."""
        if self._children is None:
            raise IllegalStateException(
                "Leaf node does not have children",
                node_id=self.id,
            )
        return self._children


__all__ = [
    "NodeKind",
    "Node",
]
