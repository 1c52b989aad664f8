"""
Full Binary Hash Tree and Slices
Keyed, incrementally-updatable hash tree with membership proofs.

This package provides:
- FBHTree: array-backed tree with lazy (or eager) digest caching
- calc_leaf_index: deterministic key-to-leaf routing
- eval_root_hash_from_slice / parse_slice: tree-independent slice evaluation
- verify_slice / check_slice: comparison against a trusted root
- SynchronizedFBHTree: exclusive-lock wrapper for shared trees

Commitment Rules:
1. Leaf digest: sha256(concat(bucket values in insertion order))
2. Internal digest: sha256(left || right)
3. Never-mutated leaf: random 32-byte nonce
4. Emptied leaf: sha256(b"")

Usage:
    from core.merkle import FBHTree, eval_root_hash_from_slice, verify_slice
    from core.crypto import sha256

    tree = FBHTree(height=17)
    tree.put("reports/q3.pdf", sha256(pdf_bytes))
    root = tree.get_root_hash()          # publish (signed) out of band

    proof = tree.extract_slice("reports/q3.pdf")
    verify_slice(proof, root)            # raises VerificationFailureException
"""
from .indexing import (
    ROOT_INDEX,
    calc_leaf_index,
    leaf_base,
    leaf_count,
    node_count,
    parent,
    left_child,
    right_child,
    sibling,
)

from .nodes import (
    NodeKind,
    Node,
)

from .slice_codec import (
    MAX_SLICE_DEPTH,
    SliceStep,
    ParsedSlice,
    format_slice,
    parse_slice,
    eval_root_hash_from_slice,
)

from .fbh_tree import (
    MIN_TREE_HEIGHT,
    DEFAULT_TREE_HEIGHT,
    MAX_TREE_HEIGHT,
    FBHTree,
)

from .verifier import (
    verify_slice,
    check_slice,
)

from .locking import SynchronizedFBHTree


__all__ = [
    # Indexing
    "ROOT_INDEX",
    "calc_leaf_index",
    "leaf_base",
    "leaf_count",
    "node_count",
    "parent",
    "left_child",
    "right_child",
    "sibling",
    # Nodes
    "NodeKind",
    "Node",
    # Slices
    "MAX_SLICE_DEPTH",
    "SliceStep",
    "ParsedSlice",
    "format_slice",
    "parse_slice",
    "eval_root_hash_from_slice",
    # Tree
    "MIN_TREE_HEIGHT",
    "DEFAULT_TREE_HEIGHT",
    "MAX_TREE_HEIGHT",
    "FBHTree",
    # Verification
    "verify_slice",
    "check_slice",
    # Concurrency
    "SynchronizedFBHTree",
]
