"""
Tree fixtures shared by all test modules.

Provides factory functions for:
- Deterministic leaf nonces (so two trees can be compared byte for byte)
- Trees of a given height, empty or populated
- Single-character slice tampering
"""

from typing import Callable, Optional

from core.crypto.hashing import sha256
from core.merkle.fbh_tree import FBHTree


HEX_CHARS = "0123456789abcdef"


def counting_nonces(seed: int = 0) -> Callable[[], bytes]:
    """
    Return a nonce source yielding sha256(b"nonce:<seed>:<n>") for n = 0, 1, ...

    Two sources with the same seed produce identical sequences.
    """
    counter = [0]

    def next_nonce() -> bytes:
        nonce = sha256(f"nonce:{seed}:{counter[0]}".encode())
        counter[0] += 1
        return nonce

    return next_nonce


def value_for(key: str, version: int = 0) -> bytes:
    """Deterministic 32-byte value for ``key``."""
    return sha256(f"value:{key}:{version}".encode())


def make_tree(
    height: int = 3,
    eager: bool = False,
    nonce_fn: Optional[Callable[[], bytes]] = None,
) -> FBHTree:
    """
    Create an empty tree.

    Args:
        height: Tree height
        eager: Eager digest maintenance
        nonce_fn: Leaf nonce source (default: counting_nonces())

    Returns:
        An FBHTree with deterministic nonces
    """
    return FBHTree(height, eager=eager, nonce_fn=nonce_fn or counting_nonces())


def make_populated_tree(
    height: int = 4,
    count: int = 20,
    eager: bool = False,
    prefix: str = "key",
) -> FBHTree:
    """Create a tree holding keys ``<prefix>-0`` .. ``<prefix>-<count-1>``."""
    tree = make_tree(height=height, eager=eager)
    for i in range(count):
        key = f"{prefix}-{i}"
        tree.put(key, value_for(key))
    return tree


def flip_hex_char(text: str, position: int) -> str:
    """Replace the hex character at ``position`` with a different hex character."""
    current = text[position]
    assert current in HEX_CHARS, f"not a hex character: {current!r}"
    replacement = "1" if current == "0" else "0"
    return text[:position] + replacement + text[position + 1:]
