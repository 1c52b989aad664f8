"""
Test fixtures package for hash tree tests.

This package provides factory functions for creating test objects:
- trees.py: tree factories, deterministic nonces, slice tampering helpers

Usage:
    from fixtures import make_populated_tree

    def test_something():
        tree = make_populated_tree(height=4, count=20)
"""

from .trees import (
    counting_nonces,
    value_for,
    make_tree,
    make_populated_tree,
    flip_hex_char,
)

__all__ = [
    "counting_nonces",
    "value_for",
    "make_tree",
    "make_populated_tree",
    "flip_hex_char",
]
