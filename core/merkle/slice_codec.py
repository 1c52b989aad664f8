"""
Slice Codec
Serialization, parsing and evaluation of slices (membership proofs).

Grammar:
    proof   := leaf | "[" proof "," sibling "]" | "[" sibling "," proof "]"
    leaf    := "(" digest ("," digest)* ")"
    sibling := digest
    digest  := exactly 64 lowercase hex characters (32 bytes)

A slice nests outward from the leaf: the innermost bracket is the level
directly above the leaf, the outermost is the level just below the root.
Within a bracket the left slot always holds the left child's encoding, so
evaluating a bracket is simply hash(left || right).

Evaluation Rules:
1. leaf: hash(concat(values in listed order))
2. bracket: hash(eval(left) || eval(right))
3. sibling: the decoded 32 bytes

Evaluation never compares against a trusted root; see core.merkle.verifier.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Sequence

from core.crypto.hashing import DIGEST_SIZE, HashFunction, hash_concat, sha256, to_hex
from core.schemas.errors import MalformedProofException


# Nesting deeper than this is rejected before it can exhaust the stack
MAX_SLICE_DEPTH = 64

_DIGEST_PATTERN = re.compile(r"[0-9a-f]{%d}" % (DIGEST_SIZE * 2))


@dataclass(frozen=True)
class SliceStep:
    """
    One level of an authentication path.

    Attributes:
        sibling: Digest of the sibling subtree at this level
        sibling_on_left: True if the sibling is the left child, i.e. the
            path being proven passes through the right child
    """
    sibling: bytes
    sibling_on_left: bool


@dataclass(frozen=True)
class ParsedSlice:
    """
    A parsed slice: the leaf's bucket values plus its path, bottom-up.
    """
    values: tuple[bytes, ...]
    path: tuple[SliceStep, ...]

    @property
    def depth(self) -> int:
        """Number of levels between the leaf and the root."""
        return len(self.path)

    @property
    def leaf_offset(self) -> int:
        """Position of the leaf among the 2^depth leaves, counted from the left."""
        offset = 0
        for level, step in enumerate(self.path):
            if step.sibling_on_left:
                offset |= 1 << level
        return offset

    def leaf_index(self) -> int:
        """Heap index of the proven leaf in a tree of height ``depth + 1``."""
        return (1 << self.depth) + self.leaf_offset

    def leaf_digest(self, hash_fn: HashFunction = sha256) -> bytes:
        return hash_fn(*self.values)

    def root_digest(self, hash_fn: HashFunction = sha256) -> bytes:
        """Fold the path from the leaf digest up to the root digest."""
        digest = self.leaf_digest(hash_fn)
        for step in self.path:
            if step.sibling_on_left:
                digest = hash_concat(step.sibling, digest, hash_fn)
            else:
                digest = hash_concat(digest, step.sibling, hash_fn)
        return digest


def format_leaf(values: Sequence[bytes]) -> str:
    """Encode bucket values as ``(hex,hex,...)``."""
    return "(" + ",".join(to_hex(v) for v in values) + ")"


def format_slice(values: Sequence[bytes], path: Sequence[SliceStep]) -> str:
    """
    Serialize a leaf and its bottom-up path into slice text.

    Inverse of parse_slice().
    """
    encoded = format_leaf(values)
    for step in path:
        sibling_hex = to_hex(step.sibling)
        if step.sibling_on_left:
            encoded = f"[{sibling_hex},{encoded}]"
        else:
            encoded = f"[{encoded},{sibling_hex}]"
    return encoded


class _SliceParser:
    """Recursive-descent parser over slice text."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0
        self.steps: list[SliceStep] = []

    def parse(self) -> ParsedSlice:
        if not self.text:
            raise MalformedProofException("Slice is empty", position=0)

        values = self._proof(0)

        if self.pos != len(self.text):
            raise self._error("Unexpected trailing input")

        return ParsedSlice(values=tuple(values), path=tuple(self.steps))

    def _peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def _error(self, message: str) -> MalformedProofException:
        found = self._peek() or "end of input"
        return MalformedProofException(
            f"{message} at position {self.pos} (found {found!r})",
            position=self.pos,
        )

    def _expect(self, char: str) -> None:
        if self._peek() != char:
            raise self._error(f"Expected {char!r}")
        self.pos += 1

    def _proof(self, depth: int) -> list[bytes]:
        ch = self._peek()
        if ch == "(":
            return self._leaf()
        if ch != "[":
            raise self._error("Expected '(' or '['")

        if depth >= MAX_SLICE_DEPTH:
            raise self._error(f"Slice nesting exceeds {MAX_SLICE_DEPTH} levels")
        self.pos += 1

        # Steps are appended after the inner proof returns, giving bottom-up order
        if self._peek() in ("(", "["):
            values = self._proof(depth + 1)
            self._expect(",")
            sibling = self._sibling()
            self.steps.append(SliceStep(sibling=sibling, sibling_on_left=False))
        else:
            sibling = self._sibling()
            self._expect(",")
            values = self._proof(depth + 1)
            self.steps.append(SliceStep(sibling=sibling, sibling_on_left=True))

        self._expect("]")
        return values

    def _leaf(self) -> list[bytes]:
        self._expect("(")
        values: list[bytes] = []
        while True:
            values.append(self._digest("leaf value"))

            if self._peek() == ",":
                self.pos += 1
                continue
            self._expect(")")
            return values

    def _sibling(self) -> bytes:
        return self._digest("sibling digest")

    def _digest(self, what: str) -> bytes:
        match = _DIGEST_PATTERN.match(self.text, self.pos)
        if match is None:
            raise self._error(f"Expected a 64-character lowercase hex {what}")
        self.pos = match.end()
        return bytes.fromhex(match.group(0))


def parse_slice(proof: str) -> ParsedSlice:
    """
    Parse slice text into its leaf values and bottom-up path.

    Args:
        proof: Slice text as produced by FBHTree.extract_slice()

    Returns:
        ParsedSlice

    Raises:
        MalformedProofException: If the text does not follow the grammar
    """
    if not isinstance(proof, str):
        raise MalformedProofException(
            f"Slice must be a string, got {type(proof).__name__}"
        )
    return _SliceParser(proof).parse()


def eval_root_hash_from_slice(proof: str, hash_fn: HashFunction = sha256) -> bytes:
    """
    Recompute the root digest implied by a slice.

    This is a pure function with no tree access. The caller must compare
    the result against a root it already trusts.

    Args:
        proof: Slice text
        hash_fn: Hashing capability the tree was built with

    Returns:
        32-byte root digest

    Raises:
        MalformedProofException: If the text does not follow the grammar
    """
    return parse_slice(proof).root_digest(hash_fn)


__all__ = [
    "MAX_SLICE_DEPTH",
    "SliceStep",
    "ParsedSlice",
    "format_leaf",
    "format_slice",
    "parse_slice",
    "eval_root_hash_from_slice",
]
