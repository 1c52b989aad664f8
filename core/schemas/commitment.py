"""
Commitment Schemas
File: commitment.py

Purpose: Typed wrappers for the values a tree hands to the outside world.
An audit-protocol envelope layer carries these as opaque payload fields;
nothing here knows about signing or anti-replay counters.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, field_validator

if TYPE_CHECKING:
    from core.merkle.fbh_tree import FBHTree


SCHEMA_VERSION = "fbht/1"

_DIGEST_HEX = re.compile(r"[0-9a-f]{64}")


def _check_digest_hex(v: str) -> str:
    if not _DIGEST_HEX.fullmatch(v):
        raise ValueError("root_hash must be 64 lowercase hex characters")
    return v


class RootAnnouncement(BaseModel):
    """
    A tree's root commitment at one point in time.

    The announcing party signs this (outside this package); verifiers later
    treat ``root_hash`` as the trusted root for slice checks.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    schema_version: str = Field(
        default=SCHEMA_VERSION,
        description="Version tag of this payload shape",
    )
    height: int = Field(
        ...,
        ge=2,
        description="Height of the committed tree",
    )
    key_count: int = Field(
        default=0,
        ge=0,
        description="Number of keys committed when the root was taken",
    )
    root_hash: str = Field(
        ...,
        description="Root digest as 64 lowercase hex characters",
    )

    @field_validator("root_hash", mode="after")
    @classmethod
    def validate_root_hash(cls, v: str) -> str:
        """Ensure the root is a well-formed 32-byte hex digest."""
        return _check_digest_hex(v)

    @classmethod
    def from_tree(cls, tree: "FBHTree") -> "RootAnnouncement":
        """Snapshot the current root of ``tree``."""
        return cls(
            height=tree.height,
            key_count=len(tree),
            root_hash=tree.get_root_hash_hex(),
        )


class SliceEnvelope(BaseModel):
    """
    A membership proof for one key, paired with the root it was taken against.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    key: str = Field(
        ...,
        min_length=1,
        description="Key whose membership the slice proves",
    )
    slice: str = Field(
        ...,
        min_length=1,
        description="Serialized authentication path",
    )
    root_hash: str = Field(
        ...,
        description="Root digest the slice was extracted under",
    )

    @field_validator("root_hash", mode="after")
    @classmethod
    def validate_root_hash(cls, v: str) -> str:
        """Ensure the root is a well-formed 32-byte hex digest."""
        return _check_digest_hex(v)

    @classmethod
    def from_tree(cls, tree: "FBHTree", key: str) -> "SliceEnvelope":
        """Extract the slice for ``key`` together with the current root."""
        return cls(
            key=key,
            slice=tree.extract_slice(key),
            root_hash=tree.get_root_hash_hex(),
        )


class CommitmentDocument(BaseModel):
    """Root announcement plus any slices requested at commit time."""

    model_config = ConfigDict(extra="forbid")

    announcement: RootAnnouncement
    slices: list[SliceEnvelope] = Field(default_factory=list)


__all__ = [
    "SCHEMA_VERSION",
    "RootAnnouncement",
    "SliceEnvelope",
    "CommitmentDocument",
]
