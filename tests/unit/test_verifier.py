"""
Verifier Unit Tests
Tests for core/merkle/verifier.py

Covers:
1. verify_slice - raises on the first failed check, returns the computed root
2. check_slice - collects every check into a VerificationResult
3. Optional value and leaf-position checks
"""
import pytest

from core.crypto.hashing import sha256, to_hex
from core.merkle.verifier import check_slice, verify_slice
from core.schemas.errors import (
    ErrorCodes,
    MalformedProofException,
    VerificationFailureException,
)

from fixtures import flip_hex_char, value_for


def key_in_other_leaf(tree, key):
    """Find a stored key that routes to a different leaf than ``key``."""
    target = tree.leaf_index(key)
    return next(k for k in tree.keys() if tree.leaf_index(k) != target)


class TestVerifySlice:
    """Tests for the raising verifier."""

    def test_accepts_matching_root_bytes(self, populated_tree):
        root = populated_tree.get_root_hash()
        proof = populated_tree.extract_slice("key-0")

        assert verify_slice(proof, root) == root

    def test_accepts_matching_root_hex(self, populated_tree):
        proof = populated_tree.extract_slice("key-0")

        assert verify_slice(proof, populated_tree.get_root_hash_hex()) == populated_tree.get_root_hash()

    def test_rejects_wrong_root(self, populated_tree):
        proof = populated_tree.extract_slice("key-0")

        with pytest.raises(VerificationFailureException) as exc_info:
            verify_slice(proof, sha256(b"other"))

        assert exc_info.value.code == ErrorCodes.ROOT_MISMATCH
        assert exc_info.value.details["trusted_root"] == to_hex(sha256(b"other"))

    def test_rejects_tampered_slice(self, populated_tree):
        root = populated_tree.get_root_hash()
        proof = flip_hex_char(populated_tree.extract_slice("key-0"), 2)

        with pytest.raises(VerificationFailureException):
            verify_slice(proof, root)

    def test_rejects_stale_slice(self, populated_tree):
        proof = populated_tree.extract_slice("key-3")
        populated_tree.put("key-3", value_for("key-3", 9))

        with pytest.raises(VerificationFailureException):
            verify_slice(proof, populated_tree.get_root_hash())

    def test_malformed_slice_propagates(self, populated_tree):
        with pytest.raises(MalformedProofException):
            verify_slice("[oops]", populated_tree.get_root_hash())

    def test_invalid_trusted_root_hex(self, populated_tree):
        proof = populated_tree.extract_slice("key-0")

        with pytest.raises(VerificationFailureException, match="not valid hex"):
            verify_slice(proof, "zz" * 32)

    def test_value_present(self, populated_tree):
        proof = populated_tree.extract_slice("key-5")

        verify_slice(proof, populated_tree.get_root_hash(), value=value_for("key-5"))

    def test_value_missing(self, populated_tree):
        proof = populated_tree.extract_slice("key-5")

        with pytest.raises(VerificationFailureException) as exc_info:
            verify_slice(proof, populated_tree.get_root_hash(), value=b"\x00" * 32)

        assert exc_info.value.code == ErrorCodes.VALUE_MISSING

    def test_resplit_leaf_cannot_claim_partial_value(self, small_tree):
        """Splitting a committed digest into two leaf values keeps the root but must not parse."""
        real = sha256(b"real content")
        small_tree.put("a", real)
        root = small_tree.get_root_hash()
        proof = small_tree.extract_slice("a")

        digest_hex = real.hex()
        resplit = proof.replace(f"({digest_hex})", f"({digest_hex[:32]},{digest_hex[32:]})")
        assert resplit != proof

        with pytest.raises(MalformedProofException):
            verify_slice(resplit, root, value=real[:16])

    def test_padded_leaf_cannot_claim_empty_value(self, small_tree):
        real = sha256(b"real content")
        small_tree.put("a", real)
        root = small_tree.get_root_hash()
        proof = small_tree.extract_slice("a")

        padded = proof.replace(f"({real.hex()})", f"({real.hex()},)")

        with pytest.raises(MalformedProofException):
            verify_slice(padded, root, value=b"")

        result = check_slice(padded, root, value=b"")
        assert result.ok is False
        assert result.error.code == ErrorCodes.MALFORMED_PROOF

    def test_leaf_position_matches(self, populated_tree):
        proof = populated_tree.extract_slice("key-7")

        verify_slice(
            proof,
            populated_tree.get_root_hash(),
            key="key-7",
            height=populated_tree.height,
        )

    def test_slice_for_another_leaf_rejected(self, populated_tree):
        """A valid slice cannot be passed off as proof for a key in another leaf."""
        other = key_in_other_leaf(populated_tree, "key-7")
        proof = populated_tree.extract_slice(other)

        with pytest.raises(VerificationFailureException) as exc_info:
            verify_slice(
                proof,
                populated_tree.get_root_hash(),
                key="key-7",
                height=populated_tree.height,
            )

        assert exc_info.value.code == ErrorCodes.LEAF_POSITION_MISMATCH
        assert exc_info.value.details["expected_leaf"] == populated_tree.leaf_index("key-7")

    def test_height_mismatch_rejected(self, populated_tree):
        proof = populated_tree.extract_slice("key-7")

        with pytest.raises(VerificationFailureException, match="depth") as exc_info:
            verify_slice(
                proof,
                populated_tree.get_root_hash(),
                key="key-7",
                height=populated_tree.height + 1,
            )

        assert exc_info.value.code == ErrorCodes.LEAF_POSITION_MISMATCH

    def test_position_check_needs_height(self, populated_tree):
        """Without a height the position check is skipped."""
        other = key_in_other_leaf(populated_tree, "key-7")
        proof = populated_tree.extract_slice(other)

        verify_slice(proof, populated_tree.get_root_hash(), key="key-7")


class TestCheckSlice:
    """Tests for the reporting verifier."""

    def test_all_checks_pass(self, populated_tree):
        proof = populated_tree.extract_slice("key-1")

        result = check_slice(
            proof,
            populated_tree.get_root_hash_hex(),
            key="key-1",
            value=value_for("key-1"),
            height=populated_tree.height,
        )

        assert result.ok is True
        assert result.error is None
        assert result.error_count == 0
        assert result.computed_root == populated_tree.get_root_hash_hex()
        assert [c.check_id for c in result.checks] == [
            "slice_parse",
            "root_match",
            "value_present",
            "leaf_position",
        ]

    def test_optional_checks_skipped(self, populated_tree):
        proof = populated_tree.extract_slice("key-1")

        result = check_slice(proof, populated_tree.get_root_hash())

        assert result.ok is True
        skipped = {c.check_id for c in result.checks if c.severity == "warn"}
        assert skipped == {"value_present", "leaf_position"}

    def test_root_mismatch_reported(self, populated_tree):
        proof = populated_tree.extract_slice("key-1")

        result = check_slice(proof, sha256(b"other"))

        assert result.ok is False
        assert [c.check_id for c in result.get_failed_checks()] == ["root_match"]
        assert result.computed_root == populated_tree.get_root_hash_hex()

    def test_several_failures_collected(self, populated_tree):
        other = key_in_other_leaf(populated_tree, "key-1")
        proof = populated_tree.extract_slice(other)

        result = check_slice(
            proof,
            sha256(b"other"),
            key="key-1",
            value=b"\x01",
            height=populated_tree.height,
        )

        assert result.ok is False
        assert result.error_count == 3
        assert len(result.get_error_messages()) == 3

    def test_malformed_slice_reported(self):
        result = check_slice("(zz)", sha256())

        assert result.ok is False
        assert result.computed_root is None
        assert result.error is not None
        assert result.error.code == ErrorCodes.MALFORMED_PROOF
        assert result.checks[0].check_id == "slice_parse"
        assert "position" in result.checks[0].details

    def test_invalid_trusted_root_reported(self, populated_tree):
        proof = populated_tree.extract_slice("key-1")

        result = check_slice(proof, "not-hex")

        assert result.ok is False
        assert result.error.code == ErrorCodes.ROOT_MISMATCH
        assert result.checks[0].check_id == "trusted_root"

    def test_result_serializes(self, populated_tree):
        proof = populated_tree.extract_slice("key-1")

        data = check_slice(proof, populated_tree.get_root_hash()).model_dump(mode="json")

        assert data["ok"] is True
        assert data["computed_root"] == populated_tree.get_root_hash_hex()
        assert data["checks"][0]["check_id"] == "slice_parse"
