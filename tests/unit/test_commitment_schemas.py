"""
Commitment Schema Unit Tests
Tests for core/schemas/commitment.py
"""
import pytest
from pydantic import ValidationError

from core.merkle.slice_codec import eval_root_hash_from_slice
from core.schemas.commitment import (
    SCHEMA_VERSION,
    CommitmentDocument,
    RootAnnouncement,
    SliceEnvelope,
)
from core.schemas.errors import NotFoundException


class TestRootAnnouncement:

    def test_from_tree(self, populated_tree):
        announcement = RootAnnouncement.from_tree(populated_tree)

        assert announcement.schema_version == SCHEMA_VERSION
        assert announcement.height == populated_tree.height
        assert announcement.key_count == 20
        assert announcement.root_hash == populated_tree.get_root_hash_hex()

    def test_frozen(self, populated_tree):
        announcement = RootAnnouncement.from_tree(populated_tree)
        with pytest.raises(ValidationError):
            announcement.height = 9

    @pytest.mark.parametrize("root_hash", ["ab" * 31, "AB" * 32, "0x" + "ab" * 31, ""])
    def test_rejects_bad_root(self, root_hash):
        with pytest.raises(ValidationError):
            RootAnnouncement(height=4, root_hash=root_hash)

    def test_rejects_small_height(self):
        with pytest.raises(ValidationError):
            RootAnnouncement(height=1, root_hash="ab" * 32)

    def test_json_round_trip(self, populated_tree):
        announcement = RootAnnouncement.from_tree(populated_tree)
        restored = RootAnnouncement.model_validate_json(announcement.model_dump_json())
        assert restored == announcement


class TestSliceEnvelope:

    def test_from_tree(self, populated_tree):
        envelope = SliceEnvelope.from_tree(populated_tree, "key-3")

        assert envelope.key == "key-3"
        assert envelope.root_hash == populated_tree.get_root_hash_hex()
        assert eval_root_hash_from_slice(envelope.slice).hex() == envelope.root_hash

    def test_from_tree_absent_key(self, populated_tree):
        with pytest.raises(NotFoundException):
            SliceEnvelope.from_tree(populated_tree, "missing")

    def test_rejects_empty_key(self):
        with pytest.raises(ValidationError):
            SliceEnvelope(key="", slice="()", root_hash="ab" * 32)


class TestCommitmentDocument:

    def test_document(self, populated_tree):
        document = CommitmentDocument(
            announcement=RootAnnouncement.from_tree(populated_tree),
            slices=[SliceEnvelope.from_tree(populated_tree, k) for k in ("key-0", "key-1")],
        )

        restored = CommitmentDocument.model_validate_json(document.model_dump_json())

        assert restored.announcement.root_hash == populated_tree.get_root_hash_hex()
        assert [s.key for s in restored.slices] == ["key-0", "key-1"]

    def test_slices_default_empty(self, populated_tree):
        document = CommitmentDocument(announcement=RootAnnouncement.from_tree(populated_tree))
        assert document.slices == []
