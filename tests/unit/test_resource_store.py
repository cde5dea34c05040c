"""Unit tests for the in-memory resource store."""

import json

import pytest

from fleet_governance.models import HistoryChangeType, LabelValidationError
from fleet_governance.services.resource_store import (
    FingerprintConflictError,
    InMemoryResourceStore,
    InventoryNotFoundError,
    InventoryValidationError,
    ResourceNotFoundError,
    RevertError,
    new_fingerprint,
)


class TestLoading:
    """Test store construction and inventory loading."""

    def test_duplicate_ids_are_rejected(self, resource_factory):
        with pytest.raises(ValueError, match="Duplicate resource id"):
            InMemoryResourceStore([resource_factory("a"), resource_factory("a")])

    def test_from_json_list(self, tmp_path):
        path = tmp_path / "inventory.json"
        path.write_text(
            json.dumps(
                [
                    {"id": "a", "name": "prod-web-1", "type": "INSTANCE", "zone": "us-central1-a", "status": "RUNNING"},
                    {"id": "b", "name": "logs", "type": "BUCKET", "zone": "us-central1", "status": "READY",
                     "labels": {"env": "prod"}},
                ]
            )
        )

        store = InMemoryResourceStore.from_json_file(path)

        assert len(store) == 2
        assert store.get("b").labels == {"env": "prod"}

    def test_from_json_object_with_resources_key(self, tmp_path):
        path = tmp_path / "inventory.json"
        path.write_text(json.dumps({"resources": [
            {"id": "a", "name": "x", "type": "DISK", "zone": "us-east1-b", "status": "READY"}
        ]}))
        assert len(InMemoryResourceStore.from_json_file(path)) == 1

    def test_missing_file(self, tmp_path):
        with pytest.raises(InventoryNotFoundError):
            InMemoryResourceStore.from_json_file(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "inventory.json"
        path.write_text("{not json")
        with pytest.raises(InventoryValidationError, match="Invalid JSON"):
            InMemoryResourceStore.from_json_file(path)

    def test_invalid_structure(self, tmp_path):
        path = tmp_path / "inventory.json"
        path.write_text(json.dumps([{"id": "a", "name": "x", "type": "SPACESHIP"}]))
        with pytest.raises(InventoryValidationError, match="Invalid inventory structure"):
            InMemoryResourceStore.from_json_file(path)

    def test_duplicate_ids_in_file(self, tmp_path):
        path = tmp_path / "inventory.json"
        record = {"id": "a", "name": "x", "type": "DISK", "zone": "z", "status": "READY"}
        path.write_text(json.dumps([record, record]))
        with pytest.raises(InventoryValidationError, match="Duplicate"):
            InMemoryResourceStore.from_json_file(path)


class TestLookup:
    """Test read access."""

    def test_get_unknown_id(self, resource_store):
        with pytest.raises(ResourceNotFoundError) as exc_info:
            resource_store.get("nope")
        assert exc_info.value.resource_id == "nope"

    def test_get_many_preserves_requested_order(self, resource_store):
        assert [r.id for r in resource_store.get_many(["r3", "r1"])] == ["r3", "r1"]

    def test_label_keys(self, resource_store):
        assert resource_store.label_keys() == ["application", "environment"]


class TestApplyLabelUpdates:
    """Test batch label replacement."""

    def test_replaces_labels_and_records_history(self, resource_store):
        before = resource_store.get("r1")

        updated = resource_store.apply_label_updates(
            {"r1": {"environment": "prod", "owner": "ops"}}, actor="alice"
        )

        after = resource_store.get("r1")
        assert updated == [after]
        assert after.labels == {"environment": "prod", "owner": "ops"}
        assert after.label_fingerprint != before.label_fingerprint
        entry = after.history[-1]
        assert entry.actor == "alice"
        assert entry.change_type == HistoryChangeType.UPDATE
        assert entry.previous_labels == before.labels
        assert entry.new_labels == after.labels

    def test_revision_bumps_on_mutation(self, resource_store):
        revision = resource_store.revision
        resource_store.apply_label_updates({"r4": {"env": "prod"}})
        assert resource_store.revision == revision + 1

    def test_empty_batch_is_a_no_op(self, resource_store):
        revision = resource_store.revision
        assert resource_store.apply_label_updates({}) == []
        assert resource_store.revision == revision

    def test_invalid_labels_reject_the_whole_batch(self, resource_store):
        with pytest.raises(LabelValidationError) as exc_info:
            resource_store.apply_label_updates(
                {"r1": {"env": "prod"}, "r2": {"Env": "prod"}}
            )
        assert "Env" in exc_info.value.errors
        assert resource_store.get("r1").labels == {"environment": "prod", "application": "web"}

    def test_unknown_id_rejects_the_whole_batch(self, resource_store):
        with pytest.raises(ResourceNotFoundError):
            resource_store.apply_label_updates({"r1": {"env": "prod"}, "ghost": {"env": "prod"}})
        assert "env" not in resource_store.get("r1").labels

    def test_stale_fingerprint_conflicts(self, resource_store):
        with pytest.raises(FingerprintConflictError) as exc_info:
            resource_store.apply_label_updates(
                {"r1": {"env": "prod"}}, expected_fingerprints={"r1": "stale"}
            )
        assert exc_info.value.conflicts == {"r1": "fp-r1"}

    def test_matching_fingerprint_is_accepted(self, resource_store):
        updated = resource_store.apply_label_updates(
            {"r1": {"env": "prod"}}, expected_fingerprints={"r1": "fp-r1"}
        )
        assert updated[0].labels == {"env": "prod"}


class TestRevert:
    """Test reverting the last label change."""

    def test_revert_restores_previous_labels(self, resource_store):
        original = resource_store.get("r2").labels
        resource_store.apply_label_updates({"r2": {"env": "prod"}}, actor="alice")

        reverted = resource_store.revert("r2", actor="bob")

        assert reverted.labels == original
        assert reverted.history[-1].change_type == HistoryChangeType.REVERT
        assert reverted.history[-1].actor == "bob"
        assert len(reverted.history) == 2

    def test_revert_without_history(self, resource_store):
        with pytest.raises(RevertError):
            resource_store.revert("r3")

    def test_revert_unknown_resource(self, resource_store):
        with pytest.raises(ResourceNotFoundError):
            resource_store.revert("ghost")


def test_new_fingerprint_is_unique_and_short():
    fingerprints = {new_fingerprint() for _ in range(100)}
    assert len(fingerprints) == 100
    assert all(len(fp) == 12 for fp in fingerprints)
