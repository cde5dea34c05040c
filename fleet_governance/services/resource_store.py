# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""In-memory resource store.

The store owns the authoritative resource collection. It is the only
place labels change: apply and revert replace a resource with an updated
copy, append a history entry and issue a new label fingerprint.
"""

import json
import logging
import threading
import uuid
from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from ..models import (
    HistoryChangeType,
    LabelHistoryEntry,
    LabelMap,
    LabelValidator,
    Resource,
)
from ..utils.label_validation import default_validator
from .facet_service import known_label_keys

logger = logging.getLogger(__name__)

_resource_list_adapter: TypeAdapter = TypeAdapter(list[Resource])


class InventoryNotFoundError(Exception):
    """Raised when the inventory file is not found."""

    pass


class InventoryValidationError(Exception):
    """Raised when the inventory file is malformed."""

    pass


class ResourceNotFoundError(Exception):
    """Raised when a resource id is not in the store."""

    def __init__(self, resource_id: str):
        self.resource_id = resource_id
        super().__init__(f"Resource not found: {resource_id}")


class RevertError(Exception):
    """Raised when a resource has no prior label snapshot to restore."""

    pass


class FingerprintConflictError(Exception):
    """Raised when a label update is based on a stale fingerprint."""

    def __init__(self, conflicts: dict[str, str]):
        """
        Args:
            conflicts: Mapping of resource id to its current fingerprint
        """
        self.conflicts = conflicts
        super().__init__(
            f"Labels changed concurrently for {len(conflicts)} resource(s): "
            f"{', '.join(sorted(conflicts))}"
        )


def new_fingerprint() -> str:
    """Issue a fresh opaque label fingerprint."""
    return uuid.uuid4().hex[:12]


class InMemoryResourceStore:
    """
    Thread-safe in-memory resource collection.

    Readers get immutable snapshots; every mutation bumps ``revision`` so
    cached query results can be keyed on it.
    """

    def __init__(
        self,
        resources: Iterable[Resource] = (),
        validator: LabelValidator | None = None,
    ):
        """
        Initialize the store.

        Args:
            resources: Initial collection; ids must be unique
            validator: Label syntax validator applied to incoming updates

        Raises:
            ValueError: If two resources share an id
        """
        self._validator = validator or default_validator
        self._lock = threading.RLock()
        self._resources: dict[str, Resource] = {}
        self._revision = 0

        for resource in resources:
            if resource.id in self._resources:
                raise ValueError(f"Duplicate resource id: {resource.id}")
            self._resources[resource.id] = resource

    @classmethod
    def from_json_file(
        cls, path: str | Path, validator: LabelValidator | None = None
    ) -> "InMemoryResourceStore":
        """
        Load an inventory snapshot from a JSON file.

        The file holds either a list of resources or an object with a
        ``resources`` list.

        Raises:
            InventoryNotFoundError: If the file doesn't exist
            InventoryValidationError: If the JSON or resource structure is invalid
        """
        path = Path(path)
        if not path.exists():
            raise InventoryNotFoundError(f"Inventory file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise InventoryValidationError(f"Invalid JSON in inventory file {path}: {e}") from e

        if isinstance(data, dict):
            data = data.get("resources", [])

        try:
            resources = _resource_list_adapter.validate_python(data)
        except ValidationError as e:
            raise InventoryValidationError(f"Invalid inventory structure in {path}: {e}") from e

        try:
            store = cls(resources, validator=validator)
        except ValueError as e:
            raise InventoryValidationError(f"Invalid inventory in {path}: {e}") from e

        logger.info(f"Loaded {len(resources)} resources from {path}")
        return store

    @property
    def revision(self) -> int:
        """Counter incremented on every mutation."""
        return self._revision

    def list_resources(self) -> list[Resource]:
        """Snapshot of the collection in insertion order."""
        with self._lock:
            return list(self._resources.values())

    def get(self, resource_id: str) -> Resource:
        """
        Look up a resource.

        Raises:
            ResourceNotFoundError: If the id is unknown
        """
        with self._lock:
            try:
                return self._resources[resource_id]
            except KeyError:
                raise ResourceNotFoundError(resource_id) from None

    def get_many(self, resource_ids: Iterable[str]) -> list[Resource]:
        """Look up several resources, preserving the requested order."""
        with self._lock:
            return [self.get(resource_id) for resource_id in resource_ids]

    def __len__(self) -> int:
        return len(self._resources)

    def _replace_labels(
        self,
        resource: Resource,
        labels: dict[str, str],
        actor: str,
        change_type: HistoryChangeType,
    ) -> Resource:
        entry = LabelHistoryEntry(
            timestamp=datetime.now(timezone.utc),
            actor=actor,
            change_type=change_type,
            previous_labels=dict(resource.labels),
            new_labels=dict(labels),
        )
        updated = resource.model_copy(
            update={
                "labels": dict(labels),
                "label_fingerprint": new_fingerprint(),
                "history": (*resource.history, entry),
            }
        )
        self._resources[resource.id] = updated
        return updated

    def apply_label_updates(
        self,
        updates: Mapping[str, Mapping[str, str]],
        actor: str = "system",
        expected_fingerprints: Mapping[str, str] | None = None,
    ) -> list[Resource]:
        """
        Replace the labels of several resources.

        The batch is validated as a whole before anything is written:
        unknown ids, invalid labels and stale fingerprints reject the batch.

        Args:
            updates: Mapping of resource id to its complete new label map
            actor: Who is making the change (recorded in history)
            expected_fingerprints: Optional mapping of resource id to the
                fingerprint the caller last saw

        Returns:
            The updated resources

        Raises:
            ResourceNotFoundError: If an id is unknown
            LabelValidationError: If a label map is invalid
            FingerprintConflictError: If a fingerprint is stale
        """
        validated = {
            resource_id: LabelMap.validated(labels, self._validator).to_dict()
            for resource_id, labels in updates.items()
        }

        with self._lock:
            current = {resource_id: self.get(resource_id) for resource_id in validated}

            conflicts = {
                resource_id: current[resource_id].label_fingerprint
                for resource_id, fingerprint in (expected_fingerprints or {}).items()
                if resource_id in current and current[resource_id].label_fingerprint != fingerprint
            }
            if conflicts:
                raise FingerprintConflictError(conflicts)

            updated = [
                self._replace_labels(current[resource_id], labels, actor, HistoryChangeType.UPDATE)
                for resource_id, labels in validated.items()
            ]
            if updated:
                self._revision += 1

        logger.info(f"Applied label updates to {len(updated)} resources (actor={actor})")
        return updated

    def revert(self, resource_id: str, actor: str = "system") -> Resource:
        """
        Restore the labels a resource had before its most recent change.

        The revert itself is recorded as a new history entry.

        Raises:
            ResourceNotFoundError: If the id is unknown
            RevertError: If the resource has no label history
        """
        with self._lock:
            resource = self.get(resource_id)
            if not resource.history:
                raise RevertError(f"Resource {resource_id} has no label history to revert")

            previous = resource.history[-1].previous_labels
            updated = self._replace_labels(resource, previous, actor, HistoryChangeType.REVERT)
            self._revision += 1

        logger.info(f"Reverted labels of {resource_id} (actor={actor})")
        return updated

    def label_keys(self) -> list[str]:
        """Sorted union of label keys in the collection."""
        with self._lock:
            return known_label_keys(list(self._resources.values()))
