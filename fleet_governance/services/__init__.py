"""Service layer for the fleet governance engine."""

from .advisory_service import AdvisoryService
from .analytics_service import summarize_fleet
from .audit_service import AuditService
from .changeset_service import build_apply_payload, diff_labels, preview_rule, run_strategy
from .facet_service import compute_facets, known_label_keys
from .filter_service import evaluate_filter, filter_resources
from .inventory_service import InventoryService
from .resource_store import (
    FingerprintConflictError,
    InMemoryResourceStore,
    InventoryNotFoundError,
    InventoryValidationError,
    ResourceNotFoundError,
    RevertError,
)
from .strategy_service import (
    LabelStrategy,
    build_rule,
    create_strategy,
    tokenize_sample,
    validate_rule,
)
from .table_service import filter_sort_paginate_group, sort_resources

__all__ = [
    "AdvisoryService",
    "summarize_fleet",
    "AuditService",
    "build_apply_payload",
    "diff_labels",
    "preview_rule",
    "run_strategy",
    "compute_facets",
    "known_label_keys",
    "evaluate_filter",
    "filter_resources",
    "InventoryService",
    "FingerprintConflictError",
    "InMemoryResourceStore",
    "InventoryNotFoundError",
    "InventoryValidationError",
    "ResourceNotFoundError",
    "RevertError",
    "LabelStrategy",
    "build_rule",
    "create_strategy",
    "tokenize_sample",
    "validate_rule",
    "filter_sort_paginate_group",
    "sort_resources",
]
