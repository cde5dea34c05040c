# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Change-set construction: diff, preview and apply payload."""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from ..models import (
    AddChange,
    Change,
    DeleteChange,
    LabelRule,
    PreviewResult,
    Resource,
    ResourcePreview,
    StrategyKind,
    UpdateChange,
)
from .strategy_service import build_rule, create_strategy

logger = logging.getLogger(__name__)


def diff_labels(original: Mapping[str, str], candidate: Mapping[str, str]) -> list[Change]:
    """
    Diff two label maps into typed change records.

    Additions and updates follow the candidate's key order; deletions
    follow the original's key order and come last.

    Args:
        original: Current labels of the resource
        candidate: Proposed labels

    Returns:
        Ordered list of ADD / UPDATE / DELETE records
    """
    changes: list[Change] = []
    for key, value in candidate.items():
        if key not in original:
            changes.append(AddChange(key=key, value=value))
        elif original[key] != value:
            changes.append(UpdateChange(key=key, old_value=original[key], new_value=value))
    for key, value in original.items():
        if key not in candidate:
            changes.append(DeleteChange(key=key, old_value=value))
    return changes


def preview_rule(rule: LabelRule, resources: Iterable[Resource]) -> PreviewResult:
    """
    Run a rule over a selection and collect the resulting changes.

    Resources for which the rule yields no candidate, or a candidate equal
    to the current labels, are left out of the result.

    Args:
        rule: Typed label rule
        resources: Selected resources

    Returns:
        PreviewResult keyed by resource id
    """
    strategy = create_strategy(rule)
    preview = PreviewResult(kind=StrategyKind(rule.kind))

    for resource in resources:
        preview.selected_count += 1
        candidate = strategy.derive(resource)
        if candidate is None:
            continue
        changes = diff_labels(resource.labels, candidate)
        if not changes:
            continue
        preview.items[resource.id] = ResourcePreview(
            resource_id=resource.id,
            resource_name=resource.name,
            original=dict(resource.labels),
            new=candidate,
            changes=changes,
        )

    logger.info(
        f"{preview.kind.value} rule affects {preview.affected_count} "
        f"of {preview.selected_count} selected resources"
    )
    return preview


def run_strategy(
    kind: StrategyKind | str,
    parameters: Mapping[str, Any] | LabelRule,
    resources: Iterable[Resource],
) -> PreviewResult:
    """
    Preview a label strategy over a selection.

    Args:
        kind: Strategy kind
        parameters: Rule model or mapping of its fields
        resources: Selected resources

    Returns:
        PreviewResult; ``PreviewResult.changes`` maps resource id to changes
    """
    return preview_rule(build_rule(kind, parameters), resources)


def build_apply_payload(preview: PreviewResult) -> dict[str, dict[str, str]]:
    """
    Convert a preview into the store's apply payload.

    Returns:
        Mapping of resource id to its complete new label map
    """
    return {resource_id: dict(item.new) for resource_id, item in preview.items.items()}
