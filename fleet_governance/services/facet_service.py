# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Faceted counts for the resource filter panel.

For each dimension the filter is re-evaluated with that dimension's own
constraint cleared, so counts for the dimension the user is filtering on
do not collapse to the selected values. Cost is one evaluator pass over
the collection per dimension.
"""

import logging
from collections.abc import Callable, Sequence

from ..models import FacetCounts, FilterConfig, LabelLogic, Resource
from .filter_service import evaluate_filter

logger = logging.getLogger(__name__)

UNASSIGNED = "Unassigned"


def _sorted_counts(counts: dict[str, int]) -> dict[str, int]:
    """Order by count descending, ties by value ascending."""
    return dict(sorted(counts.items(), key=lambda item: (-item[1], item[0])))


def count_dimension(
    resources: Sequence[Resource],
    relaxed_config: FilterConfig,
    value_of: Callable[[Resource], str],
) -> dict[str, int]:
    """
    Bucket matching resources by their value along one dimension.

    Every value seen in ``resources`` is present in the result, with a
    count of zero when no resource carrying it matches.

    Args:
        resources: Full, unfiltered collection
        relaxed_config: Filter with this dimension's constraint removed
        value_of: Extracts the dimension value of a resource

    Returns:
        Mapping of value to matching resource count
    """
    counts: dict[str, int] = {}
    for resource in resources:
        value = value_of(resource)
        counts.setdefault(value, 0)
        if evaluate_filter(resource, relaxed_config):
            counts[value] += 1
    return _sorted_counts(counts)


def _label_value(key: str) -> Callable[[Resource], str]:
    def value_of(resource: Resource) -> str:
        return resource.labels.get(key) or UNASSIGNED

    return value_of


def known_label_keys(resources: Sequence[Resource]) -> list[str]:
    """Sorted union of label keys across the collection."""
    keys = set()
    for resource in resources:
        keys.update(resource.labels)
    return sorted(keys)


def relax_label_key(config: FilterConfig, key: str) -> FilterConfig:
    """
    Filter used for the facet of label ``key``.

    Under AND only the constraints on ``key`` are dropped. Under OR the
    constraint list is one disjunction and is dropped as a whole.
    """
    if config.label_logic == LabelLogic.OR:
        remaining = []
    else:
        remaining = [c for c in config.label_constraints if c.key != key]
    return config.model_copy(update={"label_constraints": remaining})


def compute_facets(resources: Sequence[Resource], config: FilterConfig) -> FacetCounts:
    """
    Compute per-dimension facet counts.

    Dimensions are status, type, zone, machine type and every label key in
    the collection. Resources without a machine type, or without a given
    label key, are counted under ``"Unassigned"``.

    Args:
        resources: Full, unfiltered resource collection
        config: Active filter configuration

    Returns:
        FacetCounts with one mapping of value to count per dimension
    """
    resources = list(resources)

    facets = FacetCounts(
        status=count_dimension(
            resources,
            config.model_copy(update={"statuses": []}),
            lambda r: r.status.value,
        ),
        type=count_dimension(
            resources,
            config.model_copy(update={"types": []}),
            lambda r: r.type.value,
        ),
        zone=count_dimension(
            resources,
            config.model_copy(update={"zones": []}),
            lambda r: r.zone,
        ),
        machine_type=count_dimension(
            resources,
            config.model_copy(update={"machine_types": []}),
            lambda r: r.machine_type or UNASSIGNED,
        ),
    )

    for key in known_label_keys(resources):
        facets.labels[key] = count_dimension(
            resources, relax_label_key(config, key), _label_value(key)
        )

    logger.debug(
        f"Computed facets over {len(resources)} resources "
        f"({len(facets.labels)} label dimensions)"
    )
    return facets
