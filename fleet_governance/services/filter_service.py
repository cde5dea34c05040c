# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Filter predicate evaluation for resource queries.

Every check is a pure function of one resource and one FilterConfig, so
resources can be evaluated independently and in any order.
"""

from collections.abc import Iterable
from datetime import datetime

from ..models import FilterConfig, LabelLogic, Resource
from ..utils.time_utils import ensure_utc, parse_bound


def matches_search(resource: Resource, search: str) -> bool:
    """Case-insensitive substring match against name and id."""
    needle = search.strip().lower()
    if not needle:
        return True
    return needle in resource.name.lower() or needle in resource.id.lower()


def matches_date_range(
    created: datetime | None, start: datetime | None, end: datetime | None
) -> bool:
    """Inclusive range check; an unset bound is open on that side."""
    if start is None and end is None:
        return True
    if created is None:
        return False
    created = ensure_utc(created)
    if start is not None and created < start:
        return False
    if end is not None and created > end:
        return False
    return True


def matches_labels(resource: Resource, config: FilterConfig) -> bool:
    """
    Check the label section of the filter.

    The unlabeled-only flag short-circuits: when set, the resource must
    carry no labels and the explicit label constraints are not evaluated.
    """
    if config.show_unlabeled_only:
        return not resource.labels

    constraints = [c for c in config.label_constraints if c.key]
    if not constraints:
        return True

    hits = (resource.labels.get(c.key) == c.value for c in constraints)
    if config.label_logic == LabelLogic.OR:
        return any(hits)
    return all(hits)


def evaluate_filter(resource: Resource, config: FilterConfig) -> bool:
    """
    Decide whether a single resource matches a filter configuration.

    All constraints are ANDed. Empty value sets are unconstrained, and a
    malformed date bound is treated as absent.

    Args:
        resource: Resource to test
        config: Active filter configuration

    Returns:
        True if the resource satisfies every constraint
    """
    if not matches_search(resource, config.search):
        return False

    if config.statuses and resource.status not in config.statuses:
        return False
    if config.types and resource.type not in config.types:
        return False
    if config.zones and resource.zone not in config.zones:
        return False
    if config.machine_types and resource.machine_type not in config.machine_types:
        return False

    if config.has_public_ip is not None and resource.has_public_ip() != config.has_public_ip:
        return False

    start = parse_bound(config.date_start)
    end = parse_bound(config.date_end, end_of_day=True)
    if not matches_date_range(resource.creation_timestamp, start, end):
        return False

    return matches_labels(resource, config)


def filter_resources(resources: Iterable[Resource], config: FilterConfig) -> list[Resource]:
    """Return the resources matching ``config``, preserving input order."""
    return [resource for resource in resources if evaluate_filter(resource, config)]
