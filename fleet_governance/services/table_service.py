# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Sort, group and paginate stage of the resource table."""

import logging
import math
from collections.abc import Callable, Collection, Sequence
from typing import Any

from ..models import (
    FilterConfig,
    GroupHeaderRow,
    PageResult,
    Resource,
    ResourceRow,
    SortDirection,
)
from ..utils.time_utils import ensure_utc
from .facet_service import UNASSIGNED
from .filter_service import filter_resources

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 25


def _optional(value: Any) -> tuple:
    # Missing values order before present ones.
    return (0,) if value is None else (1, value)


SORT_KEYS: dict[str, Callable[[Resource], tuple]] = {
    "name": lambda r: _optional(r.name),
    "type": lambda r: _optional(r.type.value),
    "zone": lambda r: _optional(r.zone),
    "status": lambda r: _optional(r.status.value),
    "machine_type": lambda r: _optional(r.machine_type),
    "creation_timestamp": lambda r: _optional(
        ensure_utc(r.creation_timestamp).timestamp() if r.creation_timestamp else None
    ),
    "labels": lambda r: _optional(len(r.labels)),
}

# camelCase names used by the web client
SORT_KEY_ALIASES = {
    "machineType": "machine_type",
    "creationTimestamp": "creation_timestamp",
}


def sort_resources(
    resources: Sequence[Resource],
    sort_key: str | None,
    direction: SortDirection = SortDirection.ASC,
) -> list[Resource]:
    """
    Stable sort by a table column.

    String columns compare by code point, ``creation_timestamp`` and
    ``labels`` (label count) compare numerically. Descending order keeps
    equal-key ties in their original relative order. An unknown or missing
    key returns the input order unchanged.
    """
    key_name = SORT_KEY_ALIASES.get(sort_key, sort_key) if sort_key else None
    key_func = SORT_KEYS.get(key_name) if key_name else None
    if key_func is None:
        if sort_key:
            logger.debug(f"Unknown sort key {sort_key!r}; keeping insertion order")
        return list(resources)
    return sorted(resources, key=key_func, reverse=direction == SortDirection.DESC)


def group_key_of(resource: Resource, group_key: str) -> str:
    """Group a resource falls into; empty or missing values are Unassigned."""
    return resource.labels.get(group_key) or UNASSIGNED


def build_display_rows(
    resources: Sequence[Resource],
    group_key: str | None = None,
    collapsed_groups: Collection[str] = (),
) -> list[GroupHeaderRow | ResourceRow]:
    """
    Flatten resources into display rows, optionally grouped by a label.

    Groups are ordered by key, ``"Unassigned"`` included, and members keep
    their incoming order. A collapsed group contributes only its header.

    Args:
        resources: Already filtered and sorted resources
        group_key: Label key to group by, or None for a flat list
        collapsed_groups: Group keys whose members are hidden

    Returns:
        Sequence of header and resource rows
    """
    if not group_key:
        return [ResourceRow(resource=resource) for resource in resources]

    groups: dict[str, list[Resource]] = {}
    for resource in resources:
        groups.setdefault(group_key_of(resource, group_key), []).append(resource)

    rows: list[GroupHeaderRow | ResourceRow] = []
    for key in sorted(groups):
        members = groups[key]
        is_collapsed = key in collapsed_groups
        rows.append(GroupHeaderRow(key=key, count=len(members), is_collapsed=is_collapsed))
        if not is_collapsed:
            rows.extend(ResourceRow(resource=resource) for resource in members)
    return rows


def total_pages_for(total_items: int, page_size: int) -> int:
    """Number of pages needed for ``total_items`` rows."""
    return math.ceil(total_items / page_size)


def paginate(rows: Sequence, page: int, page_size: int) -> tuple[list, int]:
    """
    Slice one page out of the row sequence.

    A page index past the last page (or below 1) falls back to page 1.

    Returns:
        Tuple of (page rows, effective page index)

    Raises:
        ValueError: If page_size is smaller than 1
    """
    if page_size < 1:
        raise ValueError(f"page_size must be at least 1, got {page_size}")

    total_pages = total_pages_for(len(rows), page_size)
    if page < 1 or page > total_pages:
        page = 1

    start = (page - 1) * page_size
    return list(rows[start:start + page_size]), page


def filter_sort_paginate_group(
    resources: Sequence[Resource],
    config: FilterConfig,
    group_key: str | None = None,
    page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
    collapsed_groups: Collection[str] = (),
) -> PageResult:
    """
    Run the full table pipeline: filter, sort, group, paginate.

    Args:
        resources: Full resource collection
        config: Filter configuration (also supplies sort and group settings)
        group_key: Label key to group by; defaults to ``config.group_by``
        page: Requested 1-based page index
        page_size: Rows per page, headers included
        collapsed_groups: Group keys whose members are hidden

    Returns:
        PageResult with the page rows and pagination totals
    """
    filtered = filter_resources(resources, config)
    ordered = sort_resources(filtered, config.sort_key, config.sort_direction)
    rows = build_display_rows(ordered, group_key or config.group_by, collapsed_groups)
    page_rows, effective_page = paginate(rows, page, page_size)

    return PageResult(
        rows=page_rows,
        page=effective_page,
        page_size=page_size,
        total_pages=total_pages_for(len(rows), page_size),
        total_items=len(rows),
        filtered_count=len(filtered),
    )
