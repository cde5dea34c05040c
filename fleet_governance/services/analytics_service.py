# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Fleet analytics for the governance dashboard.

Aggregates waste, exposure and labeling indicators over a resource
collection. Cost figures are list-price approximations.
"""

import logging
import math
from collections import Counter
from collections.abc import Sequence

from ..models import (
    FleetSummary,
    LabelCoverage,
    Resource,
    ResourceStatus,
    ResourceType,
    ZoneCount,
)

logger = logging.getLogger(__name__)

# Standard persistent disk, USD per GB per month
DISK_PRICE_PER_GB_MONTH = 0.04

TOP_ZONE_LIMIT = 5

IDLE_STATUSES = {ResourceStatus.STOPPED, ResourceStatus.TERMINATED}


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def health_score(offending: int, total: int) -> int:
    """
    Score a fleet from 0 to 100 by the share of offending resources.

    An empty fleet scores 100.
    """
    total = total or 1
    return max(0, 100 - _round_half_up(offending / total * 100))


def stopped_instances(resources: Sequence[Resource]) -> list[Resource]:
    """Instances that are stopped or terminated."""
    return [
        resource
        for resource in resources
        if resource.type == ResourceType.INSTANCE and resource.status in IDLE_STATUSES
    ]


def summarize_fleet(resources: Sequence[Resource]) -> FleetSummary:
    """
    Build the dashboard summary for a resource collection.

    Args:
        resources: The resources to summarize

    Returns:
        FleetSummary with counts, scores, savings estimate and distributions
    """
    total = len(resources)
    labeled = sum(1 for resource in resources if resource.labels)

    idle = stopped_instances(resources)
    wasted_disk_gb = sum(disk.size_gb for vm in idle for disk in vm.disks or [])
    public_ip_count = sum(1 for resource in resources if resource.has_public_ip())

    zone_counts = Counter(resource.zone for resource in resources)
    top_zones = sorted(zone_counts.items(), key=lambda item: (-item[1], item[0]))[:TOP_ZONE_LIMIT]

    key_counts = Counter(key for resource in resources for key in resource.labels)
    label_distribution = [
        LabelCoverage(key=key, count=count, percentage=round(count / total * 100, 1))
        for key, count in sorted(key_counts.items(), key=lambda item: (-item[1], item[0]))
    ]

    summary = FleetSummary(
        total=total,
        labeled=labeled,
        unlabeled=total - labeled,
        by_type=dict(Counter(resource.type.value for resource in resources)),
        by_provisioning_model=dict(
            Counter(resource.provisioning_model.value for resource in resources)
        ),
        stopped_instance_ids=[vm.id for vm in idle],
        public_ip_count=public_ip_count,
        waste_score=health_score(len(idle), total),
        security_score=health_score(public_ip_count, total),
        wasted_disk_gb=wasted_disk_gb,
        potential_monthly_savings=round(wasted_disk_gb * DISK_PRICE_PER_GB_MONTH, 2),
        top_zones=[ZoneCount(zone=zone, count=count) for zone, count in top_zones],
        label_distribution=label_distribution,
    )

    logger.debug(
        f"Fleet summary: {total} resources, {len(idle)} idle instances, "
        f"{public_ip_count} public IPs"
    )
    return summary
