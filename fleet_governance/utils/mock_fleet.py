"""Synthetic fleet generator for demos and local development.

Produces a reproducible inventory whose names follow the
``<environment>-<application>-<n>-<suffix>`` convention, so the pattern and
regex label strategies have something realistic to extract from.
"""

import random
import string
from datetime import datetime, timedelta, timezone

from ..models import (
    HistoryChangeType,
    LabelHistoryEntry,
    ProvisioningModel,
    Resource,
    ResourceDisk,
    ResourceIP,
    ResourceStatus,
    ResourceType,
)

ZONES = ["us-central1-a", "us-central1-b", "europe-west1-d", "asia-east1-a"]
REGIONS = ["us-central1", "europe-west1", "asia-east1", "us-east1"]
MACHINE_TYPES = ["n1-standard-1", "e2-medium", "c2-standard-4", "m1-ultramem-40", "e2-micro"]
ENVIRONMENTS = ["production", "staging", "development", "qa"]
DEPARTMENTS = ["engineering", "finance", "marketing", "data-science", "hr"]
APPLICATIONS = ["web-portal", "payment-gateway", "user-db", "analytics-engine", "internal-tools"]
STORAGE_CLASSES = ["STANDARD", "NEARLINE", "COLDLINE", "ARCHIVE"]
DATABASE_VERSIONS = ["POSTGRES_14", "MYSQL_8_0", "SQLSERVER_2019_STANDARD"]
NETWORKS = ["default", "vpc-prod", "vpc-dev"]
ACTORS = ["jane.doe@company.com", "system-automation"]

NAME_SUFFIXES = {
    ResourceType.INSTANCE: "-vm",
    ResourceType.DISK: "-disk",
    ResourceType.CLOUD_SQL: "-db",
    ResourceType.CLOUD_RUN: "-svc",
}


def _generate_id(rng: random.Random) -> str:
    return "".join(rng.choices(string.ascii_lowercase + string.digits, k=12))


def _pick_type(rng: random.Random) -> ResourceType:
    roll = rng.random()
    if roll > 0.85:
        return ResourceType.BUCKET
    if roll > 0.75:
        return ResourceType.DISK
    if roll > 0.65:
        return ResourceType.CLOUD_SQL
    if roll > 0.55:
        return ResourceType.CLOUD_RUN
    return ResourceType.INSTANCE


def _generate_history(rng: random.Random, now: datetime) -> tuple[LabelHistoryEntry, ...]:
    entries = [
        LabelHistoryEntry(
            timestamp=now - timedelta(seconds=rng.random() * 10_000_000),
            actor=rng.choice(ACTORS),
            change_type=HistoryChangeType.UPDATE,
            previous_labels={"env": "dev"},
            new_labels={"env": "prod", "reviewed": "true"},
        )
        for _ in range(rng.randrange(5))
    ]
    entries.sort(key=lambda entry: entry.timestamp)
    return tuple(entries)


def _generate_disks(rng: random.Random, vm_name: str) -> list[ResourceDisk]:
    disks = [
        ResourceDisk(
            device_name=f"{vm_name}-boot",
            size_gb=20 if rng.random() > 0.5 else 50,
            boot=True,
        )
    ]
    if rng.random() > 0.6:
        disks.append(
            ResourceDisk(
                device_name=f"{vm_name}-data",
                size_gb=rng.randrange(100, 600),
                boot=False,
            )
        )
    return disks


def _generate_ips(rng: random.Random, resource_type: ResourceType) -> list[ResourceIP]:
    external = None
    if resource_type == ResourceType.INSTANCE and rng.random() > 0.3:
        external = f"34.{rng.randrange(255)}.{rng.randrange(255)}.{rng.randrange(255)}"
    return [
        ResourceIP(
            network=rng.choice(NETWORKS),
            internal=f"10.128.{rng.randrange(255)}.{rng.randrange(255)}",
            external=external,
        )
    ]


def generate_mock_resources(count: int = 30, seed: int | None = None) -> list[Resource]:
    """
    Generate a synthetic fleet.

    Args:
        count: Number of resources to generate
        seed: Random seed; the same seed always yields the same fleet

    Returns:
        List of resources with a mix of types, states and label coverage
    """
    rng = random.Random(seed)
    now = datetime.now(timezone.utc)
    resources = []

    for _ in range(count):
        env = rng.choice(ENVIRONMENTS)
        app = rng.choice(APPLICATIONS)
        resource_type = _pick_type(rng)
        is_labeled = rng.random() > 0.4

        if resource_type == ResourceType.BUCKET:
            name = f"{env}-assets-{app}-{rng.randrange(9999)}"
        else:
            name = f"{env}-{app}-{rng.randrange(99)}{NAME_SUFFIXES[resource_type]}"

        machine_type = None
        if resource_type == ResourceType.INSTANCE:
            machine_type = rng.choice(MACHINE_TYPES)
        elif resource_type == ResourceType.CLOUD_SQL:
            machine_type = "db-custom-2-3840"

        provisioning = ProvisioningModel.STANDARD
        if resource_type == ResourceType.INSTANCE:
            roll = rng.random()
            if roll > 0.9:
                provisioning = ProvisioningModel.RESERVED
            elif roll > 0.7:
                provisioning = ProvisioningModel.SPOT

        if resource_type == ResourceType.BUCKET:
            status = ResourceStatus.READY
        elif rng.random() > 0.2:
            status = (
                ResourceStatus.RUNNING
                if resource_type == ResourceType.INSTANCE
                else ResourceStatus.READY
            )
        else:
            status = ResourceStatus.STOPPED

        size_gb = None
        if resource_type == ResourceType.BUCKET:
            size_gb = str(rng.randrange(5000))
        elif resource_type == ResourceType.DISK:
            size_gb = str(rng.randrange(10, 510))

        labels = {}
        if is_labeled:
            labels["environment"] = env
            labels["application"] = app
            labels["department"] = rng.choice(DEPARTMENTS)
            if rng.random() > 0.5:
                labels["cost-center"] = f"cc-{rng.randrange(5000)}"

        resource_id = _generate_id(rng)
        resources.append(
            Resource(
                id=resource_id,
                name=name,
                type=resource_type,
                zone=rng.choice(REGIONS) if resource_type == ResourceType.BUCKET else rng.choice(ZONES),
                status=status,
                labels=labels,
                label_fingerprint=_generate_id(rng),
                history=_generate_history(rng, now),
                machine_type=machine_type,
                size_gb=size_gb,
                creation_timestamp=now - timedelta(seconds=rng.random() * 30_000_000),
                provisioning_model=provisioning,
                disks=_generate_disks(rng, name) if resource_type == ResourceType.INSTANCE else None,
                ips=(
                    _generate_ips(rng, resource_type)
                    if resource_type in (ResourceType.INSTANCE, ResourceType.CLOUD_SQL)
                    else None
                ),
                storage_class=rng.choice(STORAGE_CLASSES) if resource_type == ResourceType.BUCKET else None,
                database_version=(
                    rng.choice(DATABASE_VERSIONS) if resource_type == ResourceType.CLOUD_SQL else None
                ),
                url=(
                    f"https://{name}-{resource_id}.a.run.app"
                    if resource_type == ResourceType.CLOUD_RUN
                    else None
                ),
            )
        )

    return resources
