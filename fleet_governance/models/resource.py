"""Cloud resource data model."""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

from .enums import HistoryChangeType, ProvisioningModel, ResourceStatus, ResourceType


class ResourceDisk(BaseModel):
    """A disk attached to a compute instance."""

    model_config = ConfigDict(frozen=True)

    device_name: str = Field(..., description="Device name of the disk")
    size_gb: int = Field(..., ge=0, description="Disk size in GB")
    type: str = Field("PERSISTENT", description="Disk type (e.g., PERSISTENT, SCRATCH)")
    boot: bool = Field(False, description="Whether this is the boot disk")


class ResourceIP(BaseModel):
    """A network interface address pair."""

    model_config = ConfigDict(frozen=True)

    network: str = Field(..., description="VPC network name")
    internal: str | None = Field(None, description="Internal IP address")
    external: str | None = Field(None, description="External IP address (if exposed)")


class LabelHistoryEntry(BaseModel):
    """Immutable record of one label mutation on a resource."""

    model_config = ConfigDict(frozen=True)

    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    actor: str = Field(..., description="User or automation that made the change")
    change_type: HistoryChangeType = Field(HistoryChangeType.UPDATE)
    previous_labels: dict[str, str] = Field(default_factory=dict)
    new_labels: dict[str, str] = Field(default_factory=dict)


class Resource(BaseModel):
    """Represents one cloud asset with its labels."""

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "id": "k3j5h2l9x0a1",
                "name": "production-web-portal-42-vm",
                "type": "INSTANCE",
                "zone": "us-central1-a",
                "status": "RUNNING",
                "machine_type": "e2-medium",
                "labels": {"environment": "production", "application": "web-portal"},
                "label_fingerprint": "a1b2c3d4e5f6",
            }
        },
    )

    id: str = Field(..., min_length=1, description="Opaque stable resource identifier")
    name: str = Field(..., description="Resource name")
    type: ResourceType = Field(..., description="Kind of resource")
    zone: str = Field(..., description="Zone, region, or 'global'")
    status: ResourceStatus = Field(..., description="Lifecycle state")
    labels: dict[str, str] = Field(default_factory=dict, description="Label key/value pairs")
    label_fingerprint: str = Field("", description="Opaque version token of the label set")
    history: tuple[LabelHistoryEntry, ...] = Field(
        default_factory=tuple, description="Append-only label history, oldest first"
    )

    machine_type: str | None = Field(None, description="Machine type (instances, databases)")
    size_gb: str | None = Field(None, description="Size in GB (disks, buckets)")
    creation_timestamp: datetime | None = Field(None, description="When the resource was created")
    provisioning_model: ProvisioningModel = Field(ProvisioningModel.STANDARD)
    disks: list[ResourceDisk] | None = Field(None, description="Attached disks (instances)")
    ips: list[ResourceIP] | None = Field(None, description="Network addresses")
    storage_class: str | None = Field(None, description="Storage class (buckets)")
    database_version: str | None = Field(None, description="Engine version (Cloud SQL)")
    url: str | None = Field(None, description="Service URL (Cloud Run)")

    def has_public_ip(self) -> bool:
        """Return True if any network interface has an external address."""
        return any(ip.external for ip in self.ips or [])
