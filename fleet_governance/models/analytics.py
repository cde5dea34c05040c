"""Fleet-level summary models for the dashboard."""

from pydantic import BaseModel, Field


class ZoneCount(BaseModel):
    """Number of resources in a zone."""

    zone: str
    count: int


class LabelCoverage(BaseModel):
    """How many resources carry a given label key."""

    key: str
    count: int
    percentage: float = Field(..., ge=0.0, le=100.0)


class FleetSummary(BaseModel):
    """Aggregated governance indicators for a resource collection."""

    total: int = 0
    labeled: int = 0
    unlabeled: int = 0
    by_type: dict[str, int] = Field(default_factory=dict)
    by_provisioning_model: dict[str, int] = Field(default_factory=dict)
    stopped_instance_ids: list[str] = Field(default_factory=list)
    public_ip_count: int = 0
    waste_score: int = Field(100, ge=0, le=100)
    security_score: int = Field(100, ge=0, le=100)
    wasted_disk_gb: int = 0
    potential_monthly_savings: float = 0.0
    top_zones: list[ZoneCount] = Field(default_factory=list)
    label_distribution: list[LabelCoverage] = Field(default_factory=list)
