"""Faceted count model."""

from pydantic import BaseModel, Field

LABEL_DIMENSION_PREFIX = "label:"


class FacetCounts(BaseModel):
    """
    Per-dimension value counts.

    Each count is the number of resources that would match the active
    filter if that dimension's own constraint were removed.
    """

    status: dict[str, int] = Field(default_factory=dict)
    type: dict[str, int] = Field(default_factory=dict)
    zone: dict[str, int] = Field(default_factory=dict)
    machine_type: dict[str, int] = Field(default_factory=dict)
    labels: dict[str, dict[str, int]] = Field(
        default_factory=dict, description="Counts per label key, then per value"
    )

    def as_mapping(self) -> dict[str, dict[str, int]]:
        """Flatten to ``{dimension: {value: count}}`` with ``label:<key>`` dimensions."""
        mapping = {
            "status": dict(self.status),
            "type": dict(self.type),
            "zone": dict(self.zone),
            "machine_type": dict(self.machine_type),
        }
        for key, counts in self.labels.items():
            mapping[f"{LABEL_DIMENSION_PREFIX}{key}"] = dict(counts)
        return mapping
