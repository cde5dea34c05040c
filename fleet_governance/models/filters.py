"""Filter configuration models for resource queries."""

from pydantic import BaseModel, ConfigDict, Field

from .enums import LabelLogic, ResourceStatus, ResourceType, SortDirection


class LabelConstraint(BaseModel):
    """A single `key = value` label match."""

    model_config = ConfigDict(frozen=True)

    key: str = Field(..., description="Label key")
    value: str = Field(..., description="Exact label value to match")


class FilterConfig(BaseModel):
    """
    Query configuration for the resource table.

    Passed by value on every query. Empty collections mean "unconstrained"
    for that dimension. Date bounds are kept as raw strings so that a
    malformed bound can be ignored instead of rejected.
    """

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "search": "web",
                "statuses": ["RUNNING"],
                "types": ["INSTANCE"],
                "zones": [],
                "machine_types": [],
                "has_public_ip": None,
                "date_start": "2024-01-01",
                "date_end": None,
                "label_logic": "AND",
                "label_constraints": [{"key": "environment", "value": "production"}],
                "show_unlabeled_only": False,
                "sort_key": "name",
                "sort_direction": "asc",
                "group_by": "application",
            }
        },
    )

    search: str = Field("", description="Case-insensitive substring of name or id")
    statuses: list[ResourceStatus] = Field(default_factory=list)
    types: list[ResourceType] = Field(default_factory=list)
    zones: list[str] = Field(default_factory=list)
    machine_types: list[str] = Field(default_factory=list)
    has_public_ip: bool | None = Field(None, description="Require / forbid an external IP")
    date_start: str | None = Field(None, description="Inclusive lower creation bound (ISO 8601)")
    date_end: str | None = Field(None, description="Inclusive upper creation bound (ISO 8601)")
    label_logic: LabelLogic = Field(LabelLogic.AND)
    label_constraints: list[LabelConstraint] = Field(default_factory=list)
    show_unlabeled_only: bool = Field(False, description="Only resources without labels")
    sort_key: str | None = Field(None, description="Column to sort by")
    sort_direction: SortDirection = Field(SortDirection.ASC)
    group_by: str | None = Field(None, description="Label key to group rows by")
