"""Naming-pattern advisory models."""

from pydantic import BaseModel, ConfigDict, Field

from .enums import StrategyKind
from .rules import GroupMapping, PositionMapping


class AdvisoryConfig(BaseModel):
    """Suggested strategy parameters. All fields are optional."""

    model_config = ConfigDict(populate_by_name=True)

    delimiter: str | None = None
    mappings: list[PositionMapping] | None = None
    regex: str | None = None
    groups: list[GroupMapping] | None = None


class AdvisoryResult(BaseModel):
    """Advice returned by the naming-pattern advisory."""

    model_config = ConfigDict(populate_by_name=True)

    advice: str = Field(..., description="Human-readable explanation")
    suggested_mode: StrategyKind | None = Field(None, alias="suggestedMode")
    config: AdvisoryConfig | None = None
    source: str = Field("remote", description="'remote', 'heuristic', or 'error'")
