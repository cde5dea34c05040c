"""Label rule parameter models, one per strategy kind."""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from .enums import StrategyKind


class LabelPair(BaseModel):
    """A key/value row of a static rule."""

    model_config = ConfigDict(frozen=True)

    key: str = ""
    value: str = ""


class PositionMapping(BaseModel):
    """Maps a token position of the split name to a label key."""

    model_config = ConfigDict(frozen=True)

    position: int = Field(0, description="Zero-based token index")
    key: str = ""


class GroupMapping(BaseModel):
    """Maps a regex capture group index to a label key."""

    model_config = ConfigDict(frozen=True)

    index: int = Field(1, description="Capture group index (0 is the whole match)")
    key: str = ""


class StaticRule(BaseModel):
    """Apply the same labels to every selected resource."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["STATIC"] = "STATIC"
    labels: list[LabelPair] = Field(default_factory=list)


class PatternRule(BaseModel):
    """Split the resource name on a delimiter and map tokens to keys."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["PATTERN"] = "PATTERN"
    delimiter: str = "-"
    mappings: list[PositionMapping] = Field(default_factory=list)


class RegexRule(BaseModel):
    """Match the resource name and map capture groups to keys."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["REGEX"] = "REGEX"
    pattern: str = r"^([a-z]+)-([a-z]+)-(\d+)$"
    groups: list[GroupMapping] = Field(default_factory=list)


class CleanupRule(BaseModel):
    """Remove the listed label keys."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["CLEANUP"] = "CLEANUP"
    keys: list[str] = Field(default_factory=list)


LabelRule = Annotated[
    Union[StaticRule, PatternRule, RegexRule, CleanupRule],
    Field(discriminator="kind"),
]

RULE_MODELS: dict[StrategyKind, type[BaseModel]] = {
    StrategyKind.STATIC: StaticRule,
    StrategyKind.PATTERN: PatternRule,
    StrategyKind.REGEX: RegexRule,
    StrategyKind.CLEANUP: CleanupRule,
}


class RowError(BaseModel):
    """Validation messages for one static rule row."""

    row: int
    key: str | None = None
    value: str | None = None


class RuleValidation(BaseModel):
    """Outcome of the apply gate for a rule."""

    is_valid: bool
    errors: list[str] = Field(default_factory=list)
    row_errors: list[RowError] = Field(default_factory=list)
