"""Data models for the Fleet Governance service."""

from .enums import (
    HistoryChangeType,
    LabelLogic,
    ProvisioningModel,
    ResourceStatus,
    ResourceType,
    SortDirection,
    StrategyKind,
)
from .labels import LabelMap, LabelValidationError, LabelValidator
from .resource import LabelHistoryEntry, Resource, ResourceDisk, ResourceIP
from .filters import FilterConfig, LabelConstraint
from .rules import (
    CleanupRule,
    GroupMapping,
    LabelPair,
    LabelRule,
    PatternRule,
    PositionMapping,
    RegexRule,
    RowError,
    RuleValidation,
    StaticRule,
)
from .changes import AddChange, Change, DeleteChange, PreviewResult, ResourcePreview, UpdateChange
from .table import DisplayRow, GroupHeaderRow, PageResult, ResourceRow
from .facets import FacetCounts
from .advisory import AdvisoryConfig, AdvisoryResult
from .analytics import FleetSummary, LabelCoverage, ZoneCount
from .audit import AuditLogEntry, AuditStatus
from .health import HealthStatus

__all__ = [
    "HistoryChangeType",
    "LabelLogic",
    "ProvisioningModel",
    "ResourceStatus",
    "ResourceType",
    "SortDirection",
    "StrategyKind",
    "LabelMap",
    "LabelValidationError",
    "LabelValidator",
    "LabelHistoryEntry",
    "Resource",
    "ResourceDisk",
    "ResourceIP",
    "FilterConfig",
    "LabelConstraint",
    "CleanupRule",
    "GroupMapping",
    "LabelPair",
    "LabelRule",
    "PatternRule",
    "PositionMapping",
    "RegexRule",
    "RowError",
    "RuleValidation",
    "StaticRule",
    "AddChange",
    "Change",
    "DeleteChange",
    "PreviewResult",
    "ResourcePreview",
    "UpdateChange",
    "DisplayRow",
    "GroupHeaderRow",
    "PageResult",
    "ResourceRow",
    "FacetCounts",
    "AdvisoryConfig",
    "AdvisoryResult",
    "FleetSummary",
    "LabelCoverage",
    "ZoneCount",
    "AuditLogEntry",
    "AuditStatus",
    "HealthStatus",
]
