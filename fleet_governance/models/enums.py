"""Enumerations for resource kinds, states, and label rule strategies."""

from enum import Enum


class ResourceType(str, Enum):
    """Kinds of cloud resources tracked in the fleet."""

    INSTANCE = "INSTANCE"
    DISK = "DISK"
    CLOUD_SQL = "CLOUD_SQL"
    CLOUD_RUN = "CLOUD_RUN"
    BUCKET = "BUCKET"


class ResourceStatus(str, Enum):
    """Lifecycle states reported for a resource."""

    RUNNING = "RUNNING"
    STOPPED = "STOPPED"
    READY = "READY"
    TERMINATED = "TERMINATED"
    PROVISIONING = "PROVISIONING"
    SUSPENDED = "SUSPENDED"


class ProvisioningModel(str, Enum):
    """Purchase model of a compute resource."""

    STANDARD = "STANDARD"
    SPOT = "SPOT"
    RESERVED = "RESERVED"


class HistoryChangeType(str, Enum):
    """Kinds of entries recorded in a resource's label history."""

    CREATE = "CREATE"
    UPDATE = "UPDATE"
    REVERT = "REVERT"


class StrategyKind(str, Enum):
    """Label rule strategies supported by the labeling engine."""

    STATIC = "STATIC"
    PATTERN = "PATTERN"
    REGEX = "REGEX"
    CLEANUP = "CLEANUP"


class LabelLogic(str, Enum):
    """How multiple label constraints combine."""

    AND = "AND"
    OR = "OR"


class SortDirection(str, Enum):
    """Sort direction for table queries."""

    ASC = "asc"
    DESC = "desc"
