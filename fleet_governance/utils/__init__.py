"""Utility modules for the Fleet Governance service."""

from .label_validation import GcpLabelValidator, validate_key, validate_value
from .mock_fleet import generate_mock_resources
from .time_utils import ensure_utc, parse_bound

__all__ = [
    "GcpLabelValidator",
    "validate_key",
    "validate_value",
    "generate_mock_resources",
    "ensure_utc",
    "parse_bound",
]
