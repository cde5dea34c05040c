"""Fleet Governance: label governance engine for cloud resource fleets."""

__version__ = "0.1.0"
