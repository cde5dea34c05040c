"""Pytest configuration and shared fixtures."""

from datetime import datetime, timezone

import pytest

from fleet_governance.models import (
    ProvisioningModel,
    Resource,
    ResourceDisk,
    ResourceIP,
    ResourceStatus,
    ResourceType,
)
from fleet_governance.services.resource_store import InMemoryResourceStore


@pytest.fixture
def anyio_backend():
    """Configure anyio backend for async tests."""
    return "asyncio"


# =============================================================================
# Environment and Configuration Fixtures
# =============================================================================

@pytest.fixture
def test_env(monkeypatch, tmp_path):
    """Set up test environment variables."""
    test_vars = {
        "REDIS_ENABLED": "false",
        "AUDIT_DB_PATH": str(tmp_path / "audit.db"),
        "MOCK_FLEET_SIZE": "10",
        "MOCK_FLEET_SEED": "7",
        "LOG_LEVEL": "DEBUG",
        "ENVIRONMENT": "test",
    }
    for key, value in test_vars.items():
        monkeypatch.setenv(key, value)
    return test_vars


# =============================================================================
# Test Data Fixtures
# =============================================================================

def make_resource(
    resource_id: str,
    name: str | None = None,
    labels: dict[str, str] | None = None,
    **overrides,
) -> Resource:
    """Build a Resource with sensible defaults for tests."""
    fields = {
        "id": resource_id,
        "name": name or f"{resource_id}-vm",
        "type": ResourceType.INSTANCE,
        "zone": "us-central1-a",
        "status": ResourceStatus.RUNNING,
        "labels": labels or {},
        "label_fingerprint": f"fp-{resource_id}",
    }
    fields.update(overrides)
    return Resource(**fields)


@pytest.fixture
def resource_factory():
    """Factory building resources with test defaults."""
    return make_resource


@pytest.fixture
def sample_resources():
    """A small, hand-built fleet covering every filter dimension."""
    return [
        make_resource(
            "r1",
            name="prod-web-42",
            labels={"environment": "prod", "application": "web"},
            machine_type="e2-medium",
            creation_timestamp=datetime(2024, 1, 10, 8, 0, tzinfo=timezone.utc),
            ips=[ResourceIP(network="default", internal="10.0.0.1", external="34.1.2.3")],
            disks=[ResourceDisk(device_name="boot", size_gb=50, boot=True)],
        ),
        make_resource(
            "r2",
            name="staging-payments-7",
            labels={"environment": "staging", "application": "payments"},
            machine_type="n1-standard-1",
            status=ResourceStatus.STOPPED,
            creation_timestamp=datetime(2024, 2, 15, 12, 30, tzinfo=timezone.utc),
            ips=[ResourceIP(network="default", internal="10.0.0.2")],
            disks=[
                ResourceDisk(device_name="boot", size_gb=20, boot=True),
                ResourceDisk(device_name="data", size_gb=100),
            ],
            provisioning_model=ProvisioningModel.SPOT,
        ),
        make_resource(
            "r3",
            name="prod-db-1",
            labels={"environment": "prod"},
            type=ResourceType.CLOUD_SQL,
            status=ResourceStatus.READY,
            zone="europe-west1-d",
            machine_type="db-custom-2-3840",
            creation_timestamp=datetime(2024, 3, 1, tzinfo=timezone.utc),
        ),
        make_resource(
            "r4",
            name="archive-bucket",
            type=ResourceType.BUCKET,
            status=ResourceStatus.READY,
            zone="us-central1",
            size_gb="1200",
        ),
    ]


@pytest.fixture
def resource_store(sample_resources):
    """An in-memory store seeded with the sample fleet."""
    return InMemoryResourceStore(sample_resources)


# =============================================================================
# Pytest Hooks for Test Reporting
# =============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line(
        "markers", "api: marks tests that exercise the HTTP API"
    )
    config.addinivalue_line(
        "markers", "slow: marks tests as slow running"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
    config.addinivalue_line(
        "markers", "property: marks tests as property-based tests"
    )


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        # Mark tests by directory
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "property" in str(item.fspath):
            item.add_marker(pytest.mark.property)
        if "test_api" in str(item.fspath):
            item.add_marker(pytest.mark.api)


def pytest_sessionstart(session):
    """Print test session information."""
    print("\n" + "=" * 70)
    print("Fleet Governance - Test Suite")
    print("=" * 70)


def pytest_sessionfinish(session, exitstatus):
    """Print test session summary."""
    print("\n" + "=" * 70)
    if exitstatus == 0:
        print("PASS: All tests passed!")
    else:
        print(f"FAIL: Tests failed with exit status: {exitstatus}")
    print("=" * 70)
