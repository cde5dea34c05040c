"""Unit tests for the synthetic fleet generator."""

import re

from fleet_governance.models import ResourceType
from fleet_governance.utils.mock_fleet import ENVIRONMENTS, generate_mock_resources

NAME_PATTERN = re.compile(r"^(production|staging|development|qa)-")


def test_generates_requested_count():
    assert len(generate_mock_resources(count=25, seed=1)) == 25


def test_ids_are_unique():
    resources = generate_mock_resources(count=50, seed=2)
    assert len({r.id for r in resources}) == 50


def test_same_seed_same_fleet():
    first = generate_mock_resources(count=10, seed=42)
    second = generate_mock_resources(count=10, seed=42)
    assert [(r.id, r.name) for r in first] == [(r.id, r.name) for r in second]


def test_names_follow_environment_prefix_convention():
    for resource in generate_mock_resources(count=40, seed=3):
        assert NAME_PATTERN.match(resource.name), resource.name


def test_labeled_resources_agree_with_name():
    for resource in generate_mock_resources(count=40, seed=4):
        if resource.labels:
            assert resource.labels["environment"] in ENVIRONMENTS
            assert resource.name.startswith(resource.labels["environment"] + "-")


def test_type_specific_fields():
    for resource in generate_mock_resources(count=60, seed=5):
        if resource.type == ResourceType.INSTANCE:
            assert resource.machine_type is not None
            assert resource.disks
        if resource.type == ResourceType.BUCKET:
            assert resource.storage_class is not None
            assert resource.size_gb is not None
