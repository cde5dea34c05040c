"""Unit tests for the label rule strategies."""

import pytest
from pydantic import ValidationError

from fleet_governance.models import (
    CleanupRule,
    GroupMapping,
    LabelPair,
    PatternRule,
    PositionMapping,
    RegexRule,
    StaticRule,
    StrategyKind,
)
from fleet_governance.services.strategy_service import (
    CleanupStrategy,
    PatternStrategy,
    RegexStrategy,
    StaticStrategy,
    build_rule,
    create_strategy,
    split_name,
    tokenize_sample,
    validate_rule,
)


class TestStaticStrategy:
    """Test static key/value assignment."""

    def test_merges_over_existing_labels(self, resource_factory):
        resource = resource_factory("a", labels={"team": "core", "env": "dev"})
        rule = StaticRule(labels=[LabelPair(key="env", value="prod"), LabelPair(key="owner", value="ops")])

        candidate = StaticStrategy(rule).derive(resource)

        assert candidate == {"team": "core", "env": "prod", "owner": "ops"}

    def test_skips_rows_missing_key_or_value(self, resource_factory):
        rule = StaticRule(labels=[LabelPair(key="", value="x"), LabelPair(key="env", value="")])
        assert StaticStrategy(rule).derive(resource_factory("a")) is None

    def test_later_rows_win_on_duplicate_keys(self, resource_factory):
        rule = StaticRule(labels=[LabelPair(key="env", value="dev"), LabelPair(key="env", value="prod")])
        assert StaticStrategy(rule).derive(resource_factory("a")) == {"env": "prod"}


class TestPatternStrategy:
    """Test delimiter-based extraction."""

    def test_maps_token_positions(self, resource_factory):
        resource = resource_factory("a", name="prod-web-42")
        rule = PatternRule(
            delimiter="-",
            mappings=[PositionMapping(position=0, key="env"), PositionMapping(position=1, key="app")],
        )

        assert PatternStrategy(rule).derive(resource) == {"env": "prod", "app": "web"}

    def test_out_of_range_positions_are_skipped(self, resource_factory):
        resource = resource_factory("a", name="prod-web")
        rule = PatternRule(
            mappings=[
                PositionMapping(position=0, key="env"),
                PositionMapping(position=5, key="tier"),
                PositionMapping(position=-1, key="last"),
            ]
        )
        assert PatternStrategy(rule).derive(resource) == {"env": "prod"}

    def test_empty_tokens_are_skipped(self, resource_factory):
        resource = resource_factory("a", name="prod--42")
        rule = PatternRule(
            mappings=[PositionMapping(position=1, key="app"), PositionMapping(position=2, key="n")]
        )
        assert PatternStrategy(rule).derive(resource) == {"n": "42"}

    def test_no_extraction_yields_none(self, resource_factory):
        rule = PatternRule(mappings=[PositionMapping(position=3, key="x")])
        assert PatternStrategy(rule).derive(resource_factory("a", name="one-two")) is None

    def test_empty_delimiter_splits_characters(self):
        assert split_name("abc", "") == ["a", "b", "c"]

    def test_tokenize_sample(self):
        assert tokenize_sample("prod_web", "_") == [
            {"position": 0, "token": "prod"},
            {"position": 1, "token": "web"},
        ]


class TestRegexStrategy:
    """Test capture-group extraction."""

    def test_maps_capture_groups(self, resource_factory):
        resource = resource_factory("a", name="staging-payments-7")
        rule = RegexRule(
            pattern=r"^([a-z]+)-([a-z]+)-(\d+)$",
            groups=[GroupMapping(index=1, key="env"), GroupMapping(index=2, key="app")],
        )

        assert RegexStrategy(rule).derive(resource) == {"env": "staging", "app": "payments"}

    def test_non_matching_name_yields_none(self, resource_factory):
        rule = RegexRule(groups=[GroupMapping(index=1, key="env")])
        assert RegexStrategy(rule).derive(resource_factory("a", name="not-matching")) is None

    def test_group_zero_is_whole_match(self, resource_factory):
        rule = RegexRule(pattern=r"\d+", groups=[GroupMapping(index=0, key="ordinal")])
        assert RegexStrategy(rule).derive(resource_factory("a", name="web-17-vm")) == {"ordinal": "17"}

    def test_invalid_group_index_is_skipped(self, resource_factory):
        rule = RegexRule(
            pattern=r"^(\w+)-",
            groups=[GroupMapping(index=1, key="env"), GroupMapping(index=4, key="missing")],
        )
        assert RegexStrategy(rule).derive(resource_factory("a", name="prod-x")) == {"env": "prod"}

    def test_unmatched_optional_group_is_skipped(self, resource_factory):
        rule = RegexRule(
            pattern=r"^(\w+?)(-canary)?$",
            groups=[GroupMapping(index=1, key="app"), GroupMapping(index=2, key="track")],
        )
        assert RegexStrategy(rule).derive(resource_factory("a", name="web")) == {"app": "web"}

    def test_invalid_pattern_disables_strategy(self, resource_factory):
        strategy = RegexStrategy(RegexRule(pattern="([a-z", groups=[GroupMapping(index=1, key="k")]))
        assert strategy.error is not None
        assert strategy.derive(resource_factory("a", name="abc")) is None


class TestCleanupStrategy:
    """Test label removal."""

    def test_removes_listed_keys(self, resource_factory):
        resource = resource_factory("a", labels={"env": "prod", "tmp": "1", "owner": "ops"})
        candidate = CleanupStrategy(CleanupRule(keys=["tmp", "owner"])).derive(resource)
        assert candidate == {"env": "prod"}

    def test_absent_keys_yield_none(self, resource_factory):
        resource = resource_factory("a", labels={"env": "prod"})
        assert CleanupStrategy(CleanupRule(keys=["tmp"])).derive(resource) is None


class TestBuildRule:
    """Test rule construction from kind and parameters."""

    def test_from_mapping(self):
        rule = build_rule("PATTERN", {"delimiter": "_", "mappings": [{"position": 0, "key": "env"}]})
        assert isinstance(rule, PatternRule)
        assert rule.delimiter == "_"

    def test_model_passes_through(self):
        rule = CleanupRule(keys=["tmp"])
        assert build_rule(StrategyKind.CLEANUP, rule) is rule

    def test_mismatched_model_is_rejected(self):
        with pytest.raises(ValueError, match="do not match"):
            build_rule(StrategyKind.STATIC, CleanupRule(keys=["tmp"]))

    def test_unknown_kind_is_rejected(self):
        with pytest.raises(ValueError):
            build_rule("RENAME", {})

    def test_malformed_parameters_are_rejected(self):
        with pytest.raises(ValidationError):
            build_rule("CLEANUP", {"keys": "not-a-list"})

    def test_create_strategy_dispatches_on_kind(self):
        assert isinstance(create_strategy(StaticRule()), StaticStrategy)
        assert isinstance(create_strategy(RegexRule()), RegexStrategy)


class TestValidateRule:
    """Test the apply gate."""

    def test_static_requires_a_complete_row(self):
        result = validate_rule(StaticRule(labels=[LabelPair(key="env", value="")]))
        assert not result.is_valid
        assert result.errors == ["Add at least one label with a key and a value"]

    def test_static_reports_row_errors(self):
        rule = StaticRule(
            labels=[LabelPair(key="env", value="prod"), LabelPair(key="Bad Key", value="x")]
        )
        result = validate_rule(rule)
        assert not result.is_valid
        assert [error.row for error in result.row_errors] == [1]
        assert result.row_errors[0].key is not None

    def test_valid_static_rule(self):
        assert validate_rule(StaticRule(labels=[LabelPair(key="env", value="prod")])).is_valid

    def test_pattern_requires_a_mapping_key(self):
        assert not validate_rule(PatternRule(mappings=[PositionMapping(position=0, key="")])).is_valid
        assert validate_rule(PatternRule(mappings=[PositionMapping(position=0, key="env")])).is_valid

    def test_regex_requires_compilable_pattern(self):
        result = validate_rule(RegexRule(pattern="(", groups=[GroupMapping(index=1, key="env")]))
        assert not result.is_valid
        assert result.errors[0].startswith("Invalid regular expression")

    def test_cleanup_requires_a_key(self):
        assert not validate_rule(CleanupRule(keys=[""])).is_valid
        assert validate_rule(CleanupRule(keys=["tmp"])).is_valid
