"""Unit tests for the naming advisory client and service."""

from unittest.mock import MagicMock

import pytest
import requests

from fleet_governance.clients.advisory_client import AdvisoryClient, AdvisoryError
from fleet_governance.models import (
    AdvisoryConfig,
    AdvisoryResult,
    CleanupRule,
    GroupMapping,
    PatternRule,
    PositionMapping,
    RegexRule,
    StrategyKind,
)
from fleet_governance.services.advisory_service import (
    ANALYSIS_FAILED_ADVICE,
    AdvisoryService,
)


def make_session(payload=None, exc=None):
    """Build a mock requests session returning ``payload`` or raising ``exc``."""
    session = MagicMock(spec=requests.Session)
    if exc is not None:
        session.post.side_effect = exc
    else:
        response = MagicMock()
        response.raise_for_status.return_value = None
        response.json.return_value = payload
        session.post.return_value = response
    return session


class TestAdvisoryClient:
    """Test the HTTP client."""

    def test_parses_camel_case_response(self):
        session = make_session(
            {
                "advice": "Names follow env-app-n",
                "suggestedMode": "REGEX",
                "config": {"regex": r"^(\w+)-(\w+)", "groups": [{"index": 1, "key": "env"}]},
            }
        )
        client = AdvisoryClient("https://advisor.example/analyze", session=session, api_key="secret")

        result = client.analyze_names(["prod-web-1"])

        assert result.suggested_mode == StrategyKind.REGEX
        assert result.config.groups == [GroupMapping(index=1, key="env")]
        assert result.source == "remote"
        _, kwargs = session.post.call_args
        assert kwargs["json"] == {"names": ["prod-web-1"]}
        assert kwargs["headers"]["Authorization"] == "Bearer secret"
        assert kwargs["timeout"] == 15.0

    def test_transport_error(self):
        client = AdvisoryClient("https://x", session=make_session(exc=requests.ConnectionError("down")))
        with pytest.raises(AdvisoryError, match="request failed"):
            client.analyze_names(["a"])

    def test_unexpected_shape(self):
        client = AdvisoryClient("https://x", session=make_session(["not", "an", "object"]))
        with pytest.raises(AdvisoryError, match="unexpected shape"):
            client.analyze_names(["a"])

    def test_missing_advice(self):
        client = AdvisoryClient("https://x", session=make_session({"suggestedMode": "PATTERN"}))
        with pytest.raises(AdvisoryError):
            client.analyze_names(["a"])


class TestAnalyzeNames:
    """Test the advisory service."""

    def test_remote_failure_becomes_advice(self):
        client = MagicMock(spec=AdvisoryClient)
        client.analyze_names.side_effect = AdvisoryError("boom")

        result = AdvisoryService(client).analyze_names(["prod-web-1"])

        assert result.advice == ANALYSIS_FAILED_ADVICE
        assert result.source == "error"
        assert result.suggested_mode is None

    def test_remote_result_is_returned(self):
        client = MagicMock(spec=AdvisoryClient)
        client.analyze_names.return_value = AdvisoryResult(advice="ok")
        assert AdvisoryService(client).analyze_names(["a"]).advice == "ok"

    def test_empty_selection(self):
        result = AdvisoryService().analyze_names([])
        assert result.suggested_mode is None

    def test_heuristic_finds_environment_and_application(self):
        names = ["prod-web-1-vm", "staging-api-2-vm", "dev-worker-3-vm"]

        result = AdvisoryService().analyze_names(names)

        assert result.source == "heuristic"
        assert result.suggested_mode == StrategyKind.PATTERN
        assert result.config.delimiter == "-"
        assert result.config.mappings == [
            PositionMapping(position=0, key="environment"),
            PositionMapping(position=1, key="application"),
        ]

    def test_heuristic_picks_underscore_delimiter(self):
        result = AdvisoryService().analyze_names(["billing_prod", "search_prod", "auth_qa"])
        assert result.config.delimiter == "_"
        assert result.config.mappings == [
            PositionMapping(position=0, key="application"),
            PositionMapping(position=1, key="environment"),
        ]

    def test_heuristic_without_delimiter_suggests_regex(self):
        result = AdvisoryService().analyze_names(["alpha", "beta", "gamma"])
        assert result.suggested_mode == StrategyKind.REGEX
        assert result.config is None


class TestPrefillRule:
    """Test merging a suggestion into rule parameters."""

    def test_pattern_prefill_replaces_delimiter_and_mappings(self):
        result = AdvisoryResult(
            advice="x",
            suggested_mode=StrategyKind.PATTERN,
            config=AdvisoryConfig(delimiter="_", mappings=[PositionMapping(position=2, key="app")]),
        )
        rule = AdvisoryService().prefill_rule(result, PatternRule(delimiter="-"))
        assert rule.delimiter == "_"
        assert rule.mappings == [PositionMapping(position=2, key="app")]

    def test_empty_mappings_keep_current(self):
        current = PatternRule(mappings=[PositionMapping(position=0, key="env")])
        result = AdvisoryResult(
            advice="x",
            suggested_mode=StrategyKind.PATTERN,
            config=AdvisoryConfig(delimiter=".", mappings=[]),
        )
        rule = AdvisoryService().prefill_rule(result, current)
        assert rule.delimiter == "."
        assert rule.mappings == current.mappings

    def test_regex_prefill(self):
        result = AdvisoryResult(
            advice="x",
            suggested_mode=StrategyKind.REGEX,
            config=AdvisoryConfig(regex=r"^(\w+)$", groups=[GroupMapping(index=1, key="app")]),
        )
        rule = AdvisoryService().prefill_rule(result, CleanupRule(keys=["tmp"]))
        assert isinstance(rule, RegexRule)
        assert rule.pattern == r"^(\w+)$"
        assert rule.groups == [GroupMapping(index=1, key="app")]

    def test_no_mode_returns_none(self):
        assert AdvisoryService().prefill_rule(AdvisoryResult(advice="x")) is None
