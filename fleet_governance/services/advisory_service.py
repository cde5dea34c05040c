# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Naming-convention advisory.

Suggests a pattern or regex rule for a selection of resource names. The
suggestion only pre-fills rule parameters; it is never applied directly.
A remote advisory endpoint is used when configured, otherwise a local
heuristic inspects the names.
"""

import logging
import re
from collections import Counter
from typing import Optional

from ..clients.advisory_client import AdvisoryClient, AdvisoryError
from ..models import (
    AdvisoryConfig,
    AdvisoryResult,
    LabelRule,
    PatternRule,
    PositionMapping,
    RegexRule,
    StrategyKind,
)

logger = logging.getLogger(__name__)

ANALYSIS_FAILED_ADVICE = "Failed to analyze patterns. Please try again."


class AdvisoryService:
    """
    Produces naming-convention advice for a set of resource names.

    Token classification mirrors the keyword tables of a tag suggestion
    engine: environment tokens, numeric ordinals and type suffixes are
    recognized; the first remaining token is taken as the application.
    """

    CANDIDATE_DELIMITERS = ["-", "_", "."]

    ENVIRONMENT_PATTERNS = {
        "production": [r"prod", r"prd", r"production", r"live"],
        "staging": [r"stag", r"stg", r"staging", r"preprod", r"uat"],
        "development": [r"dev", r"develop", r"development", r"sandbox"],
        "qa": [r"test", r"tst", r"qa"],
    }

    TYPE_SUFFIXES = {"vm", "disk", "db", "svc", "bucket", "assets"}

    # Share of names that must agree before a token position is mapped
    MIN_AGREEMENT = 0.6

    def __init__(self, client: Optional[AdvisoryClient] = None):
        """
        Initialize the AdvisoryService.

        Args:
            client: Remote advisory client; None selects the local heuristic
        """
        self.client = client
        self._environment_regex = re.compile(
            "^(" + "|".join(p for patterns in self.ENVIRONMENT_PATTERNS.values() for p in patterns) + ")$"
        )

    def analyze_names(self, names: list[str]) -> AdvisoryResult:
        """
        Analyze resource names and suggest a labeling strategy.

        Failures of the remote service are reported as advice text and
        never raised.

        Args:
            names: Resource names of the current selection

        Returns:
            AdvisoryResult with advice and an optional suggested configuration
        """
        if not names:
            return AdvisoryResult(advice="Select resources to analyze their naming convention.", source="heuristic")

        if self.client is not None:
            try:
                return self.client.analyze_names(names)
            except AdvisoryError as e:
                logger.warning(f"Naming analysis failed: {e}")
                return AdvisoryResult(advice=ANALYSIS_FAILED_ADVICE, source="error")

        return self._analyze_locally(names)

    def _pick_delimiter(self, names: list[str]) -> Optional[str]:
        counts = {
            delimiter: sum(1 for name in names if delimiter in name)
            for delimiter in self.CANDIDATE_DELIMITERS
        }
        delimiter, hits = max(counts.items(), key=lambda item: item[1])
        if hits / len(names) < self.MIN_AGREEMENT:
            return None
        return delimiter

    def _classify(self, token: str) -> Optional[str]:
        if not token:
            return None
        if token.isdigit():
            return "ordinal"
        if token in self.TYPE_SUFFIXES:
            return "suffix"
        if self._environment_regex.match(token):
            return "environment"
        return "word"

    def _analyze_locally(self, names: list[str]) -> AdvisoryResult:
        delimiter = self._pick_delimiter(names)
        if delimiter is None:
            return AdvisoryResult(
                advice="No common delimiter found. Try a regular expression with capture groups.",
                suggested_mode=StrategyKind.REGEX,
                source="heuristic",
            )

        tokenized = [name.split(delimiter) for name in names]
        width = Counter(len(tokens) for tokens in tokenized).most_common(1)[0][0]

        mappings = []
        has_application = False
        for position in range(width):
            kinds = Counter(
                self._classify(tokens[position]) for tokens in tokenized if position < len(tokens)
            )
            kind, hits = kinds.most_common(1)[0]
            if hits / len(names) < self.MIN_AGREEMENT:
                continue
            if kind == "environment":
                mappings.append(PositionMapping(position=position, key="environment"))
            elif kind == "word" and not has_application:
                mappings.append(PositionMapping(position=position, key="application"))
                has_application = True

        if not mappings:
            return AdvisoryResult(
                advice=f"Names split on '{delimiter}' but no position holds a recognizable value.",
                suggested_mode=StrategyKind.PATTERN,
                config=AdvisoryConfig(delimiter=delimiter),
                source="heuristic",
            )

        described = ", ".join(f"position {m.position} -> {m.key}" for m in mappings)
        return AdvisoryResult(
            advice=f"Names follow a '{delimiter}'-separated convention: {described}.",
            suggested_mode=StrategyKind.PATTERN,
            config=AdvisoryConfig(delimiter=delimiter, mappings=mappings),
            source="heuristic",
        )

    def prefill_rule(
        self, result: AdvisoryResult, current: Optional[LabelRule] = None
    ) -> Optional[LabelRule]:
        """
        Merge a suggestion into rule parameters.

        Only PATTERN and REGEX suggestions carry parameters. A delimiter or
        regex replaces the current one when present; mapping lists replace
        the current ones only when non-empty. Other fields keep their
        current (or default) values.

        Args:
            result: Advisory output
            current: Rule currently being edited, if any

        Returns:
            The pre-filled rule, or None when the suggestion has no parameters
        """
        mode = result.suggested_mode
        config = result.config

        if mode == StrategyKind.PATTERN:
            rule = current if isinstance(current, PatternRule) else PatternRule()
            if config is None:
                return rule
            update = {}
            if config.delimiter:
                update["delimiter"] = config.delimiter
            if config.mappings:
                update["mappings"] = list(config.mappings)
            return rule.model_copy(update=update)

        if mode == StrategyKind.REGEX:
            rule = current if isinstance(current, RegexRule) else RegexRule()
            if config is None:
                return rule
            update = {}
            if config.regex:
                update["pattern"] = config.regex
            if config.groups:
                update["groups"] = list(config.groups)
            return rule.model_copy(update=update)

        return None
