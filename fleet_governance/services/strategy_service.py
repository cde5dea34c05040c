# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Label rule strategies.

Each strategy derives a candidate label map for one resource from its
name or current labels. Strategies never raise on extraction misses: a
resource the rule does not apply to simply yields no candidate.
"""

import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from pydantic import TypeAdapter

from ..models import (
    CleanupRule,
    LabelRule,
    LabelValidator,
    PatternRule,
    RegexRule,
    Resource,
    RowError,
    RuleValidation,
    StaticRule,
    StrategyKind,
)
from ..models.rules import RULE_MODELS
from ..utils.label_validation import default_validator

logger = logging.getLogger(__name__)

_rule_adapter: TypeAdapter = TypeAdapter(LabelRule)


class LabelStrategy(ABC):
    """Derives candidate label maps for resources."""

    kind: StrategyKind

    @abstractmethod
    def derive(self, resource: Resource) -> dict[str, str] | None:
        """
        Compute the candidate label map for a resource.

        Returns:
            The complete new label map, or None when the rule produces
            nothing for this resource
        """


class StaticStrategy(LabelStrategy):
    """Applies the same key/value pairs to every resource."""

    kind = StrategyKind.STATIC

    def __init__(self, rule: StaticRule):
        self.rule = rule

    def derive(self, resource: Resource) -> dict[str, str] | None:
        assignments = {pair.key: pair.value for pair in self.rule.labels if pair.key and pair.value}
        if not assignments:
            return None
        return {**resource.labels, **assignments}


def split_name(name: str, delimiter: str) -> list[str]:
    """Split a name into tokens; an empty delimiter yields single characters."""
    if not delimiter:
        return list(name)
    return name.split(delimiter)


def tokenize_sample(name: str, delimiter: str) -> list[dict[str, Any]]:
    """Token preview of a sample name for the pattern editor."""
    return [
        {"position": position, "token": token}
        for position, token in enumerate(split_name(name, delimiter))
    ]


class PatternStrategy(LabelStrategy):
    """Maps delimiter-separated name tokens to label keys."""

    kind = StrategyKind.PATTERN

    def __init__(self, rule: PatternRule):
        self.rule = rule

    def derive(self, resource: Resource) -> dict[str, str] | None:
        tokens = split_name(resource.name, self.rule.delimiter)
        extracted = {}
        for mapping in self.rule.mappings:
            if not mapping.key or not 0 <= mapping.position < len(tokens):
                continue
            token = tokens[mapping.position]
            if token:
                extracted[mapping.key] = token
        if not extracted:
            return None
        return {**resource.labels, **extracted}


def compile_pattern(pattern: str) -> tuple[re.Pattern | None, str | None]:
    """
    Compile a user-supplied regular expression.

    Returns:
        Tuple of (compiled pattern, None) or (None, error message)
    """
    try:
        return re.compile(pattern), None
    except re.error as e:
        return None, f"Invalid regular expression: {e}"


class RegexStrategy(LabelStrategy):
    """Maps regex capture groups of the name to label keys."""

    kind = StrategyKind.REGEX

    def __init__(self, rule: RegexRule):
        self.rule = rule
        self.pattern, self.error = compile_pattern(rule.pattern)
        if self.error:
            logger.warning(f"Regex strategy disabled for this batch: {self.error}")

    def derive(self, resource: Resource) -> dict[str, str] | None:
        if self.pattern is None:
            return None

        match = self.pattern.search(resource.name)
        if match is None:
            return None

        extracted = {}
        for group in self.rule.groups:
            if not group.key or not 0 <= group.index <= self.pattern.groups:
                continue
            captured = match.group(group.index)
            if captured:
                extracted[group.key] = captured
        if not extracted:
            return None
        return {**resource.labels, **extracted}


class CleanupStrategy(LabelStrategy):
    """Removes the listed label keys."""

    kind = StrategyKind.CLEANUP

    def __init__(self, rule: CleanupRule):
        self.rule = rule

    def derive(self, resource: Resource) -> dict[str, str] | None:
        doomed = {key for key in self.rule.keys if key and key in resource.labels}
        if not doomed:
            return None
        return {key: value for key, value in resource.labels.items() if key not in doomed}


STRATEGIES: dict[StrategyKind, type[LabelStrategy]] = {
    StrategyKind.STATIC: StaticStrategy,
    StrategyKind.PATTERN: PatternStrategy,
    StrategyKind.REGEX: RegexStrategy,
    StrategyKind.CLEANUP: CleanupStrategy,
}


def build_rule(kind: StrategyKind | str, parameters: Mapping[str, Any] | Any) -> LabelRule:
    """
    Build a typed rule from a strategy kind and its parameters.

    Args:
        kind: Strategy kind (enum member or its name)
        parameters: A rule model, or a mapping of the rule's fields

    Returns:
        The typed rule model

    Raises:
        ValueError: If the kind is unknown or does not match the parameters
        pydantic.ValidationError: If the parameters are malformed
    """
    kind = StrategyKind(kind)
    model = RULE_MODELS[kind]
    if isinstance(parameters, model):
        return parameters
    if isinstance(parameters, Mapping):
        return _rule_adapter.validate_python({**parameters, "kind": kind.value})
    raise ValueError(f"Parameters of type {type(parameters).__name__} do not match {kind.value}")


def create_strategy(rule: LabelRule) -> LabelStrategy:
    """Instantiate the strategy implementing ``rule``."""
    return STRATEGIES[StrategyKind(rule.kind)](rule)


def validate_rule(rule: LabelRule, validator: LabelValidator | None = None) -> RuleValidation:
    """
    Decide whether a rule is complete enough to be applied.

    Key/value syntax is delegated to ``validator``; this function only
    gates on its verdicts.

    Args:
        rule: The rule to check
        validator: Label syntax validator (defaults to Google Cloud rules)

    Returns:
        RuleValidation with the verdict and any messages
    """
    validator = validator or default_validator
    errors: list[str] = []
    row_errors: list[RowError] = []

    if isinstance(rule, StaticRule):
        valid_rows = 0
        for row, pair in enumerate(rule.labels):
            if not pair.key:
                continue
            key_error = validator.validate_key(pair.key)
            value_error = validator.validate_value(pair.value)
            if key_error or value_error:
                row_errors.append(RowError(row=row, key=key_error, value=value_error))
            elif pair.value:
                valid_rows += 1
        if row_errors:
            errors.append("Fix the highlighted label rows")
        if valid_rows == 0:
            errors.append("Add at least one label with a key and a value")

    elif isinstance(rule, PatternRule):
        if not any(mapping.key for mapping in rule.mappings):
            errors.append("Map at least one token position to a label key")

    elif isinstance(rule, RegexRule):
        _, pattern_error = compile_pattern(rule.pattern)
        if pattern_error:
            errors.append(pattern_error)
        if not any(group.key for group in rule.groups):
            errors.append("Map at least one capture group to a label key")

    elif isinstance(rule, CleanupRule):
        if not any(rule.keys):
            errors.append("Enter at least one label key to remove")

    return RuleValidation(is_valid=not errors, errors=errors, row_errors=row_errors)
