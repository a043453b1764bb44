# exercise_runtime/core/validation.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Tuple

from exercise_runtime.core.definition import ExerciseDefinition, SelectionMode

logger = logging.getLogger(__name__)


class ValidationSeverity(Enum):
    """
    Severity levels for schema findings.

    ERROR findings make the report unsuccessful; WARNING findings do not.
    """

    ERROR = 2
    WARNING = 1


@dataclass(frozen=True)
class ValidationRule:
    """
    Immutable container for a validation rule.

    Attributes:
        name: Unique identifier for the rule
        check: Callable returning True when the definition satisfies the rule
        severity: How severe violations of this rule are
        description: Message reported when the rule is violated
    """

    name: str
    check: Callable[[ExerciseDefinition], bool]
    severity: ValidationSeverity
    description: str


@dataclass(frozen=True)
class SchemaIssue:
    rule: str
    severity: ValidationSeverity
    message: str


@dataclass(frozen=True)
class SchemaReport:
    """Result of validating a definition."""

    success: bool
    errors: Tuple[SchemaIssue, ...] = ()
    warnings: Tuple[SchemaIssue, ...] = ()

    def messages(self) -> List[str]:
        return [issue.message for issue in self.errors + self.warnings]


class DefinitionValidator:
    """
    Rule based SchemaValidator for exercise definitions.

    Runtime Invariants:
    - Rule names are unique
    - Rules cannot modify the validated definition
    - A rule that raises is reported as an error, never propagated

    Example:
        validator = DefinitionValidator()
        validator.add_rule(
            "has_hints",
            lambda d: bool(d.solution.hints),
            ValidationSeverity.WARNING,
            "Exercise has no hints",
        )
        report = validator.validate(definition)
    """

    def __init__(self, include_defaults: bool = True) -> None:
        self._rules: Dict[str, ValidationRule] = {}
        if include_defaults:
            for rule in _default_rules():
                self._rules[rule.name] = rule

    @property
    def rules(self) -> Tuple[ValidationRule, ...]:
        return tuple(self._rules.values())

    def add_rule(
        self,
        name: str,
        check: Callable[[ExerciseDefinition], bool],
        severity: ValidationSeverity,
        description: str,
    ) -> None:
        """
        Add a custom validation rule.

        :raises ValueError: If a rule with the same name exists.
        :raises TypeError: If severity is not a ValidationSeverity.
        """
        if not isinstance(severity, ValidationSeverity):
            raise TypeError(f"severity must be a ValidationSeverity enum value, got {type(severity)}")
        if name in self._rules:
            raise ValueError(f"Rule '{name}' is already registered")
        self._rules[name] = ValidationRule(name, check, severity, description)

    def remove_rule(self, name: str) -> None:
        self._rules.pop(name, None)

    def validate(self, definition: ExerciseDefinition) -> SchemaReport:
        errors: List[SchemaIssue] = []
        warnings: List[SchemaIssue] = []
        for rule in self._rules.values():
            try:
                passed = rule.check(definition)
                severity = rule.severity
                message = rule.description
            except Exception as e:
                logger.debug("Rule %s raised: %s", rule.name, e)
                passed = False
                severity = ValidationSeverity.ERROR
                message = f"Rule '{rule.name}' could not be evaluated: {e}"
            if passed:
                continue
            issue = SchemaIssue(rule.name, severity, message)
            if severity is ValidationSeverity.ERROR:
                errors.append(issue)
            else:
                warnings.append(issue)
        return SchemaReport(success=not errors, errors=tuple(errors), warnings=tuple(warnings))


def _unique_option_ids(definition: ExerciseDefinition) -> bool:
    ids = definition.content.option_ids()
    return len(ids) == len(set(ids))


def _required_in_range(definition: ExerciseDefinition) -> bool:
    required = definition.settings.required_selections
    return 1 <= required <= max(1, len(definition.content.options))


def _positive_or_none(value) -> bool:
    return value is None or value > 0


def _default_rules() -> List[ValidationRule]:
    single = SelectionMode.SINGLE
    return [
        ValidationRule(
            "has_id",
            lambda d: bool(d.id),
            ValidationSeverity.ERROR,
            "Exercise must have an identifier",
        ),
        ValidationRule(
            "has_options",
            lambda d: len(d.content.options) > 0,
            ValidationSeverity.ERROR,
            "Exercise must define at least one option",
        ),
        ValidationRule(
            "unique_option_ids",
            _unique_option_ids,
            ValidationSeverity.ERROR,
            "Option identifiers must be unique",
        ),
        ValidationRule(
            "correct_set_not_empty",
            lambda d: len(d.solution.correct) > 0,
            ValidationSeverity.ERROR,
            "Solution must name at least one correct option",
        ),
        ValidationRule(
            "correct_set_within_options",
            lambda d: d.solution.correct <= set(d.content.option_ids()),
            ValidationSeverity.ERROR,
            "Solution references options that do not exist",
        ),
        ValidationRule(
            "required_selections_in_range",
            _required_in_range,
            ValidationSeverity.ERROR,
            "requiredSelections must be between 1 and the number of options",
        ),
        ValidationRule(
            "time_limit_positive",
            lambda d: _positive_or_none(d.settings.time_limit),
            ValidationSeverity.ERROR,
            "timeLimit must be positive",
        ),
        ValidationRule(
            "max_attempts_positive",
            lambda d: _positive_or_none(d.settings.max_attempts),
            ValidationSeverity.ERROR,
            "maxAttempts must be positive",
        ),
        ValidationRule(
            "has_question",
            lambda d: bool(d.content.question),
            ValidationSeverity.WARNING,
            "Exercise has no question text",
        ),
        ValidationRule(
            "multiple_options",
            lambda d: len(d.content.options) >= 2,
            ValidationSeverity.WARNING,
            "Exercise offers fewer than two options",
        ),
        ValidationRule(
            "single_mode_single_correct",
            lambda d: d.settings.selection_mode is not single or len(d.solution.correct) == 1,
            ValidationSeverity.WARNING,
            "Single selection mode with more than one correct option can never be fully correct",
        ),
        ValidationRule(
            "selections_cover_correct_set",
            lambda d: d.settings.selection_mode is single
            or d.settings.required_selections >= len(d.solution.correct),
            ValidationSeverity.WARNING,
            "requiredSelections is smaller than the correct set; full credit is unreachable",
        ),
    ]
