"""
Building blocks for wizard step validators.

A rule looks at the record and returns `(field, message)` when it fails.
`step_validator` bundles rules into the `record -> {field: message}`
function a `WizardStep` expects; the first failing rule for a field wins.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Optional, Tuple

from event_planner.core.models.wizard import WizardRecord

RuleResult = Optional[Tuple[str, str]]
Rule = Callable[[WizardRecord], RuleResult]
Validator = Callable[[WizardRecord], Dict[str, str]]

_MISSING = object()


def field_value(record: WizardRecord, path: str) -> Any:
    """Read `a.b.c` through nested dicts; None when any part is missing."""
    head, *rest = path.split(".")
    value = record.get(head, _MISSING)
    for part in rest:
        if not isinstance(value, dict):
            return None
        value = value.get(part, _MISSING)
    return None if value is _MISSING else value


def _number(value: Any) -> float | None:
    if isinstance(value, bool) or value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def required(field: str, message: str) -> Rule:
    def rule(record: WizardRecord) -> RuleResult:
        value = field_value(record, field)
        if value is None or (isinstance(value, str) and not value.strip()):
            return field, message
        return None

    return rule


def min_length(field: str, length: int, message: str) -> Rule:
    def rule(record: WizardRecord) -> RuleResult:
        value = field_value(record, field)
        if len((value or "").strip() if isinstance(value, str) else "") < length:
            return field, message
        return None

    return rule


def positive(field: str, message: str) -> Rule:
    def rule(record: WizardRecord) -> RuleResult:
        number = _number(field_value(record, field))
        if number is None or number <= 0:
            return field, message
        return None

    return rule


def in_range(field: str, low: float, high: float, message: str) -> Rule:
    def rule(record: WizardRecord) -> RuleResult:
        number = _number(field_value(record, field))
        if number is None or number < low or number > high:
            return field, message
        return None

    return rule


def non_empty_list(field: str, message: str) -> Rule:
    def rule(record: WizardRecord) -> RuleResult:
        value = field_value(record, field)
        if not isinstance(value, (list, tuple)) or len(value) == 0:
            return field, message
        return None

    return rule


def min_attachments(field: str, count: int, message: str) -> Rule:
    def rule(record: WizardRecord) -> RuleResult:
        if len(record.attachments.get(field, [])) < count:
            return field, message
        return None

    return rule


def ordered(low_field: str, high_field: str, message: str, error_field: str | None = None) -> Rule:
    """`low <= high`; skipped while either side is not a number yet."""

    def rule(record: WizardRecord) -> RuleResult:
        low = _number(field_value(record, low_field))
        high = _number(field_value(record, high_field))
        if low is None or high is None:
            return None
        if low > high:
            return error_field or high_field, message
        return None

    return rule


def when(predicate: Callable[[WizardRecord], bool], inner: Rule) -> Rule:
    def rule(record: WizardRecord) -> RuleResult:
        return inner(record) if predicate(record) else None

    return rule


def step_validator(*rules: Rule) -> Validator:
    def validate(record: WizardRecord) -> Dict[str, str]:
        errors: Dict[str, str] = {}
        for rule in rules:
            result = rule(record)
            if result is not None:
                field, message = result
                errors.setdefault(field, message)
        return errors

    return validate


def no_rules(_record: WizardRecord) -> Dict[str, str]:
    return {}
