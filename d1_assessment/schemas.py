"""
Assessment answer schema and the default-normalisation step

``AssessmentAnswers`` is the complete, immutable answer set the scoring rules
operate on. Construction is strict: every field the rules read must be present.
Call sites that accept partial answers run ``normalize_answers`` first, which is
the only place defaults are substituted.
"""

from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from core.exceptions import ValidationError

from .types import (
    BOOLEAN_FIELDS,
    REQUIRED_FIELDS,
    EmployeeRange,
    InvestorEngagement,
    Milestone,
    MrrTier,
)

ANSWER_COLUMNS = REQUIRED_FIELDS + ("funding_goal",)

# Documented defaults applied by ``normalize_answers`` only
DEFAULT_ANSWERS: dict[str, Any] = {
    **{name: False for name in BOOLEAN_FIELDS},
    "mrr": MrrTier.NONE.value,
    "employees": EmployeeRange.SOLO.value,
    "investors": InvestorEngagement.NONE.value,
    "milestones": Milestone.CONCEPT.value,
    "funding_goal": None,
}


class AssessmentAnswers(BaseModel):
    """Complete answer set for one self-assessment submission"""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
    )

    prototype: bool
    revenue: bool
    full_time_team: bool
    term_sheets: bool
    cap_table: bool
    external_capital: bool
    mrr: MrrTier
    employees: EmployeeRange
    investors: InvestorEngagement
    milestones: Milestone
    funding_goal: Optional[str] = None

    def canonical(self) -> dict[str, Any]:
        """Plain, JSON-safe field mapping keyed by snake_case names"""
        return self.model_dump(mode="json")


AnswersInput = Union[AssessmentAnswers, Mapping[str, Any]]


def _lookup(data: Mapping[str, Any], name: str) -> Any:
    """Read a field by its snake_case name or its camelCase alias"""
    if name in data:
        return data[name]
    return data.get(to_camel(name))


def parse_answers(data: AnswersInput) -> AssessmentAnswers:
    """
    Build ``AssessmentAnswers`` from a mapping without substituting defaults

    Raises:
        ValidationError: a required field is absent/None or holds an unknown value
    """
    if isinstance(data, AssessmentAnswers):
        return data

    for name in REQUIRED_FIELDS:
        if _lookup(data, name) is None:
            raise ValidationError(f"Missing required answer: {name}", field=name)

    try:
        return AssessmentAnswers.model_validate(dict(data))
    except PydanticValidationError as exc:
        first = exc.errors()[0]
        field = _field_from_loc(first.get("loc", ()))
        raise ValidationError(
            f"Invalid answer for {field}: {first.get('msg')}",
            field=field,
            errors=[error.get("msg") for error in exc.errors()],
        ) from exc


def _field_from_loc(loc: tuple) -> Optional[str]:
    if not loc:
        return None
    key = str(loc[0])
    aliases = {to_camel(name): name for name in AssessmentAnswers.model_fields}
    return aliases.get(key, key)


def normalize_answers(data: Mapping[str, Any]) -> dict[str, Any]:
    """
    Map absent or null answers to their documented defaults

    Returns a snake_case mapping suitable for ``parse_answers``. Values that are
    present are passed through untouched so invalid values still fail loudly.
    """
    normalized: dict[str, Any] = {}
    for name, default in DEFAULT_ANSWERS.items():
        value = _lookup(data, name)
        normalized[name] = default if value is None else value
    return normalized


def answer_columns(data: Mapping[str, Any]) -> dict[str, Any]:
    """
    Map snake_case or camelCase answer keys onto column names without validating values

    Raises:
        ValidationError: a key is not an answer field
    """
    columns = {name: name for name in ANSWER_COLUMNS}
    columns.update({to_camel(name): name for name in ANSWER_COLUMNS})

    values: dict[str, Any] = {}
    for key, value in data.items():
        if key not in columns:
            raise ValidationError(f"Unknown answer field: {key}", field=key)
        values[columns[key]] = value
    return values


def answers_from_row(row: Any) -> dict[str, Any]:
    """Extract raw answer columns from an ``assessments`` row"""
    return {name: getattr(row, name, None) for name in ANSWER_COLUMNS}


__all__ = [
    "AssessmentAnswers",
    "AnswersInput",
    "DEFAULT_ANSWERS",
    "answer_columns",
    "answers_from_row",
    "normalize_answers",
    "parse_answers",
]
