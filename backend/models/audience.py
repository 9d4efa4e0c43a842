"""Pydantic models for audience targeting rules."""

from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class GeoField(str, Enum):
    """Subscriber geography fields a rule clause can test."""

    state = "state"
    county = "county"
    place = "place"


class ClauseOperator(str, Enum):
    """Supported clause operators."""

    equals = "equals"  # field == value
    member_of = "memberOf"  # field in [values]


# Spellings used by rules stored before the operator names settled.
_LEGACY_OPERATORS = {"eq": "equals", "==": "equals", "in": "memberOf", "member_of": "memberOf"}
_LEGACY_FIELDS = {"county_fips": "county"}


class RuleClause(BaseModel):
    """A single equality or membership check on one geography field."""

    model_config = ConfigDict(frozen=True)

    field: GeoField = Field(..., validation_alias=AliasChoices("field", "level"))
    operator: ClauseOperator = Field(..., validation_alias=AliasChoices("operator", "op"))
    value: str | list[str]

    @field_validator("field", mode="before")
    @classmethod
    def _legacy_field(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip().lower()
            return _LEGACY_FIELDS.get(value, value)
        return value

    @field_validator("operator", mode="before")
    @classmethod
    def _legacy_operator(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip()
            return _LEGACY_OPERATORS.get(value, value)
        return value


class AudienceRule(BaseModel):
    """Boolean predicate over a subscriber's geography.

    `any` clauses are OR-ed, `all` clauses are AND-ed, and both groups must
    pass. A rule with neither group never matches.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    any_: list[RuleClause] | None = Field(default=None, alias="any")
    all_: list[RuleClause] | None = Field(default=None, alias="all")

    @property
    def is_empty(self) -> bool:
        return self.any_ is None and self.all_ is None
