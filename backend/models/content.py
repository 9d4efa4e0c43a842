"""Pydantic models for dataset content and subscriber geography."""

import math
from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from models.types import ContentID, DatasetID, ScopeString
from shared.utils import parse_timestamp


class GeographyContext(BaseModel):
    """A subscriber's resolved location as a flat record.

    Any subset of fields may be absent. State codes are stored uppercase;
    rule evaluation compares case-insensitively either way.
    """

    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    state: str | None = None
    county_fips: str | None = None
    place: str | None = None

    @field_validator("state", "county_fips", "place", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("state")
    @classmethod
    def _upper_state(cls, value: str | None) -> str | None:
        return value.upper() if value else value

    @property
    def is_empty(self) -> bool:
        return not (self.state or self.county_fips or self.place)


class ContentCandidate(BaseModel):
    """One content row competing for a subscriber within a dataset.

    Built from a v2_content_items row: `ocd_scope` becomes `scope` and
    `metadata.priority` / `metadata.audience_rule` are lifted to top-level
    fields. Malformed priority or created_at values degrade to None rather
    than rejecting the row.
    """

    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: ContentID | None = None
    dataset_id: DatasetID | None = None
    subject: str | None = None
    body_html: str | None = None
    body_md: str | None = None
    scope: ScopeString | None = Field(
        default=None, validation_alias=AliasChoices("scope", "ocd_scope")
    )
    audience_rule: Any = None
    priority: float | None = None
    created_at: datetime | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _lift_metadata(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        lifted = dict(data)
        metadata = lifted.get("metadata")
        if not isinstance(metadata, dict):
            lifted["metadata"] = {}
            return lifted
        if lifted.get("audience_rule") is None and "audience_rule" in metadata:
            lifted["audience_rule"] = metadata["audience_rule"]
        if lifted.get("priority") is None and "priority" in metadata:
            lifted["priority"] = metadata["priority"]
        return lifted

    @field_validator("scope", mode="before")
    @classmethod
    def _blank_scope(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("priority", mode="before")
    @classmethod
    def _coerce_priority(cls, value: Any) -> float | None:
        if value is None or isinstance(value, bool):
            return None
        try:
            number = float(value)
        except (TypeError, ValueError):
            return None
        if not math.isfinite(number):
            return None
        return number

    @field_validator("created_at", mode="before")
    @classmethod
    def _coerce_created_at(cls, value: Any) -> datetime | None:
        return parse_timestamp(value)

    @property
    def has_audience_rule(self) -> bool:
        """True when the row carries any audience rule, parseable or not.

        An empty dict or list still counts; only a missing or blank value
        leaves the row eligible for the global tier.
        """
        rule = self.audience_rule
        if rule is None:
            return False
        if isinstance(rule, str):
            return bool(rule.strip())
        return True

    @property
    def has_scope(self) -> bool:
        return bool(self.scope)

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "ContentCandidate":
        """Build a candidate from a raw Supabase row."""
        return cls.model_validate(row)
