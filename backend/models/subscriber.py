"""Pydantic models for subscriber profiles."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.types import DivisionPathList, UserID


class SubscriberProfile(BaseModel):
    """Subscriber profile with the division paths resolved at signup."""

    model_config = ConfigDict(str_strip_whitespace=True)

    user_id: UserID
    email: str = Field(..., pattern=r"^[^@]+@[^@]+\.[^@]+$")
    ocd_ids: DivisionPathList = Field(default_factory=list)

    @field_validator("email")
    @classmethod
    def _lower_email(cls, value: str) -> str:
        return value.lower()

    @field_validator("ocd_ids", mode="before")
    @classmethod
    def _null_paths(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, list):
            return [v for v in value if isinstance(v, str) and v]
        return value
