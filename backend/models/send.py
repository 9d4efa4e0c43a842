"""Pydantic models for send jobs and delivery bookkeeping."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.types import BatchID, DatasetID, JobID

SendMode = Literal["test", "cohort"]
DeliveryStatus = Literal["queued", "delivered", "failed"]


class Recipient(BaseModel):
    """Someone a send run may email."""

    model_config = ConfigDict(str_strip_whitespace=True)

    email: str = Field(..., min_length=3, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    first_name: str | None = None

    @field_validator("email")
    @classmethod
    def _lower_email(cls, value: str) -> str:
        return value.lower()


class DeliveryHistoryRow(BaseModel):
    """Previous delivery attempt recorded in delivery_history."""

    email: str
    dataset_id: DatasetID | None = None
    job_id: JobID | None = None
    batch_id: BatchID | None = None
    status: DeliveryStatus

    @field_validator("email")
    @classmethod
    def _lower_email(cls, value: str) -> str:
        return value.strip().lower()


class BatchPlan(BaseModel):
    """Outcome of planning one send run."""

    selected: int = Field(..., ge=0)
    deduped: int = Field(..., ge=0)
    queued: int = Field(..., ge=0)
    to_enqueue: list[Recipient] = Field(default_factory=list)


class SendJob(BaseModel):
    """Row from send_jobs."""

    id: JobID
    dataset_id: DatasetID | None = None
    status: str = Field("pending", pattern="^(pending|running|completed|failed)$")
    totals: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime | None = None
    started_at: datetime | None = None
    finished_at: datetime | None = None
