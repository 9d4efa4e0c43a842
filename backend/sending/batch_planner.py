"""
Batch planning for send runs.

Caps the requested recipients and drops anyone already queued or delivered
for the same dataset, so a re-run of a job does not email people twice.
"""

import math

from config.defaults import DEFAULT_MAX_PER_RUN
from models.send import BatchPlan, DeliveryHistoryRow, Recipient, SendMode


def _history_key(row: DeliveryHistoryRow, dataset_id: str | None) -> str:
    if dataset_id:
        return f"{dataset_id}|{row.email}"
    return f"{row.job_id or ''}|{row.email}"


def _recipient_key(recipient: Recipient, dataset_id: str | None) -> str:
    if dataset_id:
        return f"{dataset_id}|{recipient.email}"
    return f"job|{recipient.email}"


def plan_batch(
    mode: SendMode,
    requested: list[Recipient],
    max_per_run: int | None,
    dataset_id: str | None,
    existing: list[DeliveryHistoryRow],
) -> BatchPlan:
    """
    Decide which recipients to enqueue for this run.

    Args:
        mode: 'test' or 'cohort' (both are capped and deduplicated the same way)
        requested: Candidate recipients in send order
        max_per_run: Cap on recipients; missing or zero falls back to the default
        dataset_id: Dataset being sent; dedupe is per dataset when present
        existing: delivery_history rows for this dataset/job

    Returns:
        BatchPlan with counts and the recipients to enqueue
    """
    cap = max(1, math.floor(max_per_run or DEFAULT_MAX_PER_RUN))
    trimmed = requested[:cap]

    sent_keys = {
        _history_key(row, dataset_id)
        for row in existing
        if row.status in ("queued", "delivered")
    }

    to_enqueue = []
    seen = set()
    for recipient in trimmed:
        key = _recipient_key(recipient, dataset_id)
        if key in sent_keys or key in seen:
            continue
        seen.add(key)
        to_enqueue.append(recipient)

    return BatchPlan(
        selected=len(trimmed),
        deduped=len(trimmed) - len(to_enqueue),
        queued=len(to_enqueue),
        to_enqueue=to_enqueue,
    )
