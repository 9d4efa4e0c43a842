"""
CLI script for running a personalized send job.

Usage:
    # Send a dataset to the first MAX_SEND_PER_RUN subscribers
    uv run python -m sending.process_send_job --job-id <uuid> --dataset-id <uuid>

    # Test send to specific addresses (dataset looked up from send_jobs)
    uv run python -m sending.process_send_job --job-id <uuid> --emails a@example.com,b@example.com

    # Dry run (personalize but don't send or record anything)
    uv run python -m sending.process_send_job --job-id <uuid> --dry-run
"""

import argparse
import os
import time
import uuid
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError

from config.defaults import (
    DEFAULT_MAX_PER_RUN,
    DELIVERY_HISTORY_TABLE,
    PROFILES_TABLE,
    SEND_JOBS_TABLE,
)
from models.selection import TargetingTier
from models.send import DeliveryHistoryRow, Recipient, SendMode
from shared.db import get_supabase_client
from shared.utils import print_summary
from sending.batch_planner import plan_batch
from sending.email_sender import send_personalized_email
from sending.error_logger import log_send_error
from sending.personalize import load_dataset_content, personalize_for_email, resolve_dataset_id
from sending.unsubscribe_tokens import generate_unsubscribe_url


def _max_per_run() -> int:
    try:
        return int(os.getenv("MAX_SEND_PER_RUN", DEFAULT_MAX_PER_RUN))
    except ValueError:
        return DEFAULT_MAX_PER_RUN


def _load_cohort(supabase: Any, cap: int) -> list[Recipient]:
    """Deterministic capped pull of subscribers, ordered by email."""
    response = (
        supabase.table(PROFILES_TABLE)
        .select("email")
        .order("email", desc=False)
        .limit(cap)
        .execute()
    )
    recipients = []
    for row in response.data or []:
        if not row.get("email"):
            continue
        try:
            recipients.append(Recipient(email=row["email"]))
        except ValidationError:
            print(f"  ⚠️  Skipping invalid profile email: {row['email']!r}")
    return recipients


def _parse_recipients(emails: list[str]) -> list[Recipient]:
    """Validate explicit test recipients, skipping unusable addresses."""
    recipients = []
    for email in emails:
        if not email.strip():
            continue
        try:
            recipients.append(Recipient(email=email))
        except ValidationError:
            print(f"  ⚠️  Skipping invalid recipient email: {email!r}")
    return recipients


def _load_history(supabase: Any, dataset_id: str) -> list[DeliveryHistoryRow]:
    response = (
        supabase.table(DELIVERY_HISTORY_TABLE)
        .select("email, dataset_id, job_id, status")
        .eq("dataset_id", dataset_id)
        .execute()
    )
    history = []
    for row in response.data or []:
        try:
            history.append(DeliveryHistoryRow.model_validate(row))
        except ValidationError:
            continue
    return history


def _update_job(supabase: Any, job_id: str, fields: dict[str, Any]) -> None:
    try:
        supabase.table(SEND_JOBS_TABLE).update(fields).eq("id", job_id).execute()
    except Exception as e:
        print(f"  ⚠️  Could not update send job {job_id}: {e}")


def process_send_job(
    job_id: str,
    dataset_id: str | None = None,
    emails: list[str] | None = None,
    max_per_run: int | None = None,
    dry_run: bool = False,
) -> dict[str, int]:
    """
    Personalize and send one dataset for a send job.

    Args:
        job_id: Send job ID
        dataset_id: Dataset to send (defaults to the job's dataset)
        emails: Explicit test recipients; when omitted the cohort is pulled from profiles
        max_per_run: Recipient cap (defaults to MAX_SEND_PER_RUN)
        dry_run: If True, personalize but don't send emails or write history

    Returns:
        Dictionary with stats: selected, deduped, sent, failed, defaulted
    """
    supabase = get_supabase_client()
    stats = {"selected": 0, "deduped": 0, "sent": 0, "failed": 0, "defaulted": 0}

    dataset_id = dataset_id or resolve_dataset_id(supabase, job_id)
    if not dataset_id:
        print(f"✗ No dataset found for send job {job_id}")
        return stats

    cap = max_per_run or _max_per_run()
    mode: SendMode = "test" if emails else "cohort"
    if emails:
        requested = _parse_recipients(emails)
    else:
        requested = _load_cohort(supabase, cap)

    plan = plan_batch(mode, requested, cap, dataset_id, _load_history(supabase, dataset_id))
    stats["selected"] = plan.selected
    stats["deduped"] = plan.deduped

    batch_id = str(uuid.uuid4())
    print(f"Processing send job {job_id} (dataset {dataset_id}, batch {batch_id}, mode {mode})")
    print(f"Queued {plan.queued} of {plan.selected} recipients ({plan.deduped} already sent)")

    if not plan.to_enqueue:
        print("No recipients to send.")
        return stats

    candidates = load_dataset_content(supabase, dataset_id)
    print(f"Loaded {len(candidates)} content rows")

    if not dry_run:
        _update_job(
            supabase,
            job_id,
            {"status": "running", "started_at": datetime.now(timezone.utc).isoformat()},
        )

    for recipient in plan.to_enqueue:
        try:
            message = personalize_for_email(
                recipient.email,
                job_id,
                batch_id=batch_id,
                dataset_id=dataset_id,
                supabase=supabase,
                candidates=candidates,
            )
        except Exception as e:
            print(f"  ✗ Failed to personalize for {recipient.email}: {e}")
            stats["failed"] += 1
            error_file = log_send_error(
                error_type="personalize",
                error_message=str(e),
                context={"job_id": job_id, "dataset_id": dataset_id, "email": recipient.email},
                exc=e,
            )
            print(f"    Error details logged to: {error_file}")
            continue

        if message.tier == TargetingTier.default:
            stats["defaulted"] += 1

        if dry_run:
            print(f"  [DRY RUN] Would send '{message.subject}' to {recipient.email} ({message.tier.value})")
            stats["sent"] += 1
            continue

        try:
            unsubscribe_url = generate_unsubscribe_url(recipient.email)
        except ValueError as e:
            print(f"  ⚠️  No unsubscribe link for {recipient.email}: {e}")
            unsubscribe_url = None

        result = send_personalized_email(
            message,
            unsubscribe_url=unsubscribe_url,
            tags={"job_id": job_id, "batch_id": batch_id},
        )

        history_row = {
            "job_id": job_id,
            "dataset_id": dataset_id,
            "batch_id": batch_id,
            "email": recipient.email,
            "content_item_id": message.content_id,
        }

        if result["success"]:
            print(f"  ✓ Sent '{message.subject}' to {recipient.email}")
            stats["sent"] += 1
            history_row.update({"status": "queued", "provider_message_id": result.get("email_id")})
        else:
            error_msg = result.get("error", "Unknown error")
            print(f"  ✗ Failed to send to {recipient.email}: {error_msg}")
            stats["failed"] += 1
            history_row.update({"status": "failed", "error_message": error_msg})
            error_file = log_send_error(
                error_type="sending",
                error_message=error_msg,
                context={
                    "job_id": job_id,
                    "batch_id": batch_id,
                    "email": recipient.email,
                    "content_item_id": message.content_id,
                },
            )
            print(f"    Error details logged to: {error_file}")

        try:
            supabase.table(DELIVERY_HISTORY_TABLE).insert(history_row, returning="minimal").execute()
        except Exception as e:
            print(f"  ⚠ Could not record delivery for {recipient.email}: {e}")

        # Rate limiting: max 10 emails/second
        time.sleep(0.1)

    if not dry_run:
        _update_job(
            supabase,
            job_id,
            {
                "status": "completed",
                "finished_at": datetime.now(timezone.utc).isoformat(),
                "totals": {**stats, "batch_id": batch_id},
            },
        )

    print_summary(
        "Send Job Complete",
        {
            "Selected": stats["selected"],
            "Deduped": stats["deduped"],
            "Sent": stats["sent"],
            "Failed": stats["failed"],
            "Default content": stats["defaulted"],
        },
    )

    return stats


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Personalize and send a dataset for a send job")

    parser.add_argument("--job-id", type=str, required=True, help="Send job ID")

    parser.add_argument(
        "--dataset-id",
        type=str,
        help="Dataset ID (defaults to the dataset recorded on the send job)",
    )

    parser.add_argument(
        "--emails",
        type=str,
        help="Comma-separated test recipients (skips the cohort pull)",
    )

    parser.add_argument(
        "--max-per-run",
        type=int,
        help="Maximum recipients for this run (defaults to MAX_SEND_PER_RUN)",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Dry run mode (don't actually send emails)",
    )

    args = parser.parse_args()

    emails = [e.strip() for e in args.emails.split(",") if e.strip()] if args.emails else None
    if args.emails is not None and not emails:
        parser.error("--emails must list at least one address")

    process_send_job(
        job_id=args.job_id,
        dataset_id=args.dataset_id,
        emails=emails,
        max_per_run=args.max_per_run,
        dry_run=args.dry_run,
    )


if __name__ == "__main__":
    main()
