"""
CLI script to rebuild geo_metrics from profiles.ocd_ids.

Populates state, county_fips and place metrics for subscribers who signed up
before geo_metrics were written at signup.

Usage:
    uv run python -m sending.backfill_geo_metrics
    uv run python -m sending.backfill_geo_metrics --dry-run
"""

import argparse
from typing import Any

from config.defaults import GEO_METRIC_KEYS, GEO_METRICS_TABLE, PROFILES_TABLE
from shared.db import get_supabase_client
from shared.utils import print_summary
from sending.error_logger import log_send_error
from targeting.geo import metric_rows_from_division_paths


def backfill_profile(supabase: Any, profile: dict[str, Any]) -> int:
    """
    Replace one profile's geo_metrics with a fresh canonical set.

    Returns:
        Number of metric rows written (0 when the profile has no usable paths)
    """
    rows = metric_rows_from_division_paths(profile.get("ocd_ids"))
    if not rows:
        return 0

    user_id = profile["user_id"]

    # Delete existing metrics so stale values don't linger
    supabase.table(GEO_METRICS_TABLE).delete().eq("user_id", user_id).in_(
        "metric_key", GEO_METRIC_KEYS
    ).execute()

    supabase.table(GEO_METRICS_TABLE).insert(
        [
            {
                "user_id": user_id,
                "metric_key": row["metric_key"],
                "metric_value": row["metric_value"],
                "source": "backfill",
            }
            for row in rows
        ]
    ).execute()

    return len(rows)


def backfill_geo_metrics(dry_run: bool = False) -> dict[str, int]:
    """
    Backfill geo_metrics for every profile.

    Args:
        dry_run: If True, compute metrics but don't write them

    Returns:
        Dictionary with stats: processed, created, skipped, errors
    """
    supabase = get_supabase_client()
    stats = {"processed": 0, "created": 0, "skipped": 0, "errors": 0}

    print("Starting geo_metrics backfill...")

    response = supabase.table(PROFILES_TABLE).select("user_id, email, ocd_ids").execute()
    profiles = response.data or []

    if not profiles:
        print("No profiles found to backfill.")
        return stats

    print(f"Found {len(profiles)} profiles to process")

    for profile in profiles:
        stats["processed"] += 1

        if stats["processed"] % 10 == 0:
            print(f"   Progress: {stats['processed']}/{len(profiles)}")

        if dry_run:
            rows = metric_rows_from_division_paths(profile.get("ocd_ids"))
            if rows:
                stats["created"] += len(rows)
            else:
                stats["skipped"] += 1
            continue

        try:
            written = backfill_profile(supabase, profile)
        except Exception as e:
            stats["errors"] += 1
            print(f"  ⚠️  Backfill failed for user {profile.get('user_id')}: {e}")
            log_send_error(
                error_type="backfill",
                error_message=str(e),
                context={"user_id": profile.get("user_id")},
                exc=e,
            )
            continue

        if written:
            stats["created"] += written
        else:
            stats["skipped"] += 1

    print_summary(
        "Backfill Complete",
        {
            "Total profiles": len(profiles),
            "Processed": stats["processed"],
            "Metrics created": stats["created"],
            "Skipped": stats["skipped"],
            "Errors": stats["errors"],
        },
    )

    return stats


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Backfill geo_metrics from profiles.ocd_ids")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Compute metrics without writing them",
    )
    args = parser.parse_args()
    backfill_geo_metrics(dry_run=args.dry_run)


if __name__ == "__main__":
    main()
