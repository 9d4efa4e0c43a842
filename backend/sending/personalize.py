"""
Personalization of one dataset's content for one subscriber.

Loads the subscriber's geography and the dataset's content rows from
Supabase, runs the targeting engine, and renders the winning row (or the
default message) with tokens resolved.
"""

from typing import Any, cast

from pydantic import ValidationError

from config.defaults import (
    CONTENT_ITEMS_TABLE,
    PROFILES_TABLE,
    SEND_JOBS_TABLE,
    SUBSCRIBER_GEO_VIEW,
)
from models.content import ContentCandidate, GeographyContext
from models.selection import PersonalizedMessage
from models.subscriber import SubscriberProfile
from models.types import DivisionPath
from shared.db import get_supabase_client
from targeting.engine import select_content
from targeting.geo import extract_geo_context
from sending.tokens import TokenContext, html_to_text, resolve_tokens


def load_subscriber(supabase: Any, email: str) -> SubscriberProfile | None:
    """Fetch a subscriber profile by email, or None if unknown."""
    response = (
        supabase.table(PROFILES_TABLE)
        .select("user_id, email, ocd_ids")
        .eq("email", email.strip().lower())
        .limit(1)
        .execute()
    )
    if not response.data:
        return None

    try:
        return SubscriberProfile.model_validate(response.data[0])
    except ValidationError as e:
        print(f"  ⚠️  Invalid profile row for {email}: {e}")
        return None


def load_subscriber_geo(supabase: Any, profile: SubscriberProfile) -> GeographyContext:
    """
    Resolve a subscriber's geography context.

    Reads the precomputed v_subscriber_geo view and falls back to deriving the
    context from the profile's division paths when the view has nothing for
    the subscriber or cannot be queried.
    """
    try:
        response = (
            supabase.table(SUBSCRIBER_GEO_VIEW)
            .select("state, county_fips, place")
            .eq("user_id", profile.user_id)
            .limit(1)
            .execute()
        )
        if response.data:
            row = cast(dict[str, Any], response.data[0])
            geo = GeographyContext(
                state=row.get("state"),
                county_fips=row.get("county_fips"),
                place=row.get("place"),
            )
            if not geo.is_empty:
                return geo
    except Exception as e:
        print(f"  ⚠️  Geo view lookup failed for user {profile.user_id}, using division paths: {e}")

    return extract_geo_context(profile.ocd_ids)


def load_dataset_content(supabase: Any, dataset_id: str) -> list[ContentCandidate]:
    """
    Fetch all content rows for a dataset, newest first.

    Rows that fail validation are skipped so one bad row cannot block the
    rest of the dataset.
    """
    response = (
        supabase.table(CONTENT_ITEMS_TABLE)
        .select("id, dataset_id, subject, body_html, body_md, ocd_scope, metadata, created_at")
        .eq("dataset_id", dataset_id)
        .order("created_at", desc=True)
        .execute()
    )

    candidates = []
    for row in response.data or []:
        try:
            candidates.append(ContentCandidate.from_row(row))
        except ValidationError as e:
            print(f"  ⚠️  Skipping invalid content row {row.get('id')}: {e}")
    return candidates


def resolve_dataset_id(supabase: Any, job_id: str) -> str | None:
    """Look up the dataset a send job belongs to."""
    response = (
        supabase.table(SEND_JOBS_TABLE)
        .select("dataset_id")
        .eq("id", job_id)
        .limit(1)
        .execute()
    )
    if not response.data:
        return None
    return cast(dict[str, Any], response.data[0]).get("dataset_id")


def build_personalized_message(
    email: str,
    geo: GeographyContext,
    division_paths: list[DivisionPath],
    candidates: list[ContentCandidate],
    token_context: TokenContext,
) -> PersonalizedMessage:
    """
    Select content for a subscriber and render it.

    Args:
        email: Recipient email
        geo: Recipient geography context
        division_paths: Recipient division paths
        candidates: Dataset content rows
        token_context: Values for token substitution

    Returns:
        PersonalizedMessage; always has a subject and body, falling back to
        the default message when nothing matches
    """
    result = select_content(geo, division_paths, candidates)
    html = resolve_tokens(result.body_html, token_context)

    return PersonalizedMessage(
        email=email,
        subject=result.subject,
        html=html,
        text=html_to_text(html),
        content_id=result.content_id,
        tier=result.tier,
    )


def personalize_for_email(
    email: str,
    job_id: str,
    batch_id: str | None = None,
    dataset_id: str | None = None,
    supabase: Any = None,
    candidates: list[ContentCandidate] | None = None,
) -> PersonalizedMessage:
    """
    Personalize a send job's content for one email address.

    An unknown subscriber gets an empty geography, so only global content or
    the default message can be selected.

    Args:
        email: Recipient email
        job_id: Send job ID
        batch_id: Send batch ID
        dataset_id: Dataset ID (looked up from send_jobs when omitted)
        supabase: Supabase client (created when omitted)
        candidates: Preloaded dataset content, to avoid refetching per recipient

    Returns:
        PersonalizedMessage for the recipient

    Raises:
        ValueError: If no dataset can be resolved for the job
    """
    supabase = supabase or get_supabase_client()

    if candidates is None:
        dataset_id = dataset_id or resolve_dataset_id(supabase, job_id)
        if not dataset_id:
            raise ValueError(f"No dataset found for send job {job_id}")
        candidates = load_dataset_content(supabase, dataset_id)

    profile = load_subscriber(supabase, email)
    if profile is None:
        geo, division_paths = GeographyContext(), []
    else:
        geo, division_paths = load_subscriber_geo(supabase, profile), profile.ocd_ids

    token_context = TokenContext(email=email, job_id=job_id, batch_id=batch_id)
    return build_personalized_message(email, geo, division_paths, candidates, token_context)
