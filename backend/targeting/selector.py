"""
Deterministic ranking of content candidates.

Candidates are ordered by specificity (audience rule > place > county >
state > global), then by lower metadata priority, then by newer created_at.
Python's sort is stable, so full ties keep their input order.
"""

from datetime import datetime, timezone

from config.defaults import PRIORITY_SENTINEL
from models.content import ContentCandidate

SPECIFICITY_AUDIENCE_RULE = 4
SPECIFICITY_PLACE = 3
SPECIFICITY_COUNTY = 2
SPECIFICITY_STATE = 1
SPECIFICITY_GLOBAL = 0

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def specificity(candidate: ContentCandidate) -> int:
    """Rank how narrowly a candidate is targeted."""
    if candidate.has_audience_rule:
        return SPECIFICITY_AUDIENCE_RULE

    scope = (candidate.scope or "").lower()
    if "/place:" in scope or scope.startswith("place:"):
        return SPECIFICITY_PLACE
    if "/county:" in scope or "county_fips:" in scope or scope.startswith("county:"):
        return SPECIFICITY_COUNTY
    if "/state:" in scope or scope.startswith("state:"):
        return SPECIFICITY_STATE
    return SPECIFICITY_GLOBAL


def _sort_key(candidate: ContentCandidate) -> tuple[int, float, float]:
    priority = candidate.priority if candidate.priority is not None else PRIORITY_SENTINEL
    created_at = candidate.created_at or _OLDEST
    return (-specificity(candidate), priority, -created_at.timestamp())


def rank_candidates(candidates: list[ContentCandidate]) -> list[ContentCandidate]:
    """Return a new list ordered best-first."""
    return sorted(candidates, key=_sort_key)


def pick_best(candidates: list[ContentCandidate]) -> ContentCandidate | None:
    """
    Pick the single best candidate.

    Args:
        candidates: Candidates that already passed one targeting tier

    Returns:
        The winning candidate, or None for an empty list
    """
    if not candidates:
        return None
    return rank_candidates(candidates)[0]
