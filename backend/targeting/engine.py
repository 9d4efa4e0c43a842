"""
Content targeting for one subscriber.

Partitions a dataset's content into three tiers and picks the best row from
the first non-empty one:

1. audience rule - rule parses and matches the subscriber's geography
2. scope - content scope covers one of the subscriber's division paths
3. global - no scope and no audience rule

A malformed rule or scope only disqualifies its own row; selection for the
rest of the dataset carries on.
"""

from models.content import ContentCandidate, GeographyContext
from models.selection import TargetingResult, TargetingTier
from models.types import DivisionPath
from targeting.audience_rule import evaluate, safe_parse_rule
from targeting.scope_matcher import matches_scope
from targeting.selector import pick_best


def _matches_audience_rule(candidate: ContentCandidate, geo: GeographyContext) -> bool:
    if not candidate.has_audience_rule:
        return False
    try:
        return evaluate(safe_parse_rule(candidate.audience_rule), geo)
    except Exception as e:
        print(f"  ⚠️  Skipping audience rule on content {candidate.id}: {e}")
        return False


def _matches_scope(candidate: ContentCandidate, division_paths: list[DivisionPath]) -> bool:
    if not candidate.has_scope:
        return False
    try:
        return matches_scope(candidate.scope, division_paths)
    except Exception as e:
        print(f"  ⚠️  Skipping scope on content {candidate.id}: {e}")
        return False


def partition_tiers(
    geo: GeographyContext,
    division_paths: list[DivisionPath],
    candidates: list[ContentCandidate],
) -> dict[TargetingTier, list[ContentCandidate]]:
    """Split candidates into audience-rule, scope and global tiers."""
    return {
        TargetingTier.audience_rule: [c for c in candidates if _matches_audience_rule(c, geo)],
        TargetingTier.scope: [c for c in candidates if _matches_scope(c, division_paths)],
        TargetingTier.global_: [
            c for c in candidates if not c.has_scope and not c.has_audience_rule
        ],
    }


def select_content(
    geo: GeographyContext,
    division_paths: list[DivisionPath],
    candidates: list[ContentCandidate],
) -> TargetingResult:
    """
    Select the content row a subscriber should receive.

    Args:
        geo: Subscriber's geography context
        division_paths: Subscriber's division paths
        candidates: All content rows for the dataset

    Returns:
        TargetingResult with the winning row and its tier; when no tier has a
        candidate, selected is None and subject/body fall back to defaults

    Raises:
        TypeError: If any argument is None
    """
    if geo is None or division_paths is None or candidates is None:
        raise TypeError("select_content requires geo, division_paths and candidates")

    tiers = partition_tiers(geo, division_paths, candidates)
    for tier in (TargetingTier.audience_rule, TargetingTier.scope, TargetingTier.global_):
        if tiers[tier]:
            return TargetingResult(selected=pick_best(tiers[tier]), tier=tier)

    return TargetingResult(selected=None, tier=TargetingTier.default)
