"""Match a content scope against a subscriber's division paths."""

from typing import Any

from models.types import DivisionPath
from targeting.geo import normalize_scope


def is_ancestor_or_equal(ancestor: DivisionPath, path: DivisionPath) -> bool:
    """True if `path` equals `ancestor` or sits beneath it in the hierarchy."""
    return path == ancestor or path.startswith(ancestor + "/")


def matches_scope(scope: Any, subscriber_paths: list[DivisionPath]) -> bool:
    """
    Check whether a content scope covers any of the subscriber's locations.

    A scope of ``state:oh`` covers a subscriber in Columbus, Ohio; a scope of
    ``place:columbus,oh`` does not cover a subscriber known only at state level.

    Args:
        scope: Shorthand or canonical scope from the content row
        subscriber_paths: Subscriber's division paths

    Returns:
        True if some subscriber path is equal to or beneath a normalized target
    """
    targets = normalize_scope(scope)
    if not targets:
        return False

    return any(
        is_ancestor_or_equal(target, path)
        for target in targets
        for path in subscriber_paths
        if isinstance(path, str)
    )
