"""
Geographic normalization for content targeting.

Converts shorthand content scopes (``state:oh``, ``place:columbus,oh``,
``county:39049``) into canonical OCD division paths, and flattens a
subscriber's division paths into a GeographyContext.
"""

import re
from typing import Any

from config.defaults import OCD_COUNTRY_US, OCD_PREFIX
from models.content import GeographyContext
from models.types import DivisionPath

_STATE_RE = re.compile(r"/state:([a-z]{2})(?:/|$)")
_COUNTY_FIPS_RE = re.compile(r"/county_fips:(\d{5})(?:/|$)")
_PLACE_RE = re.compile(r"/place:([a-z0-9_\-]+)(?:/|$)")
_FIPS_RE = re.compile(r"^\d{5}$")


def norm(value: str) -> str:
    """Normalize a string for case-insensitive comparison."""
    return value.strip().lower()


def _split_pair(raw: str) -> tuple[str, str] | None:
    """Split ``name,st`` into its two parts; None unless both are present."""
    parts = raw.split(",")
    if len(parts) < 2:
        return None
    name, state = norm(parts[0]), norm(parts[1])
    if not name or not state:
        return None
    return name, state


def normalize_scope(scope: Any) -> list[DivisionPath]:
    """
    Normalize a content scope to canonical division paths.

    Args:
        scope: Shorthand ``level:value`` scope or a full ``ocd-division/...`` path

    Returns:
        List of canonical paths; empty when the scope is malformed or uses an
        unsupported level (such a scope matches nothing)

    Examples:
        >>> normalize_scope("state:oh")
        ['ocd-division/country:us/state:oh']
        >>> normalize_scope("place:columbus,oh")
        ['ocd-division/country:us/state:oh/place:columbus']
        >>> normalize_scope("county:39049")
        ['ocd-division/country:us/state_fips:39/county_fips:39049']
        >>> normalize_scope("place:columbus")
        []
    """
    if not isinstance(scope, str):
        return []

    scope = scope.strip()
    if scope.startswith(OCD_PREFIX):
        return [scope]

    level, sep, raw = scope.partition(":")
    level = norm(level)
    raw = raw.strip()
    if not sep or not level or not raw:
        return []

    if level == "state":
        return [f"{OCD_COUNTRY_US}/state:{norm(raw)}"]

    if level == "place":
        pair = _split_pair(raw)
        if pair is None:
            return []
        place, state = pair
        return [f"{OCD_COUNTRY_US}/state:{state}/place:{place}"]

    if level == "county":
        if _FIPS_RE.match(raw):
            return [f"{OCD_COUNTRY_US}/state_fips:{raw[:2]}/county_fips:{raw}"]
        pair = _split_pair(raw)
        if pair is None:
            return []
        name, state = pair
        return [f"{OCD_COUNTRY_US}/state:{state}/county:{name}"]

    return []


def _scan_paths(paths: list[DivisionPath] | None) -> tuple[str | None, str | None, str | None]:
    # Last path wins for each field when several disagree.
    state = county_fips = place = None
    for path in paths or []:
        if not isinstance(path, str):
            continue
        lowered = path.lower()

        m_state = _STATE_RE.search(lowered)
        if m_state:
            state = m_state.group(1)

        m_county = _COUNTY_FIPS_RE.search(lowered)
        if m_county:
            county_fips = m_county.group(1)

        m_place = _PLACE_RE.search(lowered)
        if m_place:
            place = m_place.group(1)

    return state, county_fips, place


def extract_geo_context(paths: list[DivisionPath] | None) -> GeographyContext:
    """
    Flatten a subscriber's division paths into a GeographyContext.

    State is uppercased, place is stored as ``place,state`` (lowercase) and is
    only set when a state segment was also found.

    Args:
        paths: Division paths from profiles.ocd_ids

    Returns:
        GeographyContext (all fields None when nothing is recognized)
    """
    state, county_fips, place = _scan_paths(paths)
    return GeographyContext(
        state=state.upper() if state else None,
        county_fips=county_fips,
        place=f"{place},{state}" if place and state else None,
    )


def metric_rows_from_division_paths(paths: list[DivisionPath] | None) -> list[dict[str, str]]:
    """
    Build geo_metrics rows from division paths.

    Returns:
        List of ``{"metric_key", "metric_value"}`` dicts, at most one per key
    """
    geo = extract_geo_context(paths)
    rows = []
    if geo.state:
        rows.append({"metric_key": "state", "metric_value": geo.state})
    if geo.county_fips:
        rows.append({"metric_key": "county_fips", "metric_value": geo.county_fips})
    if geo.place:
        rows.append({"metric_key": "place", "metric_value": geo.place})
    return rows
