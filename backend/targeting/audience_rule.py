"""
Audience rule parsing and in-memory evaluation.

Rules are stored on content rows under metadata.audience_rule, either as a
JSON object (``{"any": [{"field": "state", "operator": "equals", "value": "OH"}]}``)
or as a legacy expression string (``state == 'OH' or county_fips in ['39049']``).
Anything that fails to parse becomes the empty rule, which never matches.
"""

import json
import re
from typing import Any

from pydantic import ValidationError

from models.audience import AudienceRule, ClauseOperator, GeoField, RuleClause
from models.content import GeographyContext
from targeting.geo import norm

_OR_SPLIT_RE = re.compile(r"\s+or\s+", re.IGNORECASE)
_EQ_RE = re.compile(r"^(state|county_fips|place)\s*==\s*'([^']+)'$", re.IGNORECASE)
_IN_RE = re.compile(r"^(state|county_fips|place)\s+in\s*\[\s*([^\]]*)\s*\]$", re.IGNORECASE)
_LIST_ITEM_RE = re.compile(r"^'([^']+)'$")


class RuleSyntaxError(ValueError):
    """Raised when a legacy rule expression cannot be parsed."""


def parse_rule_expression(src: str) -> AudienceRule:
    """
    Parse a legacy rule expression into an AudienceRule.

    Grammar: clauses joined by ``or``; each clause is ``field == 'value'`` or
    ``field in ['a','b']`` with field one of state, county_fips, place.

    Raises:
        RuleSyntaxError: On empty input, unsupported syntax, or an empty list
    """
    if not src or not isinstance(src, str):
        raise RuleSyntaxError("Audience rule must be a non-empty string")

    parts = [p.strip() for p in _OR_SPLIT_RE.split(src.strip()) if p.strip()]
    if not parts:
        raise RuleSyntaxError("No valid clauses found in audience rule")

    clauses = []
    for part in parts:
        m = _EQ_RE.match(part)
        if m:
            clauses.append(
                RuleClause(field=m.group(1).lower(), operator=ClauseOperator.equals, value=m.group(2))
            )
            continue

        m = _IN_RE.match(part)
        if m:
            values = []
            for item in (i.strip() for i in m.group(2).split(",")):
                if not item:
                    continue
                mm = _LIST_ITEM_RE.match(item)
                if not mm:
                    raise RuleSyntaxError(f"Invalid list item format: {item}")
                values.append(mm.group(1))
            if not values:
                raise RuleSyntaxError("Empty array in audience rule")
            clauses.append(
                RuleClause(field=m.group(1).lower(), operator=ClauseOperator.member_of, value=values)
            )
            continue

        raise RuleSyntaxError(f"Unsupported rule syntax: {part}")

    return AudienceRule(any_=clauses)


def validate_rule_expression(src: str) -> bool:
    """Return True if the legacy expression parses."""
    try:
        parse_rule_expression(src)
        return True
    except RuleSyntaxError:
        return False


def safe_parse_rule(raw: Any) -> AudienceRule:
    """
    Parse an audience rule from unknown input without raising.

    Accepts an AudienceRule, a dict, a JSON string, or a legacy expression
    string.

    Returns:
        The parsed rule, or the empty rule for anything unparseable
    """
    if isinstance(raw, AudienceRule):
        return raw

    if isinstance(raw, str):
        text = raw.strip()
        if not text:
            return AudienceRule()
        try:
            raw = json.loads(text)
        except json.JSONDecodeError:
            try:
                return parse_rule_expression(text)
            except RuleSyntaxError:
                return AudienceRule()

    if not isinstance(raw, dict):
        return AudienceRule()

    try:
        return AudienceRule.model_validate(raw)
    except ValidationError:
        return AudienceRule()


def _context_value(geo: GeographyContext, field: GeoField) -> str | None:
    if field == GeoField.state:
        return geo.state
    if field == GeoField.county:
        return geo.county_fips
    return geo.place


def clause_matches(clause: RuleClause, geo: GeographyContext) -> bool:
    """Check one clause against a subscriber's geography."""
    actual = _context_value(geo, clause.field)
    # An absent field never satisfies a clause, even one comparing to "".
    if actual is None or not actual.strip():
        return False
    actual = norm(actual)

    if clause.operator == ClauseOperator.equals:
        expected = ",".join(clause.value) if isinstance(clause.value, list) else clause.value
        return actual == norm(expected)

    values = clause.value if isinstance(clause.value, list) else [clause.value]
    return actual in {norm(v) for v in values}


def evaluate(rule: AudienceRule, geo: GeographyContext) -> bool:
    """
    Evaluate an audience rule against a subscriber's geography in memory.

    Returns:
        False for the empty rule; otherwise (any clause matches, or no ``any``
        group) and (every clause matches, or no ``all`` group)
    """
    if rule.is_empty:
        return False

    any_ok = rule.any_ is None or any(clause_matches(c, geo) for c in rule.any_)
    all_ok = rule.all_ is None or all(clause_matches(c, geo) for c in rule.all_)
    return any_ok and all_ok
