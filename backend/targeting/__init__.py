"""
Content targeting engine.

This module handles:
- Normalizing content scopes and subscriber division paths
- Parsing and evaluating audience rules
- Ranking candidates by specificity, priority and recency
- Selecting the best content row for a subscriber
"""

from .audience_rule import evaluate, safe_parse_rule
from .engine import select_content
from .geo import extract_geo_context, normalize_scope
from .scope_matcher import matches_scope
from .selector import pick_best

__all__ = [
    'normalize_scope',
    'extract_geo_context',
    'safe_parse_rule',
    'evaluate',
    'matches_scope',
    'pick_best',
    'select_content',
]
