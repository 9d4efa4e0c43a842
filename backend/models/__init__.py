"""Pydantic models for data validation and type checking."""

from models.audience import AudienceRule, ClauseOperator, GeoField, RuleClause
from models.content import ContentCandidate, GeographyContext
from models.selection import PersonalizedMessage, TargetingResult, TargetingTier
from models.send import BatchPlan, DeliveryHistoryRow, Recipient, SendJob
from models.subscriber import SubscriberProfile

__all__ = [
    "AudienceRule",
    "RuleClause",
    "ClauseOperator",
    "GeoField",
    "ContentCandidate",
    "GeographyContext",
    "TargetingResult",
    "TargetingTier",
    "PersonalizedMessage",
    "Recipient",
    "DeliveryHistoryRow",
    "BatchPlan",
    "SendJob",
    "SubscriberProfile",
]
