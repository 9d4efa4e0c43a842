"""Pydantic models for targeting results and personalized messages."""

from enum import Enum

from pydantic import BaseModel, ConfigDict

from config.defaults import DEFAULT_BODY_HTML, DEFAULT_SUBJECT
from models.content import ContentCandidate
from models.types import ContentID


class TargetingTier(str, Enum):
    """Which precedence level produced a selection."""

    audience_rule = "audience_rule"
    scope = "scope"
    global_ = "global"
    default = "default"


class TargetingResult(BaseModel):
    """Winning content row for one subscriber, plus the renderable subject/body."""

    model_config = ConfigDict(frozen=True)

    selected: ContentCandidate | None = None
    tier: TargetingTier = TargetingTier.default

    @property
    def subject(self) -> str:
        if self.selected and self.selected.subject:
            return self.selected.subject
        return DEFAULT_SUBJECT

    @property
    def body_html(self) -> str:
        # html preferred, markdown column as fallback
        if self.selected:
            if self.selected.body_html:
                return self.selected.body_html
            if self.selected.body_md:
                return self.selected.body_md
        return DEFAULT_BODY_HTML

    @property
    def content_id(self) -> ContentID | None:
        return self.selected.id if self.selected else None


class PersonalizedMessage(BaseModel):
    """Fully rendered email for one subscriber."""

    model_config = ConfigDict(str_strip_whitespace=True)

    email: str
    subject: str
    html: str
    text: str
    content_id: ContentID | None = None
    tier: TargetingTier = TargetingTier.default
