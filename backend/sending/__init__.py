"""
Send pipeline for personalized dataset emails.

This module handles:
- Personalizing dataset content per subscriber
- Resolving tokens in email bodies
- Planning send batches without re-sending
- Sending emails via Resend
- Signed one-click unsubscribe links
"""

from .personalize import build_personalized_message, personalize_for_email
from .batch_planner import plan_batch
from .email_sender import send_personalized_email

__all__ = [
    'build_personalized_message',
    'personalize_for_email',
    'plan_batch',
    'send_personalized_email',
]
