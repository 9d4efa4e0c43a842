"""
Email sending via Resend API for personalized sends.

Delivers one rendered PersonalizedMessage per call.
"""

import os
from typing import Any

import resend

from config.defaults import APP_NAME
from models.selection import PersonalizedMessage


# Initialize Resend with API key from environment
resend.api_key = os.getenv('RESEND_API_KEY')


def _build_headers(unsubscribe_url: str | None) -> dict[str, str]:
    if not unsubscribe_url:
        return {}
    return {
        'List-Unsubscribe': f'<{unsubscribe_url}>',
        'List-Unsubscribe-Post': 'List-Unsubscribe=One-Click',
    }


def send_personalized_email(
    message: PersonalizedMessage,
    unsubscribe_url: str | None = None,
    tags: dict[str, str] | None = None,
) -> dict[str, Any]:
    """
    Send one personalized email.

    Args:
        message: Rendered message (recipient, subject, html, text)
        unsubscribe_url: One-click unsubscribe link for the List-Unsubscribe header
        tags: Optional Resend tags (e.g. job_id, batch_id) for callback matching

    Returns:
        Dictionary with 'success' (bool), 'email_id' (str if success), 'error' (str if failed)
    """
    from_email = os.getenv('SEND_FROM_EMAIL', 'updates@yourfriendfido.org')

    params: dict[str, Any] = {
        "from": f"{APP_NAME} <{from_email}>",
        "to": message.email,
        "subject": message.subject,
        "html": message.html,
        "text": message.text,
    }
    headers = _build_headers(unsubscribe_url)
    if headers:
        params["headers"] = headers
    if tags:
        params["tags"] = [{"name": k, "value": v} for k, v in tags.items()]

    try:
        response = resend.Emails.send(params)
        return {
            'success': True,
            'email_id': response.get('id')
        }

    except Exception as e:
        return {
            'success': False,
            'error': str(e)
        }
