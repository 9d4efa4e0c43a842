"""
Token generation and validation for one-click unsubscribe links.

Tokens are signed with HMAC-SHA256, carry the subscriber email and list key,
and need no database storage. They expire after 365 days by default.
"""

import hashlib
import os
from urllib.parse import urlencode

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

UNSUBSCRIBE_SALT = "unsubscribe"
DEFAULT_LIST_KEY = "general"
LOCAL_BASE_URL = "http://localhost:3000"


def _get_serializer() -> URLSafeTimedSerializer:
    """
    Get configured serializer for token generation and validation.

    Raises:
        ValueError: If UNSUBSCRIBE_SIGNING_SECRET environment variable not set
    """
    secret_key = os.getenv("UNSUBSCRIBE_SIGNING_SECRET")
    if not secret_key:
        raise ValueError("UNSUBSCRIBE_SIGNING_SECRET environment variable must be set.")

    return URLSafeTimedSerializer(
        secret_key,
        salt=UNSUBSCRIBE_SALT,
        signer_kwargs={"digest_method": hashlib.sha256},
    )


def get_base_url() -> str:
    """
    Resolve the public base URL for links in emails.

    Falls back to localhost outside production.

    Raises:
        ValueError: If BASE_URL is unset in production
    """
    configured = os.getenv("BASE_URL", "").strip()
    if not configured and os.getenv("APP_ENV", "development") != "production":
        configured = LOCAL_BASE_URL
    if not configured:
        raise ValueError("BASE_URL not set")
    return configured.rstrip("/")


def generate_unsubscribe_token(email: str, list_key: str = DEFAULT_LIST_KEY) -> str:
    """
    Generate a signed unsubscribe token for an email address and list.

    Returns:
        URL-safe token string (format: payload.timestamp.signature)

    Raises:
        ValueError: If UNSUBSCRIBE_SIGNING_SECRET not configured
    """
    serializer = _get_serializer()
    return serializer.dumps({"email": email.strip().lower(), "list": list_key})


def validate_unsubscribe_token(
    token: str, list_key: str = DEFAULT_LIST_KEY, max_age_days: int = 365
) -> str | None:
    """
    Validate an unsubscribe token and extract the email address.

    Never raises exceptions - returns None for any invalid token, including a
    valid token issued for a different list.

    Returns:
        Email if token is valid for `list_key`, None otherwise
    """
    try:
        serializer = _get_serializer()
        payload = serializer.loads(token, max_age=max_age_days * 24 * 60 * 60)
    except (BadSignature, SignatureExpired, ValueError, TypeError):
        return None

    if not isinstance(payload, dict) or payload.get("list") != list_key:
        return None
    email = payload.get("email")
    return email if isinstance(email, str) else None


def generate_unsubscribe_url(email: str, list_key: str = DEFAULT_LIST_KEY) -> str:
    """Build the one-click unsubscribe URL for an email address."""
    token = generate_unsubscribe_token(email, list_key)
    query = urlencode({"email": email, "list": list_key, "token": token})
    return f"{get_base_url()}/api/unsubscribe?{query}"
