"""
Placeholder substitution for personalized email bodies.

Supported tokens: [[DELEGATION]], [[UNSUBSCRIBE_URL]], [[EMAIL]], [[JOB_ID]],
[[BATCH_ID]].
"""

import html
import re
from urllib.parse import urlencode

from bs4 import BeautifulSoup
from pydantic import BaseModel, ConfigDict

from sending.unsubscribe_tokens import DEFAULT_LIST_KEY, generate_unsubscribe_url, get_base_url

_WHITESPACE_RE = re.compile(r"\s+")


class TokenContext(BaseModel):
    """Per-recipient values available to token substitution."""

    model_config = ConfigDict(str_strip_whitespace=True)

    email: str
    job_id: str
    batch_id: str | None = None
    list_key: str = DEFAULT_LIST_KEY


def build_delegation_url(job_id: str, batch_id: str | None, email: str) -> str:
    """Link that lets a subscriber hand this action off to someone else."""
    params = {"job_id": job_id, "batch_id": batch_id or "", "email": email}
    return f"{get_base_url()}/delegate?{urlencode(params)}"


def _delegation_html(ctx: TokenContext) -> str:
    url = html.escape(build_delegation_url(ctx.job_id, ctx.batch_id, ctx.email))
    return (
        "<p>If you can't email right now, you can "
        f'<a href="{url}" target="_blank" rel="noopener noreferrer">delegate this action</a>.</p>'
    )


def resolve_tokens(body_html: str | None, ctx: TokenContext) -> str:
    """
    Replace placeholder tokens in an HTML body.

    Args:
        body_html: HTML containing tokens (None is treated as empty)
        ctx: Recipient context

    Returns:
        HTML with tokens replaced. [[BATCH_ID]] is left alone when the context
        has no batch ID. Link tokens become empty strings when links cannot be
        built (missing signing secret or base URL).
    """
    out = body_html or ""

    if "[[DELEGATION]]" in out:
        try:
            delegation = _delegation_html(ctx)
        except ValueError as e:
            print(f"  ⚠️  No delegation link for {ctx.email}: {e}")
            delegation = ""
        out = out.replace("[[DELEGATION]]", delegation)

    if "[[UNSUBSCRIBE_URL]]" in out:
        try:
            unsubscribe_url = html.escape(generate_unsubscribe_url(ctx.email, ctx.list_key))
        except ValueError as e:
            print(f"  ⚠️  No unsubscribe link for {ctx.email}: {e}")
            unsubscribe_url = ""
        out = out.replace("[[UNSUBSCRIBE_URL]]", unsubscribe_url)

    out = out.replace("[[EMAIL]]", html.escape(ctx.email))
    out = out.replace("[[JOB_ID]]", html.escape(ctx.job_id))

    if ctx.batch_id:
        out = out.replace("[[BATCH_ID]]", html.escape(ctx.batch_id))

    return out


def html_to_text(body_html: str | None) -> str:
    """Plain-text alternative for an HTML body."""
    if not body_html:
        return ""
    soup = BeautifulSoup(body_html, "html.parser")
    for tag in soup(["style", "script"]):
        tag.decompose()
    text = soup.get_text(" ")
    return _WHITESPACE_RE.sub(" ", text).strip()
