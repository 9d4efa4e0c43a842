"""
Error report files for the send pipeline.

Each failed personalization, delivery or backfill write leaves a plain-text
report under sending/logs/<error_type>/ so a run can be audited after the
console output is gone.
"""

import os
import traceback
from datetime import datetime
from typing import Any

LOG_ROOT = os.path.join(os.path.dirname(__file__), "logs")


def log_send_error(
    error_type: str,
    error_message: str,
    context: dict[str, Any] | None = None,
    exc: BaseException | None = None,
) -> str:
    """
    Write a send pipeline error report.

    Args:
        error_type: Stage that failed (e.g., 'personalize', 'sending', 'backfill')
        error_message: The error message
        context: Optional identifiers for the failure (job_id, batch_id, email, ...)
        exc: Exception to include a traceback for

    Returns:
        Path to the report file
    """
    report_dir = os.path.join(LOG_ROOT, error_type)
    os.makedirs(report_dir, exist_ok=True)

    now = datetime.now()
    filename = os.path.join(report_dir, f"send_error_{now.strftime('%Y%m%d_%H%M%S_%f')}.txt")

    lines = [
        f"Send Error Report - {now}",
        "=" * 60,
        "",
        f"Error Type: {error_type}",
        f"Error Message: {error_message}",
    ]

    if context:
        lines += ["", "Context:", "-" * 60]
        lines += [f"{key}: {value}" for key, value in context.items()]

    if exc is not None:
        lines += ["", "Traceback:", "-" * 60]
        lines.append("".join(traceback.format_exception(type(exc), exc, exc.__traceback__)).rstrip())

    with open(filename, "w", encoding="utf-8") as f:
        f.write("\n".join(lines) + "\n")

    return filename
