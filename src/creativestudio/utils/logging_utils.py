"""Structured user-action logging and payload sanitising."""

import json
import logging
import re
import uuid
from datetime import datetime, timezone
from typing import Any

logger = logging.getLogger(__name__)

_DATA_URL_MIME = re.compile(r"^data:([^;,]+)")

# One anonymous id per process, standing in for the per-session user id
_SESSION_USER_ID = f"user_{uuid.uuid4().hex[:12]}"


def _describe_data_url(value: str) -> str:
    match = _DATA_URL_MIME.match(value)
    mime_type = match.group(1) if match else "unknown"
    size_kb = round(len(value) / 1024)
    return f"[DATA_URL: {mime_type}, {size_kb}KB]"


def sanitize_for_logging(value: Any) -> Any:
    """
    Replace data URLs with short placeholders so payloads stay loggable.

    Walks dicts, lists and tuples; other values are returned unchanged.
    """
    if isinstance(value, str):
        return _describe_data_url(value) if value.startswith("data:") else value
    if isinstance(value, dict):
        return {key: sanitize_for_logging(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [sanitize_for_logging(item) for item in value]
    return value


def build_user_action_entry(event_type: str, user_id: str | None = None, **payload: Any) -> dict[str, Any]:
    """Cloud Logging compatible entry for a user action."""
    return {
        "severity": "INFO",
        "message": f"User action: {event_type}",
        "jsonPayload": {
            "event_type": event_type,
            "user_id": user_id or _SESSION_USER_ID,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            **sanitize_for_logging(payload),
        },
    }


def log_user_action(event_type: str, user_id: str | None = None, **payload: Any) -> dict[str, Any]:
    """
    Emit one JSON line describing a user action (e.g. GENERATE_HAIRSTYLES).

    Returns the entry that was logged.
    """
    entry = build_user_action_entry(event_type, user_id=user_id, **payload)
    logger.info(json.dumps(entry, default=str))
    return entry
