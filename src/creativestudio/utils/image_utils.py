"""Filename, id and URL helpers shared by the task builders."""

import random
import re
import string
from datetime import datetime

_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")


def sanitize_component(value: str, max_length: int | None = None) -> str:
    """Replace every non-alphanumeric character with '_' and optionally truncate."""
    sanitized = _NON_ALNUM.sub("_", value)
    return sanitized[:max_length] if max_length is not None else sanitized


def base_filename(filename: str, fallback: str = "image") -> str:
    """Filename without its extension; ``fallback`` when nothing is left."""
    stem = ".".join(filename.split(".")[:-1])
    return stem or fallback


def sanitize_source_filename(filename: str, max_length: int, fallback: str = "image") -> str:
    return sanitize_component(base_filename(filename, fallback), max_length)


def indexed_timestamp(timestamp: str, index: int) -> str:
    """Per-task timestamp suffix that keeps filenames unique within a batch."""
    return f"{timestamp}_{index:02d}"


def build_filename(session_id: str, parts: list[str], timestamp: str, extension: str = "jpg") -> str:
    return "_".join([session_id, *parts, timestamp]) + f".{extension}"


def get_timestamp(now: datetime | None = None) -> str:
    """Compact ``YYMMDDHHMMSS`` timestamp used for batch ids and filenames."""
    return (now or datetime.now()).strftime("%y%m%d%H%M%S")


def generate_set_id(length: int = 7) -> str:
    alphabet = string.ascii_uppercase + string.digits
    return "".join(random.choice(alphabet) for _ in range(length))


def is_public_url(value: str) -> bool:
    return value.startswith(("http://", "https://"))
