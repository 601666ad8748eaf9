"""Deterministic validators and sanitizers used across services and schemas."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any


def sanitize_text(value: str | None, max_len: int = 20000) -> str:
    """Sanitize free-form content before persistence."""
    if value is None:
        return ""
    cleaned = str(value).replace("\x00", "").strip()
    cleaned = cleaned[:max_len]
    return cleaned


def coerce_optional_int(value: Any) -> int | None:
    """Return ``value`` as a non-negative int, or ``None`` when it is not numeric."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, float):
        return int(value) if value.is_integer() and value >= 0 else None
    if isinstance(value, str):
        stripped = value.strip()
        if stripped.isdigit():
            return int(stripped)
    return None


def split_csv(value: Any) -> list[Any] | None:
    """Normalize a list-or-comma-separated-string input into a list."""
    if value is None:
        return None
    if isinstance(value, str):
        parts = [part.strip() for part in value.split(",")]
        return [part for part in parts if part]
    if isinstance(value, (list, tuple, set, frozenset)):
        return list(value)
    return [value]


def sanitize_fields(payload: dict[str, Any], fields: Iterable[str], max_len: int = 20000) -> dict[str, Any]:
    """Apply ``sanitize_text`` in place to the string values of ``fields``."""
    for name in fields:
        value = payload.get(name)
        if isinstance(value, str):
            payload[name] = sanitize_text(value, max_len=max_len)
    return payload
