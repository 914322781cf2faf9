"""Shared text and time formatting helpers for human-facing panels."""

from __future__ import annotations

from datetime import datetime, timezone

STATE_STYLES = {
    "running": "green",
    "ready": "green",
    "building": "yellow",
    "loading": "yellow",
    "pending": "yellow",
    "queued": "yellow",
    "stopped": "dim",
    "completed": "dim",
    "destroyed": "dim",
    "crashed": "red",
    "errored": "red",
    "failed": "red",
}


def state_style(state: str | None) -> str:
    return STATE_STYLES.get(str(state or "").strip().lower(), "default")


def compact_relative_age(age_seconds: float | int | None) -> str:
    if age_seconds is None:
        return "n/a"

    seconds = max(0, int(age_seconds))
    if seconds < 60:
        return f"{seconds}s ago"
    if seconds < 3600:
        return f"{seconds // 60}m ago"
    if seconds < 86400:
        return f"{seconds // 3600}h ago"
    return f"{seconds // 86400}d ago"


def parse_iso_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    text = str(value).strip()
    if not text:
        return None
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def age_of(value: str | None, now: datetime | None = None) -> str:
    parsed = parse_iso_timestamp(value)
    if parsed is None:
        return "n/a"
    now = now or datetime.now(timezone.utc)
    return compact_relative_age((now - parsed).total_seconds())


def short_id(value: str | None, length: int = 8) -> str:
    text = str(value or "").strip()
    if not text:
        return "-"
    return text if len(text) <= length else text[:length]
