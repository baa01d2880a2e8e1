"""Injectable time providers and timestamp parsing."""

from __future__ import annotations

from datetime import date, datetime, time
from typing import Protocol


class Clock(Protocol):
    def now(self) -> datetime: ...


class SystemClock:
    """Wall-clock time in the caller's local zone."""

    def now(self) -> datetime:
        return datetime.now()


class FixedClock:
    """Clock pinned to a single instant, for deterministic runs and tests."""

    def __init__(self, instant: datetime | str):
        self._instant = parse_timestamp(instant)

    def now(self) -> datetime:
        return self._instant


def resolve(clock: Clock | None) -> Clock:
    return clock if clock is not None else SystemClock()


def parse_timestamp(value: datetime | date | str) -> datetime:
    """Parse an ISO-8601 value into a naive local datetime.

    Timezone-aware values keep their wall-clock reading and lose the offset;
    bare dates become midnight. Raises ``ValueError`` on unparsable input.
    """

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as exc:
            raise ValueError(f"Invalid timestamp {value!r}") from exc
    else:
        raise ValueError(f"Invalid timestamp {value!r}")

    return parsed.replace(tzinfo=None)


def parse_optional(value) -> datetime | None:
    if value is None or value == "":
        return None
    return parse_timestamp(value)
