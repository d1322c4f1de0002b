"""Normalized match, market and outcome records."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, tzinfo
import re
from typing import Iterable

UNKNOWN = "Unknown"
OVER_UNDER_TYPE_ID = 6
SCALE = 1000

_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class Match:
    """One event from the provider's list view."""

    id: str
    name: str
    home_name: str = UNKNOWN
    away_name: str = UNKNOWN
    start: str = ""
    group: str = ""

    @property
    def start_time(self) -> datetime | None:
        if not self.start:
            return None
        try:
            return datetime.fromisoformat(self.start.replace("Z", "+00:00"))
        except ValueError:
            return None

    @property
    def participants(self) -> tuple[str, str]:
        return (self.home_name, self.away_name)


@dataclass(frozen=True)
class Outcome:
    """A single selection within a market; odds and line are scaled by 1000."""

    label: str = UNKNOWN
    odds: int | None = None
    kind: str = "other"
    line: int | None = None
    participant: str = UNKNOWN
    id: str = ""


@dataclass(frozen=True)
class Market:
    """A bet offer belonging to exactly one match."""

    id: str
    match_id: str
    label: str = UNKNOWN
    type_id: int | None = None
    line: int | None = None
    outcomes: tuple[Outcome, ...] = ()

    @property
    def is_over_under(self) -> bool:
        return self.type_id == OVER_UNDER_TYPE_ID

    def outcome_of_kind(self, kind: str) -> Outcome | None:
        for outcome in self.outcomes:
            if outcome.kind == kind:
                return outcome
        return None


def format_odds(value: int | None) -> str:
    """Render scaled odds as a decimal price with two places."""

    if value is None:
        return ""
    return f"{value / SCALE:.2f}"


def format_line(value: int | None) -> str:
    """Render a scaled line with one decimal place; zero counts as missing."""

    if not value:
        return ""
    return f"{value / SCALE:.1f}"


def format_start(match: Match, tz: tzinfo | None = None) -> tuple[str, str]:
    """Return (DD/MM/YYYY, HH:MM) for the match start, or empty strings."""

    start = match.start_time
    if start is None:
        return "", ""
    if tz is not None:
        start = start.astimezone(tz)
    return start.strftime("%d/%m/%Y"), start.strftime("%H:%M")


def strip_participant_names(label: str, names: Iterable[str]) -> str:
    """Remove participant names from a market label.

    Drops "by <name>", "<name> to" and bare "<name>" fragments. Labels that
    shrink below three characters fall back to the original text.
    """

    cleaned = label
    for name in names:
        if not name or name == UNKNOWN:
            continue
        escaped = re.escape(name)
        patterns = (
            rf"\s*\bby\s+{escaped}\s*",
            rf"\s*{escaped}\s+to\b\s*",
            rf"\s*{escaped}\s*",
        )
        for pattern in patterns:
            cleaned = re.sub(pattern, " ", cleaned, flags=re.IGNORECASE).strip()

    cleaned = _WHITESPACE.sub(" ", cleaned).strip()
    if len(cleaned) < 3:
        return label
    return cleaned


__all__ = [
    "Market",
    "Match",
    "OVER_UNDER_TYPE_ID",
    "Outcome",
    "UNKNOWN",
    "format_line",
    "format_odds",
    "format_start",
    "strip_participant_names",
]
