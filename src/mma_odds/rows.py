"""Per-market row building for the 13-column export."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import tzinfo
import logging
import re
from typing import Callable, NamedTuple, Sequence

from .markets import (
    Market,
    Match,
    Outcome,
    format_line,
    format_odds,
    format_start,
    strip_participant_names,
)

logger = logging.getLogger(__name__)

AFFIRMATIVE_MARKER = "DA"

EXPORT_COLUMNS: tuple[str, ...] = (
    "Date",
    "Time",
    "Code",
    "Home",
    "Away",
    "1",
    "X",
    "2",
    "Line",
    "Under",
    "Over",
    "Yes",
    "No",
)

_COLUMN_FIELDS: dict[str, str] = {
    "Date": "date",
    "Time": "time",
    "Code": "code",
    "Home": "home",
    "Away": "away",
    "1": "one",
    "X": "draw",
    "2": "two",
    "Line": "line",
    "Under": "under",
    "Over": "over",
    "Yes": "yes",
    "No": "no",
}

WIN_AND_ROUNDS_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"win\s*&\s*(over|under)\s*\d+\.?\d*\s*rounds?",
        r"to\s*win\s*&\s*(over|under)",
        r"win\s*&\s*(go\s*)?(over|under)",
        r"win.*&.*(over|under).*rounds?",
        r"(over|under).*rounds?.*win",
        r"win.*&.*total.*rounds?",
        r"total.*rounds?.*win",
        r"fighter.*win.*total.*rounds?",
    )
)

_ENUMERATED_PHRASES = ("winning combination", "winning round", "alternate winning method")


@dataclass
class ExportRow:
    """One line of the export; header rows only fill ``home``."""

    date: str = ""
    time: str = ""
    code: str = ""
    home: str = ""
    away: str = ""
    one: str = ""
    draw: str = ""
    two: str = ""
    line: str = ""
    under: str = ""
    over: str = ""
    yes: str = ""
    no: str = ""
    is_match_name: bool = False
    is_section_header: bool = False

    @property
    def is_header(self) -> bool:
        return self.is_match_name or self.is_section_header

    def get(self, column: str) -> str:
        return getattr(self, _field_for(column))

    def set(self, column: str, value: str) -> None:
        setattr(self, _field_for(column), str(value))

    def as_record(self) -> dict[str, str]:
        values = asdict(self)
        return {column: values[_COLUMN_FIELDS[column]] for column in EXPORT_COLUMNS}


class RowRule(NamedTuple):
    name: str
    applies: Callable[[Market], bool]
    build: Callable[[Match, Market, str, str], list[ExportRow]]


def _field_for(column: str) -> str:
    try:
        return _COLUMN_FIELDS[column]
    except KeyError:
        raise KeyError(f"Unknown export column: {column}") from None


def _lower(market: Market) -> str:
    return (market.label or "").lower()


def _over_under_shaped(market: Market) -> bool:
    return market.is_over_under or any(outcome.kind in ("over", "under") for outcome in market.outcomes)


def is_win_and_rounds(label: str) -> bool:
    return any(pattern.search(label or "") for pattern in WIN_AND_ROUNDS_PATTERNS)


def find_affirmative_outcome(outcomes: Sequence[Outcome]) -> Outcome | None:
    """Pick the "it happened" side of a yes/no style market.

    Providers label the positive side inconsistently ("Yes", "Da" or the bare
    selection), so anything without a negative marker qualifies.
    """

    for outcome in outcomes:
        label = (outcome.label or "").lower()
        if "yes" in label or "da" in label:
            return outcome
        if "no" not in label and "ne" not in label:
            return outcome
    return None


def resolve_line(market: Market) -> str:
    """Over line, then under line, then the market line."""

    for kind in ("over", "under"):
        outcome = market.outcome_of_kind(kind)
        if outcome is not None and outcome.line:
            return format_line(outcome.line)
    return format_line(market.line)


def _value_row(date: str, time: str, home: str, odds: int | None, *, away: str = AFFIRMATIVE_MARKER) -> ExportRow:
    return ExportRow(date=date, time=time, home=home, away=away, one=format_odds(odds))


def _significant_strikes_rows(match: Match, market: Market, date: str, time: str) -> list[ExportRow]:
    line = resolve_line(market)
    rows: list[ExportRow] = []
    for outcome in market.outcomes:
        row = _value_row(date, time, market.label, outcome.odds, away=outcome.label)
        row.line = line
        rows.append(row)
    return rows


def _over_under_rows(match: Match, market: Market, date: str, time: str) -> list[ExportRow]:
    over = market.outcome_of_kind("over")
    under = market.outcome_of_kind("under")
    row = ExportRow(
        date=date,
        time=time,
        home=strip_participant_names(market.label, match.participants),
        away=AFFIRMATIVE_MARKER,
        line=resolve_line(market),
        under=format_odds(under.odds) if under else "",
        over=format_odds(over.odds) if over else "",
    )
    return [row]


def _affirmative_rows(match: Match, market: Market, date: str, time: str) -> list[ExportRow]:
    outcome = find_affirmative_outcome(market.outcomes)
    if outcome is None:
        logger.debug("No affirmative outcome for %s; skipping", market.label)
        return []
    return [_value_row(date, time, market.label, outcome.odds)]


def _per_outcome_rows(match: Match, market: Market, date: str, time: str) -> list[ExportRow]:
    return [_value_row(date, time, outcome.label, outcome.odds) for outcome in market.outcomes]


def _round_distance_rows(match: Match, market: Market, date: str, time: str) -> list[ExportRow]:
    rows = _affirmative_rows(match, market, date, time)
    if rows:
        return rows
    return _per_outcome_rows(match, market, date, time)


ROW_RULES: tuple[RowRule, ...] = (
    RowRule(
        "significant-strikes",
        lambda market: "significant strikes" in _lower(market) and _over_under_shaped(market),
        _significant_strikes_rows,
    ),
    RowRule("over-under", lambda market: market.is_over_under, _over_under_rows),
    RowRule("win-and-rounds", lambda market: is_win_and_rounds(market.label), _affirmative_rows),
    RowRule(
        "enumerated",
        lambda market: any(phrase in _lower(market) for phrase in _ENUMERATED_PHRASES),
        _per_outcome_rows,
    ),
    RowRule(
        "round-distance",
        lambda market: ("round" in _lower(market) or "distance" in _lower(market))
        and "winning round" not in _lower(market),
        _round_distance_rows,
    ),
    RowRule("default", lambda market: True, _affirmative_rows),
)


def matching_rule(market: Market) -> RowRule:
    for rule in ROW_RULES:
        if rule.applies(market):
            return rule
    return ROW_RULES[-1]  # pragma: no cover - default always applies


def build_market_rows(match: Match, market: Market, *, tz: tzinfo | None = None) -> list[ExportRow]:
    """Convert one selected market into zero or more export rows."""

    rule = matching_rule(market)
    date, time = format_start(match, tz)
    rows = rule.build(match, market, date, time)
    logger.debug("Market %s (%s) -> %s rule, %d row(s)", market.id, market.label, rule.name, len(rows))
    return rows


def match_name_row(match: Match) -> ExportRow:
    return ExportRow(home=f"MATCH_NAME:{match.name}", is_match_name=True)


def section_header_row(section: str) -> ExportRow:
    return ExportRow(home=f"LEAGUE_NAME:{section}", is_section_header=True)


__all__ = [
    "AFFIRMATIVE_MARKER",
    "EXPORT_COLUMNS",
    "ExportRow",
    "ROW_RULES",
    "RowRule",
    "WIN_AND_ROUNDS_PATTERNS",
    "build_market_rows",
    "find_affirmative_outcome",
    "is_win_and_rounds",
    "match_name_row",
    "matching_rule",
    "resolve_line",
    "section_header_row",
]
