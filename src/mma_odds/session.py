"""Single-event working state: matches, selection and the staging copy."""

from __future__ import annotations

from datetime import date, tzinfo
import logging
from pathlib import Path
from typing import Protocol, Sequence

from .export import write_csv
from .markets import Market, Match
from .rows import ExportRow
from .staging import StagingStore
from .table import SelectedMarket, SelectedMarketSet, assemble_rows

logger = logging.getLogger(__name__)


class OddsSource(Protocol):
    def fetch_matches(self) -> list[Match]: ...

    def fetch_bet_offers(self, event_id: str) -> list[Market]: ...


class OddsSession:
    """Holds everything one export run needs.

    Provider calls are guarded per kind ("matches", "odds"): a call made while
    another of the same kind is still running is rejected and returns ``None``.
    Provider errors propagate to the caller and leave the state untouched.
    """

    def __init__(self, source: OddsSource, *, tz: tzinfo | None = None) -> None:
        self._source = source
        self._tz = tz
        self._busy: set[str] = set()
        self.matches: list[Match] = []
        self.selected_match: Match | None = None
        self.selected_odds: list[Market] = []
        self.selection = SelectedMarketSet()
        self.staging = StagingStore()

    def is_busy(self, kind: str) -> bool:
        return kind in self._busy

    def fetch_matches(self) -> list[Match] | None:
        if "matches" in self._busy:
            logger.info("Match list request already in flight; ignoring")
            return None
        self._busy.add("matches")
        try:
            matches = self._source.fetch_matches()
        finally:
            self._busy.discard("matches")
        self.matches = list(matches)
        self.selected_match = None
        self.selected_odds = []
        return self.matches

    def find_match(self, match_id: str) -> Match | None:
        for match in self.matches:
            if match.id == str(match_id):
                return match
        return None

    def fetch_match_odds(self, match_id: str) -> list[Market] | None:
        if "odds" in self._busy:
            logger.info("Odds request already in flight; ignoring")
            return None
        match = self.find_match(match_id)
        if match is None:
            logger.debug("Match %s is not in the current list", match_id)
            return None
        self._busy.add("odds")
        try:
            markets = self._source.fetch_bet_offers(match.id)
        finally:
            self._busy.discard("odds")
        self.selected_match = match
        self.selected_odds = list(markets)
        return self.selected_odds

    def find_market(self, market_id: str) -> Market | None:
        for market in self.selected_odds:
            if market.id == str(market_id):
                return market
        return None

    def add_market(self, market_id: str) -> bool:
        """Queue a market of the selected match for export.

        Unknown markets and markets already queued are ignored.
        """

        if self.selected_match is None:
            return False
        market = self.find_market(market_id)
        if market is None:
            logger.debug("Market %s not found for match %s", market_id, self.selected_match.id)
            return False
        added = self.selection.add(SelectedMarket(match=self.selected_match, market=market))
        if added:
            self.staging.discard()
        return added

    def add_all_markets(self) -> int:
        return sum(1 for market in self.selected_odds if self.add_market(market.id))

    def is_selected(self, market_id: str) -> bool:
        if self.selected_match is None:
            return False
        return (self.selected_match.id, str(market_id)) in self.selection

    def export_table(self) -> list[ExportRow]:
        return assemble_rows(self.selection, tz=self._tz)

    def preview(self) -> list[ExportRow]:
        rows = self.export_table()
        if not rows:
            return []
        return self.staging.open(rows)

    def hide_preview(self) -> None:
        self.staging.close()

    def set_cell(self, row_index: int, column: str, value: str) -> bool:
        """Edit a staged data cell; match-name and section rows are read-only."""

        rows = self.staging.rows
        if 0 <= row_index < len(rows) and rows[row_index].is_header:
            logger.debug("Row %s is a header row; edit refused", row_index)
            return False
        return self.staging.set_cell(row_index, column, value)

    def commit_edits(self) -> bool:
        return self.staging.commit()

    def export_rows(self) -> list[ExportRow]:
        return self.staging.export_source(self.export_table)

    def export_csv(self, out_dir: str | Path, *, today: date | None = None) -> Path | None:
        rows = self.export_rows()
        if not rows:
            logger.warning("No markets selected; nothing to export")
            return None
        path = write_csv(rows, out_dir, today=today)
        logger.info("Wrote %d rows to %s", len(rows), path)
        return path

    def reset(self) -> None:
        self.matches = []
        self.selected_match = None
        self.selected_odds = []
        self.selection.clear()
        self.staging.discard()


def select_markets(session: OddsSession, market_ids: Sequence[str]) -> list[str]:
    """Add the given market ids in order; returns the ids that were not found."""

    missing: list[str] = []
    for market_id in market_ids:
        if session.find_market(market_id) is None:
            missing.append(market_id)
            continue
        session.add_market(market_id)
    return missing


__all__ = ["OddsSession", "OddsSource", "select_markets"]
