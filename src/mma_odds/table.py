"""Assemble the ordered export table from the selected markets."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import tzinfo
from typing import Iterable, Iterator

from .classify import SECTION_ORDER, section_for_label
from .markets import Market, Match
from .rows import ExportRow, build_market_rows, match_name_row, section_header_row


@dataclass(frozen=True)
class SelectedMarket:
    match: Match
    market: Market

    @property
    def key(self) -> tuple[str, str]:
        return (self.match.id, self.market.id)


class SelectedMarketSet:
    """Markets chosen for export, in the order they were added."""

    def __init__(self, selections: Iterable[SelectedMarket] = ()) -> None:
        self._items: dict[tuple[str, str], SelectedMarket] = {}
        for selection in selections:
            self.add(selection)

    def add(self, selection: SelectedMarket) -> bool:
        if selection.key in self._items:
            return False
        self._items[selection.key] = selection
        return True

    def clear(self) -> None:
        self._items.clear()

    def __contains__(self, key: object) -> bool:
        if isinstance(key, SelectedMarket):
            key = key.key
        return key in self._items

    def __iter__(self) -> Iterator[SelectedMarket]:
        return iter(list(self._items.values()))

    def __len__(self) -> int:
        return len(self._items)


def group_by_section(selections: Iterable[SelectedMarket]) -> dict[str, list[SelectedMarket]]:
    """Group selections by section name in the fixed section order."""

    groups: dict[str, list[SelectedMarket]] = {}
    for selection in selections:
        groups.setdefault(section_for_label(selection.market.label), []).append(selection)

    ordered: dict[str, list[SelectedMarket]] = {
        section: groups[section] for section in SECTION_ORDER if section in groups
    }
    for section, members in groups.items():
        if section not in ordered:
            ordered[section] = members
    return ordered


def assemble_rows(
    selections: Iterable[SelectedMarket],
    *,
    tz: tzinfo | None = None,
) -> list[ExportRow]:
    """Build the full export table: match header, then one block per section.

    Only the first selection's match is named in the header row, even when
    markets from several matches are mixed.
    """

    items = list(selections)
    if not items:
        return []

    rows: list[ExportRow] = [match_name_row(items[0].match)]
    for section, members in group_by_section(items).items():
        rows.append(section_header_row(section))
        for selection in members:
            rows.extend(build_market_rows(selection.match, selection.market, tz=tz))
    return rows


__all__ = [
    "SelectedMarket",
    "SelectedMarketSet",
    "assemble_rows",
    "group_by_section",
]
