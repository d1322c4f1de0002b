"""Command-line entry point for mma-odds utilities."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Iterable, Sequence

from dotenv import load_dotenv

from .classify import SECTION_ORDER, section_for_label
from .config import AppConfig, load_config
from .export import render_html, render_markdown
from .kambi_api import KambiAPIError, KambiClient
from .markets import Market, Match, format_line, format_odds, format_start
from .rows import EXPORT_COLUMNS, matching_rule
from .session import OddsSession, select_markets


def main(argv: Iterable[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Kambi MMA odds to CSV")
    parser.add_argument("--matches", action="store_true", help="List the events currently offered.")
    parser.add_argument("--markets", action="store_true", help="List the bet offers for --event.")
    parser.add_argument("--export", action="store_true", help="Export selected bet offers for --event to CSV.")
    parser.add_argument("--event", help="Event id (see --matches).")
    parser.add_argument(
        "--market",
        dest="market_ids",
        action="append",
        default=[],
        help="Bet offer id to export; repeatable. Defaults to every offer.",
    )
    parser.add_argument(
        "--set",
        dest="edits",
        action="append",
        default=[],
        metavar="ROW:COLUMN=VALUE",
        help="Edit a cell of the staged table before export; repeatable.",
    )
    parser.add_argument("--preview", action="store_true", help="Print the staged table as Markdown.")
    parser.add_argument("--html", help="Also write an HTML preview of the staged table to this path.")
    parser.add_argument("--out-dir", help="Directory for the CSV (default from settings).")
    parser.add_argument("--settings", default="settings.yaml", help="Path to settings.yaml.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    args = parser.parse_args(list(argv) if argv is not None else None)

    mode_flags = [args.matches, args.markets, args.export]
    if sum(1 for flag in mode_flags if flag) > 1:
        parser.error("Pick only one of --matches, --markets, or --export.")
    if (args.markets or args.export) and not args.event:
        parser.error("--markets and --export require --event.")
    if (args.market_ids or args.edits or args.preview or args.html) and not args.export:
        parser.error("--market, --set, --preview and --html require --export.")

    try:
        edits = _parse_cell_edits(args.edits)
    except ValueError as exc:
        parser.error(str(exc))

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s:%(name)s:%(message)s",
    )

    load_dotenv()
    try:
        config = load_config(args.settings)
    except ValueError as exc:
        parser.error(str(exc))

    if not (args.matches or args.markets or args.export):
        # default dry-run
        print("everything wired correctly")
        return 0

    with KambiClient(config.kambi) as client:
        session = OddsSession(client, tz=config.export.tzinfo)
        try:
            if args.matches:
                return run_matches_flow(session, config)
            if args.markets:
                return run_markets_flow(session, config, args.event)
            return run_export_flow(
                session,
                config,
                event_id=args.event,
                market_ids=args.market_ids,
                edits=edits,
                preview=args.preview,
                html_path=args.html,
                out_dir=args.out_dir,
            )
        except KambiAPIError as exc:
            logging.error("%s", exc)
            print("Failed to fetch data from Kambi. Please try again.")
            return 1


def run_matches_flow(session: OddsSession, config: AppConfig) -> int:
    matches = session.fetch_matches() or []
    if not matches:
        print("No matches available.")
        return 0
    _print_matches_table(matches, config)
    return 0


def run_markets_flow(session: OddsSession, config: AppConfig, event_id: str) -> int:
    markets = _load_event(session, event_id)
    if markets is None:
        return 1
    if not markets:
        print("No odds available for this match.")
        return 0
    _print_markets_table(session.selected_match, markets, config)
    return 0


def run_export_flow(
    session: OddsSession,
    config: AppConfig,
    *,
    event_id: str,
    market_ids: Sequence[str],
    edits: Sequence[tuple[int, str, str]],
    preview: bool,
    html_path: str | None,
    out_dir: str | None,
) -> int:
    markets = _load_event(session, event_id)
    if markets is None:
        return 1

    if market_ids:
        missing = select_markets(session, market_ids)
        for market_id in missing:
            logging.warning("Bet offer %s not found for event %s", market_id, event_id)
    else:
        session.add_all_markets()

    if not len(session.selection):
        print("No markets selected for export.")
        return 0

    if edits or preview or html_path:
        rows = session.preview()
        for row_index, column, value in edits:
            if not session.set_cell(row_index, column, value):
                logging.warning("Skipped edit %s:%s (missing or read-only row)", row_index, column)
        if edits:
            session.commit_edits()
        if preview:
            print(render_markdown(rows, show_index=True))
        if html_path:
            title = session.selected_match.name if session.selected_match else "MMA odds export"
            target = Path(html_path)
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(render_html(rows, title=title), encoding="utf-8")
            print(f"HTML preview: {target}")

    path = session.export_csv(out_dir or config.export.output_dir)
    if path is None:
        print("No markets selected for export.")
        return 0
    print(f"Exported {len(session.selection)} market(s) to {path}")
    return 0


def _load_event(session: OddsSession, event_id: str) -> list[Market] | None:
    session.fetch_matches()
    if session.find_match(event_id) is None:
        print(f"Event {event_id} is not currently offered.")
        return None
    return session.fetch_match_odds(event_id)


def _parse_cell_edits(raw_edits: Sequence[str]) -> list[tuple[int, str, str]]:
    """Parse ``ROW:COLUMN=VALUE`` tokens; rows are 0-based table indexes."""

    edits: list[tuple[int, str, str]] = []
    for token in raw_edits:
        target, sep, value = token.partition("=")
        row_raw, colon, column = target.partition(":")
        if not sep or not colon:
            raise ValueError(f"Invalid edit '{token}'. Expected ROW:COLUMN=VALUE.")
        try:
            row_index = int(row_raw)
        except ValueError as exc:
            raise ValueError(f"Invalid row in edit '{token}'.") from exc
        column = column.strip()
        if column not in EXPORT_COLUMNS:
            raise ValueError(
                f"Unknown column '{column}'. Expected one of: {', '.join(EXPORT_COLUMNS)}."
            )
        edits.append((row_index, column, value))
    return edits


def _print_matches_table(matches: Sequence[Match], config: AppConfig) -> None:
    header = f"{'Event':<12} {'Date':<10} {'Time':<5} {'Match':<44} {'Group'}"
    print(header)
    print("-" * len(header))
    for match in matches:
        date_value, time_value = format_start(match, config.export.tzinfo)
        print(f"{match.id:<12} {date_value:<10} {time_value:<5} {match.name:<44} {match.group}")


def _print_markets_table(match: Match | None, markets: Sequence[Market], config: AppConfig) -> None:
    if match is not None:
        date_value, time_value = format_start(match, config.export.tzinfo)
        title = f"{match.name} ({date_value} {time_value})"
        print(f"\n{title}")
        print("-" * len(title))

    section_rank = {section: index for index, section in enumerate(SECTION_ORDER)}
    ordered = sorted(
        markets,
        key=lambda m: (section_rank.get(section_for_label(m.label), len(section_rank)), m.label),
    )

    current_section = ""
    for market in ordered:
        section = section_for_label(market.label)
        if section != current_section:
            current_section = section
            print(f"\n[{section}]")
        rule = matching_rule(market).name
        line = format_line(market.line)
        line_note = f" line {line}" if line else ""
        print(f"{market.id:<12} {market.label} ({rule}{line_note})")
        for outcome in market.outcomes:
            outcome_line = format_line(outcome.line)
            suffix = f" @ {outcome_line}" if outcome_line else ""
            print(f"    {outcome.label:<40} {format_odds(outcome.odds):>7}{suffix}")


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
