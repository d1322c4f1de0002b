"""CSV export and tabular previews of the export rows."""

from __future__ import annotations

import csv
import html
import io
from datetime import date
from pathlib import Path
from typing import Sequence

import pandas as pd

from .rows import EXPORT_COLUMNS, ExportRow

FILENAME_PREFIX = "mma_odds"


def serialize_csv(rows: Sequence[ExportRow]) -> str:
    """Serialize rows with every value double-quoted and quotes doubled."""

    buffer = io.StringIO()
    buffer.write(",".join(EXPORT_COLUMNS) + "\n")
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for row in rows:
        record = row.as_record()
        writer.writerow([record[column] for column in EXPORT_COLUMNS])
    return buffer.getvalue()


def export_filename(today: date | None = None) -> str:
    today = today or date.today()
    return f"{FILENAME_PREFIX}_{today.isoformat()}.csv"


def write_csv(
    rows: Sequence[ExportRow],
    out_dir: str | Path = "reports",
    *,
    today: date | None = None,
) -> Path:
    """Write the export CSV and return its path."""

    out_path = Path(out_dir)
    out_path.mkdir(parents=True, exist_ok=True)
    csv_path = out_path / export_filename(today)
    with csv_path.open("w", newline="", encoding="utf-8") as handle:
        handle.write(serialize_csv(rows))
    return csv_path


def read_csv(path: str | Path) -> pd.DataFrame:
    """Load an export back with every cell as a string."""

    return pd.read_csv(path, dtype=str, keep_default_na=False)


def rows_to_frame(rows: Sequence[ExportRow]) -> pd.DataFrame:
    records = [row.as_record() for row in rows]
    if not records:
        return pd.DataFrame(columns=list(EXPORT_COLUMNS))
    return pd.DataFrame.from_records(records, columns=list(EXPORT_COLUMNS))


def render_markdown(rows: Sequence[ExportRow], *, show_index: bool = False) -> str:
    """Render the rows as a GitHub-flavoured Markdown table."""

    df = rows_to_frame(rows)
    if show_index:
        df.insert(0, "#", [str(index) for index in range(len(df))])
    headers = [str(col) for col in df.columns]
    divider = ["---" for _ in headers]
    lines = ["| " + " | ".join(headers) + " |", "| " + " | ".join(divider) + " |"]
    for _, row in df.iterrows():
        cells = [str(row[col]).replace("|", "\\|") for col in df.columns]
        lines.append("| " + " | ".join(cells) + " |")
    return "\n".join(lines) + "\n"


def render_html(rows: Sequence[ExportRow], *, title: str = "MMA odds export", editable: bool = False) -> str:
    """Render a standalone HTML preview.

    Match-name and section rows are always read-only; with ``editable`` the
    data cells carry an ``editable`` class and row/column attributes.
    """

    thead = "".join(f"<th>{html.escape(col)}</th>" for col in EXPORT_COLUMNS)
    body_rows: list[str] = []
    for index, row in enumerate(rows):
        if row.is_match_name:
            row_class = "match-name-row"
        elif row.is_section_header:
            row_class = "league-name-row"
        else:
            row_class = ""
        cells: list[str] = []
        for column in EXPORT_COLUMNS:
            value = html.escape(row.get(column))
            if editable and not row.is_header:
                cells.append(
                    f"<td class='editable' data-column='{html.escape(column)}'>{value}</td>"
                )
            else:
                cells.append(f"<td>{value}</td>")
        body_rows.append(
            f"<tr class='{row_class}' data-row-index='{index}'>{''.join(cells)}</tr>"
        )
    tbody = "".join(body_rows)

    css = """
    body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', sans-serif;
           margin: 2rem auto; max-width: 1200px; color: #1f2933; background:#fff; }
    h1 { color: #0b3d91; }
    table { border-collapse: collapse; width: 100%; margin-bottom: 1.5rem; }
    th, td { border: 1px solid #d9e2ec; padding: 0.4rem; text-align: left; }
    th { background: #f0f4f8; }
    tr.match-name-row td { background: #0b3d91; color: #fff; font-weight: bold; }
    tr.league-name-row td { background: #d9e2ec; font-weight: bold; }
    td.editable { background: #fffbea; }
    """

    safe_title = html.escape(title)
    return (
        "<!doctype html><html lang='en'><head><meta charset='utf-8'>"
        f"<title>{safe_title}</title><style>{css}</style></head><body>"
        f"<h1>{safe_title}</h1>"
        f"<table><thead><tr>{thead}</tr></thead><tbody>{tbody}</tbody></table>"
        "</body></html>"
    )


__all__ = [
    "export_filename",
    "read_csv",
    "render_html",
    "render_markdown",
    "rows_to_frame",
    "serialize_csv",
    "write_csv",
]
