import csv
import io
from datetime import date

from mma_odds.export import (
    export_filename,
    read_csv,
    render_html,
    render_markdown,
    rows_to_frame,
    serialize_csv,
    write_csv,
)
from mma_odds.rows import EXPORT_COLUMNS, ExportRow


def _rows():
    return [
        ExportRow(home="MATCH_NAME:Jones - Miocic", is_match_name=True),
        ExportRow(home="LEAGUE_NAME:Match Winner", is_section_header=True),
        ExportRow(
            date="19/01/2025",
            time="03:00",
            home='Jones "Bones", by KO',
            away="DA",
            one="1.50",
        ),
        ExportRow(date="19/01/2025", time="03:00", home="Line\nbreak", away="DA", line="2.5", under="1.80", over="2.00"),
    ]


def test_serialize_csv_quotes_every_field():
    text = serialize_csv(_rows()[2:3])
    header, line = text.rstrip("\n").split("\n")

    assert header == "Date,Time,Code,Home,Away,1,X,2,Line,Under,Over,Yes,No"
    assert line == '"19/01/2025","03:00","","Jones ""Bones"", by KO","DA","1.50","","","","","","",""'


def test_csv_round_trip_recovers_values():
    rows = _rows()
    parsed = list(csv.reader(io.StringIO(serialize_csv(rows))))

    assert parsed[0] == list(EXPORT_COLUMNS)
    assert parsed[1:] == [[row.as_record()[column] for column in EXPORT_COLUMNS] for row in rows]


def test_write_and_read_csv(tmp_path):
    rows = _rows()

    path = write_csv(rows, tmp_path / "out", today=date(2025, 1, 18))
    frame = read_csv(path)

    assert path.name == "mma_odds_2025-01-18.csv"
    assert list(frame.columns) == list(EXPORT_COLUMNS)
    assert frame.to_dict("records") == [row.as_record() for row in rows]


def test_export_filename_defaults_to_today():
    assert export_filename(date(2024, 12, 31)) == "mma_odds_2024-12-31.csv"
    assert export_filename() == f"mma_odds_{date.today().isoformat()}.csv"


def test_rows_to_frame_drops_header_flags():
    frame = rows_to_frame(_rows())
    assert list(frame.columns) == list(EXPORT_COLUMNS)
    assert len(frame) == 4
    assert rows_to_frame([]).empty


def test_render_markdown_with_index():
    markdown = render_markdown(_rows()[:3], show_index=True)
    lines = markdown.strip().split("\n")

    assert lines[0].startswith("| # | Date | Time |")
    assert lines[2].startswith("| 0 |")
    assert len(lines) == 5


def test_render_html_marks_header_rows_read_only():
    page = render_html(_rows(), title="Jones <vs> Miocic", editable=True)

    assert "<title>Jones &lt;vs&gt; Miocic</title>" in page
    assert "class='match-name-row'" in page
    assert "class='league-name-row'" in page
    assert page.count("class='editable'") == 2 * len(EXPORT_COLUMNS)
    assert "Jones &quot;Bones&quot;, by KO" in page
