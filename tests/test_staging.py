from mma_odds.rows import ExportRow
from mma_odds.staging import StagingStore


def _rows():
    return [
        ExportRow(home="MATCH_NAME:A - B", is_match_name=True),
        ExportRow(home="LEAGUE_NAME:Match Winner", is_section_header=True),
        ExportRow(date="19/01/2025", time="03:00", home="Moneyline", away="DA", one="1.50"),
    ]


def test_open_takes_an_independent_copy():
    source = _rows()
    store = StagingStore()

    staged = store.open(source)
    store.set_cell(2, "1", "1.65")

    assert staged[2].one == "1.65"
    assert source[2].one == "1.50"
    assert staged[2] is not source[2]


def test_set_cell_out_of_range_is_a_no_op():
    store = StagingStore()
    store.open(_rows())

    assert store.set_cell(3, "Home", "x") is False
    assert store.set_cell(-1, "Home", "x") is False
    assert [row.home for row in store.rows][-1] == "Moneyline"


def test_header_rows_are_not_protected_in_the_store():
    store = StagingStore()
    store.open(_rows())

    assert store.set_cell(0, "Home", "MATCH_NAME:renamed") is True
    assert store.rows[0].home == "MATCH_NAME:renamed"


def test_close_drops_uncommitted_edits():
    store = StagingStore()
    store.open(_rows())

    store.close()

    assert not store.is_open
    assert store.export_source(lambda: ["fresh"]) == ["fresh"]


def test_committed_edits_survive_close_until_discarded():
    store = StagingStore()
    store.open(_rows())
    store.set_cell(2, "Home", "Edited")

    assert store.commit() is True
    store.close()

    assert store.committed
    assert store.export_source(list)[2].home == "Edited"

    store.discard()
    assert len(store) == 0
    assert not store.committed


def test_commit_without_rows_does_nothing():
    store = StagingStore()
    assert store.commit() is False
    assert not store.committed


def test_reopen_resets_commit_flag():
    store = StagingStore()
    store.open(_rows())
    store.commit()

    store.open(_rows())

    assert not store.committed


def test_set_cell_unknown_column_is_a_no_op():
    store = StagingStore()
    store.open(_rows())

    assert store.set_cell(2, "Gost", "x") is False
    assert store.rows[2].as_record() == _rows()[2].as_record()
