import pytest

from mma_odds.classify import (
    CATEGORIES,
    CATEGORY_KEYWORDS,
    METHOD,
    MONEYLINE,
    OTHER,
    PROPS,
    ROUND_DISTANCE,
    SECTION_LABELS,
    SECTION_ORDER,
    TOTALS,
    WINNING_COMBINATIONS,
    classify_market,
    section_for_label,
)


@pytest.mark.parametrize(
    ("label", "expected"),
    [
        ("Moneyline", MONEYLINE),
        ("Bout Winner", MONEYLINE),
        ("Jon Jones to win by KO/TKO", MONEYLINE),
        ("Winning Combinations", WINNING_COMBINATIONS),
        ("Alternate Winning Combination", WINNING_COMBINATIONS),
        ("Total Rounds", ROUND_DISTANCE),
        ("Will the fight go the distance?", ROUND_DISTANCE),
        ("Method of Victory", METHOD),
        ("Fight to end in a decision", METHOD),
        ("Total Significant Strikes Landed by Jon Jones", TOTALS),
        ("Takedowns Over/Under", TOTALS),
        ("Fight Props", PROPS),
        ("Special Bets", PROPS),
        ("Point Deduction", OTHER),
    ],
)
def test_classify_market_keywords(label, expected):
    assert classify_market(label) == expected


def test_round_is_checked_before_total():
    assert classify_market("Total Rounds") == ROUND_DISTANCE
    assert classify_market("TOTAL ROUNDS") != TOTALS


def test_classifier_is_total():
    for label in ["", None, "???", "Knockdown", "ünïcode label", "Winner Round Total Prop"]:
        assert classify_market(label) in CATEGORIES


def test_section_order_follows_classifier_priority():
    assert SECTION_ORDER == tuple(SECTION_LABELS[category] for category, _ in CATEGORY_KEYWORDS)
    assert SECTION_ORDER[0] == "Match Winner"
    assert SECTION_ORDER[-1] == "Props & Specials"
    assert "Other Markets" not in SECTION_ORDER


def test_section_for_label():
    assert section_for_label("Moneyline") == "Match Winner"
    assert section_for_label("Total Rounds") == "Round & Distance"
    assert section_for_label("Anything else") == "Other Markets"
