"""Keyword classification of market labels into export sections."""

from __future__ import annotations

MONEYLINE = "moneyline"
WINNING_COMBINATIONS = "winning-combinations"
ROUND_DISTANCE = "round-distance"
METHOD = "method"
TOTALS = "totals"
PROPS = "props"
OTHER = "other"

# Checked top to bottom; labels often hit several keyword sets ("Total Rounds").
CATEGORY_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    (MONEYLINE, ("moneyline", "winner", "to win")),
    (WINNING_COMBINATIONS, ("winning combinations", "winning combination")),
    (ROUND_DISTANCE, ("round", "distance")),
    (METHOD, ("method", "finish", "decision")),
    (TOTALS, ("over", "under", "total")),
    (PROPS, ("prop", "special")),
)

CATEGORIES: tuple[str, ...] = tuple(category for category, _ in CATEGORY_KEYWORDS) + (OTHER,)

SECTION_LABELS: dict[str, str] = {
    MONEYLINE: "Match Winner",
    WINNING_COMBINATIONS: "Winning Combinations",
    ROUND_DISTANCE: "Round & Distance",
    METHOD: "Method of Victory",
    TOTALS: "Totals",
    PROPS: "Props & Specials",
    OTHER: "Other Markets",
}

SECTION_ORDER: tuple[str, ...] = tuple(
    SECTION_LABELS[category] for category, _ in CATEGORY_KEYWORDS
)


def classify_market(label: str | None) -> str:
    """Return the category for a market label; unmatched labels are ``other``."""

    cleaned = (label or "").lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in cleaned for keyword in keywords):
            return category
    return OTHER


def section_label(category: str) -> str:
    return SECTION_LABELS.get(category, SECTION_LABELS[OTHER])


def section_for_label(label: str | None) -> str:
    return section_label(classify_market(label))


__all__ = [
    "CATEGORIES",
    "CATEGORY_KEYWORDS",
    "METHOD",
    "MONEYLINE",
    "OTHER",
    "PROPS",
    "ROUND_DISTANCE",
    "SECTION_LABELS",
    "SECTION_ORDER",
    "TOTALS",
    "WINNING_COMBINATIONS",
    "classify_market",
    "section_for_label",
    "section_label",
]
