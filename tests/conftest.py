from datetime import timezone

import pytest

from mma_odds.markets import Market, Match, Outcome


@pytest.fixture
def match():
    return Match(
        id="1021937000",
        name="Jon Jones - Stipe Miocic",
        home_name="Jon Jones",
        away_name="Stipe Miocic",
        start="2025-01-19T03:00:00Z",
        group="UFC 309",
    )


@pytest.fixture
def utc():
    return timezone.utc


@pytest.fixture
def make_market(match):
    def _make(label, outcomes, *, market_id="1", type_id=2, line=None, owner=None):
        owner = owner or match
        return Market(
            id=str(market_id),
            match_id=owner.id,
            label=label,
            type_id=type_id,
            line=line,
            outcomes=tuple(
                outcome if isinstance(outcome, Outcome) else Outcome(label=outcome[0], odds=outcome[1])
                for outcome in outcomes
            ),
        )

    return _make
