"""Thin client for the Kambi offering API."""

from __future__ import annotations

import logging
from typing import Any, Mapping, MutableMapping

import requests

from .config import KambiConfig
from .markets import UNKNOWN, Market, Match, Outcome

logger = logging.getLogger(__name__)

_OUTCOME_KINDS = {
    "OT_OVER": "over",
    "OT_UNDER": "under",
    "OT_YES": "yes",
    "OT_NO": "no",
}


class KambiAPIError(RuntimeError):
    """Raised when the Kambi API fails or returns an unusable payload."""


class KambiClient:
    """Simple HTTP client for the Kambi event list and bet offers."""

    def __init__(
        self,
        config: KambiConfig,
        session: requests.Session | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._config = config
        self._timeout = timeout
        self._session = session or requests.Session()

    def fetch_matches(self) -> list[Match]:
        """Return the events listed for the configured sport path."""

        params: MutableMapping[str, str] = {
            "channel_id": self._config.channel_id,
            "client_id": self._config.client_id,
            "lang": self._config.lang,
            "market": self._config.market,
            "useCombined": "true",
            "useCombinedLive": "true",
        }
        url = (
            f"{self._config.base_url}/{self._config.offering}/listView/"
            f"{self._config.list_view_path}/matches.json"
        )
        payload = self._get_json(url, params)
        matches = parse_matches(payload)
        logger.info("Found %d matches", len(matches))
        return matches

    def fetch_bet_offers(self, event_id: str) -> list[Market]:
        """Return the normalized bet offers for a single event."""

        params: MutableMapping[str, str] = {
            "lang": self._config.lang,
            "market": self._config.market,
            "client_id": self._config.client_id,
            "channel_id": self._config.channel_id,
            "includeParticipants": "true",
        }
        url = f"{self._config.base_url}/{self._config.offering}/betoffer/event/{event_id}.json"
        payload = self._get_json(url, params)
        markets = parse_bet_offers(payload, match_id=str(event_id))
        logger.debug("Event %s: %d bet offers", event_id, len(markets))
        return markets

    def _get_json(self, url: str, params: Mapping[str, str]) -> Mapping[str, Any]:
        logger.debug("GET %s", url)
        try:
            response = self._session.get(url, params=params, timeout=self._timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            logger.warning("Kambi request failed for %s: %s", url, exc)
            raise KambiAPIError(f"Unable to reach the Kambi API: {exc}") from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise KambiAPIError(f"Malformed JSON from {url}") from exc
        if not isinstance(payload, dict):
            raise KambiAPIError(f"Unexpected payload type from {url}: {type(payload).__name__}")
        return payload

    def close(self) -> None:
        """Close the underlying HTTP session."""

        self._session.close()

    def __enter__(self) -> "KambiClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def parse_matches(payload: Mapping[str, Any]) -> list[Match]:
    matches: list[Match] = []
    for entry in _entries(payload, "events"):
        event = entry.get("event") if isinstance(entry, Mapping) else None
        if not isinstance(event, Mapping) or event.get("id") is None:
            continue
        matches.append(
            Match(
                id=str(event["id"]),
                name=str(event.get("name") or UNKNOWN),
                home_name=str(event.get("homeName") or UNKNOWN),
                away_name=str(event.get("awayName") or UNKNOWN),
                start=str(event.get("start") or ""),
                group=str(event.get("group") or ""),
            )
        )
    return matches


def parse_bet_offers(payload: Mapping[str, Any], match_id: str) -> list[Market]:
    markets: list[Market] = []
    for offer in _entries(payload, "betOffers"):
        outcomes = offer.get("outcomes") if isinstance(offer, Mapping) else None
        if not isinstance(outcomes, list):
            continue
        criterion = _mapping(offer.get("criterion"))
        offer_type = _mapping(offer.get("betOfferType"))
        label = str(criterion.get("label") or UNKNOWN)
        if "significant strikes" in label.lower():
            logger.debug("Significant strikes offer %s: %s", offer.get("id"), label)
        markets.append(
            Market(
                id=str(offer.get("id", "")),
                match_id=match_id,
                label=label,
                type_id=_to_int(offer_type.get("id")),
                line=_to_int(offer.get("line")),
                outcomes=tuple(
                    _outcome_from_payload(outcome)
                    for outcome in outcomes
                    if isinstance(outcome, Mapping)
                ),
            )
        )
    return markets


def _outcome_from_payload(outcome: Mapping[str, Any]) -> Outcome:
    participant = outcome.get("participant") or UNKNOWN
    if isinstance(participant, Mapping):
        participant = participant.get("name") or UNKNOWN
    return Outcome(
        label=str(outcome.get("label") or UNKNOWN),
        odds=_to_int(outcome.get("odds")),
        kind=_OUTCOME_KINDS.get(str(outcome.get("type", "")), "other"),
        line=_to_int(outcome.get("line")),
        participant=str(participant),
        id=str(outcome.get("id", "")),
    )


def _entries(payload: Mapping[str, Any], key: str) -> list[Any]:
    entries = payload.get(key)
    if entries is None:
        return []
    if not isinstance(entries, list):
        raise KambiAPIError(f"Expected a list under {key!r}, got {type(entries).__name__}")
    return entries


def _mapping(value: object) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _to_int(value: object) -> int | None:
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


__all__ = [
    "KambiAPIError",
    "KambiClient",
    "parse_bet_offers",
    "parse_matches",
]
