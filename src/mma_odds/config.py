"""Configuration helpers for environment-driven settings."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import os
from typing import Any, Mapping
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml


@dataclass(frozen=True)
class KambiConfig:
    """Settings for the Kambi offering API."""

    base_url: str = "https://eu1.offering-api.kambicdn.com/offering/v2018"
    offering: str = "kambi"
    list_view_path: str = "ufc_mma/ufc/all/all"
    channel_id: str = "7"
    client_id: str = "2"
    lang: str = "en_GB"
    market: str = "GB"


@dataclass(frozen=True)
class ExportSettings:
    """Where exports land and which clock the Date/Time columns use."""

    timezone: str
    output_dir: str

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


@dataclass(frozen=True)
class AppConfig:
    kambi: KambiConfig
    export: ExportSettings


_DEFAULT_KAMBI: dict[str, Any] = {
    "list_view_path": "ufc_mma/ufc/all/all",
    "channel_id": "7",
    "client_id": "2",
}

_DEFAULT_EXPORT: dict[str, Any] = {
    "timezone": "UTC",
    "output_dir": "reports",
}


def load_config(settings_path: str | os.PathLike[str] = "settings.yaml") -> AppConfig:
    """Load configuration from environment variables and settings.yaml."""

    raw = _load_settings_file(settings_path)
    defaults = KambiConfig()

    kambi_raw = {
        **_DEFAULT_KAMBI,
        **{k: v for k, v in raw.items() if k in _DEFAULT_KAMBI},
    }
    kambi = KambiConfig(
        base_url=os.getenv("KAMBI_BASE_URL", defaults.base_url).rstrip("/"),
        offering=os.getenv("KAMBI_OFFERING", defaults.offering),
        list_view_path=str(kambi_raw["list_view_path"]).strip("/"),
        channel_id=str(kambi_raw["channel_id"]),
        client_id=str(kambi_raw["client_id"]),
        lang=os.getenv("KAMBI_LANG", defaults.lang),
        market=os.getenv("KAMBI_MARKET", defaults.market),
    )

    export = _build_export_settings(raw)

    return AppConfig(kambi=kambi, export=export)


def _load_settings_file(path: str | os.PathLike[str]) -> Mapping[str, Any]:
    settings_path = Path(path)
    if not settings_path.exists():
        return {}
    raw = settings_path.read_text(encoding="utf-8")
    loaded = yaml.safe_load(raw) or {}
    if not isinstance(loaded, dict):
        raise ValueError("settings.yaml must contain a mapping")
    return loaded


def _build_export_settings(data: Mapping[str, Any]) -> ExportSettings:
    merged = {**_DEFAULT_EXPORT, **{k: v for k, v in data.items() if k in _DEFAULT_EXPORT}}
    timezone_name = os.getenv("MMA_ODDS_TIMEZONE") or str(merged["timezone"])
    output_dir = os.getenv("MMA_ODDS_OUTPUT_DIR") or str(merged["output_dir"])
    try:
        ZoneInfo(timezone_name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"Unknown timezone: {timezone_name}") from exc
    return ExportSettings(timezone=timezone_name, output_dir=output_dir)


__all__ = [
    "AppConfig",
    "ExportSettings",
    "KambiConfig",
    "load_config",
]
