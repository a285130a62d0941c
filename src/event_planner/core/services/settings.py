from __future__ import annotations

import json
import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

SETTINGS_PATH = Path(__file__).resolve().parents[2] / "data" / "settings.json"
API_URL_ENV = "EVENT_PLANNER_API_URL"

DEFAULT_SETTINGS = {
    "pricing": {
        "fee_rate": 0.10,
        "tax_rate": 0.18,
        "savings_rate": 0.15,
        "currency": "INR",
    },
    "api": {
        "base_url": "http://localhost:3000",
        "connect_timeout": 3.0,
        "read_timeout": 30.0,
    },
    "drafts": {
        "path": str(Path.home() / ".event_planner" / "drafts"),
    },
    "filters": {
        "rating": 0.0,
        "price_min": 0.0,
        "price_max": 100000.0,
    },
}


def _merge(defaults: dict, overrides: dict) -> dict:
    merged = dict(defaults)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(defaults.get(key), dict):
            merged[key] = _merge(defaults[key], value)
        else:
            merged[key] = value
    return merged


def load_settings(path: Path | None = None) -> dict:
    """
    Load settings JSON and merge it over the defaults.

    Missing or broken file falls back to defaults; `EVENT_PLANNER_API_URL`
    wins over the configured API base URL.
    """
    target = path or SETTINGS_PATH
    data = json.loads(json.dumps(DEFAULT_SETTINGS))
    if target.exists():
        try:
            raw = json.loads(target.read_text(encoding="utf-8"))
            if isinstance(raw, dict):
                data = _merge(data, raw)
            else:
                logger.warning("Ignoring settings %s: top level is not an object", target)
        except (OSError, ValueError) as exc:
            logger.warning("Failed to load settings %s: %s", target, exc)

    env_url = os.environ.get(API_URL_ENV)
    if env_url:
        data["api"]["base_url"] = env_url
    return data


def save_settings(data: dict, path: Path | None = None) -> Path:
    target = path or SETTINGS_PATH
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
    return target
