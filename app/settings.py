# app/settings.py
from __future__ import annotations
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Any, Dict, Optional
import json
import logging
import os

from app.errors import ConfigError

log = logging.getLogger(__name__)

SETTINGS_ENV = "TYPEPACE_SETTINGS"
_DEFAULT_FILE = Path("settings.json")


@dataclass
class Settings:
    tick_ms: int = 100
    visible_lines: int = 3
    line_width: int = 60
    timed_word_count: int = 400
    trend_limit: int = 50
    db_path: str = "data/scores.db"
    texts_dir: str = "assets/texts"


_POSITIVE_INTS = ("tick_ms", "visible_lines", "line_width", "timed_word_count", "trend_limit")


def settings_path(path: Optional[Path] = None) -> Path:
    if path:
        return Path(path)
    env_path = os.environ.get(SETTINGS_ENV)
    if env_path:
        return Path(env_path)
    return _DEFAULT_FILE


def _settings_from_dict(d: Dict[str, Any]) -> Settings:
    known = {f.name for f in fields(Settings)}
    unknown = set(d.keys()) - known
    if unknown:
        raise ConfigError(f"Unknown settings keys: {', '.join(sorted(unknown))}")
    settings = Settings(**d)
    for name in _POSITIVE_INTS:
        value = getattr(settings, name)
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise ConfigError(f"{name} must be a positive integer, got {value!r}")
    if settings.visible_lines % 2 == 0:
        raise ConfigError(f"visible_lines must be odd, got {settings.visible_lines}")
    return settings


def load_settings(path: Optional[Path] = None) -> Settings:
    """Read settings.json, falling back to defaults when it does not exist."""
    p = settings_path(path)
    if not p.exists():
        log.debug("No settings file at %s, using defaults", p)
        return Settings()
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot read settings from {p}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Settings file {p} must contain a JSON object")
    return _settings_from_dict(data)


def save_settings(settings: Settings, path: Optional[Path] = None) -> None:
    p = settings_path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(json.dumps(asdict(settings), ensure_ascii=False, indent=2), encoding="utf-8")
