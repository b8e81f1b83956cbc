import json

import pytest

from app.errors import ConfigError
from app.modes import Sentence, WordsFixed, WordsTimed
from app.settings import SETTINGS_ENV, Settings, load_settings, save_settings


def test_config_keys():
    assert Sentence().key() == ("sentence", None, None)
    assert WordsTimed(15).key() == ("words", 15, None)
    assert WordsFixed(50).key() == ("words", None, 50)


def test_configs_compare_by_value():
    assert Sentence() == Sentence()
    assert WordsFixed(25) == WordsFixed(25)
    assert WordsFixed(25) != WordsFixed(50)


@pytest.mark.parametrize("bad", [0, -5])
def test_timed_needs_positive_duration(bad):
    with pytest.raises(ConfigError):
        WordsTimed(bad)


@pytest.mark.parametrize("bad", [0, -1, 2.5, True])
def test_fixed_needs_positive_integer(bad):
    with pytest.raises(ConfigError):
        WordsFixed(bad)


def test_missing_settings_file_gives_defaults(tmp_path):
    s = load_settings(tmp_path / "settings.json")
    assert s == Settings()
    assert s.tick_ms == 100
    assert s.timed_word_count == 400
    assert s.trend_limit == 50


def test_settings_override(tmp_path):
    p = tmp_path / "settings.json"
    p.write_text(json.dumps({"visible_lines": 5, "line_width": 40}))
    s = load_settings(p)
    assert s.visible_lines == 5
    assert s.line_width == 40
    assert s.tick_ms == 100


@pytest.mark.parametrize("payload", [
    {"visible_lines": 4},
    {"tick_ms": 0},
    {"line_width": "wide"},
    {"colour": "blue"},
    [1, 2, 3],
])
def test_invalid_settings(tmp_path, payload):
    p = tmp_path / "settings.json"
    p.write_text(json.dumps(payload))
    with pytest.raises(ConfigError):
        load_settings(p)


def test_broken_json(tmp_path):
    p = tmp_path / "settings.json"
    p.write_text("{not json")
    with pytest.raises(ConfigError):
        load_settings(p)


def test_env_var_points_at_settings(tmp_path, monkeypatch):
    p = tmp_path / "custom.json"
    save_settings(Settings(trend_limit=20), p)
    monkeypatch.setenv(SETTINGS_ENV, str(p))
    assert load_settings().trend_limit == 20
