"""
Tests for settings defaults and environment loading
"""
import pytest

from jsonlens.core.settings import DEFAULT_SETTINGS, DiagnosticsSettings, load_settings, resolve_settings


def test_defaults():
    assert DEFAULT_SETTINGS.max_diagnostics == 15
    assert DEFAULT_SETTINGS.expand_depth == 3
    assert DEFAULT_SETTINGS.structure_comma_lookahead == 2
    assert DEFAULT_SETTINGS.missing_comma_lookback == 24
    assert DEFAULT_SETTINGS.reject_duplicate_keys is False


def test_load_from_mapping():
    settings = load_settings(
        {
            "JSONLENS_MAX_DIAGNOSTICS": "40",
            "JSONLENS_INPUT_MAX_CHARS": "1000",
            "JSONLENS_EXPAND_DEPTH": "1",
            "JSONLENS_REJECT_DUPLICATE_KEYS": "yes",
        }
    )
    assert settings == DiagnosticsSettings(
        max_diagnostics=40,
        input_max_chars=1000,
        expand_depth=1,
        reject_duplicate_keys=True,
    )


@pytest.mark.parametrize(
    "raw, expected",
    [("", 15), ("abc", 15), ("0", 1), ("-3", 1), ("100000", 500), (" 7 ", 7)],
)
def test_max_diagnostics_is_bounded(raw, expected):
    assert load_settings({"JSONLENS_MAX_DIAGNOSTICS": raw}).max_diagnostics == expected


def test_reads_process_environment(monkeypatch):
    monkeypatch.setenv("JSONLENS_EXPAND_DEPTH", "5")
    monkeypatch.delenv("JSONLENS_REJECT_DUPLICATE_KEYS", raising=False)
    settings = load_settings()
    assert settings.expand_depth == 5
    assert settings.reject_duplicate_keys is False


def test_with_overrides_skips_none():
    settings = DEFAULT_SETTINGS.with_overrides(max_diagnostics=None, expand_depth=0)
    assert settings.max_diagnostics == 15
    assert settings.expand_depth == 0


def test_resolve_settings_falls_back_to_defaults():
    assert resolve_settings(None) is DEFAULT_SETTINGS
    custom = DiagnosticsSettings(max_diagnostics=2)
    assert resolve_settings(custom) is custom
