"""Diagnostics settings bucket and environment loader."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Any, Mapping

from jsonlens.core import constants as app_constants


def _truthy(value: Any) -> bool:
    return str(value or "").strip().lower() in {"1", "true", "yes", "on"}


def _bounded_int(raw: Any, default: int, minimum: int, maximum: int | None = None) -> int:
    text = str(raw or "").strip()
    if not text:
        return default
    try:
        value = int(text)
    except ValueError:
        return default
    value = max(minimum, value)
    if maximum is not None:
        value = min(maximum, value)
    return value


@dataclass(frozen=True, slots=True)
class DiagnosticsSettings:
    """Tunables shared by the analyzer, the tree engine and the CLI."""

    max_diagnostics: int = app_constants.MAX_DIAGNOSTICS_DEFAULT
    input_max_chars: int = app_constants.EDITOR_INPUT_MAX_CHARS
    expand_depth: int = app_constants.TREE_DEFAULT_EXPAND_DEPTH
    reject_duplicate_keys: bool = False
    structure_comma_lookahead: int = app_constants.STRUCTURE_COMMA_LOOKAHEAD_LINES
    missing_comma_lookback: int = app_constants.MISSING_COMMA_LOOKBACK_LINES

    def with_overrides(self, **changes: Any) -> "DiagnosticsSettings":
        return replace(self, **{key: value for key, value in changes.items() if value is not None})


DEFAULT_SETTINGS = DiagnosticsSettings()


def load_settings(environ: Mapping[str, str] | None = None) -> DiagnosticsSettings:
    """Build settings from JSONLENS_* environment variables, ignoring bad values."""
    env = os.environ if environ is None else environ
    return DiagnosticsSettings(
        max_diagnostics=_bounded_int(
            env.get(app_constants.ENV_MAX_DIAGNOSTICS),
            app_constants.MAX_DIAGNOSTICS_DEFAULT,
            1,
            app_constants.MAX_DIAGNOSTICS_CEILING,
        ),
        input_max_chars=_bounded_int(
            env.get(app_constants.ENV_INPUT_MAX_CHARS),
            app_constants.EDITOR_INPUT_MAX_CHARS,
            1,
        ),
        expand_depth=_bounded_int(
            env.get(app_constants.ENV_EXPAND_DEPTH),
            app_constants.TREE_DEFAULT_EXPAND_DEPTH,
            0,
        ),
        reject_duplicate_keys=_truthy(env.get(app_constants.ENV_REJECT_DUPLICATE_KEYS)),
    )


def resolve_settings(settings: DiagnosticsSettings | None) -> DiagnosticsSettings:
    return settings if isinstance(settings, DiagnosticsSettings) else DEFAULT_SETTINGS
