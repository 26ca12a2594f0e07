"""Input payload checks shared by the analyzer and the CLI."""

from __future__ import annotations

from typing import Any

from jsonlens.core import constants as app_constants
from jsonlens.core.settings import DiagnosticsSettings, resolve_settings

_ALLOWED_CONTROLS = frozenset(app_constants.EDITOR_ALLOWED_CONTROL_CHARS)
_HIDDEN_UNICODE = frozenset(app_constants.EDITOR_HIDDEN_UNICODE_CHARS)


def is_disallowed_char(char: str) -> bool:
    """Control characters outside tab/CR/LF and invisible Unicode format marks."""
    if not char:
        return False
    if char in _HIDDEN_UNICODE:
        return True
    return ord(char) < 32 and char not in _ALLOWED_CONTROLS


def _contains_disallowed_controls(text: str) -> bool:
    for char in text:
        if ord(char) < 32 and char not in _ALLOWED_CONTROLS:
            return True
    return False


def _contains_utf16_surrogate(text: str) -> bool:
    for char in text:
        code = ord(char)
        if 0xD800 <= code <= 0xDFFF:
            return True
    return False


def _contains_hidden_unicode(text: str) -> bool:
    return any(char in _HIDDEN_UNICODE for char in text)


def heuristic_scan_allowed(text: Any, settings: DiagnosticsSettings | None = None) -> bool:
    """Line scanners only run on payloads below the configured ceiling."""
    limit = int(resolve_settings(settings).input_max_chars)
    return len(str(text or "")) <= limit


def payload_warnings(payload: Any, settings: DiagnosticsSettings | None = None) -> list[str]:
    """Human-readable notes about payload content that editors tend to hide."""
    text = str(payload or "")
    if not text:
        return []
    warnings = []
    limit = int(resolve_settings(settings).input_max_chars)
    if len(text) > limit:
        warnings.append(f"Input exceeds heuristic scan limit ({limit:,} characters); only the decoder verdict is reported.")
    if _contains_utf16_surrogate(text):
        warnings.append("Input contains unpaired UTF-16 surrogate code points.")
    if _contains_disallowed_controls(text):
        warnings.append("Input contains unsupported control characters.")
    if _contains_hidden_unicode(text):
        warnings.append("Input contains hidden Unicode characters.")
    return warnings
