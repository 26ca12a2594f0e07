"""Strict decoder wrapper and decoder-error to diagnostic mapping."""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from jsonlens.core import constants as app_constants
from jsonlens.core import json_diagnostics as line_rules
from jsonlens.core.domain_impl.json import validation_service
from jsonlens.core.models import DiagnosticKind

_LOGGER = logging.getLogger(__name__)

_CHAR_OFFSET_RE = re.compile(r"\(char (\d+)\)")
_BARE_TOKEN_RE = re.compile(r"[^\W\d]\w*")
_NUMERIC_CHARS = frozenset("0123456789+-.eE")
_LONE_NUMERIC_SIGNS = ("-", "+", ".")


class NonFiniteConstantError(ValueError):
    """Raised while decoding when NaN/Infinity/-Infinity appear in the text."""

    def __init__(self, constant: str) -> None:
        super().__init__(f"Non-finite number {constant} is not valid JSON")
        self.constant = constant


def _reject_constant(name: str) -> Any:
    raise NonFiniteConstantError(name)


def strict_loads(text: str, **kwargs: Any) -> Any:
    """`json.loads` that refuses the non-standard numeric constants."""
    return json.loads(text, parse_constant=_reject_constant, **kwargs)


def decode_native(text: Any) -> tuple[Any, Exception | None]:
    """Decode text and return `(value, None)` or `(None, error)`; never raises."""
    try:
        return strict_loads(str(text or "")), None
    except (ValueError, RecursionError) as exc:
        _LOGGER.debug(
            "json_error_diag.decode_failed",
            extra={"error_type": type(exc).__name__},
        )
        return None, exc


def error_offset(exc: Exception) -> int | None:
    """Character offset from the decoder message `(char N)`, else `exc.pos`."""
    match = _CHAR_OFFSET_RE.search(str(exc))
    if match:
        return int(match.group(1))
    pos = getattr(exc, "pos", None)
    return pos if isinstance(pos, int) else None


def find_token_outside_strings(text: str, token: str) -> int | None:
    """First offset of a bare `token` that is not inside a string literal."""
    in_string = False
    escape = False
    for idx, ch in enumerate(text):
        if in_string:
            if escape:
                escape = False
            elif ch == "\\":
                escape = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
            continue
        if not text.startswith(token, idx):
            continue
        before = text[idx - 1 : idx]
        after = text[idx + len(token) : idx + len(token) + 1]
        if (before.isalnum() or before == "_") or (after.isalnum() or after == "_"):
            continue
        return idx
    return None


def numeric_run_at(text: str, offset: int) -> tuple[int, str]:
    """Return `(start, run)` of number-like characters surrounding offset."""
    if offset >= len(text) or text[offset] not in _NUMERIC_CHARS:
        return offset, ""
    start = offset
    while start > 0 and text[start - 1] in _NUMERIC_CHARS:
        start -= 1
    end = offset
    while end < len(text) and text[end] in _NUMERIC_CHARS:
        end += 1
    return start, text[start:end]


def _is_malformed_number(run: str) -> bool:
    if not run or line_rules.is_valid_json_number(run):
        return False
    return any(ch.isdigit() for ch in run) or run in _LONE_NUMERIC_SIGNS


def trailing_comma_before(text: str, offset: int) -> int | None:
    """Offset of a comma directly preceding the closer at offset, if any."""
    if text[offset : offset + 1] not in ("}", "]"):
        return None
    idx = offset - 1
    while idx >= 0 and text[idx].isspace():
        idx -= 1
    if idx >= 0 and text[idx] == ",":
        return idx
    return None


def _ends_value(raw_line: str) -> bool:
    stripped = raw_line.strip()
    return stripped in ("}", "]") or line_rules.is_value_bearing_line(stripped)


def previous_value_end(text: str, offset: int, lookback: int) -> int | None:
    """Where a missing comma before `offset` belongs.

    Prefers the same-line prefix; otherwise walks back over at most
    `lookback` non-empty lines to the nearest one that ends a value.
    """
    line_start = text.rfind("\n", 0, offset) + 1
    prefix = text[line_start:offset]
    if prefix.strip():
        return line_start + len(prefix.rstrip()) - 1
    end = line_start - 1
    scanned = 0
    while end > 0 and scanned < lookback:
        start = text.rfind("\n", 0, end) + 1
        raw = text[start:end]
        if raw.strip():
            scanned += 1
            if _ends_value(raw):
                return start + len(raw.rstrip()) - 1
        end = start - 1
    return None


def _entry(
    kind: DiagnosticKind,
    seed: str,
    offset: int,
    decoder_text: str,
    suggestion: str | None = None,
) -> dict[str, Any]:
    return {
        "kind": kind,
        "message": f"{seed} ({decoder_text})",
        "offset": max(0, int(offset)),
        "suggestion": suggestion,
    }


def classify_decode_error(
    text: str,
    exc: Exception,
    lookback: int = app_constants.MISSING_COMMA_LOOKBACK_LINES,
) -> dict[str, Any]:
    """Map one decoder failure to `{kind, message, offset, suggestion}`."""
    source = str(text or "")
    decoder_text = str(exc)
    if isinstance(exc, NonFiniteConstantError):
        found = find_token_outside_strings(source, exc.constant)
        return _entry(
            DiagnosticKind.INVALID_NUMBER,
            f"{exc.constant} is not a JSON number",
            found or 0,
            decoder_text,
            "use null or a finite number",
        )
    if isinstance(exc, RecursionError):
        return _entry(DiagnosticKind.SYNTAX_ERROR, "nesting too deep to decode", 0, decoder_text)

    offset = error_offset(exc)
    offset = min(max(offset or 0, 0), len(source))
    msg = str(getattr(exc, "msg", decoder_text) or "")
    char = source[offset : offset + 1]

    match msg:
        case _ if msg.startswith("Unexpected UTF-8 BOM"):
            return _entry(DiagnosticKind.INVALID_CHARACTER, "byte order mark before the document", 0, decoder_text)
        case _ if msg.startswith("Unterminated string"):
            return _entry(DiagnosticKind.UNTERMINATED_STRING, "string is never closed", offset, decoder_text)
        case _ if msg.startswith("Invalid \\escape"):
            return _entry(DiagnosticKind.INVALID_ESCAPE_SEQUENCE, "invalid escape sequence", offset, decoder_text)
        case _ if msg.startswith("Invalid \\u"):
            return _entry(DiagnosticKind.INVALID_UNICODE_ESCAPE, "invalid \\u escape", offset, decoder_text)
        case _ if msg.startswith("Invalid control character"):
            if char in ("\n", "\r"):
                return _entry(DiagnosticKind.NEWLINE_IN_STRING, "line break inside string", offset, decoder_text)
            return _entry(
                DiagnosticKind.INVALID_CHARACTER,
                f"control character {char!r} inside string",
                offset,
                decoder_text,
            )
        case _ if msg.startswith("Illegal trailing comma"):
            comma = offset if char == "," else source.rfind(",", 0, offset)
            return _entry(DiagnosticKind.TRAILING_COMMA, "trailing comma", max(comma, 0), decoder_text)

    if msg.startswith("Expecting") and not source[offset:].strip():
        return _entry(DiagnosticKind.UNEXPECTED_END, "unexpected end of input", offset, decoder_text)

    if msg.startswith(("Expecting property name", "Expecting value")):
        comma = trailing_comma_before(source, offset)
        if comma is not None:
            return _entry(DiagnosticKind.TRAILING_COMMA, "trailing comma", comma, decoder_text)

    if char and validation_service.is_disallowed_char(char):
        return _entry(
            DiagnosticKind.INVALID_CHARACTER,
            f"invisible or control character U+{ord(char):04X}",
            offset,
            decoder_text,
        )

    run_start, run = numeric_run_at(source, offset)
    if _is_malformed_number(run):
        return _entry(DiagnosticKind.INVALID_NUMBER, f"{run} is not a valid JSON number", run_start, decoder_text)

    if msg.startswith("Expecting ',' delimiter"):
        follows_gap = source[offset - 1 : offset].isspace() if offset > 0 else False
        if char in ('"', "{", "[") or (follows_gap and line_rules.starts_like_value(source[offset:])):
            target = previous_value_end(source, offset, lookback)
            if target is not None:
                return _entry(
                    DiagnosticKind.SYNTAX_ERROR,
                    "missing comma",
                    target,
                    decoder_text,
                    "add ',' between the values",
                )

    if msg.startswith(("Expecting value", "Expecting property name")):
        expecting_key = msg.startswith("Expecting property name")
        if char == "'":
            return _entry(
                DiagnosticKind.UNEXPECTED_TOKEN,
                "single-quoted string",
                offset,
                decoder_text,
                "use double quotes",
            )
        if source.startswith(("//", "/*"), offset):
            return _entry(
                DiagnosticKind.UNEXPECTED_TOKEN,
                "comments are not allowed in JSON",
                offset,
                decoder_text,
                "remove the comment",
            )
        token_match = _BARE_TOKEN_RE.match(source, offset)
        if token_match:
            token = token_match.group(0)
            typo = None if expecting_key else line_rules.literal_typo_suggestion(token)
            if typo:
                return _entry(DiagnosticKind.INVALID_VALUE, f"unknown literal {token}", offset, decoder_text, typo)
            subject = "property name" if expecting_key else "value"
            return _entry(
                DiagnosticKind.UNEXPECTED_TOKEN,
                f"unquoted {subject} {token}",
                offset,
                decoder_text,
                f'write "{token}"',
            )

    if msg.startswith("Extra data"):
        return _entry(
            DiagnosticKind.SYNTAX_ERROR,
            "unexpected data after the top-level value",
            offset,
            decoder_text,
            "keep a single top-level value",
        )
    return _entry(DiagnosticKind.SYNTAX_ERROR, "invalid JSON syntax", offset, decoder_text)


def run_native_pass(
    collector: Any,
    text: str,
    decode_error: Exception | None = None,
    lookback: int = app_constants.MISSING_COMMA_LOOKBACK_LINES,
) -> None:
    """Admit the decoder's own verdict as one diagnostic (nothing on success)."""
    exc = decode_error
    if exc is None:
        _value, exc = decode_native(text)
    if exc is None:
        return
    entry = classify_decode_error(text, exc, lookback=lookback)
    collector.add_at(entry["kind"], entry["message"], entry["offset"], entry["suggestion"])
