"""Consolidated JSON domain pillar: json_diagnostics_core.

Line-oriented heuristic passes (pattern, comma, trailing comma, duplicate
keys) and the collector that deduplicates and caps their findings.
"""

import json
import logging
from typing import Any, Iterator

from jsonlens.core import constants as app_constants
from jsonlens.core import json_diagnostics as line_rules
from jsonlens.core.models import Diagnostic, DiagnosticKind, SourcePosition

_LOG = logging.getLogger(__name__)


# --- Diagnostic collector ---


class DiagnosticCollector:
    """Admit diagnostics once per (line, offset), up to a fixed limit."""

    def __init__(self, text: Any, limit: Any = app_constants.MAX_DIAGNOSTICS_DEFAULT) -> None:
        self.text = str(text or "")
        self.limit = max(1, int(limit))
        self._entries: list[Diagnostic] = []
        self._seen: set[tuple[Any, Any]] = set()

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def full(self) -> bool:
        return len(self._entries) >= self.limit

    def add(
        self,
        kind: DiagnosticKind,
        message: str,
        position: SourcePosition | None = None,
        suggestion: str | None = None,
    ) -> bool:
        key = (position.line, position.offset) if position is not None else (None, None)
        if key in self._seen or self.full:
            return False
        if suggestion is None:
            suggestion = app_constants.DIAGNOSTIC_SUGGESTIONS.get(kind.value)
        self._entries.append(Diagnostic(kind=kind, message=message, position=position, suggestion=suggestion))
        self._seen.add(key)
        return True

    def add_at(self, kind: DiagnosticKind, message: str, offset: int, suggestion: str | None = None) -> bool:
        return self.add(kind, message, line_rules.position_from_offset(self.text, offset), suggestion)

    def results(self) -> tuple[Diagnostic, ...]:
        # sorted() is stable, so admission order breaks (line, column) ties.
        return tuple(sorted(self._entries, key=lambda diag: (diag.line or 0, diag.column or 0)))


def line_end_offset(raw_line: str, line_start: int) -> int:
    """Offset of the last non-whitespace character of a line."""
    content = str(raw_line or "").rstrip()
    if not content:
        return line_start
    return line_start + len(content) - 1


# --- Pattern pass ---


def run_pattern_pass(collector: DiagnosticCollector, lines: list[str], starts: list[int]) -> None:
    """Flag quoting mismatches and malformed numbers line by line."""
    for idx, raw in enumerate(lines):
        if collector.full:
            return
        trimmed = raw.strip()
        if not trimmed or line_rules.is_structural_line(trimmed):
            continue
        line_start = starts[idx]
        if line_rules.is_key_value_line(trimmed):
            colon = raw.index(":")
            _check_key_part(collector, raw[:colon].strip(), raw, line_start)
            _check_value_part(collector, raw[colon + 1 :].strip(), raw, line_start, colon + 1)
        else:
            _check_value_part(collector, trimmed, raw, line_start, 0)


def _check_key_part(collector: DiagnosticCollector, key_part: str, raw: str, line_start: int) -> None:
    if not key_part:
        return
    opens = key_part.startswith('"')
    closes = key_part.endswith('"')
    if opens and closes:
        return
    if opens:
        collector.add_at(
            DiagnosticKind.UNTERMINATED_STRING,
            "key string is missing its closing quote",
            line_start + raw.find('"'),
        )
        return
    name = key_part[:-1].strip() if closes else key_part
    if not line_rules.is_identifier(name):
        return
    col = raw.find(name)
    if col < 0:
        return
    message = f"key {name} is missing its opening quote" if closes else f"key {name} is not quoted"
    collector.add_at(DiagnosticKind.UNEXPECTED_TOKEN, message, line_start + col, f'write "{name}"')


def _check_value_part(
    collector: DiagnosticCollector,
    value_part: str,
    raw: str,
    line_start: int,
    search_from: int,
) -> None:
    if not value_part:
        return
    clean = line_rules.strip_trailing_closers(value_part)
    if not clean or clean[0] in "{[":
        return
    if line_rules.looks_like_number(clean) and not line_rules.is_valid_json_number(clean):
        col = raw.find(clean, search_from)
        if col >= 0:
            collector.add_at(
                DiagnosticKind.INVALID_NUMBER,
                f"{clean} is not a valid JSON number",
                line_start + col,
            )
            return
    if line_rules.is_json_literal(clean):
        return
    _check_quoted_text(collector, clean, raw, line_start, search_from)


def _holds_more_members(clean: str) -> bool:
    # Minified input puts every later member in one value part.
    return '":' in clean or ', "' in clean


def _check_quoted_text(
    collector: DiagnosticCollector,
    clean: str,
    raw: str,
    line_start: int,
    search_from: int,
) -> None:
    opens = clean.startswith('"')
    closes = clean.endswith('"')
    if opens and closes:
        return
    if _holds_more_members(clean):
        return
    if opens:
        col = raw.find(clean, search_from)
        if col >= 0:
            collector.add_at(
                DiagnosticKind.UNTERMINATED_STRING,
                "string value is missing its closing quote",
                line_start + col,
            )
        return
    bare = clean[:-1].strip() if closes else clean
    if not line_rules.starts_with_letter(bare):
        return
    col = raw.find(bare, search_from)
    if col < 0:
        return
    if closes:
        collector.add_at(
            DiagnosticKind.UNEXPECTED_TOKEN,
            f"value {bare} is missing its opening quote",
            line_start + col,
        )
        return
    suggestion = line_rules.literal_typo_suggestion(bare) or "wrap the value in double quotes"
    collector.add_at(DiagnosticKind.UNEXPECTED_TOKEN, f"value {bare} is not quoted", line_start + col, suggestion)


# --- Comma pass ---


def run_comma_pass(
    collector: DiagnosticCollector,
    lines: list[str],
    starts: list[int],
    lookahead: int = app_constants.STRUCTURE_COMMA_LOOKAHEAD_LINES,
) -> None:
    """Detect missing commas between value lines and after closer-only lines."""
    stripped = [line.strip() for line in lines]
    for idx in range(len(lines) - 1):
        if collector.full:
            return
        if needs_comma(stripped[idx], stripped[idx + 1]):
            collector.add_at(
                DiagnosticKind.SYNTAX_ERROR,
                "missing comma",
                line_end_offset(lines[idx], starts[idx]),
                "add ',' at the end of the line",
            )

    for idx in range(len(lines) - 1):
        if collector.full:
            return
        current = stripped[idx]
        if current not in ("}", "]"):
            continue
        if not line_rules.is_value_bearing_line(stripped[idx + 1]):
            continue
        if has_comma_after_structure(stripped, idx, lookahead):
            continue
        container = "object" if current == "}" else "array"
        collector.add_at(
            DiagnosticKind.SYNTAX_ERROR,
            f"missing comma after {container}",
            line_end_offset(lines[idx], starts[idx]),
            f"add ',' after '{current}'",
        )


def needs_comma(current: str, following: str) -> bool:
    if not line_rules.is_value_bearing_line(current) or not line_rules.is_value_bearing_line(following):
        return False
    return not current.endswith((",", "{", "["))


def has_comma_after_structure(stripped_lines: list[str], closer_index: int, lookahead: int) -> bool:
    if stripped_lines[closer_index].endswith(","):
        return True
    stop = min(closer_index + 1 + max(0, int(lookahead)), len(stripped_lines))
    for idx in range(closer_index + 1, stop):
        candidate = stripped_lines[idx]
        if candidate == ",":
            return True
        if candidate and not line_rules.is_structural_line(candidate):
            break
    return False


# --- Trailing comma pass ---


def run_trailing_comma_pass(collector: DiagnosticCollector, text: str) -> None:
    """Flag a comma whose next significant character closes an object/array."""
    in_string = False
    escape = False
    pending_comma = None
    for idx, ch in enumerate(text):
        if collector.full:
            return
        if in_string:
            # JSON strings cannot span lines; resync on newline.
            if ch == "\n":
                in_string = False
                escape = False
            elif escape:
                escape = False
            elif ch == "\\":
                escape = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
            pending_comma = None
            continue
        if ch.isspace():
            continue
        if ch in "}]" and pending_comma is not None:
            container = "object" if ch == "}" else "array"
            collector.add_at(
                DiagnosticKind.TRAILING_COMMA,
                f"trailing comma before end of {container}",
                pending_comma,
            )
        pending_comma = idx if ch == "," else None


# --- Duplicate key pass ---


def _string_token_end(text: str, start: int) -> int:
    """Index just past the closing quote of the string opening at `start`."""
    idx = start + 1
    while idx < len(text):
        ch = text[idx]
        if ch == "\\":
            idx += 2
            continue
        if ch == '"':
            return idx + 1
        idx += 1
    return len(text)


def iter_object_members(text: str) -> Iterator[tuple[int, str, int]]:
    """Yield (object_scope_id, decoded_key, key_offset) in source order.

    Only reliable on text the strict decoder accepts.
    """
    stack: list[tuple[str, int]] = []
    scope_ids = 0
    idx = 0
    length = len(text)
    while idx < length:
        ch = text[idx]
        if ch == '"':
            end = _string_token_end(text, idx)
            probe = end
            while probe < length and text[probe] in " \t\r\n":
                probe += 1
            if stack and stack[-1][0] == "{" and probe < length and text[probe] == ":":
                try:
                    key = json.loads(text[idx:end])
                except ValueError as exc:
                    _LOG.debug("expected_error", exc_info=exc)
                else:
                    yield stack[-1][1], key, idx
            idx = end
            continue
        if ch == "{":
            scope_ids += 1
            stack.append(("{", scope_ids))
        elif ch == "[":
            stack.append(("[", 0))
        elif ch in "}]" and stack:
            stack.pop()
        idx += 1


def run_duplicate_key_pass(collector: DiagnosticCollector, text: str) -> None:
    """Report each repeated key within one object at the repeated occurrence."""
    seen: dict[int, set[str]] = {}
    for scope_id, key, offset in iter_object_members(text):
        if collector.full:
            return
        keys = seen.setdefault(scope_id, set())
        if key in keys:
            collector.add_at(
                DiagnosticKind.DUPLICATE_KEY,
                f"duplicate key {json.dumps(key, ensure_ascii=False)}",
                offset,
            )
            continue
        keys.add(key)
