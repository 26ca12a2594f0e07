import difflib
import re
from typing import Optional

from jsonlens.core import constants as app_constants
from jsonlens.core.models import SourcePosition

# Core note: this module is intentionally pure and line-oriented so the analyzer
# passes and tests can reuse the same classification decisions.

_STRUCTURAL_LINES = frozenset({"{", "}", "[", "]", ","})
_COMMENT_PREFIXES = ("//", "/*")
_TRAILING_CLOSERS = ", \t\r\n}]"
_NUMERIC_LEADS = frozenset("-.0123456789")
_JSON_LITERALS = ("true", "false", "null")

_IDENTIFIER_RE = re.compile(r"[^\W\d]\w*")
_LOOSE_NUMBER_RE = re.compile(r"-?\d+(?:\.\d+)*(?:[eE][+-]?\d+)?")
_STRICT_NUMBER_RE = re.compile(r"-?(?:0|[1-9]\d*)(?:\.\d+)?(?:[eE][+-]?\d+)?")


def position_from_offset(text: str, offset: int) -> SourcePosition:
    """Map a 0-based character offset to a 1-based line/column position.

    Offsets outside the text are clamped to `[0, len(text)]`, so an offset past
    the end maps to the position just after the last character.
    """
    source = str(text or "")
    try:
        offset = int(offset)
    except (TypeError, ValueError):
        offset = 0
    offset = min(max(offset, 0), len(source))
    line = source.count("\n", 0, offset) + 1
    last_newline = source.rfind("\n", 0, offset)
    return SourcePosition(line=line, column=offset - last_newline, offset=offset)


def line_start_offsets(text: str) -> list[int]:
    """Return the starting offset of every `\\n`-separated line."""
    starts = [0]
    source = str(text or "")
    idx = source.find("\n")
    while idx >= 0:
        starts.append(idx + 1)
        idx = source.find("\n", idx + 1)
    return starts


def is_structural_line(line: str) -> bool:
    stripped = str(line or "").strip()
    return stripped in _STRUCTURAL_LINES or stripped.startswith(_COMMENT_PREFIXES)


def is_key_value_line(line: str) -> bool:
    # Any colon counts, including one inside a string value (e.g. a URL).
    return ":" in str(line or "")


def strip_trailing_closers(line: str) -> str:
    return str(line or "").strip().rstrip(_TRAILING_CLOSERS)


def starts_like_value(text: str) -> bool:
    """True when text opens with something a JSON value could start with."""
    if not text:
        return False
    head = text[0]
    if head in ('"', "{", "[") or head in _NUMERIC_LEADS:
        return True
    if text.startswith(_JSON_LITERALS):
        return True
    return head.isalpha() or head == "_"


def is_value_bearing_line(line: str) -> bool:
    """True for key-value lines and lines whose content plausibly is a JSON value."""
    stripped = str(line or "").strip()
    if not stripped or is_structural_line(stripped):
        return False
    if is_key_value_line(stripped):
        return True
    return starts_like_value(strip_trailing_closers(stripped))


def is_identifier(text: str) -> bool:
    return bool(_IDENTIFIER_RE.fullmatch(str(text or "").strip()))


def starts_with_letter(text: str) -> bool:
    stripped = str(text or "").strip()
    return bool(stripped) and (stripped[0].isalpha() or stripped[0] == "_")


def looks_like_number(text: str) -> bool:
    return bool(_LOOSE_NUMBER_RE.fullmatch(str(text or "")))


def is_valid_json_number(text: str) -> bool:
    return bool(_STRICT_NUMBER_RE.fullmatch(str(text or "")))


def is_json_literal(text: str) -> bool:
    value = str(text or "")
    return value in _JSON_LITERALS or is_valid_json_number(value)


def suggest_json_literal_from_token(token) -> Optional[str]:
    token_l = str(token or "").strip().lower()
    if not token_l:
        return None
    if token_l in _JSON_LITERALS:
        return token_l
    # Direct close-match typo recovery (e.g. "flase" -> "false").
    close = difflib.get_close_matches(
        token_l, _JSON_LITERALS, n=1, cutoff=app_constants.LITERAL_TYPO_CUTOFF
    )
    if close:
        return close[0]
    # Missing-leading-char style typo (e.g. "rue" -> "true").
    for lit in _JSON_LITERALS:
        if lit.endswith(token_l) and (len(lit) - len(token_l)) <= 2:
            return lit
    return None


def literal_typo_suggestion(token) -> Optional[str]:
    """Return `use 'false'` style seed when token is a misspelt JSON literal."""
    suggested = suggest_json_literal_from_token(token)
    if not suggested or str(token or "").strip() == suggested:
        return None
    return f"use '{suggested}'"
