"""Consolidated JSON domain pillar: json_io_core.

Public parse/validate entry points, the analyzer pipeline, and document I/O
helpers (load, pretty-print, minify, statistics).
"""

import gzip
import json
import logging
from typing import Any, Callable

from jsonlens.core import constants as app_constants
from jsonlens.core import json_diagnostics as line_rules
from jsonlens.core.domain_impl.json import json_diagnostics_core
from jsonlens.core.domain_impl.json import json_error_diag_service
from jsonlens.core.domain_impl.json import validation_service
from jsonlens.core.exceptions import EXPECTED_ERRORS, AppRuntimeError, InvalidJsonError
from jsonlens.core.models import (
    Diagnostic,
    DiagnosticKind,
    DocumentStats,
    Invalid,
    ParseOutcome,
    Valid,
    ValidationResult,
)
from jsonlens.core.settings import DiagnosticsSettings, resolve_settings

_LOG = logging.getLogger(__name__)

_GZIP_MAGIC = b"\x1f\x8b"


# --- Analyzer pipeline ---


def _run_pass(stage: str, pass_fn: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
    try:
        pass_fn(*args, **kwargs)
    except EXPECTED_ERRORS as exc:
        _LOG.debug(
            "json_analyzer.pass_failed",
            extra={"stage": stage, "error_type": type(exc).__name__},
            exc_info=exc,
        )


def analyze_text(
    text: Any,
    settings: DiagnosticsSettings | None = None,
    decode_error: Exception | None = None,
) -> tuple[Diagnostic, ...]:
    """Run pattern, comma and native passes and return capped, sorted diagnostics."""
    settings = resolve_settings(settings)
    source = str(text or "")
    collector = json_diagnostics_core.DiagnosticCollector(source, settings.max_diagnostics)
    if validation_service.heuristic_scan_allowed(source, settings):
        lines = source.split("\n")
        starts = line_rules.line_start_offsets(source)
        _run_pass("pattern", json_diagnostics_core.run_pattern_pass, collector, lines, starts)
        _run_pass(
            "comma",
            json_diagnostics_core.run_comma_pass,
            collector,
            lines,
            starts,
            settings.structure_comma_lookahead,
        )
        _run_pass("trailing_comma", json_diagnostics_core.run_trailing_comma_pass, collector, source)
    else:
        _LOG.info(
            "json_parse.oversized_input",
            extra={"chars": len(source), "limit": settings.input_max_chars},
        )
    _run_pass(
        "native",
        json_error_diag_service.run_native_pass,
        collector,
        source,
        decode_error=decode_error,
        lookback=settings.missing_comma_lookback,
    )
    return collector.results()


def find_duplicate_keys(text: Any, limit: Any = None) -> tuple[Diagnostic, ...]:
    """Report repeated object keys in decodable text; empty for undecodable text."""
    source = str(text or "")
    _value, error = json_error_diag_service.decode_native(source)
    if error is not None:
        return ()
    use_limit = app_constants.MAX_DIAGNOSTICS_DEFAULT if limit is None else limit
    collector = json_diagnostics_core.DiagnosticCollector(source, use_limit)
    _run_pass("duplicate_keys", json_diagnostics_core.run_duplicate_key_pass, collector, source)
    return collector.results()


def _fallback_diagnostic(text: str, error: Exception) -> Diagnostic:
    offset = json_error_diag_service.error_offset(error) or 0
    return Diagnostic(
        kind=DiagnosticKind.SYNTAX_ERROR,
        message=f"JSON parse error ({error})",
        position=line_rules.position_from_offset(text, offset),
        suggestion=app_constants.DIAGNOSTIC_SUGGESTIONS[DiagnosticKind.SYNTAX_ERROR.value],
    )


def parse_json(text: Any, settings: DiagnosticsSettings | None = None) -> ParseOutcome:
    """Decode text, or explain why it is not JSON. Never raises."""
    settings = resolve_settings(settings)
    source = text if isinstance(text, str) else str(text or "")
    if not source.strip():
        return Invalid(
            diagnostics=(
                Diagnostic(
                    kind=DiagnosticKind.UNEXPECTED_END,
                    message="empty JSON text",
                    suggestion=app_constants.DIAGNOSTIC_SUGGESTIONS[DiagnosticKind.UNEXPECTED_END.value],
                ),
            )
        )
    value, error = json_error_diag_service.decode_native(source)
    if error is None:
        if settings.reject_duplicate_keys:
            duplicates = find_duplicate_keys(source, settings.max_diagnostics)
            if duplicates:
                return Invalid(diagnostics=duplicates)
        return Valid(value=value)
    diagnostics = analyze_text(source, settings, decode_error=error)
    if not diagnostics:
        diagnostics = (_fallback_diagnostic(source, error),)
    _LOG.debug(
        "json_parse.invalid",
        extra={"diagnostics": len(diagnostics), "chars": len(source)},
    )
    return Invalid(diagnostics=diagnostics)


def validate_json(text: Any, settings: DiagnosticsSettings | None = None) -> ValidationResult:
    """Boolean verdict plus the diagnostics behind it."""
    outcome = parse_json(text, settings)
    return ValidationResult(is_valid=outcome.is_valid, errors=outcome.diagnostics)


# --- Document helpers ---


def _require_value(text: Any, settings: DiagnosticsSettings | None = None) -> Any:
    outcome = parse_json(text, settings)
    match outcome:
        case Valid(value=value):
            return value
        case Invalid(diagnostics=diagnostics):
            raise InvalidJsonError("Document is not valid JSON.", diagnostics)


def format_json(text: Any, indent: int = 2, sort_keys: bool = False) -> str:
    """Pretty-print a valid document; raises InvalidJsonError otherwise."""
    value = _require_value(text)
    return json.dumps(value, indent=max(0, int(indent)), ensure_ascii=False, sort_keys=sort_keys)


def minify_json(text: Any) -> str:
    """Compact a valid document; raises InvalidJsonError otherwise."""
    value = _require_value(text)
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def load_document(path: Any) -> str:
    """Read JSON text from a plain or gzip-compressed file."""
    use_path = str(path or "")
    if not use_path:
        raise ValueError("Document path is required.")
    with open(use_path, "rb") as handle:
        raw = handle.read()
    if raw[:2] == _GZIP_MAGIC:
        try:
            raw = gzip.decompress(raw)
        except (OSError, EOFError) as exc:
            raise AppRuntimeError(f"Could not decompress {use_path}: {exc}") from exc
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise AppRuntimeError(f"{use_path} is not UTF-8 text: {exc}") from exc


def count_value_types(value: Any) -> dict[str, int]:
    """Count decoded values by JSON type without recursion."""
    counts = {"objects": 0, "arrays": 0, "strings": 0, "numbers": 0, "booleans": 0, "nulls": 0}
    stack = [value]
    while stack:
        current = stack.pop()
        match current:
            case None:
                counts["nulls"] += 1
            case bool():
                counts["booleans"] += 1
            case int() | float():
                counts["numbers"] += 1
            case str():
                counts["strings"] += 1
            case dict():
                counts["objects"] += 1
                stack.extend(current.values())
            case list():
                counts["arrays"] += 1
                stack.extend(current)
    return counts


def document_stats(
    text: Any,
    settings: DiagnosticsSettings | None = None,
    outcome: ParseOutcome | None = None,
) -> DocumentStats:
    """Size/line counts for a buffer, plus value type counts when it decodes.

    Pass `outcome` when the caller already parsed `text`.
    """
    source = str(text or "")
    if outcome is None:
        outcome = parse_json(source, settings)
    return DocumentStats(
        characters=len(source),
        lines=source.count("\n") + 1,
        size_bytes=len(source.encode("utf-8", errors="surrogatepass")),
        is_valid=outcome.is_valid,
        type_counts=count_value_types(outcome.value) if outcome.is_valid else None,
    )
