"""
Tests for the public parse/validate entry points
"""
import json

import pytest

from jsonlens.core.domain_impl.json import json_diagnostics_core, json_io_core
from jsonlens.core.domain_impl.json.json_io_core import find_duplicate_keys, parse_json, validate_json
from jsonlens.core.models import DiagnosticKind, Invalid, Valid
from jsonlens.core.settings import DiagnosticsSettings


def _many_bare_words(count):
    return "[\n" + ",\n".join(f"  bad{idx}" for idx in range(count)) + "\n]"


def test_valid_document():
    outcome = parse_json('{"a": [1, 2.5, "x", true, null]}')
    assert isinstance(outcome, Valid)
    assert outcome.is_valid
    assert outcome.value == {"a": [1, 2.5, "x", True, None]}
    assert outcome.diagnostics == ()


def test_structural_pattern_matching_on_outcome():
    match parse_json("[1]"):
        case Valid(value=value):
            assert value == [1]
        case Invalid():
            pytest.fail("expected a valid outcome")


def test_trailing_comma_single_diagnostic():
    outcome = parse_json('{"a": 1, "b": 2,}')
    assert isinstance(outcome, Invalid)
    assert [diag.kind for diag in outcome.diagnostics] == [DiagnosticKind.TRAILING_COMMA]
    assert outcome.diagnostics[0].offset == 15


def test_unterminated_string_position():
    outcome = parse_json('{"a": "x}')
    (diag,) = outcome.diagnostics
    assert diag.kind is DiagnosticKind.UNTERMINATED_STRING
    assert (diag.line, diag.column) == (1, 7)


def test_missing_comma_across_lines():
    outcome = parse_json('{"a": 1\n"b": 2}')
    (diag,) = outcome.diagnostics
    assert diag.kind is DiagnosticKind.SYNTAX_ERROR
    assert (diag.line, diag.column) == (1, 7)


@pytest.mark.parametrize("text", ["", "   \n\t", None])
def test_blank_input(text):
    outcome = parse_json(text)
    assert not outcome.is_valid
    (diag,) = outcome.diagnostics
    assert diag.kind is DiagnosticKind.UNEXPECTED_END
    assert diag.position is None


def test_duplicate_keys_are_lenient_by_default():
    outcome = parse_json('{"a": 1, "a": 2}')
    assert outcome.is_valid
    assert outcome.value == {"a": 2}


def test_duplicate_keys_rejected_when_enabled():
    settings = DiagnosticsSettings(reject_duplicate_keys=True)
    outcome = parse_json('{"a": 1, "a": 2}', settings)
    (diag,) = outcome.diagnostics
    assert diag.kind is DiagnosticKind.DUPLICATE_KEY
    assert (diag.line, diag.column, diag.offset) == (1, 10, 9)


def test_find_duplicate_keys_scopes_objects_separately():
    assert find_duplicate_keys('{"a": {"a": 1}, "b": [{"c": 1}, {"c": 2}]}') == ()
    (diag,) = find_duplicate_keys('{"x": {"k": 1, "k\\u0000": 0, "k": 2}}')
    assert diag.offset == '{"x": {"k": 1, "k\\u0000": 0, "k": 2}}'.rindex('"k"')


def test_find_duplicate_keys_compares_decoded_keys():
    (diag,) = find_duplicate_keys('{"k": 1, "\\u006b": 2}')
    assert diag.offset == 9


def test_find_duplicate_keys_ignores_undecodable_text():
    assert find_duplicate_keys('{"a": 1, "a": 2') == ()


def test_diagnostics_are_capped():
    assert len(parse_json(_many_bare_words(30)).diagnostics) == 15
    assert len(parse_json(_many_bare_words(30), DiagnosticsSettings(max_diagnostics=3)).diagnostics) == 3


def test_diagnostics_are_sorted():
    diagnostics = parse_json(_many_bare_words(5)).diagnostics
    lines = [diag.line for diag in diagnostics]
    assert lines == sorted(lines)


def test_oversized_input_runs_only_the_decoder():
    outcome = parse_json(_many_bare_words(30), DiagnosticsSettings(input_max_chars=10))
    assert len(outcome.diagnostics) == 1


def test_failing_pass_does_not_abort_analysis(monkeypatch):
    def boom(*args, **kwargs):
        raise ValueError("pass exploded")

    monkeypatch.setattr(json_diagnostics_core, "run_pattern_pass", boom)
    monkeypatch.setattr(json_diagnostics_core, "run_comma_pass", boom)
    outcome = parse_json('{"a": 1\n"b": 2}')
    (diag,) = outcome.diagnostics
    assert (diag.line, diag.column) == (1, 7)


def test_generic_fallback_when_pipeline_finds_nothing(monkeypatch):
    monkeypatch.setattr(json_io_core, "analyze_text", lambda *args, **kwargs: ())
    (diag,) = parse_json("[1,,]").diagnostics
    assert diag.kind is DiagnosticKind.SYNTAX_ERROR
    assert diag.message.startswith("JSON parse error")
    assert diag.position is not None


def test_validate_json_mirrors_parse():
    assert validate_json("[1, 2]").is_valid
    result = validate_json("[1, 2")
    assert not result.is_valid
    assert result.errors[0].kind is DiagnosticKind.UNEXPECTED_END


def test_parse_is_idempotent():
    text = '{\n  "a": 01\n  "b": tru,\n}'
    assert parse_json(text) == parse_json(text)


@pytest.mark.parametrize("text", ['{"a": {"b": [1, -2.5e3, "\\u00e9", false]}}', "[]", '"s"', "0", "null"])
def test_valid_values_match_json_loads(text):
    assert parse_json(text).value == json.loads(text)


def test_failed_decode_always_has_sorted_unique_diagnostics():
    text = "{\n  a: 01,\n  \"b\": \"x\n  \"c\": [1, 2,]\n  d\n}"
    diagnostics = parse_json(text).diagnostics
    assert diagnostics
    keys = [(diag.line, diag.offset) for diag in diagnostics]
    assert len(keys) == len(set(keys))
    assert [(diag.line, diag.column) for diag in diagnostics] == sorted((diag.line, diag.column) for diag in diagnostics)


def test_minified_trailing_comma_after_literal_is_the_only_diagnostic():
    outcome = parse_json('{"a": true, "b": 2,}')
    assert [diag.kind for diag in outcome.diagnostics] == [DiagnosticKind.TRAILING_COMMA]
    assert outcome.diagnostics[0].offset == 18
