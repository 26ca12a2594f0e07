"""
Tests for the diagnostic collector
"""
from jsonlens.core.domain_impl.json.json_diagnostics_core import DiagnosticCollector
from jsonlens.core.models import DiagnosticKind


def test_repeated_position_is_ignored():
    collector = DiagnosticCollector("abc\ndef")
    assert collector.add_at(DiagnosticKind.SYNTAX_ERROR, "first", 5) is True
    assert collector.add_at(DiagnosticKind.TRAILING_COMMA, "second", 5) is False
    (diag,) = collector.results()
    assert diag.message == "first"


def test_limit_is_enforced():
    collector = DiagnosticCollector("abcdef", limit=2)
    assert collector.add_at(DiagnosticKind.SYNTAX_ERROR, "a", 0)
    assert collector.add_at(DiagnosticKind.SYNTAX_ERROR, "b", 1)
    assert collector.full
    assert not collector.add_at(DiagnosticKind.SYNTAX_ERROR, "c", 2)
    assert len(collector) == 2


def test_results_sorted_by_line_and_column():
    collector = DiagnosticCollector("one\ntwo\nthree")
    collector.add_at(DiagnosticKind.SYNTAX_ERROR, "late", 9)
    collector.add_at(DiagnosticKind.SYNTAX_ERROR, "early-col2", 1)
    collector.add_at(DiagnosticKind.SYNTAX_ERROR, "early-col1", 0)
    assert [diag.message for diag in collector.results()] == ["early-col1", "early-col2", "late"]


def test_default_suggestion_seed():
    collector = DiagnosticCollector("[1,]")
    collector.add_at(DiagnosticKind.TRAILING_COMMA, "trailing comma", 2)
    (diag,) = collector.results()
    assert diag.suggestion == "remove the comma after the last element"
    assert diag.to_dict() == {
        "kind": "TRAILING_COMMA",
        "message": "trailing comma",
        "line": 1,
        "column": 3,
        "offset": 2,
        "suggestion": "remove the comma after the last element",
    }
