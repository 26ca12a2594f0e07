"""
Smoke tests for the perf_smoke tool
"""
from jsonlens.core.domain_impl.json.json_io_core import parse_json
from jsonlens.tools import perf_smoke


def test_synthetic_payload_is_valid_and_break_is_not():
    payload = perf_smoke._build_synthetic_payload(20)
    assert parse_json(payload).is_valid
    assert not parse_json(perf_smoke._break_payload(payload)).is_valid


def test_main_runs_small_profile(capsys):
    assert perf_smoke.main(["--synthetic-records", "20", "--iterations", "1", "--warmup", "0"]) == 0
    assert "perf_smoke summary" in capsys.readouterr().out


def test_main_reports_missing_input(tmp_path, capsys):
    assert perf_smoke.main(["--input", str(tmp_path / "missing.json")]) == 2
