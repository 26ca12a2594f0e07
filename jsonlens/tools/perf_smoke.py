import argparse
import gc
import json
import time
import tracemalloc
from pathlib import Path

from jsonlens.core.domain_impl.json import json_io_core
from jsonlens.core.domain_impl.tree import tree_engine_service
from jsonlens.core.exceptions import EXPECTED_ERRORS


def _build_synthetic_payload(records: int) -> str:
    # Deterministic pretty-printed payload so the line scanners have real work.
    records = max(20, int(records))
    items = []
    for idx in range(records):
        items.append(
            {
                "id": f"item-{idx}",
                "label": f"Item {idx}",
                "score": (idx * 37) % 1000 / 10.0,
                "active": idx % 3 == 0,
                "tags": [f"t{idx % 7}", f"t{idx % 11}"],
                "meta": {"rank": idx, "parent": None if idx % 5 else idx - 1},
            }
        )
    return json.dumps({"items": items, "count": records}, indent=2)


def _break_payload(payload_text: str) -> str:
    """Inject a missing comma near the middle and a trailing comma at the end."""
    lines = payload_text.split("\n")
    middle = len(lines) // 2
    for idx in range(middle, len(lines)):
        if lines[idx].rstrip().endswith(","):
            lines[idx] = lines[idx].rstrip()[:-1]
            break
    for idx in range(len(lines) - 1, 0, -1):
        if lines[idx].strip() in ("]", "}"):
            lines[idx - 1] = lines[idx - 1].rstrip() + ","
            break
    return "\n".join(lines)


def _run_once(payload_text: str, broken_text: str) -> dict:
    parse_start = time.perf_counter()
    outcome = json_io_core.parse_json(payload_text)
    parse_ms = (time.perf_counter() - parse_start) * 1000.0

    diag_start = time.perf_counter()
    broken = json_io_core.parse_json(broken_text)
    diagnose_ms = (time.perf_counter() - diag_start) * 1000.0

    tree_start = time.perf_counter()
    nodes = tree_engine_service.generate_tree(outcome.value)
    stats = tree_engine_service.get_tree_stats(nodes)
    tree_ms = (time.perf_counter() - tree_start) * 1000.0

    return {
        "parse_ms": parse_ms,
        "diagnose_ms": diagnose_ms,
        "tree_ms": tree_ms,
        "node_count": stats.total_nodes,
        "max_depth": stats.max_depth,
        "diagnostics": len(broken.diagnostics),
    }


def _fmt_bytes(num_bytes: int) -> str:
    mib = float(num_bytes) / (1024.0 * 1024.0)
    return f"{mib:.2f} MiB"


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Quick performance/memory smoke check for the diagnostics and tree engines."
    )
    parser.add_argument(
        "--input",
        type=Path,
        help="Path to a JSON file (plain or gzip). If omitted, a synthetic payload is used.",
    )
    parser.add_argument("--synthetic-records", type=int, default=1200)
    parser.add_argument("--warmup", type=int, default=1)
    parser.add_argument("--iterations", type=int, default=5)
    # Strict gate exits non-zero when perf/memory thresholds regress.
    parser.add_argument("--strict", action="store_true")
    parser.add_argument("--max-parse-ms", type=float, default=300.0)
    parser.add_argument("--max-diagnose-ms", type=float, default=900.0)
    parser.add_argument("--max-tree-ms", type=float, default=900.0)
    parser.add_argument("--max-peak-mib", type=float, default=256.0)
    args = parser.parse_args(argv)

    if args.input:
        if not args.input.exists():
            print(f"ERROR: input not found: {args.input}")
            return 2
        source = str(args.input)
        try:
            payload_text = json_io_core.load_document(args.input)
        except EXPECTED_ERRORS as exc:
            print(f"ERROR: failed to load input payload: {exc}")
            return 2
        if not json_io_core.parse_json(payload_text).is_valid:
            print("ERROR: input payload is not valid JSON")
            return 2
    else:
        source = f"synthetic:{max(20, int(args.synthetic_records))}"
        payload_text = _build_synthetic_payload(args.synthetic_records)
    broken_text = _break_payload(payload_text)

    iterations = max(1, int(args.iterations))
    warmup = max(0, int(args.warmup))

    samples = []
    peak_samples = []
    tracemalloc.start()
    try:
        for idx in range(warmup + iterations):
            gc.collect()
            metrics = _run_once(payload_text, broken_text)
            _current_bytes, peak_bytes = tracemalloc.get_traced_memory()
            if idx < warmup:
                continue
            samples.append(metrics)
            peak_samples.append(peak_bytes)
    finally:
        tracemalloc.stop()

    avg_parse = sum(item["parse_ms"] for item in samples) / len(samples)
    max_diagnose = max(item["diagnose_ms"] for item in samples)
    max_tree = max(item["tree_ms"] for item in samples)
    peak_bytes = max(peak_samples)

    print("perf_smoke summary")
    print(f"- source: {source}")
    print(f"- iterations: {iterations} (warmup={warmup})")
    print(f"- payload size: {len(payload_text):,} chars")
    print(f"- avg parse: {avg_parse:.2f} ms")
    print(f"- max diagnose: {max_diagnose:.2f} ms")
    print(f"- max tree build: {max_tree:.2f} ms")
    print(f"- nodes: {samples[-1]['node_count']:,}")
    print(f"- max depth: {samples[-1]['max_depth']}")
    print(f"- diagnostics on broken payload: {samples[-1]['diagnostics']}")
    print(f"- peak traced memory: {_fmt_bytes(peak_bytes)}")

    if not args.strict:
        return 0

    failures = []
    if avg_parse > float(args.max_parse_ms):
        failures.append(f"avg parse {avg_parse:.2f} ms > {args.max_parse_ms:.2f} ms")
    if max_diagnose > float(args.max_diagnose_ms):
        failures.append(f"max diagnose {max_diagnose:.2f} ms > {args.max_diagnose_ms:.2f} ms")
    if max_tree > float(args.max_tree_ms):
        failures.append(f"max tree build {max_tree:.2f} ms > {args.max_tree_ms:.2f} ms")
    if peak_bytes > int(float(args.max_peak_mib) * 1024 * 1024):
        failures.append(f"peak traced memory {_fmt_bytes(peak_bytes)} > {args.max_peak_mib:.2f} MiB")

    if failures:
        print("perf_smoke strict gate: FAIL")
        for failure in failures:
            print(f"- {failure}")
        return 1

    print("perf_smoke strict gate: PASS")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
