"""`jsonlens` command-line front end."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from typing import Any

from jsonlens.core import constants as app_constants
from jsonlens.core.exceptions import EXPECTED_ERRORS, InvalidJsonError, PathResolutionError
from jsonlens.core.settings import DiagnosticsSettings, load_settings
from jsonlens.services.json_engine import JSON_ENGINE
from jsonlens.services.tree_manager import TREE

_LOG = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_USAGE = 2


def _read_source(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return JSON_ENGINE.json_io_core.load_document(path)


def _format_diagnostic(diag: Any) -> str:
    where = f"{diag.line}:{diag.column}" if diag.position is not None else "-:-"
    line = f"{where} {diag.kind.value} {diag.message}"
    if diag.suggestion:
        line += f" [{diag.suggestion}]"
    return line


def _print_diagnostics(diagnostics: Any, as_json: bool = False, stream: Any = None) -> None:
    out = stream or sys.stdout
    if as_json:
        print(json.dumps([diag.to_dict() for diag in diagnostics], indent=2, ensure_ascii=False), file=out)
        return
    for diag in diagnostics:
        print(_format_diagnostic(diag), file=out)


def _settings_from_args(args: argparse.Namespace) -> DiagnosticsSettings:
    settings = load_settings()
    changes = {
        "max_diagnostics": getattr(args, "max_diagnostics", None),
        "expand_depth": getattr(args, "expand_depth", None),
    }
    if getattr(args, "reject_duplicate_keys", False):
        changes["reject_duplicate_keys"] = True
    return settings.with_overrides(**changes)


def cmd_check(args: argparse.Namespace, text: str, settings: DiagnosticsSettings) -> int:
    for warning in JSON_ENGINE.validation_service.payload_warnings(text, settings):
        print(f"warning: {warning}", file=sys.stderr)
    result = JSON_ENGINE.json_io_core.validate_json(text, settings)
    if result.is_valid:
        if args.json:
            print("[]")
        else:
            print("OK")
        return EXIT_OK
    _print_diagnostics(result.errors, as_json=args.json)
    return EXIT_INVALID


def _parse_or_report(text: str, settings: DiagnosticsSettings) -> Any:
    outcome = JSON_ENGINE.json_io_core.parse_json(text, settings)
    if not outcome.is_valid:
        _print_diagnostics(outcome.diagnostics, stream=sys.stderr)
    return outcome


def cmd_tree(args: argparse.Namespace, text: str, settings: DiagnosticsSettings) -> int:
    outcome = _parse_or_report(text, settings)
    if not outcome.is_valid:
        return EXIT_INVALID
    engine = TREE.tree_engine_service
    nodes = engine.generate_tree(outcome.value, settings.expand_depth)
    if args.all:
        nodes = engine.toggle_all_nodes(nodes, True)
    if args.search:
        rows = TREE.json_navigation_core.search_tree(nodes, args.search, case_sensitive=args.case_sensitive)
    else:
        rows = tuple(engine.iter_visible_nodes(nodes))
    for node in rows:
        marker = "-" if node.expanded or not node.children else "+"
        indent = "" if args.search else "  " * node.depth
        print(f"{indent}{marker} {node.key}: {engine.display_value(node)}  {node.path}")
    return EXIT_OK


def cmd_get(args: argparse.Namespace, text: str, settings: DiagnosticsSettings) -> int:
    outcome = _parse_or_report(text, settings)
    if not outcome.is_valid:
        return EXIT_INVALID
    try:
        value = TREE.json_navigation_core.resolve_path(outcome.value, args.path)
    except PathResolutionError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_INVALID
    print(json.dumps(value, indent=2, ensure_ascii=False))
    return EXIT_OK


def cmd_stats(args: argparse.Namespace, text: str, settings: DiagnosticsSettings) -> int:
    outcome = JSON_ENGINE.json_io_core.parse_json(text, settings)
    doc_stats = JSON_ENGINE.json_io_core.document_stats(text, settings, outcome=outcome)
    payload = doc_stats.to_dict()
    if outcome.is_valid:
        tree_stats = TREE.tree_engine_service.get_tree_stats(TREE.tree_engine_service.generate_tree(outcome.value))
        payload["tree"] = tree_stats.to_dict()
    if args.json:
        print(json.dumps(payload, indent=2))
    else:
        for key, item in payload.items():
            print(f"{key}: {json.dumps(item)}")
    return EXIT_OK if doc_stats.is_valid else EXIT_INVALID


def cmd_format(args: argparse.Namespace, text: str, settings: DiagnosticsSettings) -> int:
    try:
        print(JSON_ENGINE.json_io_core.format_json(text, indent=args.indent, sort_keys=args.sort_keys))
    except InvalidJsonError as exc:
        _print_diagnostics(exc.diagnostics, stream=sys.stderr)
        return EXIT_INVALID
    return EXIT_OK


def cmd_minify(args: argparse.Namespace, text: str, settings: DiagnosticsSettings) -> int:
    try:
        print(JSON_ENGINE.json_io_core.minify_json(text))
    except InvalidJsonError as exc:
        _print_diagnostics(exc.diagnostics, stream=sys.stderr)
        return EXIT_INVALID
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=app_constants.APP_NAME,
        description="Diagnose near-JSON text and explore valid documents as a path-addressed tree.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {app_constants.APP_VERSION}")
    parser.add_argument(
        "--log-level",
        default=os.getenv(app_constants.ENV_LOG_LEVEL, "WARNING"),
        help=f"Logging level (default from {app_constants.ENV_LOG_LEVEL}, else WARNING).",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    def _add_file(sub):
        sub.add_argument("file", help="JSON file (plain or gzip); '-' reads stdin")

    p_check = subparsers.add_parser("check", help="Validate a document and list diagnostics")
    _add_file(p_check)
    p_check.add_argument("--json", action="store_true", help="Emit diagnostics as JSON")
    p_check.add_argument("--max-diagnostics", type=int, help="Cap on reported diagnostics")
    p_check.add_argument(
        "--reject-duplicate-keys",
        action="store_true",
        help="Treat repeated object keys as errors",
    )
    p_check.set_defaults(func=cmd_check)

    p_tree = subparsers.add_parser("tree", help="Print the node tree with JSON-Paths")
    _add_file(p_tree)
    p_tree.add_argument("--expand-depth", type=int, help="Depth below which nodes start expanded")
    p_tree.add_argument("--all", action="store_true", help="Expand every node")
    p_tree.add_argument("--search", help="Only print nodes whose key or value contains this text")
    p_tree.add_argument("--case-sensitive", action="store_true")
    p_tree.set_defaults(func=cmd_tree)

    p_get = subparsers.add_parser("get", help="Print the value at a JSON-Path")
    _add_file(p_get)
    p_get.add_argument("path", help="JSON-Path such as $.items[0].name")
    p_get.set_defaults(func=cmd_get)

    p_stats = subparsers.add_parser("stats", help="Print document and tree statistics")
    _add_file(p_stats)
    p_stats.add_argument("--json", action="store_true")
    p_stats.set_defaults(func=cmd_stats)

    p_format = subparsers.add_parser("format", help="Pretty-print a valid document")
    _add_file(p_format)
    p_format.add_argument("--indent", type=int, default=2)
    p_format.add_argument("--sort-keys", action="store_true")
    p_format.set_defaults(func=cmd_format)

    p_minify = subparsers.add_parser("minify", help="Compact a valid document")
    _add_file(p_minify)
    p_minify.set_defaults(func=cmd_minify)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    level = logging.getLevelName(str(args.log_level or "WARNING").upper())
    logging.basicConfig(
        level=level if isinstance(level, int) else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        text = _read_source(args.file)
    except EXPECTED_ERRORS as exc:
        _LOG.debug("expected_error", exc_info=exc)
        print(f"error: cannot read {args.file}: {exc}", file=sys.stderr)
        return EXIT_USAGE
    return args.func(args, text, _settings_from_args(args))


if __name__ == "__main__":
    raise SystemExit(main())
