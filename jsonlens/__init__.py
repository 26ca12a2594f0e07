"""jsonlens: diagnostics for near-JSON text and a path-addressed tree view."""

from jsonlens.core.constants import APP_VERSION as __version__
from jsonlens.core.domain_impl.infra.analysis_worker import LatestResultWorker
from jsonlens.core.domain_impl.json.json_diagnostics_core import DiagnosticCollector
from jsonlens.core.domain_impl.json.json_io_core import (
    analyze_text,
    document_stats,
    find_duplicate_keys,
    format_json,
    load_document,
    minify_json,
    parse_json,
    validate_json,
)
from jsonlens.core.domain_impl.json.json_navigation_core import (
    find_node_by_path,
    parse_path,
    resolve_path,
    search_tree,
)
from jsonlens.core.domain_impl.tree.tree_engine_service import (
    generate_tree,
    get_tree_stats,
    toggle_all_nodes,
    toggle_node_expansion,
)
from jsonlens.core.exceptions import AppError, InvalidJsonError, PathResolutionError
from jsonlens.core.json_diagnostics import position_from_offset
from jsonlens.core.models import (
    Diagnostic,
    DiagnosticKind,
    DocumentStats,
    Invalid,
    ParseOutcome,
    SourcePosition,
    TreeNode,
    TreeStats,
    Valid,
    ValidationResult,
)
from jsonlens.core.settings import DEFAULT_SETTINGS, DiagnosticsSettings, load_settings

__all__ = [
    "__version__",
    "AppError",
    "DEFAULT_SETTINGS",
    "Diagnostic",
    "DiagnosticCollector",
    "DiagnosticKind",
    "DiagnosticsSettings",
    "DocumentStats",
    "Invalid",
    "InvalidJsonError",
    "LatestResultWorker",
    "ParseOutcome",
    "PathResolutionError",
    "SourcePosition",
    "TreeNode",
    "TreeStats",
    "Valid",
    "ValidationResult",
    "analyze_text",
    "document_stats",
    "find_duplicate_keys",
    "find_node_by_path",
    "format_json",
    "generate_tree",
    "get_tree_stats",
    "load_document",
    "load_settings",
    "minify_json",
    "parse_json",
    "parse_path",
    "position_from_offset",
    "resolve_path",
    "search_tree",
    "toggle_all_nodes",
    "toggle_node_expansion",
    "validate_json",
]
