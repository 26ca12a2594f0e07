"""Consolidated JSON domain pillar: json_navigation_core.

Find helpers over tree snapshots plus JSON-Path parsing/resolution against
decoded values.
"""

import json
import re
from typing import Any

from jsonlens.core import constants as app_constants
from jsonlens.core.domain_impl.tree import tree_engine_service
from jsonlens.core.exceptions import PathResolutionError
from jsonlens.core.models import TreeNode

_IDENTIFIER_KEY_RE = re.compile(app_constants.TREE_IDENTIFIER_KEY_PATTERN)
_INDEX_RE = re.compile(r"\d+")
_STRING_DECODER = json.JSONDecoder()


# --- Tree find ---


def search_tree(nodes: Any, query: Any, case_sensitive: bool = False) -> tuple[TreeNode, ...]:
    """Depth-first nodes whose key or rendered value contains the query."""
    needle = str(query or "")
    if not needle:
        return ()
    if not case_sensitive:
        needle = needle.casefold()

    matches = []
    for node in tree_engine_service.iter_nodes(nodes):
        haystacks = (node.key, tree_engine_service.display_value(node))
        if not case_sensitive:
            haystacks = tuple(text.casefold() for text in haystacks)
        if any(needle in text for text in haystacks):
            matches.append(node)
    return tuple(matches)


def find_node_by_path(nodes: Any, path: Any) -> TreeNode | None:
    """First node whose path equals `path` exactly, or None."""
    target = str(path or "")
    stack = list(reversed(tuple(nodes or ())))
    while stack:
        node = stack.pop()
        if node.path == target:
            return node
        # Child paths always extend the parent path.
        if target.startswith(node.path):
            stack.extend(reversed(node.children))
    return None


# --- Path parse/resolve ---


def parse_path(path: Any) -> list[str | int]:
    """Split `$.a["b c"][0]` into `["a", "b c", 0]`."""
    text = str(path or "").strip()
    if not text.startswith(app_constants.TREE_ROOT_PATH):
        raise PathResolutionError(path, "path must start with '$'")
    tokens: list[str | int] = []
    idx = len(app_constants.TREE_ROOT_PATH)
    while idx < len(text):
        ch = text[idx]
        if ch == ".":
            match = _IDENTIFIER_KEY_RE.match(text, idx + 1)
            if not match:
                raise PathResolutionError(path, f"expected a member name at {idx + 1}")
            tokens.append(match.group(0))
            idx = match.end()
            continue
        if ch == "[":
            if text.startswith('"', idx + 1):
                try:
                    key, end = _STRING_DECODER.raw_decode(text, idx + 1)
                except ValueError:
                    raise PathResolutionError(path, f"malformed quoted member at {idx + 1}") from None
            else:
                match = _INDEX_RE.match(text, idx + 1)
                if not match:
                    raise PathResolutionError(path, f"expected an array index at {idx + 1}")
                key, end = int(match.group(0)), match.end()
            if not text.startswith("]", end):
                raise PathResolutionError(path, f"expected ']' at {end}")
            tokens.append(key)
            idx = end + 1
            continue
        raise PathResolutionError(path, f"unexpected character {ch!r} at {idx}")
    return tokens


_PATH_MISSING = object()


def _resolve_path_value(root: Any, path: list[Any]) -> Any:
    cursor = root
    for part in path:
        if isinstance(cursor, dict) and isinstance(part, str):
            if part not in cursor:
                return _PATH_MISSING
            cursor = cursor.get(part)
            continue
        if isinstance(cursor, list) and isinstance(part, int):
            if part < 0 or part >= len(cursor):
                return _PATH_MISSING
            cursor = cursor[part]
            continue
        return _PATH_MISSING
    return cursor


def resolve_path(value: Any, path: Any) -> Any:
    """Return the member of a decoded value addressed by a tree JSON-Path."""
    tokens = parse_path(path)
    resolved = _resolve_path_value(value, tokens)
    if resolved is _PATH_MISSING:
        raise PathResolutionError(path, "no such member")
    return resolved
