"""Tree engine: decoded value -> immutable node snapshot with JSON-Paths."""

from __future__ import annotations

import itertools
import json
import re
from dataclasses import replace
from typing import Any, Iterator

from jsonlens.core import constants as app_constants
from jsonlens.core.models import TreeNode, TreeStats

_IDENTIFIER_KEY_RE = re.compile(app_constants.TREE_IDENTIFIER_KEY_PATTERN)
_CONTAINER_TYPES = ("object", "array")


def value_type(value: Any) -> str:
    match value:
        case None:
            return "null"
        case bool():
            return "boolean"
        case int() | float():
            return "number"
        case str():
            return "string"
        case list() | tuple():
            return "array"
        case dict():
            return "object"
    return "string"


def child_path(parent_path: str, key: Any, is_index: bool = False) -> str:
    """Append one member or index step to a JSON-Path."""
    if is_index:
        return f"{parent_path}[{int(key)}]"
    text = str(key)
    if _IDENTIFIER_KEY_RE.fullmatch(text):
        return f"{parent_path}.{text}"
    return f"{parent_path}[{json.dumps(text, ensure_ascii=False)}]"


def display_value(node: TreeNode) -> str:
    """Text shown for a node's value; also the text search matches against."""
    match node.type:
        case "object":
            return f"Object({len(node.children)})"
        case "array":
            return f"Array({len(node.children)})"
        case "string":
            return f'"{node.value}"'
    return json.dumps(node.value, ensure_ascii=False)


def _iter_members(value: Any, node_type: str, path: str) -> Iterator[tuple[str, Any, str]]:
    if node_type == "object":
        for child_key, child_value in value.items():
            yield str(child_key), child_value, child_path(path, child_key)
    elif node_type == "array":
        for idx, child_value in enumerate(value):
            yield str(idx), child_value, child_path(path, idx, is_index=True)


def generate_tree(value: Any, expand_depth: int = app_constants.TREE_DEFAULT_EXPAND_DEPTH) -> tuple[TreeNode, ...]:
    """Build the node tree for a decoded value; always a single root node.

    Iterative, so any nesting depth the decoder accepts builds. Ids are
    assigned in pre-order.
    """
    counter = itertools.count(1)
    limit = int(expand_depth)

    def _open(key: str, item: Any, path: str, depth: int) -> list[Any]:
        node_id = f"{app_constants.TREE_NODE_ID_PREFIX}{next(counter)}"
        node_type = value_type(item)
        return [key, item, path, depth, node_id, node_type, _iter_members(item, node_type, path), []]

    stack = [_open(app_constants.TREE_ROOT_KEY, value, app_constants.TREE_ROOT_PATH, 0)]
    root = None
    while stack:
        frame = stack[-1]
        member = next(frame[6], None)
        if member is not None:
            stack.append(_open(member[0], member[1], member[2], frame[3] + 1))
            continue
        stack.pop()
        key, item, path, depth, node_id, node_type, _members, children = frame
        node = TreeNode(
            id=node_id,
            key=key,
            value=None if node_type in _CONTAINER_TYPES else item,
            type=node_type,
            path=path,
            children=tuple(children),
            expanded=depth < limit,
            depth=depth,
        )
        if stack:
            stack[-1][7].append(node)
        else:
            root = node
    return (root,)


def toggle_node_expansion(node: TreeNode) -> TreeNode:
    return replace(node, expanded=not node.expanded)


def toggle_all_nodes(nodes: tuple[TreeNode, ...] | list[TreeNode], expanded: bool) -> tuple[TreeNode, ...]:
    """Copy of the forest with every node's `expanded` set to one value."""
    flag = bool(expanded)
    top: list[TreeNode] = []
    # Each frame: (original node, iterator over its children, rebuilt children).
    stack: list[tuple[TreeNode, Iterator[TreeNode], list[TreeNode]]] = []
    for root in nodes:
        stack.append((root, iter(root.children), []))
        while stack:
            node, pending, rebuilt = stack[-1]
            child = next(pending, None)
            if child is not None:
                stack.append((child, iter(child.children), []))
                continue
            stack.pop()
            copy = replace(node, expanded=flag, children=tuple(rebuilt))
            if stack:
                stack[-1][2].append(copy)
            else:
                top.append(copy)
    return tuple(top)


def iter_nodes(nodes: Any) -> Iterator[TreeNode]:
    """Depth-first pre-order walk over a forest."""
    stack = list(reversed(tuple(nodes or ())))
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def iter_visible_nodes(nodes: Any) -> Iterator[TreeNode]:
    """Pre-order walk that does not descend into collapsed nodes."""
    stack = list(reversed(tuple(nodes or ())))
    while stack:
        node = stack.pop()
        yield node
        if node.expanded:
            stack.extend(reversed(node.children))


def get_tree_stats(nodes: Any) -> TreeStats:
    total = 0
    max_depth = 0
    leaves = 0
    type_counts: dict[str, int] = {}
    for node in iter_nodes(nodes):
        total += 1
        max_depth = max(max_depth, node.depth)
        type_counts[node.type] = type_counts.get(node.type, 0) + 1
        if not node.children:
            leaves += 1
    return TreeStats(total_nodes=total, max_depth=max_depth, type_counts=type_counts, leaf_nodes=leaves)
