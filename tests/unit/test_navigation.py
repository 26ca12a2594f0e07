"""
Tests for tree search, path lookup and path resolution
"""
import pytest

from jsonlens.core.domain_impl.json.json_navigation_core import (
    find_node_by_path,
    parse_path,
    resolve_path,
    search_tree,
)
from jsonlens.core.domain_impl.tree.tree_engine_service import generate_tree, iter_nodes
from jsonlens.core.exceptions import AppError, PathResolutionError


def test_search_is_case_insensitive_by_default(sample_document):
    nodes = generate_tree(sample_document)
    assert [node.path for node in search_tree(nodes, "alice")] == ["$.Name"]
    assert [node.path for node in search_tree(nodes, "NAME")] == ["$.Name"]


def test_search_matches_container_rendering(sample_document):
    nodes = generate_tree(sample_document)
    assert [node.path for node in search_tree(nodes, "array(2)")] == ["$.tags"]


def test_search_case_sensitive(sample_document):
    nodes = generate_tree(sample_document)
    assert search_tree(nodes, "alice", case_sensitive=True) == ()
    assert [node.path for node in search_tree(nodes, "Alice", case_sensitive=True)] == ["$.Name"]


def test_empty_query_matches_nothing(sample_document):
    assert search_tree(generate_tree(sample_document), "") == ()


def test_find_node_by_path(sample_document):
    nodes = generate_tree(sample_document)
    assert find_node_by_path(nodes, "$.tags[1]").value == "ops"
    assert find_node_by_path(nodes, '$.address["zip code"]').value == "0150"
    assert find_node_by_path(nodes, "$.missing") is None


def test_parse_path():
    assert parse_path("$") == []
    assert parse_path('$.a["b c"][0]') == ["a", "b c", 0]
    assert parse_path('$["q\\"k"].$x') == ['q"k', "$x"]


@pytest.mark.parametrize("path", ["a.b", "$.", "$[x]", '$["a"', "$[0", "$..a", "$ .a"])
def test_parse_path_rejects_malformed(path):
    with pytest.raises(PathResolutionError):
        parse_path(path)


def test_every_generated_path_resolves(sample_document):
    for node in iter_nodes(generate_tree(sample_document)):
        resolved = resolve_path(sample_document, node.path)
        if not node.children and node.type not in ("object", "array"):
            assert resolved == node.value


def test_resolve_path_with_escaped_key():
    value = {'q"k': {"x y": [10]}}
    assert resolve_path(value, '$["q\\"k"]["x y"][0]') == 10


def test_resolve_missing_member_raises_key_error():
    with pytest.raises(PathResolutionError) as excinfo:
        resolve_path({"a": [1]}, "$.a[5]")
    assert isinstance(excinfo.value, KeyError)
    assert isinstance(excinfo.value, AppError)
    assert "no such member" in str(excinfo.value)
