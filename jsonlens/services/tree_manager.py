"""Tree domain module."""

from jsonlens.core.domain_impl.json import json_navigation_core
from jsonlens.core.domain_impl.tree import tree_engine_service


class TreeManager:
    tree_engine_service = tree_engine_service
    json_navigation_core = json_navigation_core


TREE = TreeManager()
