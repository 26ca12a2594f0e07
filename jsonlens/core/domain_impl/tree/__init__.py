"""Tree domain package exports."""

from __future__ import annotations

from . import tree_engine_service

__all__ = [
    "tree_engine_service",
]
