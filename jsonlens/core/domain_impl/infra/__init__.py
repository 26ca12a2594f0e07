"""Infra domain package exports."""

from __future__ import annotations

from . import analysis_worker

__all__ = [
    "analysis_worker",
]
