"""JSON domain package exports."""

from __future__ import annotations

from . import json_diagnostics_core
from . import json_error_diag_service
from . import json_io_core
from . import json_navigation_core
from . import validation_service

__all__ = [
    "json_io_core",
    "json_diagnostics_core",
    "json_error_diag_service",
    "json_navigation_core",
    "validation_service",
]
