"""JSON diagnostics and document domain module."""

from jsonlens.core.domain_impl.json import json_diagnostics_core
from jsonlens.core.domain_impl.json import json_error_diag_service
from jsonlens.core.domain_impl.json import json_io_core
from jsonlens.core.domain_impl.json import validation_service
from jsonlens.core.domain_impl.infra import analysis_worker


class JsonEngine:
    json_diagnostics_core = json_diagnostics_core
    json_error_diag_service = json_error_diag_service
    json_io_core = json_io_core
    validation_service = validation_service
    analysis_worker = analysis_worker


JSON_ENGINE = JsonEngine()
