"""Shared exception classes and expected-error tuple for services/core."""

from __future__ import annotations

from typing import Any, TypeAlias


class AppError(Exception):
    """Base class for expected application-layer failures."""


class AppRuntimeError(RuntimeError, AppError):
    """Raised for runtime operation failures with user-facing context."""


class InvalidJsonError(ValueError, AppError):
    """Raised by helpers that need a decodable document (format/minify)."""

    def __init__(self, message: str, diagnostics: Any = ()) -> None:
        super().__init__(message)
        self.diagnostics = tuple(diagnostics or ())


class PathResolutionError(KeyError, AppError):
    """Raised when a JSON-Path is malformed or does not resolve."""

    def __init__(self, path: Any, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason

    def __str__(self) -> str:
        return f"{self.path}: {self.reason}"


EXPECTED_ERRORS: TypeAlias = (
    OSError,
    ValueError,
    TypeError,
    RuntimeError,
    AttributeError,
    KeyError,
    IndexError,
    ImportError,
)
