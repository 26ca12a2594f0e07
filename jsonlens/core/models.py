"""Value records shared by the diagnostics and tree engines."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TypeAlias


class DiagnosticKind(str, Enum):
    """Closed set of diagnostic identifiers; values are stable strings."""

    SYNTAX_ERROR = "SYNTAX_ERROR"
    UNEXPECTED_TOKEN = "UNEXPECTED_TOKEN"
    UNEXPECTED_END = "UNEXPECTED_END"
    UNTERMINATED_STRING = "UNTERMINATED_STRING"
    INVALID_CHARACTER = "INVALID_CHARACTER"
    INVALID_ESCAPE_SEQUENCE = "INVALID_ESCAPE_SEQUENCE"
    INVALID_UNICODE_ESCAPE = "INVALID_UNICODE_ESCAPE"
    INVALID_NUMBER = "INVALID_NUMBER"
    TRAILING_COMMA = "TRAILING_COMMA"
    DUPLICATE_KEY = "DUPLICATE_KEY"
    INVALID_VALUE = "INVALID_VALUE"
    NEWLINE_IN_STRING = "NEWLINE_IN_STRING"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class SourcePosition:
    """1-based line/column plus the 0-based character offset they came from."""

    line: int
    column: int
    offset: int


@dataclass(frozen=True, slots=True)
class Diagnostic:
    kind: DiagnosticKind
    message: str
    position: SourcePosition | None = None
    suggestion: str | None = None

    @property
    def line(self) -> int | None:
        return self.position.line if self.position else None

    @property
    def column(self) -> int | None:
        return self.position.column if self.position else None

    @property
    def offset(self) -> int | None:
        return self.position.offset if self.position else None

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "line": self.line,
            "column": self.column,
            "offset": self.offset,
            "suggestion": self.suggestion,
        }


@dataclass(frozen=True, slots=True)
class Valid:
    """Decoded document."""

    value: Any
    is_valid: bool = field(default=True, init=False)

    @property
    def diagnostics(self) -> tuple[Diagnostic, ...]:
        return ()


@dataclass(frozen=True, slots=True)
class Invalid:
    """Rejected document with at least one diagnostic."""

    diagnostics: tuple[Diagnostic, ...]
    is_valid: bool = field(default=False, init=False)

    @property
    def value(self) -> None:
        return None


ParseOutcome: TypeAlias = Valid | Invalid


@dataclass(frozen=True, slots=True)
class ValidationResult:
    is_valid: bool
    errors: tuple[Diagnostic, ...] = ()


@dataclass(frozen=True, slots=True)
class TreeNode:
    """Immutable tree snapshot node; containers carry value=None."""

    id: str
    key: str
    value: Any
    type: str
    path: str
    children: tuple["TreeNode", ...] = ()
    expanded: bool = False
    depth: int = 0

    @property
    def is_leaf(self) -> bool:
        return not self.children


@dataclass(frozen=True, slots=True)
class TreeStats:
    total_nodes: int
    max_depth: int
    type_counts: dict[str, int]
    leaf_nodes: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalNodes": self.total_nodes,
            "maxDepth": self.max_depth,
            "typeCounts": dict(self.type_counts),
            "leafNodes": self.leaf_nodes,
        }


@dataclass(frozen=True, slots=True)
class DocumentStats:
    characters: int
    lines: int
    size_bytes: int
    is_valid: bool
    type_counts: dict[str, int] | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "characters": self.characters,
            "lines": self.lines,
            "size": self.size_bytes,
            "isValid": self.is_valid,
        }
        if self.type_counts is not None:
            payload["types"] = dict(self.type_counts)
        return payload
