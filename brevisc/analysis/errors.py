"""Semantic error taxonomy and the diagnostic sink used by name analysis.

Semantic errors are not fatal: the analyzer reports each one through a
``DiagnosticSink`` and keeps walking the tree. The error classes double as
diagnostic categories, so callers can ask the sink for every diagnostic of a
given kind. ``DuplicateNameError`` is also raised by ``ScopeStack.declare``.

``ScopeStackEmptyError`` is different: it signals a broken scope discipline
in the analyzer itself, never a problem in the user's program.
"""

from __future__ import annotations
from dataclasses import dataclass


class SemanticError(Exception):
    message = "Semantic error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)


class DuplicateNameError(SemanticError):
    message = "Identifier multiply-declared"


class UndeclaredIdentifierError(SemanticError):
    message = "Identifier undeclared"


class VoidVariableError(SemanticError):
    message = "Non-function declared void"


class InvalidRecordTypeError(SemanticError):
    message = "Name of record type invalid"


class NonRecordDotAccessError(SemanticError):
    message = "Dot-access of non-record type"


class InvalidFieldNameError(SemanticError):
    message = "Record field name invalid"


class ScopeStackEmptyError(RuntimeError):
    pass


@dataclass
class Diagnostic:
    line: int
    column: int
    message: str
    error: type[SemanticError] = SemanticError

    def __str__(self) -> str:
        return f"{self.line}:{self.column} ***ERROR*** {self.message}"


class DiagnosticSink:
    """Collects diagnostics in the order they are reported."""

    def __init__(self):
        self.diagnostics: list[Diagnostic] = []

    def report(self, line: int, column: int, message: str,
               error: type[SemanticError] = SemanticError) -> None:
        self.diagnostics.append(Diagnostic(line, column, message, error))

    @property
    def error_count(self) -> int:
        return len(self.diagnostics)

    def of_type(self, error: type[SemanticError]) -> list[Diagnostic]:
        return [d for d in self.diagnostics if issubclass(d.error, error)]

    def __iter__(self):
        return iter(self.diagnostics)

    def __len__(self) -> int:
        return len(self.diagnostics)
