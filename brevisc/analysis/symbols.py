"""Symbols and the scoped symbol table."""

from __future__ import annotations
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from brevisc.analysis.errors import DuplicateNameError, ScopeStackEmptyError


class SymbolKind(Enum):
    PLAIN = "plain"
    RECORD = "record"
    FUNCTION = "function"


class Namespace(Enum):
    NAMES = "names"
    RECORDS = "records"


@dataclass(eq=False)
class Symbol:
    type: str  # "integer", "boolean", "void" or a record type name
    kind: SymbolKind = SymbolKind.PLAIN
    fields: Optional[Mapping[str, Symbol]] = None  # records only, shared by aliases
    formal_types: Optional[list[str]] = None  # functions only

    def __post_init__(self):
        if (self.fields is not None) != (self.kind is SymbolKind.RECORD):
            raise ValueError(f"Field table must be given exactly for record symbols, got {self.kind.name}")
        if (self.formal_types is not None) != (self.kind is SymbolKind.FUNCTION):
            raise ValueError(f"Formal types must be given exactly for function symbols, got {self.kind.name}")

    @property
    def is_record(self) -> bool:
        return self.kind is SymbolKind.RECORD

    @property
    def is_function(self) -> bool:
        return self.kind is SymbolKind.FUNCTION

    def describe(self) -> str:
        if self.is_function:
            return f"{','.join(self.formal_types)}->{self.type}"
        if self.is_record:
            return f"record {self.type}({', '.join(self.fields)})"
        return self.type

    def __str__(self) -> str:
        return self.type


@dataclass
class ScopeFrame:
    names: dict[str, Symbol] = field(default_factory=dict)
    records: dict[str, Symbol] = field(default_factory=dict)

    def table(self, namespace: Namespace) -> dict[str, Symbol]:
        if namespace is Namespace.RECORDS:
            return self.records
        return self.names


class ScopeStack:
    """Stack of scope frames. Starts with the global frame."""

    def __init__(self):
        self._frames: list[ScopeFrame] = [ScopeFrame()]

    @property
    def depth(self) -> int:
        return len(self._frames)

    @property
    def innermost(self) -> ScopeFrame:
        self._check_not_empty()
        return self._frames[-1]

    def open_scope(self) -> None:
        self._frames.append(ScopeFrame())

    def close_scope(self) -> ScopeFrame:
        self._check_not_empty()
        return self._frames.pop()

    def declare(self, name: str, sym: Symbol, namespace: Namespace = Namespace.NAMES) -> None:
        table = self.innermost.table(namespace)
        if name in table:
            raise DuplicateNameError(f"'{name}' is already declared in this scope")
        table[name] = sym

    def lookup_local(self, name: str, namespace: Namespace = Namespace.NAMES) -> Symbol | None:
        return self.innermost.table(namespace).get(name)

    def lookup(self, name: str, namespace: Namespace = Namespace.NAMES) -> Symbol | None:
        self._check_not_empty()
        for frame in self:
            sym = frame.table(namespace).get(name)
            if sym is not None:
                return sym
        return None

    def __iter__(self):
        # innermost first
        return reversed(self._frames)

    def _check_not_empty(self) -> None:
        if not self._frames:
            raise ScopeStackEmptyError("Scope stack is empty")

    def format(self) -> str:
        lines = ["--- Symbol Table ---"]
        for depth, frame in zip(range(self.depth - 1, -1, -1), self):
            lines.append(f"scope {depth}:")
            for name, sym in frame.records.items():
                lines.append(f"  record {name}: {sym.describe()}")
            for name, sym in frame.names.items():
                lines.append(f"  {name}: {sym.describe()}")
        return "\n".join(lines)
