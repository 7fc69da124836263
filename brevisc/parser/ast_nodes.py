"""AST node definitions for Brevis."""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from brevisc.analysis.symbols import Symbol


INTEGER = "integer"
BOOLEAN = "boolean"
VOID = "void"

PRIMITIVE_TYPES = frozenset({INTEGER, BOOLEAN, VOID})


@dataclass
class SourceLocation:
    line: int
    column: int


# --- Program ---

@dataclass
class Program:
    decls: list = field(default_factory=list)


# --- Types ---

@dataclass
class PrimitiveType:
    name: str  # "integer", "boolean" or "void"

    @property
    def type_name(self) -> str:
        return self.name


@dataclass
class RecordType:
    ident: IdNode

    @property
    def type_name(self) -> str:
        return self.ident.name


TypeNode = "PrimitiveType or RecordType"


# --- Declarations ---

@dataclass
class VarDecl:
    type: TypeNode
    ident: IdNode


@dataclass
class FormalDecl:
    type: TypeNode
    ident: IdNode


@dataclass
class RecordDecl:
    ident: IdNode
    fields: list[VarDecl] = field(default_factory=list)


@dataclass
class FnBody:
    decls: list[VarDecl] = field(default_factory=list)
    stmts: list = field(default_factory=list)


@dataclass
class FnDecl:
    return_type: TypeNode
    ident: IdNode
    formals: list[FormalDecl] = field(default_factory=list)
    body: FnBody = field(default_factory=FnBody)


# --- Statements ---

@dataclass
class AssignStmt:
    assign: AssignExpr


@dataclass
class PostIncStmt:
    target: Expr


@dataclass
class PostDecStmt:
    target: Expr


@dataclass
class IfStmt:
    condition: Expr
    decls: list[VarDecl] = field(default_factory=list)
    stmts: list = field(default_factory=list)


@dataclass
class IfElseStmt:
    condition: Expr
    then_decls: list[VarDecl] = field(default_factory=list)
    then_stmts: list = field(default_factory=list)
    else_decls: list[VarDecl] = field(default_factory=list)
    else_stmts: list = field(default_factory=list)


@dataclass
class WhileStmt:
    condition: Expr
    decls: list[VarDecl] = field(default_factory=list)
    stmts: list = field(default_factory=list)


@dataclass
class ReadStmt:
    target: Expr


@dataclass
class WriteStmt:
    value: Expr


@dataclass
class CallStmt:
    call: CallExpr


@dataclass
class ReturnStmt:
    value: Optional[Expr] = None


# --- Expressions ---

Expr = "any expression node"


@dataclass
class BoolLit:
    value: bool
    loc: Optional[SourceLocation] = None


@dataclass
class IntLit:
    value: int
    loc: Optional[SourceLocation] = None


@dataclass
class StrLit:
    value: str  # includes the surrounding quotes
    loc: Optional[SourceLocation] = None


@dataclass
class IdNode:
    name: str
    loc: Optional[SourceLocation] = None
    sym: Optional[Symbol] = None  # filled in by name analysis


@dataclass
class DotAccess:
    base: Expr  # IdNode or another DotAccess
    field: IdNode


@dataclass
class AssignExpr:
    target: Expr
    value: Expr


@dataclass
class CallExpr:
    callee: IdNode
    args: list[Expr] = field(default_factory=list)


@dataclass
class UnaryOp:
    op: str  # "-" or "\\"
    operand: Expr


@dataclass
class BinaryOp:
    op: str
    left: Expr
    right: Expr
