"""Name analysis for Brevis programs.

Walks the AST depth-first, maintaining a ``ScopeStack``: declarations are
entered into the innermost scope, every identifier used as a value is
resolved against the visible scopes and gets its ``Symbol`` attached
(``IdNode.sym``). Semantic errors are reported to a ``DiagnosticSink`` and
the walk continues, so one run yields every diagnostic in the program.

Record type names live in their own namespace, separate from variables and
functions, so ``record Point`` and a variable ``Point`` can coexist.
"""

from __future__ import annotations
from types import MappingProxyType

from brevisc.parser.ast_nodes import (
    Program, VarDecl, FormalDecl, RecordDecl, FnDecl,
    RecordType, VOID,
    AssignStmt, PostIncStmt, PostDecStmt, IfStmt, IfElseStmt, WhileStmt,
    ReadStmt, WriteStmt, CallStmt, ReturnStmt,
    BoolLit, IntLit, StrLit, IdNode, DotAccess, AssignExpr, CallExpr,
    UnaryOp, BinaryOp,
)
from brevisc.analysis.errors import (
    SemanticError, DuplicateNameError, UndeclaredIdentifierError,
    VoidVariableError, InvalidRecordTypeError, NonRecordDotAccessError,
    InvalidFieldNameError, DiagnosticSink,
)
from brevisc.analysis.symbols import Symbol, SymbolKind, Namespace, ScopeStack


def analyze_names(program: Program, diagnostics: DiagnosticSink | None = None) -> DiagnosticSink:
    analyzer = NameAnalyzer(program, diagnostics)
    return analyzer.analyze()


class NameAnalyzer:
    def __init__(self, program: Program, diagnostics: DiagnosticSink | None = None,
                 scopes: ScopeStack | None = None):
        self.program = program
        self.diagnostics = diagnostics if diagnostics is not None else DiagnosticSink()
        self.scopes = scopes if scopes is not None else ScopeStack()

    def analyze(self) -> DiagnosticSink:
        # The stack's initial frame is the global scope.
        for decl in self.program.decls:
            self._analyze_decl(decl)
        return self.diagnostics

    def _report(self, error: type[SemanticError], ident: IdNode) -> None:
        line, column = (ident.loc.line, ident.loc.column) if ident.loc else (0, 0)
        self.diagnostics.report(line, column, error.message, error)

    def _declare(self, ident: IdNode, sym: Symbol, namespace: Namespace = Namespace.NAMES) -> None:
        try:
            self.scopes.declare(ident.name, sym, namespace)
        except DuplicateNameError:
            self._report(DuplicateNameError, ident)

    # --- Declarations ---

    def _analyze_decl(self, decl) -> None:
        if isinstance(decl, (VarDecl, FormalDecl)):
            self._declare_variable(decl.type, decl.ident)
        elif isinstance(decl, RecordDecl):
            self._analyze_record_decl(decl)
        elif isinstance(decl, FnDecl):
            self._analyze_fn_decl(decl)
        else:
            raise TypeError(f"Unknown declaration type: {type(decl).__name__}")

    def _declare_variable(self, type_node, ident: IdNode) -> None:
        if isinstance(type_node, RecordType):
            record_id = type_node.ident
            record = self.scopes.lookup(record_id.name, Namespace.RECORDS)
            if record is None:
                self._report(InvalidRecordTypeError, ident)
                return
            record_id.sym = record
            # Aliases the record's field table, never copies it.
            sym = Symbol(record_id.name, SymbolKind.RECORD, fields=record.fields)
        elif type_node.name == VOID:
            self._report(VoidVariableError, ident)
            return
        else:
            sym = Symbol(type_node.name)
        ident.sym = sym
        self._declare(ident, sym)

    def _analyze_record_decl(self, decl: RecordDecl) -> None:
        # Fields are declared into a throwaway frame that catches duplicates;
        # whatever survives becomes the record's field table.
        self.scopes.open_scope()
        for member in decl.fields:
            self._declare_variable(member.type, member.ident)
        frame = self.scopes.close_scope()

        sym = Symbol(decl.ident.name, SymbolKind.RECORD, fields=MappingProxyType(frame.names))
        decl.ident.sym = sym
        self._declare(decl.ident, sym, Namespace.RECORDS)

    def _analyze_fn_decl(self, decl: FnDecl) -> None:
        name = decl.ident.name
        formal_types = [f.type.type_name for f in decl.formals]
        sym = Symbol(decl.return_type.type_name, SymbolKind.FUNCTION, formal_types=formal_types)

        prior = self.scopes.lookup_local(name)
        if prior is None:
            self._declare(decl.ident, sym)
        elif not prior.is_function or prior.formal_types == formal_types:
            self._report(DuplicateNameError, decl.ident)
        # Any other signature is accepted as an overload, but the name stays
        # bound to the earlier declaration.
        decl.ident.sym = sym

        # Formals and body locals share a single frame.
        self.scopes.open_scope()
        for formal in decl.formals:
            self._declare_variable(formal.type, formal.ident)
        for local in decl.body.decls:
            self._analyze_decl(local)
        for stmt in decl.body.stmts:
            self._analyze_stmt(stmt)
        self.scopes.close_scope()

    # --- Statements ---

    def _analyze_block(self, decls, stmts) -> None:
        self.scopes.open_scope()
        for decl in decls:
            self._analyze_decl(decl)
        for stmt in stmts:
            self._analyze_stmt(stmt)
        self.scopes.close_scope()

    def _analyze_stmt(self, stmt) -> None:
        if isinstance(stmt, AssignStmt):
            self._analyze_expr(stmt.assign)

        elif isinstance(stmt, (PostIncStmt, PostDecStmt, ReadStmt)):
            self._analyze_expr(stmt.target)

        elif isinstance(stmt, WriteStmt):
            self._analyze_expr(stmt.value)

        elif isinstance(stmt, CallStmt):
            self._analyze_expr(stmt.call)

        elif isinstance(stmt, ReturnStmt):
            if stmt.value is not None:
                self._analyze_expr(stmt.value)

        elif isinstance(stmt, IfStmt):
            self._analyze_expr(stmt.condition)
            self._analyze_block(stmt.decls, stmt.stmts)

        elif isinstance(stmt, IfElseStmt):
            self._analyze_expr(stmt.condition)
            self._analyze_block(stmt.then_decls, stmt.then_stmts)
            self._analyze_block(stmt.else_decls, stmt.else_stmts)

        elif isinstance(stmt, WhileStmt):
            self._analyze_expr(stmt.condition)
            self._analyze_block(stmt.decls, stmt.stmts)

        else:
            raise TypeError(f"Unknown statement type: {type(stmt).__name__}")

    # --- Expressions ---

    def _analyze_expr(self, expr) -> None:
        if isinstance(expr, (BoolLit, IntLit, StrLit)):
            return

        elif isinstance(expr, IdNode):
            self._resolve(expr)

        elif isinstance(expr, DotAccess):
            self._resolve_dot_access(expr)

        elif isinstance(expr, AssignExpr):
            self._analyze_expr(expr.target)
            self._analyze_expr(expr.value)

        elif isinstance(expr, CallExpr):
            self._resolve(expr.callee)
            for arg in expr.args:
                self._analyze_expr(arg)

        elif isinstance(expr, UnaryOp):
            self._analyze_expr(expr.operand)

        elif isinstance(expr, BinaryOp):
            self._analyze_expr(expr.left)
            self._analyze_expr(expr.right)

        else:
            raise TypeError(f"Unknown expression type: {type(expr).__name__}")

    def _resolve(self, ident: IdNode) -> Symbol | None:
        sym = self.scopes.lookup(ident.name)
        if sym is None:
            self._report(UndeclaredIdentifierError, ident)
        ident.sym = sym
        return sym

    def _resolve_dot_access(self, node: DotAccess) -> Symbol | None:
        """Resolve ``a.b.c`` left to right, returning the last field's Symbol.

        Every identifier along the chain gets its Symbol attached. A chain
        whose left part already failed stops without further reports.
        """
        if isinstance(node.base, DotAccess):
            owner = self._resolve_dot_access(node.base)
            owner_id = node.base.field
        elif isinstance(node.base, IdNode):
            owner = self._resolve(node.base)
            owner_id = node.base
        else:
            raise TypeError(f"Unsupported dot-access base: {type(node.base).__name__}")

        if owner is None:
            return None
        if not owner.is_record:
            self._report(NonRecordDotAccessError, owner_id)
            return None

        sym = owner.fields.get(node.field.name)
        if sym is None:
            self._report(InvalidFieldNameError, node.field)
            return None
        node.field.sym = sym
        return sym
