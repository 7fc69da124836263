"""Lark Transformer that builds our AST from the parse tree."""

from __future__ import annotations
from pathlib import Path
from lark import Lark, Transformer, Token
from lark.exceptions import UnexpectedInput

from brevisc.parser.ast_nodes import (
    Program, VarDecl, FormalDecl, RecordDecl, FnDecl, FnBody,
    PrimitiveType, RecordType,
    AssignStmt, PostIncStmt, PostDecStmt, IfStmt, IfElseStmt, WhileStmt,
    ReadStmt, WriteStmt, CallStmt, ReturnStmt,
    BoolLit, IntLit, StrLit, IdNode, DotAccess, AssignExpr, CallExpr,
    UnaryOp, BinaryOp, SourceLocation,
    INTEGER, BOOLEAN, VOID,
)

_GRAMMAR_PATH = Path(__file__).parent.parent / "grammar" / "brevis.lark"

_parser = Lark(
    _GRAMMAR_PATH.read_text(encoding="utf-8"),
    parser="earley",
    propagate_positions=True,
)


class BrevisSyntaxError(Exception):
    def __init__(self, message: str, line: int | None = None, column: int | None = None):
        super().__init__(message)
        self.line = line
        self.column = column


def _tok_loc(tok: Token) -> SourceLocation | None:
    if tok is not None and hasattr(tok, "line"):
        return SourceLocation(tok.line, tok.column)
    return None


def _split_block(items) -> tuple[list, list]:
    decls = [a for a in items if isinstance(a, VarDecl)]
    stmts = [a for a in items if not isinstance(a, VarDecl)]
    return decls, stmts


class BrevisTransformer(Transformer):
    # --- Program ---

    def start(self, items):
        return Program(list(items))

    # --- Declarations ---

    def var_decl(self, args):
        return VarDecl(args[0], args[1])

    def record_decl(self, args):
        name = args[0]
        fields = [a for a in args[1:] if isinstance(a, VarDecl)]
        return RecordDecl(name, fields)

    def fn_decl(self, args):
        ret_type, name = args[0], args[1]
        formals = []
        body = FnBody()
        for a in args[2:]:
            if isinstance(a, list):
                formals = a
            elif isinstance(a, FnBody):
                body = a
        return FnDecl(ret_type, name, formals, body)

    def formals(self, args):
        return list(args)

    def formal_decl(self, args):
        return FormalDecl(args[0], args[1])

    def fn_body(self, args):
        decls, stmts = _split_block(args)
        return FnBody(decls, stmts)

    def block(self, args):
        return _split_block(args)

    # --- Types ---

    def integer_type(self, args):
        return PrimitiveType(INTEGER)

    def boolean_type(self, args):
        return PrimitiveType(BOOLEAN)

    def void_type(self, args):
        return PrimitiveType(VOID)

    def record_type(self, args):
        return RecordType(args[0])

    # --- Statements ---

    def assign_stmt(self, args):
        return AssignStmt(args[0])

    def post_inc_stmt(self, args):
        return PostIncStmt(args[0])

    def post_dec_stmt(self, args):
        return PostDecStmt(args[0])

    def if_stmt(self, args):
        condition, (decls, stmts) = args[0], args[1]
        return IfStmt(condition, decls, stmts)

    def if_else_stmt(self, args):
        condition = args[0]
        then_decls, then_stmts = args[1]
        else_decls, else_stmts = args[2]
        return IfElseStmt(condition, then_decls, then_stmts, else_decls, else_stmts)

    def while_stmt(self, args):
        condition, (decls, stmts) = args[0], args[1]
        return WhileStmt(condition, decls, stmts)

    def read_stmt(self, args):
        return ReadStmt(args[0])

    def write_stmt(self, args):
        return WriteStmt(args[0])

    def call_stmt(self, args):
        return CallStmt(args[0])

    def return_stmt(self, args):
        return ReturnStmt(args[0] if args else None)

    # --- Expressions ---

    def assign_exp(self, args):
        return AssignExpr(args[0], args[1])

    def or_exp(self, args):
        return _left_assoc(args, "||")

    def and_exp(self, args):
        return _left_assoc(args, "&&")

    def rel_exp(self, args):
        return _left_assoc_ops(args)

    def add_exp(self, args):
        return _left_assoc_ops(args)

    def mul_exp(self, args):
        return _left_assoc_ops(args)

    def neg_exp(self, args):
        return UnaryOp("-", args[0])

    def not_exp(self, args):
        return UnaryOp("\\", args[0])

    def true_lit(self, args):
        return BoolLit(True)

    def false_lit(self, args):
        return BoolLit(False)

    def int_lit(self, args):
        return IntLit(int(args[0]), _tok_loc(args[0]))

    def str_lit(self, args):
        return StrLit(str(args[0]), _tok_loc(args[0]))

    def call_exp(self, args):
        callee = args[0]
        call_args = args[1] if len(args) > 1 and isinstance(args[1], list) else []
        return CallExpr(callee, call_args)

    def actuals(self, args):
        return list(args)

    def dot_access(self, args):
        return DotAccess(args[0], args[1])

    def ident(self, args):
        return IdNode(str(args[0]), _tok_loc(args[0]))


def _left_assoc(args, op):
    result = args[0]
    for i in range(1, len(args)):
        result = BinaryOp(op, result, args[i])
    return result


def _left_assoc_ops(args):
    """Handle interleaved value/op/value/op/value lists."""
    if len(args) == 1:
        return args[0]
    result = args[0]
    i = 1
    while i < len(args):
        op = str(args[i])
        right = args[i + 1]
        result = BinaryOp(op, result, right)
        i += 2
    return result


def parse_brevis(source: str) -> Program:
    try:
        tree = _parser.parse(source)
    except UnexpectedInput as e:
        line = getattr(e, "line", None)
        column = getattr(e, "column", None)
        raise BrevisSyntaxError(f"Syntax error: {e}", line, column) from e
    return BrevisTransformer().transform(tree)
