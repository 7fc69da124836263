"""Top-level compiler orchestration."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from brevisc.parser.ast_nodes import Program
from brevisc.parser.tree_builder import parse_brevis
from brevisc.analysis.errors import DiagnosticSink
from brevisc.analysis.name_analyzer import NameAnalyzer
from brevisc.analysis.symbols import ScopeStack


@dataclass
class CompileResult:
    program: Program
    diagnostics: DiagnosticSink
    scopes: Optional[ScopeStack] = None

    @property
    def ok(self) -> bool:
        return self.diagnostics.error_count == 0


def compile_source(
    source: str,
    source_name: str = "",
    dump_ast: bool = False,
    dump_symbols: bool = False,
) -> CompileResult:
    program = parse_brevis(source)

    if dump_ast:
        _dump_ast(program)
        return CompileResult(program, DiagnosticSink())

    analyzer = NameAnalyzer(program)
    diagnostics = analyzer.analyze()

    if dump_symbols:
        if source_name:
            print(f"// {source_name}")
        print(analyzer.scopes.format())

    return CompileResult(program, diagnostics, analyzer.scopes)


def _dump_ast(program):
    import dataclasses, json

    def _ser(obj):
        if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
            d = {"_type": type(obj).__name__}
            d.update({f.name: _ser(getattr(obj, f.name)) for f in dataclasses.fields(obj)})
            return d
        if isinstance(obj, (list, tuple)):
            return [_ser(x) for x in obj]
        return obj

    print(json.dumps(_ser(program), indent=2, default=str))
