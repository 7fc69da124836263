"""Command-line interface for the Brevis front-end."""

import argparse
import sys
from pathlib import Path


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="brevisc",
        description="Brevis front-end: parse .brevis files and run name analysis",
    )
    parser.add_argument("input", help="Input .brevis file")
    parser.add_argument(
        "--dump-ast", action="store_true", help="Dump the AST and exit"
    )
    parser.add_argument(
        "--dump-symbols", action="store_true",
        help="Print the global symbol table after name analysis",
    )
    parser.add_argument(
        "--version", action="version", version="brevisc 0.1.0"
    )

    args = parser.parse_args(argv)

    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Error: file not found: {input_path}", file=sys.stderr)
        sys.exit(1)

    source = input_path.read_text(encoding="utf-8")

    from brevisc.compiler import compile_source
    from brevisc.analysis.errors import ScopeStackEmptyError

    try:
        result = compile_source(
            source,
            source_name=input_path.name,
            dump_ast=args.dump_ast,
            dump_symbols=args.dump_symbols,
        )
    except ScopeStackEmptyError as e:
        print(f"Internal error: {e}", file=sys.stderr)
        sys.exit(2)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    for diag in result.diagnostics:
        print(f"{input_path.name}:{diag}", file=sys.stderr)

    if not result.ok:
        count = result.diagnostics.error_count
        print(f"{count} error{'s' if count != 1 else ''} in {input_path.name}", file=sys.stderr)
        sys.exit(1)
