"""CLI entry point for the Lox interpreter.

Usage:
    python -m lox [-v|-vv|-vvv]                  start the REPL
    python -m lox [-v...] <script.lox>           run a script
    python -m lox [-v...] --emit-ast <script.lox>
    python -m lox [-v...] --ast <ast_json_file>

Options:
  -v            Increase debug verbosity (can be repeated)
  --emit-ast    Parse the given .lox file and emit an AST JSON file
  --ast         Execute a previously emitted AST JSON file

Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero. Exit status follows sysexits: 65 for
syntax errors, 66 for a missing input file, 70 for runtime errors.
"""

import argparse
import json
import sys
from pathlib import Path

from .ast_json import program_from_obj, program_to_obj
from .session import EXIT_DATAERR, EXIT_NOINPUT, EXIT_OK, Session


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog='lox', description="Lox language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--emit-ast', metavar='LOX_FILE', help='emit AST JSON for the given .lox file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('script', nargs='?', help='Lox script to execute; omit to start the REPL')
    args = parser.parse_args(argv)

    session = Session(debug_level=args.v)
    try:
        # Emit AST mode
        if args.emit_ast:
            program_file = Path(args.emit_ast)
            if not program_file.exists():
                print(f"Error: file {program_file} not found", file=sys.stderr)
                return EXIT_NOINPUT
            with open(program_file, 'r', encoding='utf-8') as f:
                source = f.read()
            statements = session.parse(source)
            if session.reporter.had_error:
                return EXIT_DATAERR
            out_path = program_file.with_name(program_file.name + '.ast.json')
            with open(out_path, 'w', encoding='utf-8') as out:
                json.dump(program_to_obj(statements), out, ensure_ascii=False, indent=2)
            print(str(out_path))
            return EXIT_OK

        # Execute from AST JSON
        if args.ast:
            ast_path = Path(args.ast)
            if not ast_path.exists():
                print(f"Error: file {ast_path} not found", file=sys.stderr)
                return EXIT_NOINPUT
            with open(ast_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            try:
                statements = program_from_obj(data)
            except (TypeError, ValueError, KeyError) as e:
                print(f"Error: invalid AST file {ast_path}: {e}", file=sys.stderr)
                return EXIT_DATAERR
            session.execute(statements)
            return session.exit_status()

        if args.script:
            return session.run_file(args.script)

        session.run_prompt()
        return EXIT_OK
    finally:
        session.close()


if __name__ == '__main__':
    sys.exit(main())
