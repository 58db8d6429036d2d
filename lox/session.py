"""Running Lox source: one-shot programs, script files and the REPL.

A `Session` owns one error reporter and one long-lived `Interpreter`,
so variables and functions defined by one call to `run` stay visible
to the next. This is what the REPL relies on.
"""

from __future__ import annotations

import builtins
from pathlib import Path
from typing import Callable, List, Optional, TextIO

from .ast import Stmt
from .errors import ErrorReporter
from .interpreter import Interpreter
from .parser import parse_program

# sysexits.h codes
EXIT_OK = 0
EXIT_DATAERR = 65
EXIT_NOINPUT = 66
EXIT_SOFTWARE = 70

PROMPT = '> '


class Session:
    def __init__(self, out: Optional[TextIO] = None, err: Optional[TextIO] = None,
                 debug_level: int = 0, debug_file: str = 'debug.txt'):
        self.reporter = ErrorReporter(err)
        self.interpreter = Interpreter(self.reporter, out=out, debug_level=debug_level,
                                       debug_file=debug_file)

    def parse(self, source: str) -> List[Stmt]:
        return parse_program(source, self.reporter)

    def run(self, source: str) -> None:
        # error state is per submission
        self.reporter.reset()
        statements = self.parse(source)
        # Don't run code that failed to parse cleanly.
        if self.reporter.had_error:
            return
        self.interpreter.interpret(statements)

    def execute(self, statements: List[Stmt]) -> None:
        """Run an already parsed program, e.g. one loaded from AST JSON."""
        self.interpreter.interpret(statements)

    def exit_status(self) -> int:
        if self.reporter.had_error:
            return EXIT_DATAERR
        if self.reporter.had_runtime_error:
            return EXIT_SOFTWARE
        return EXIT_OK

    def run_file(self, path: str) -> int:
        file_path = Path(path)
        if not file_path.exists():
            self.reporter.emit(f"Error: file {file_path} not found")
            return EXIT_NOINPUT
        with open(file_path, 'r', encoding='utf-8') as f:
            source = f.read()
        self.run(source)
        return self.exit_status()

    def run_prompt(self, input_fn: Optional[Callable[[str], str]] = None) -> None:
        if input_fn is None:
            input_fn = builtins.input
        while True:
            try:
                line = input_fn(PROMPT)
            except EOFError:
                break
            self.run(line)

    def close(self):
        self.interpreter.close()


def run_program(source: str, debug_level: int = 0) -> int:
    """Convenience function to run a Lox program from a source string."""
    session = Session(debug_level=debug_level)
    try:
        session.run(source)
    finally:
        session.close()
    return session.exit_status()
