import sys
from typing import Any, List, Optional, TextIO, Union

from lox.tokens import EOF, Token


class LoxError(Exception):
    """Base class for errors raised while scanning, parsing or running Lox."""


class ParseError(LoxError):
    """Internal exception used to unwind the parser to a statement boundary."""


class LoxRuntimeError(LoxError):
    """Exception type used to propagate Lox runtime errors."""
    def __init__(self, token: Optional[Token], message: str):
        super().__init__(message)
        self.token = token
        self.message = message


class ReturnSignal:
    """Result object carried out of a function body by a return statement.

    Statement execution hands this back up the call chain; it is never raised.
    """
    def __init__(self, keyword: Optional[Token], value: Any):
        self.keyword = keyword
        self.value = value

    def __repr__(self) -> str:
        return f"ReturnSignal({self.value!r})"


class ErrorReporter:
    """Collects and prints errors from every stage of the pipeline."""
    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream
        self.had_error = False
        self.had_runtime_error = False
        self.messages: List[str] = []

    def error(self, where: Union[int, Token], message: str):
        if isinstance(where, Token):
            if where.type == EOF:
                self.report(where.line, ' at end', message)
            else:
                self.report(where.line, f" at '{where.lexeme}'", message)
        else:
            self.report(where, '', message)

    def runtime_error(self, err: LoxRuntimeError):
        if err.token is not None:
            text = f"[line {err.token.line}] RuntimeError: {err.message}"
        else:
            text = f"RuntimeError: {err.message}"
        self.emit(text)
        self.had_runtime_error = True

    def report(self, line: int, where: str, message: str):
        self.emit(f"[line {line}] Error{where}: {message}")
        self.had_error = True

    def emit(self, text: str):
        self.messages.append(text)
        print(text, file=self.stream if self.stream is not None else sys.stderr)

    def reset(self):
        self.had_error = False
        self.had_runtime_error = False
        self.messages.clear()
