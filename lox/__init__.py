# Lox language package
# This package provides a scanner, parser and tree-walking interpreter for Lox.
from .errors import ErrorReporter, LoxError, LoxRuntimeError
from .interpreter import Interpreter
from .parser import Parser, parse_program
from .scanner import scan
from .session import Session, run_program

__all__ = [
    'ErrorReporter',
    'Interpreter',
    'LoxError',
    'LoxRuntimeError',
    'Parser',
    'Session',
    'parse_program',
    'run_program',
    'scan',
]
