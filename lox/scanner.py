"""Scanner for the Lox language.

Scanning happens in two stages:

1. **Comment stripping**: `//` line comments and `/* ... */` block
   comments are removed from the source. Block comments may nest. Line
   breaks inside comments are kept so that token line numbers still
   match the original text, and string literals are copied untouched so
   that comment markers inside strings are not treated as comments.

2. **Lexing**: the stripped source is fed to a Lark basic lexer built
   from the terminal grammar below. Lark tokens are then converted into
   `Token` values carrying the parsed literal for numbers and strings.

Problems are reported through an `ErrorReporter`; scanning always
continues to the end of the input and the token list is terminated by
an `EOF` token.
"""

from __future__ import annotations

from typing import List, Optional

from lark import Lark

from .errors import ErrorReporter
from .tokens import EOF, KEYWORDS, Token


def strip_comments(source: str, reporter: Optional[ErrorReporter] = None) -> str:
    """Remove line and (nested) block comments, keeping line breaks."""
    result: List[str] = []
    i = 0
    length = len(source)
    line = 1
    depth = 0  # block comment nesting
    in_string = False
    in_line_comment = False
    while i < length:
        c = source[i]
        nxt = source[i + 1] if i + 1 < length else ''
        if c == '\n':
            line += 1
            in_line_comment = False
            result.append(c)
            i += 1
            continue
        if depth > 0:
            if c == '/' and nxt == '*':
                depth += 1
                i += 2
            elif c == '*' and nxt == '/':
                depth -= 1
                i += 2
            else:
                i += 1
            continue
        if in_line_comment:
            i += 1
            continue
        if in_string:
            result.append(c)
            if c == '"':
                in_string = False
            i += 1
            continue
        if c == '"':
            in_string = True
            result.append(c)
            i += 1
            continue
        if c == '/' and nxt == '/':
            in_line_comment = True
            i += 2
            continue
        if c == '/' and nxt == '*':
            depth = 1
            i += 2
            # keep tokens on either side of the comment apart
            result.append(' ')
            continue
        result.append(c)
        i += 1
    if depth > 0 and reporter is not None:
        reporter.error(line, 'Unterminated block comment.')
    return ''.join(result)


# Every terminal carries an explicit priority so that the catch-all
# UNEXPECTED_CHAR (priority 0) is only tried after everything else.
# Keywords share IDENTIFIER's priority: Lark then matches them as whole
# identifiers only, so `orchid` stays an IDENTIFIER.
LOX_TERMINALS = r"""
    start: _token*

    _token: LEFT_PAREN | RIGHT_PAREN | LEFT_BRACE | RIGHT_BRACE
          | COMMA | DOT | MINUS | PLUS | SEMICOLON | SLASH | STAR
          | BANG_EQUAL | BANG | EQUAL_EQUAL | EQUAL
          | GREATER_EQUAL | GREATER | LESS_EQUAL | LESS
          | AND | CLASS | ELSE | FALSE | FOR | FUN | IF | NIL | OR
          | PRINT | RETURN | SUPER | THIS | TRUE | VAR | WHILE
          | IDENTIFIER | NUMBER | STRING | UNTERMINATED_STRING
          | UNEXPECTED_CHAR

    LEFT_PAREN.1: "("
    RIGHT_PAREN.1: ")"
    LEFT_BRACE.1: "{"
    RIGHT_BRACE.1: "}"
    COMMA.1: ","
    DOT.1: "."
    MINUS.1: "-"
    PLUS.1: "+"
    SEMICOLON.1: ";"
    SLASH.1: "/"
    STAR.1: "*"
    BANG_EQUAL.1: "!="
    BANG.1: "!"
    EQUAL_EQUAL.1: "=="
    EQUAL.1: "="
    GREATER_EQUAL.1: ">="
    GREATER.1: ">"
    LESS_EQUAL.1: "<="
    LESS.1: "<"

    AND.1: "and"
    CLASS.1: "class"
    ELSE.1: "else"
    FALSE.1: "false"
    FOR.1: "for"
    FUN.1: "fun"
    IF.1: "if"
    NIL.1: "nil"
    OR.1: "or"
    PRINT.1: "print"
    RETURN.1: "return"
    SUPER.1: "super"
    THIS.1: "this"
    TRUE.1: "true"
    VAR.1: "var"
    WHILE.1: "while"

    IDENTIFIER.1: /[A-Za-z_][A-Za-z0-9_]*/
    NUMBER.1: /[0-9]+(\.[0-9]+)?/
    STRING.3: /"[^"]*"/
    UNTERMINATED_STRING.2: /"[^"]*/
    UNEXPECTED_CHAR: /./

    WHITESPACE.1: /[ \t\r\n]+/
    %ignore WHITESPACE
"""


LOX_LEXER = Lark(
    LOX_TERMINALS,
    parser='lalr',
    lexer='basic',
)


class Scanner:
    """Turns Lox source text into a list of tokens."""

    def __init__(self, source: str, reporter: Optional[ErrorReporter] = None):
        self.source = source
        self.reporter = reporter if reporter is not None else ErrorReporter()

    def scan_tokens(self) -> List[Token]:
        text = strip_comments(self.source, self.reporter)
        tokens: List[Token] = []
        for tok in LOX_LEXER.lex(text):
            kind = tok.type
            lexeme = str(tok)
            if kind == 'UNEXPECTED_CHAR':
                self.reporter.error(tok.line, 'Unexpected character.')
                continue
            if kind == 'UNTERMINATED_STRING':
                self.reporter.error(tok.end_line or tok.line, 'Unterminated string.')
                continue
            if kind == 'NUMBER':
                tokens.append(Token(kind, lexeme, float(lexeme), tok.line))
            elif kind == 'STRING':
                # strings may span lines; report them at their last line
                tokens.append(Token(kind, lexeme, lexeme[1:-1], tok.end_line or tok.line))
            elif kind == 'IDENTIFIER' and lexeme in KEYWORDS:
                tokens.append(Token(KEYWORDS[lexeme], lexeme, None, tok.line))
            else:
                tokens.append(Token(kind, lexeme, None, tok.line))
        tokens.append(Token(EOF, '', None, self.source.count('\n') + 1))
        return tokens


def scan(source: str, reporter: Optional[ErrorReporter] = None) -> List[Token]:
    """Scan Lox source into tokens, reporting lexical errors to `reporter`."""
    return Scanner(source, reporter).scan_tokens()
