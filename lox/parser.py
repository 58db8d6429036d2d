"""Recursive-descent parser for the Lox language.

The parser consumes the token list produced by `lox.scanner` once, left
to right, with a single token of lookahead. Each grammar rule is a
`parse_*` method; binary operator rules loop and fold to the left
instead of recursing, which keeps them left-associative.

Syntax errors are reported through the shared `ErrorReporter`. After
an error the parser skips ahead to the next statement boundary and
keeps going, so a single parse reports every syntax error it can find.
Callers must check `reporter.had_error` before running the result.
"""

from __future__ import annotations

from typing import List, Optional

from .ast import (
    Expr, Stmt, Literal, Grouping, Unary, Binary, Logical, Variable,
    Assign, Call, Expression, Print, Var, Block, If, While, Function,
    Return,
)
from .errors import ErrorReporter, ParseError
from .scanner import scan
from .tokens import EOF, STATEMENT_KEYWORDS, Token

MAX_ARGS = 8


class Parser:
    def __init__(self, tokens: List[Token], reporter: Optional[ErrorReporter] = None):
        self.tokens = tokens
        self.reporter = reporter if reporter is not None else ErrorReporter()
        self.pos = 0

    # Token helpers

    def peek(self) -> Token:
        return self.tokens[self.pos]

    def previous(self) -> Token:
        return self.tokens[self.pos - 1]

    def is_at_end(self) -> bool:
        return self.peek().type == EOF

    def advance(self) -> Token:
        if not self.is_at_end():
            self.pos += 1
        return self.previous()

    def check(self, *types: str) -> bool:
        if self.is_at_end():
            return False
        return self.peek().type in types

    def match(self, *types: str) -> bool:
        if self.check(*types):
            self.advance()
            return True
        return False

    def consume(self, expected: str, message: str) -> Token:
        if self.check(expected):
            return self.advance()
        raise self.error(self.peek(), message)

    def error(self, token: Token, message: str) -> ParseError:
        self.reporter.error(token, message)
        return ParseError(message)

    def synchronize(self):
        """Discard tokens until the start of the next statement."""
        self.advance()
        while not self.is_at_end():
            if self.previous().type == 'SEMICOLON':
                return
            if self.peek().type in STATEMENT_KEYWORDS:
                return
            self.advance()

    # Declarations and statements

    def parse(self) -> List[Stmt]:
        self.pos = 0
        statements: List[Stmt] = []
        while not self.is_at_end():
            stmt = self.parse_declaration()
            if stmt is not None:
                statements.append(stmt)
        return statements

    def parse_declaration(self) -> Optional[Stmt]:
        try:
            if self.match('VAR'):
                return self.parse_var_decl()
            if self.match('FUN'):
                return self.parse_function('function')
            return self.parse_statement()
        except ParseError:
            self.synchronize()
            return None
        except RecursionError:
            self.error(self.peek(), 'Too much nesting.')
            self.synchronize()
            return None

    def parse_var_decl(self) -> Var:
        name = self.consume('IDENTIFIER', 'Expect variable name.')
        initializer: Optional[Expr] = None
        if self.match('EQUAL'):
            initializer = self.parse_expression()
        self.consume('SEMICOLON', "Expect ';' after variable declaration.")
        return Var(name, initializer)

    def parse_function(self, kind: str) -> Function:
        name = self.consume('IDENTIFIER', f'Expect {kind} name.')
        self.consume('LEFT_PAREN', f"Expect '(' after {kind} name.")
        params: List[Token] = []
        if not self.check('RIGHT_PAREN'):
            while True:
                if len(params) >= MAX_ARGS:
                    self.error(self.peek(), f"Can't have more than {MAX_ARGS} parameters.")
                params.append(self.consume('IDENTIFIER', 'Expect parameter name.'))
                if not self.match('COMMA'):
                    break
        self.consume('RIGHT_PAREN', "Expect ')' after parameters.")
        self.consume('LEFT_BRACE', f"Expect '{{' before {kind} body.")
        body = self.parse_block()
        return Function(name, params, body)

    def parse_statement(self) -> Stmt:
        if self.match('FOR'):
            return self.parse_for_stmt()
        if self.match('IF'):
            return self.parse_if_stmt()
        if self.match('PRINT'):
            return self.parse_print_stmt()
        if self.match('RETURN'):
            return self.parse_return_stmt()
        if self.match('WHILE'):
            return self.parse_while_stmt()
        if self.match('LEFT_BRACE'):
            return Block(self.parse_block())
        return self.parse_expression_stmt()

    def parse_for_stmt(self) -> Stmt:
        self.consume('LEFT_PAREN', "Expect '(' after 'for'.")
        initializer: Optional[Stmt]
        if self.match('SEMICOLON'):
            initializer = None
        elif self.match('VAR'):
            initializer = self.parse_var_decl()
        else:
            initializer = self.parse_expression_stmt()

        condition: Optional[Expr] = None
        if not self.check('SEMICOLON'):
            condition = self.parse_expression()
        self.consume('SEMICOLON', "Expect ';' after loop condition.")

        increment: Optional[Expr] = None
        if not self.check('RIGHT_PAREN'):
            increment = self.parse_expression()
        self.consume('RIGHT_PAREN', "Expect ')' after for clauses.")
        body = self.parse_statement()

        # { init; while (cond) { body; increment } }
        if increment is not None:
            body = Block([body, Expression(increment)])
        if condition is None:
            condition = Literal(True)
        body = While(condition, body)
        if initializer is not None:
            body = Block([initializer, body])
        return body

    def parse_if_stmt(self) -> If:
        self.consume('LEFT_PAREN', "Expect '(' after 'if'.")
        condition = self.parse_expression()
        self.consume('RIGHT_PAREN', "Expect ')' after if condition.")
        then_branch = self.parse_statement()
        else_branch: Optional[Stmt] = None
        # the innermost if claims the else
        if self.match('ELSE'):
            else_branch = self.parse_statement()
        return If(condition, then_branch, else_branch)

    def parse_print_stmt(self) -> Print:
        value = self.parse_expression()
        self.consume('SEMICOLON', "Expect ';' after value.")
        return Print(value)

    def parse_return_stmt(self) -> Return:
        keyword = self.previous()
        value: Optional[Expr] = None
        if not self.check('SEMICOLON'):
            value = self.parse_expression()
        self.consume('SEMICOLON', "Expect ';' after return value.")
        return Return(keyword, value)

    def parse_while_stmt(self) -> While:
        self.consume('LEFT_PAREN', "Expect '(' after 'while'.")
        condition = self.parse_expression()
        self.consume('RIGHT_PAREN', "Expect ')' after condition.")
        body = self.parse_statement()
        return While(condition, body)

    def parse_block(self) -> List[Stmt]:
        statements: List[Stmt] = []
        while not self.check('RIGHT_BRACE') and not self.is_at_end():
            stmt = self.parse_declaration()
            if stmt is not None:
                statements.append(stmt)
        self.consume('RIGHT_BRACE', "Expect '}' after block.")
        return statements

    def parse_expression_stmt(self) -> Expression:
        expr = self.parse_expression()
        self.consume('SEMICOLON', "Expect ';' after expression.")
        return Expression(expr)

    # Expressions

    def parse_expression(self) -> Expr:
        return self.parse_assign()

    def parse_assign(self) -> Expr:
        expr = self.parse_logic_or()
        if self.match('EQUAL'):
            equals = self.previous()
            value = self.parse_assign()
            if isinstance(expr, Variable):
                return Assign(expr.name, value)
            # reported only; parsing continues
            self.error(equals, 'Invalid assignment target.')
        return expr

    def parse_logic_or(self) -> Expr:
        expr = self.parse_logic_and()
        while self.match('OR'):
            operator = self.previous()
            right = self.parse_logic_and()
            expr = Logical(expr, operator, right)
        return expr

    def parse_logic_and(self) -> Expr:
        expr = self.parse_equality()
        while self.match('AND'):
            operator = self.previous()
            right = self.parse_equality()
            expr = Logical(expr, operator, right)
        return expr

    def parse_equality(self) -> Expr:
        expr = self.parse_comparison()
        while self.match('BANG_EQUAL', 'EQUAL_EQUAL'):
            operator = self.previous()
            right = self.parse_comparison()
            expr = Binary(expr, operator, right)
        return expr

    def parse_comparison(self) -> Expr:
        expr = self.parse_term()
        while self.match('GREATER', 'GREATER_EQUAL', 'LESS', 'LESS_EQUAL'):
            operator = self.previous()
            right = self.parse_term()
            expr = Binary(expr, operator, right)
        return expr

    def parse_term(self) -> Expr:
        expr = self.parse_factor()
        while self.match('MINUS', 'PLUS'):
            operator = self.previous()
            right = self.parse_factor()
            expr = Binary(expr, operator, right)
        return expr

    def parse_factor(self) -> Expr:
        expr = self.parse_unary()
        while self.match('SLASH', 'STAR'):
            operator = self.previous()
            right = self.parse_unary()
            expr = Binary(expr, operator, right)
        return expr

    def parse_unary(self) -> Expr:
        if self.match('BANG', 'MINUS'):
            operator = self.previous()
            right = self.parse_unary()
            return Unary(operator, right)
        return self.parse_call()

    def parse_call(self) -> Expr:
        expr = self.parse_primary()
        while self.match('LEFT_PAREN'):
            expr = self.finish_call(expr)
        return expr

    def finish_call(self, callee: Expr) -> Call:
        arguments: List[Expr] = []
        if not self.check('RIGHT_PAREN'):
            while True:
                if len(arguments) >= MAX_ARGS:
                    self.error(self.peek(), f"Can't have more than {MAX_ARGS} arguments.")
                arguments.append(self.parse_expression())
                if not self.match('COMMA'):
                    break
        paren = self.consume('RIGHT_PAREN', "Expect ')' after arguments.")
        return Call(callee, paren, arguments)

    def parse_primary(self) -> Expr:
        if self.match('FALSE'):
            return Literal(False)
        if self.match('TRUE'):
            return Literal(True)
        if self.match('NIL'):
            return Literal(None)
        if self.match('NUMBER', 'STRING'):
            return Literal(self.previous().literal)
        if self.match('IDENTIFIER'):
            return Variable(self.previous())
        if self.match('LEFT_PAREN'):
            expr = self.parse_expression()
            self.consume('RIGHT_PAREN', "Expect ')' after expression.")
            return Grouping(expr)
        raise self.error(self.peek(), 'Expect expression.')


def parse_program(source: str, reporter: Optional[ErrorReporter] = None) -> List[Stmt]:
    """Scan and parse Lox source into a list of statements.

    Lexical and syntax errors are reported to `reporter`; statements that
    failed to parse are left out of the result.
    """
    if reporter is None:
        reporter = ErrorReporter()
    tokens = scan(source, reporter)
    return Parser(tokens, reporter).parse()
