"""Tree-walking interpreter for the Lox language.

The interpreter walks the statement list produced by `lox.parser`.
`execute` runs one statement in a given environment and returns either
`None` or a `ReturnSignal`; compound statements hand a `ReturnSignal`
straight back to their caller so that `return` unwinds to the enclosing
function call. `evaluate` computes the value of one expression.

The environment is passed explicitly to every call, so leaving a block
(normally, by `return`, or by a runtime error) never has to restore any
interpreter state.

Runtime values are plain Python objects: `None` for nil, `bool`,
`float` for numbers, `str`, and `LoxCallable` instances for functions.
"""

from __future__ import annotations

from typing import Any, List, Optional, TextIO

from .ast import (
    Expr, Stmt, Literal, Grouping, Unary, Binary, Logical, Variable,
    Assign, Call, Expression, Print, Var, Block, If, While, Function,
    Return,
)
from .callables import LoxCallable, LoxFunction
from .environment import Environment
from .errors import ErrorReporter, LoxRuntimeError, ReturnSignal
from .natives import define_natives
from .tokens import Token


class Interpreter:
    """Core interpreter that executes Lox ASTs against a persistent global frame."""
    def __init__(self, reporter: Optional[ErrorReporter] = None, out: Optional[TextIO] = None,
                 debug_level: int = 0, debug_file: str = 'debug.txt'):
        self.reporter = reporter if reporter is not None else ErrorReporter()
        self.out = out
        self.globals = define_natives(Environment())
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w', encoding='utf-8') if debug_level > 0 else None

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp:
                self.debug_fp.write(msg + '\n')
                self.debug_fp.flush()
            else:
                print(msg)

    def close(self):
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    # Public API
    def interpret(self, statements: List[Stmt]) -> None:
        """Run top-level statements; a runtime error abandons the rest of them."""
        try:
            for stmt in statements:
                if self.debug_level >= 1:
                    self.debug(f"execute {type(stmt).__name__}")
                result = self.execute(stmt, self.globals)
                if isinstance(result, ReturnSignal):
                    raise LoxRuntimeError(result.keyword, "Can't return from top-level code.")
        except LoxRuntimeError as err:
            self.debug(f"runtime error: {err.message}")
            self.reporter.runtime_error(err)
        except RecursionError:
            self.debug("runtime error: stack overflow")
            self.reporter.runtime_error(LoxRuntimeError(None, 'Stack overflow.'))

    def execute_block(self, statements: List[Stmt], env: Environment) -> Optional[ReturnSignal]:
        for stmt in statements:
            result = self.execute(stmt, env)
            if isinstance(result, ReturnSignal):
                return result
        return None

    def execute(self, node: Stmt, env: Environment) -> Optional[ReturnSignal]:
        if isinstance(node, Expression):
            self.evaluate(node.expression, env)
            return None
        if isinstance(node, Print):
            value = self.evaluate(node.expression, env)
            print(self.stringify(value), file=self.out)
            return None
        if isinstance(node, Var):
            value = self.evaluate(node.initializer, env) if node.initializer is not None else None
            env.define(node.name.lexeme, value)
            if self.debug_level >= 2:
                self.debug(f"define {node.name.lexeme} = {self.stringify(value)}")
            return None
        if isinstance(node, Block):
            block_env = Environment(env)
            if self.debug_level >= 3:
                self.debug(f"enter block at depth {block_env.depth()}")
            return self.execute_block(node.statements, block_env)
        if isinstance(node, If):
            cond = self.evaluate(node.condition, env)
            truthy = self.is_truthy(cond)
            if self.debug_level >= 3:
                self.debug(f"if condition {self.stringify(cond)} -> {truthy}")
            if truthy:
                return self.execute(node.then_branch, env)
            if node.else_branch is not None:
                return self.execute(node.else_branch, env)
            return None
        if isinstance(node, While):
            while self.is_truthy(self.evaluate(node.condition, env)):
                res = self.execute(node.body, env)
                if isinstance(res, ReturnSignal):
                    return res
            return None
        if isinstance(node, Function):
            env.define(node.name.lexeme, LoxFunction(node, env))
            if self.debug_level >= 2:
                self.debug(f"define function {node.name.lexeme}")
            return None
        if isinstance(node, Return):
            value = self.evaluate(node.value, env) if node.value is not None else None
            return ReturnSignal(node.keyword, value)
        raise NotImplementedError(f"execute: unexpected node type {type(node)}")

    def evaluate(self, node: Expr, env: Environment) -> Any:
        if isinstance(node, Literal):
            return node.value
        if isinstance(node, Grouping):
            return self.evaluate(node.expression, env)
        if isinstance(node, Variable):
            return env.get(node.name)
        if isinstance(node, Assign):
            value = self.evaluate(node.value, env)
            env.assign(node.name, value)
            return value
        if isinstance(node, Logical):
            left = self.evaluate(node.left, env)
            if node.operator.type == 'OR':
                if self.is_truthy(left):
                    return left
            elif not self.is_truthy(left):
                return left
            return self.evaluate(node.right, env)
        if isinstance(node, Unary):
            right = self.evaluate(node.right, env)
            if node.operator.type == 'BANG':
                return not self.is_truthy(right)
            if node.operator.type == 'MINUS':
                self.check_number_operand(node.operator, right)
                return -right
            raise LoxRuntimeError(node.operator, f"Unknown unary operator '{node.operator.lexeme}'.")
        if isinstance(node, Binary):
            left = self.evaluate(node.left, env)
            right = self.evaluate(node.right, env)
            return self.apply_binary_op(node.operator, left, right)
        if isinstance(node, Call):
            callee = self.evaluate(node.callee, env)
            arguments = [self.evaluate(arg, env) for arg in node.arguments]
            return self.call_function(callee, arguments, node.paren)
        raise NotImplementedError(f"evaluate: unexpected node type {type(node)}")

    def call_function(self, callee: Any, arguments: List[Any], paren: Token) -> Any:
        if not isinstance(callee, LoxCallable):
            raise LoxRuntimeError(paren, 'Can only call functions and classes.')
        if len(arguments) != callee.arity():
            raise LoxRuntimeError(paren, f"Expected {callee.arity()} arguments but got {len(arguments)}.")
        if self.debug_level >= 2:
            self.debug(f"call {callee!r} with {len(arguments)} arguments")
        return callee.call(self, arguments)

    def apply_binary_op(self, operator: Token, left: Any, right: Any) -> Any:
        op = operator.type
        if op == 'PLUS':
            if self.is_number(left) and self.is_number(right):
                return left + right
            if isinstance(left, str) and isinstance(right, str):
                return left + right
            raise LoxRuntimeError(operator, 'Operands must be two numbers or two strings.')
        if op == 'EQUAL_EQUAL':
            return self.is_equal(left, right)
        if op == 'BANG_EQUAL':
            return not self.is_equal(left, right)
        self.check_number_operands(operator, left, right)
        if op == 'MINUS':
            return left - right
        if op == 'STAR':
            return left * right
        if op == 'SLASH':
            if right == 0:
                raise LoxRuntimeError(operator, 'Division by zero.')
            return left / right
        if op == 'GREATER':
            return left > right
        if op == 'GREATER_EQUAL':
            return left >= right
        if op == 'LESS':
            return left < right
        if op == 'LESS_EQUAL':
            return left <= right
        raise LoxRuntimeError(operator, f"Unknown operator '{operator.lexeme}'.")

    @staticmethod
    def is_number(value: Any) -> bool:
        return isinstance(value, float)

    def check_number_operand(self, operator: Token, operand: Any):
        if not self.is_number(operand):
            raise LoxRuntimeError(operator, 'Operand must be a number.')

    def check_number_operands(self, operator: Token, left: Any, right: Any):
        if not (self.is_number(left) and self.is_number(right)):
            raise LoxRuntimeError(operator, 'Operands must be numbers.')

    @staticmethod
    def is_truthy(value: Any) -> bool:
        if value is None:
            return False
        if isinstance(value, bool):
            return value
        return True

    @staticmethod
    def is_equal(a: Any, b: Any) -> bool:
        if a is None:
            return b is None
        # no coercion: true never equals 1
        if type(a) is not type(b):
            return False
        return a == b

    @staticmethod
    def stringify(value: Any) -> str:
        if value is None:
            return 'nil'
        if isinstance(value, bool):
            return 'true' if value else 'false'
        if isinstance(value, float):
            # integral values print as plain digits, never 1e+17
            if value.is_integer() and abs(value) < 1e21:
                return str(int(value))
            return repr(value)
        if isinstance(value, str):
            return value
        return repr(value)
