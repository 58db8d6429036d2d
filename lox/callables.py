from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, List

from lox.ast import Function
from lox.environment import Environment
from lox.errors import ReturnSignal

if TYPE_CHECKING:
    from lox.interpreter import Interpreter


class LoxCallable:
    """Interface shared by user functions and native builtins."""
    def arity(self) -> int:
        raise NotImplementedError

    def call(self, interpreter: 'Interpreter', arguments: List[Any]) -> Any:
        raise NotImplementedError


class LoxFunction(LoxCallable):
    """A user-defined function closed over its declaring frame."""
    def __init__(self, declaration: Function, closure: Environment):
        self.declaration = declaration
        self.closure = closure

    @property
    def name(self) -> str:
        return self.declaration.name.lexeme

    def arity(self) -> int:
        return len(self.declaration.params)

    def call(self, interpreter: 'Interpreter', arguments: List[Any]) -> Any:
        # Parent is the declaration-site frame, not the caller's.
        env = Environment(self.closure)
        for param, arg in zip(self.declaration.params, arguments):
            env.define(param.lexeme, arg)
        result = interpreter.execute_block(self.declaration.body, env)
        if isinstance(result, ReturnSignal):
            return result.value
        return None

    def __repr__(self) -> str:
        return f"<fn {self.name}>"


@dataclass(eq=False)
class NativeFunction(LoxCallable):
    name: str
    param_count: int
    fn: Callable[[List[Any]], Any]

    def arity(self) -> int:
        return self.param_count

    def call(self, interpreter: 'Interpreter', arguments: List[Any]) -> Any:
        return self.fn(arguments)

    def __repr__(self) -> str:
        return "<native fn>"
