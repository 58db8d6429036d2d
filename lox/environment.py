from typing import Any, Dict, Optional

from lox.errors import LoxRuntimeError
from lox.tokens import Token


class Environment:
    """One scope frame: name bindings plus a link to the enclosing frame."""
    def __init__(self, enclosing: Optional['Environment'] = None):
        self.enclosing = enclosing
        self.values: Dict[str, Any] = {}

    def define(self, name: str, value: Any):
        # Always binds in this frame; this is what makes shadowing work.
        self.values[name] = value

    def get(self, name: Token) -> Any:
        env: Optional[Environment] = self
        while env is not None:
            if name.lexeme in env.values:
                return env.values[name.lexeme]
            env = env.enclosing
        raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def assign(self, name: Token, value: Any):
        env: Optional[Environment] = self
        while env is not None:
            if name.lexeme in env.values:
                env.values[name.lexeme] = value
                return
            env = env.enclosing
        # never creates a global
        raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def depth(self) -> int:
        """Number of frames between this one and the global frame."""
        count = 0
        env = self.enclosing
        while env is not None:
            count += 1
            env = env.enclosing
        return count
