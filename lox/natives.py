"""Native functions available in every Lox session."""

import time
from typing import Any, List

from lox.callables import NativeFunction
from lox.environment import Environment


def native_clock(args: List[Any]) -> float:
    """Wall clock time in milliseconds."""
    return float(time.time_ns() // 1_000_000)


NATIVES = (
    NativeFunction('clock', 0, native_clock),
)


def define_natives(env: Environment) -> Environment:
    for native in NATIVES:
        env.define(native.name, native)
    return env
