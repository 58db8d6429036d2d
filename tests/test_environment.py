import pytest

from lox.environment import Environment
from lox.errors import LoxRuntimeError
from lox.tokens import Token


def ident(name, line=1):
    return Token('IDENTIFIER', name, None, line)


def test_define_and_get():
    env = Environment()
    env.define('a', 1.0)
    assert env.get(ident('a')) == 1.0


def test_define_overwrites_in_same_frame():
    env = Environment()
    env.define('a', 1.0)
    env.define('a', 'two')
    assert env.get(ident('a')) == 'two'


def test_get_falls_back_to_enclosing():
    outer = Environment()
    outer.define('a', 'outer')
    inner = Environment(outer)
    assert inner.get(ident('a')) == 'outer'


def test_define_shadows_without_touching_enclosing():
    outer = Environment()
    outer.define('a', 'outer')
    inner = Environment(outer)
    inner.define('a', 'inner')
    assert inner.get(ident('a')) == 'inner'
    assert outer.get(ident('a')) == 'outer'


def test_assign_updates_nearest_binding():
    outer = Environment()
    outer.define('a', 1.0)
    middle = Environment(outer)
    middle.define('a', 2.0)
    inner = Environment(middle)
    inner.assign(ident('a'), 3.0)
    assert middle.values['a'] == 3.0
    assert outer.values['a'] == 1.0
    assert 'a' not in inner.values


def test_undefined_get_raises():
    env = Environment(Environment())
    with pytest.raises(LoxRuntimeError) as excinfo:
        env.get(ident('missing', line=4))
    assert excinfo.value.message == "Undefined variable 'missing'."
    assert excinfo.value.token.line == 4


def test_assign_never_creates_a_binding():
    outer = Environment()
    inner = Environment(outer)
    with pytest.raises(LoxRuntimeError):
        inner.assign(ident('typo'), 1.0)
    assert 'typo' not in outer.values
    assert 'typo' not in inner.values


def test_nil_binding_is_still_defined():
    env = Environment()
    env.define('a', None)
    assert env.get(ident('a')) is None


def test_depth():
    root = Environment()
    assert root.depth() == 0
    assert Environment(Environment(root)).depth() == 2
