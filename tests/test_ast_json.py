import io
import json
from pathlib import Path

import pytest

from lox.ast import Literal
from lox.ast_json import ast_from_obj, ast_to_obj, program_from_obj, program_to_obj
from lox.interpreter import Interpreter
from lox.parser import parse_program

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


@pytest.mark.parametrize('name', ['program_3.lox', 'program_4.lox', 'program_6.lox'])
def test_json_round_trip_preserves_program(name):
    source = (EXAMPLES / name).read_text(encoding='utf-8')
    statements = parse_program(source)
    text = json.dumps(program_to_obj(statements))
    restored = program_from_obj(json.loads(text))
    assert restored == statements


def test_restored_program_runs_the_same():
    source = (EXAMPLES / 'program_3.lox').read_text(encoding='utf-8')
    statements = parse_program(source)
    restored = program_from_obj(json.loads(json.dumps(program_to_obj(statements))))
    direct, loaded = io.StringIO(), io.StringIO()
    Interpreter(out=direct).interpret(statements)
    Interpreter(out=loaded).interpret(restored)
    assert loaded.getvalue() == direct.getvalue() == '1\n2\n1\n3\n'


def test_literal_shape():
    assert ast_to_obj(Literal(None)) == {"type": "Literal", "value": None}
    assert ast_from_obj({"type": "Literal", "value": 2.5}) == Literal(2.5)


def test_unknown_node_type():
    with pytest.raises(ValueError):
        ast_from_obj({"type": "Class"})
    with pytest.raises(TypeError):
        ast_to_obj(object())


def test_program_wrapper_required():
    with pytest.raises(ValueError):
        program_from_obj({"type": "Block", "statements": []})
