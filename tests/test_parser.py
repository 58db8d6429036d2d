import io

from lox.ast import (
    Assign, Binary, Block, Call, Expression, Function, Grouping, If, Literal,
    Logical, Print, Return, Unary, Var, Variable, While,
)
from lox.errors import ErrorReporter
from lox.parser import Parser, parse_program
from lox.scanner import scan


def parse(source):
    reporter = ErrorReporter(io.StringIO())
    statements = parse_program(source, reporter)
    return statements, reporter


def parse_expr(source):
    statements, reporter = parse(source + ';')
    assert not reporter.had_error, reporter.messages
    assert isinstance(statements[0], Expression)
    return statements[0].expression


def test_factor_binds_tighter_than_term():
    expr = parse_expr('1 + 2 * 3')
    assert isinstance(expr, Binary)
    assert expr.operator.type == 'PLUS'
    assert expr.left == Literal(1.0)
    assert isinstance(expr.right, Binary)
    assert expr.right.operator.type == 'STAR'


def test_subtraction_is_left_associative():
    expr = parse_expr('1 - 2 - 3')
    assert expr.operator.type == 'MINUS'
    assert isinstance(expr.left, Binary)
    assert expr.left.left == Literal(1.0)
    assert expr.left.right == Literal(2.0)
    assert expr.right == Literal(3.0)


def test_precedence_ladder():
    expr = parse_expr('a or b and c == d < e + f * -g')
    assert isinstance(expr, Logical) and expr.operator.type == 'OR'
    and_expr = expr.right
    assert isinstance(and_expr, Logical) and and_expr.operator.type == 'AND'
    eq = and_expr.right
    assert eq.operator.type == 'EQUAL_EQUAL'
    lt = eq.right
    assert lt.operator.type == 'LESS'
    plus = lt.right
    assert plus.operator.type == 'PLUS'
    star = plus.right
    assert star.operator.type == 'STAR'
    assert isinstance(star.right, Unary)


def test_grouping_and_unary():
    expr = parse_expr('!(true)')
    assert isinstance(expr, Unary)
    assert expr.operator.type == 'BANG'
    assert expr.right == Grouping(Literal(True))


def test_literals():
    assert parse_expr('nil') == Literal(None)
    assert parse_expr('false') == Literal(False)
    assert parse_expr('"s"') == Literal('s')


def test_assignment_is_right_associative():
    expr = parse_expr('a = b = 1')
    assert isinstance(expr, Assign)
    assert expr.name.lexeme == 'a'
    assert isinstance(expr.value, Assign)
    assert expr.value.name.lexeme == 'b'
    assert expr.value.value == Literal(1.0)


def test_invalid_assignment_target_is_reported_not_fatal():
    statements, reporter = parse('1 = 2; print 3;')
    assert reporter.messages == ["[line 1] Error at '=': Invalid assignment target."]
    assert len(statements) == 2
    assert isinstance(statements[1], Print)


def test_call_chaining():
    expr = parse_expr('f(1)(2, 3)')
    assert isinstance(expr, Call)
    assert len(expr.arguments) == 2
    assert expr.paren.type == 'RIGHT_PAREN'
    assert isinstance(expr.callee, Call)
    assert expr.callee.callee.name.lexeme == 'f'


def test_too_many_arguments():
    statements, reporter = parse('f(1, 2, 3, 4, 5, 6, 7, 8, 9);')
    assert reporter.messages == ["[line 1] Error at '9': Can't have more than 8 arguments."]
    assert len(statements[0].expression.arguments) == 9


def test_eight_arguments_are_fine():
    statements, reporter = parse('f(1, 2, 3, 4, 5, 6, 7, 8);')
    assert not reporter.had_error


def test_too_many_parameters():
    statements, reporter = parse('fun f(a, b, c, d, e, g, h, i, j) {}')
    assert reporter.messages == ["[line 1] Error at 'j': Can't have more than 8 parameters."]
    assert len(statements[0].params) == 9


def test_function_declaration():
    statements, reporter = parse('fun add(a, b) { return a + b; }')
    assert not reporter.had_error
    fn = statements[0]
    assert isinstance(fn, Function)
    assert fn.name.lexeme == 'add'
    assert [p.lexeme for p in fn.params] == ['a', 'b']
    assert isinstance(fn.body[0], Return)
    assert fn.body[0].keyword.lexeme == 'return'


def test_return_without_value():
    statements, _ = parse('fun f() { return; }')
    assert statements[0].body[0].value is None


def test_var_declaration_with_and_without_initializer():
    statements, _ = parse('var a; var b = 2;')
    assert statements[0] == Var(statements[0].name, None)
    assert statements[1].initializer == Literal(2.0)


def test_dangling_else_binds_to_nearest_if():
    statements, _ = parse('if (a) if (b) print 1; else print 2;')
    outer = statements[0]
    assert isinstance(outer, If)
    assert outer.else_branch is None
    inner = outer.then_branch
    assert isinstance(inner, If)
    assert isinstance(inner.else_branch, Print)


def test_for_loop_desugars_to_block_and_while():
    statements, reporter = parse('for (var i = 0; i < 3; i = i + 1) print i;')
    assert not reporter.had_error
    outer = statements[0]
    assert isinstance(outer, Block)
    init, loop = outer.statements
    assert isinstance(init, Var)
    assert isinstance(loop, While)
    assert isinstance(loop.condition, Binary)
    body = loop.body
    assert isinstance(body, Block)
    assert isinstance(body.statements[0], Print)
    assert isinstance(body.statements[1], Expression)
    assert isinstance(body.statements[1].expression, Assign)


def test_for_loop_without_clauses():
    statements, _ = parse('for (;;) print 1;')
    loop = statements[0]
    assert isinstance(loop, While)
    assert loop.condition == Literal(True)
    assert isinstance(loop.body, Print)


def test_while_statement():
    statements, _ = parse('while (x) { x = false; }')
    assert isinstance(statements[0], While)
    assert isinstance(statements[0].body, Block)


def test_recovers_and_reports_every_error():
    statements, reporter = parse('var = 1;\nprint 2;\nprint ;\nprint 4;')
    assert reporter.messages == [
        "[line 1] Error at '=': Expect variable name.",
        "[line 3] Error at ';': Expect expression.",
    ]
    assert [type(s) for s in statements] == [Print, Print]


def test_missing_semicolon_at_end():
    _, reporter = parse('print 1')
    assert reporter.messages == ["[line 1] Error at end: Expect ';' after value."]


def test_unclosed_block():
    _, reporter = parse('{ print 1;')
    assert reporter.messages == ["[line 1] Error at end: Expect '}' after block."]


def test_reparsing_gives_identical_statements():
    source = 'fun f(x) { if (x > 1) return x * f(x - 1); return 1; } print f(5);'
    tokens = scan(source)
    parser = Parser(tokens)
    first = parser.parse()
    second = parser.parse()
    third = Parser(scan(source)).parse()
    assert first == second == third
    assert [type(s) for s in first] == [Function, Print]


def test_variable_expression():
    expr = parse_expr('name')
    assert isinstance(expr, Variable)
    assert expr.name.lexeme == 'name'


def test_deep_nesting_is_reported_and_parsing_continues():
    source = 'print ' + '(' * 1000 + '1' + ')' * 1000 + ';\nprint 2;'
    statements, reporter = parse(source)
    assert reporter.had_error
    assert reporter.messages == ["[line 1] Error at '(': Too much nesting."]
    assert len(statements) == 1
    assert isinstance(statements[0], Print)
