from typing import Any

import pytest
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from gibbon.gibbon_ast import (
    Block,
    BooleanLiteral,
    Call,
    ExpressionStatement,
    FunctionLiteral,
    Identifier,
    If,
    Infix,
    IntegerLiteral,
    Let,
    Prefix,
    Program,
    Return,
)
from gibbon.gibbon_constants import keywords
from gibbon.gibbon_lexer import CharacterStream, Lexer
from gibbon.gibbon_parser import Parser, ParserError, parse


def parse_with_errors(source: str) -> tuple[Program, list[str]]:
    parser = Parser(Lexer(CharacterStream(source)))
    program = parser.parse_program()
    return program, parser.errors


def parse_checked(source: str) -> Program:
    program, errors = parse_with_errors(source)
    assert errors == [], f"parser errors: {errors}"
    return program


def single_expression(source: str) -> Any:
    program = parse_checked(source)
    assert len(program.statements) == 1
    stmt = program.statements[0]
    assert isinstance(stmt, ExpressionStatement)
    return stmt.value


# Statements


def test_let_statements() -> None:
    program = parse_checked(
        """
        let x = 5;
        let y = 10;
        let foobar = 838383;
        """
    )
    assert len(program.statements) == 3
    for stmt, (name, value) in zip(
        program.statements, [("x", 5), ("y", 10), ("foobar", 838383)]
    ):
        assert isinstance(stmt, Let)
        assert str(stmt.name) == name
        assert stmt.value == IntegerLiteral(value)


@pytest.mark.parametrize(
    "source,name,expected",
    [
        ("let x = 5;", "x", IntegerLiteral(5)),
        ("let y = true;", "y", BooleanLiteral(True)),
        ("let foobar = y;", "foobar", Identifier("y")),
        ("let z = 1 + 2", "z", Infix(IntegerLiteral(1), "+", IntegerLiteral(2))),
    ],
)  # type: ignore[misc]
def test_let_statement_values(source: str, name: str, expected: Any) -> None:
    program = parse_checked(source)
    assert program.statements == [Let(Identifier(name), expected)]


def test_return_statements() -> None:
    program = parse_checked("return 5; return 10; return 993322;")
    assert program.statements == [
        Return(IntegerLiteral(5)),
        Return(IntegerLiteral(10)),
        Return(IntegerLiteral(993322)),
    ]


def test_semicolons_are_optional() -> None:
    program = parse_checked("let a = 1\nreturn a\na")
    assert [type(s) for s in program.statements] == [
        Let,
        Return,
        ExpressionStatement,
    ]


def test_empty_program() -> None:
    program = parse_checked("")
    assert program.statements == []
    assert str(program) == ""


# Expressions


def test_identifier_expression() -> None:
    assert single_expression("foobar;") == Identifier("foobar")


def test_integer_literal_expression() -> None:
    assert single_expression("5;") == IntegerLiteral(5)


def test_integer_literal_max_int64() -> None:
    assert single_expression("9223372036854775807") == IntegerLiteral(2**63 - 1)


@pytest.mark.parametrize(
    "source,value", [("true;", True), ("false;", False)]
)  # type: ignore[misc]
def test_boolean_literal_expression(source: str, value: bool) -> None:
    assert single_expression(source) == BooleanLiteral(value)


@pytest.mark.parametrize(
    "source,operator,right",
    [
        ("!5;", "!", IntegerLiteral(5)),
        ("-15;", "-", IntegerLiteral(15)),
        ("!true;", "!", BooleanLiteral(True)),
        ("!false;", "!", BooleanLiteral(False)),
    ],
)  # type: ignore[misc]
def test_prefix_expressions(source: str, operator: str, right: Any) -> None:
    assert single_expression(source) == Prefix(operator, right)


@pytest.mark.parametrize("operator", ["+", "-", "*", "/", ">", "<", "==", "!="])  # type: ignore[misc]
def test_integer_infix_expressions(operator: str) -> None:
    expr = single_expression(f"5 {operator} 5;")
    assert expr == Infix(IntegerLiteral(5), operator, IntegerLiteral(5))


@pytest.mark.parametrize(
    "source,left,operator,right",
    [
        ("true == true", True, "==", True),
        ("true != false", True, "!=", False),
        ("false == false", False, "==", False),
    ],
)  # type: ignore[misc]
def test_boolean_infix_expressions(
    source: str, left: bool, operator: str, right: bool
) -> None:
    expr = single_expression(source)
    assert expr == Infix(BooleanLiteral(left), operator, BooleanLiteral(right))


@pytest.mark.parametrize(
    "source,expected",
    [
        ("-a * b", "((-a) * b)"),
        ("!-a", "(!(-a))"),
        ("a + b + c", "((a + b) + c)"),
        ("a + b - c", "((a + b) - c)"),
        ("a * b * c", "((a * b) * c)"),
        ("a * b / c", "((a * b) / c)"),
        ("a + b / c", "(a + (b / c))"),
        ("a + b * c + d / e - f", "(((a + (b * c)) + (d / e)) - f)"),
        ("3 + 4; -5 * 5", "(3 + 4); ((-5) * 5)"),
        ("5 > 4 == 3 < 4", "((5 > 4) == (3 < 4))"),
        ("5 < 4 != 3 > 4", "((5 < 4) != (3 > 4))"),
        ("3 + 4 * 5 == 3 * 1 + 4 * 5", "((3 + (4 * 5)) == ((3 * 1) + (4 * 5)))"),
        ("true", "true"),
        ("false", "false"),
        ("3 > 5 == false", "((3 > 5) == false)"),
        ("3 < 5 == true", "((3 < 5) == true)"),
        ("1 + (2 + 3) + 4", "((1 + (2 + 3)) + 4)"),
        ("(5 + 5) * 2", "((5 + 5) * 2)"),
        ("2 / (5 + 5)", "(2 / (5 + 5))"),
        ("-(5 + 5)", "(-(5 + 5))"),
        ("!(true == true)", "(!(true == true))"),
        ("a + add(b * c) + d", "((a + add((b * c))) + d)"),
        (
            "add(a, b, 1, 2 * 3, 4 + 5, add(6, 7 * 8))",
            "add(a, b, 1, (2 * 3), (4 + 5), add(6, (7 * 8)))",
        ),
        ("add(a + b + c * d / f + g)", "add((((a + b) + ((c * d) / f)) + g))"),
        ("-f(x)", "(-f(x))"),
        ("f(x)(y)", "f(x)(y)"),
    ],
)  # type: ignore[misc]
def test_operator_precedence(source: str, expected: str) -> None:
    assert str(parse_checked(source)) == expected


def test_two_statements_render_separately() -> None:
    program = parse_checked("3 + 4; -5 * 5")
    assert [str(s) for s in program.statements] == ["(3 + 4)", "((-5) * 5)"]


def test_if_expression() -> None:
    expr = single_expression("if (x < y) { x }")
    assert isinstance(expr, If)
    assert str(expr.condition) == "(x < y)"
    assert expr.consequence == Block([ExpressionStatement(Identifier("x"))])
    assert expr.alternative is None


def test_if_else_expression() -> None:
    expr = single_expression("if (x < y) { x } else { y };")
    assert isinstance(expr, If)
    assert str(expr.condition) == "(x < y)"
    assert str(expr.consequence) == "{ x }"
    assert expr.alternative is not None
    assert str(expr.alternative) == "{ y }"
    assert [str(s) for s in expr.alternative.statements] == ["y"]


def test_if_with_multiple_statements_in_block() -> None:
    expr = single_expression("if (a) { let b = 1; return b; }")
    assert isinstance(expr, If)
    assert expr.consequence.statements == [
        Let(Identifier("b"), IntegerLiteral(1)),
        Return(Identifier("b")),
    ]


def test_if_with_empty_block() -> None:
    expr = single_expression("if (a) { }")
    assert isinstance(expr, If)
    assert expr.consequence == Block([])


def test_unterminated_block_stops_at_end_of_input() -> None:
    expr = single_expression("if (a) { b")
    assert isinstance(expr, If)
    assert expr.consequence.statements == [ExpressionStatement(Identifier("b"))]


def test_function_literal() -> None:
    expr = single_expression("fn(x, y) { x + y; }")
    assert isinstance(expr, FunctionLiteral)
    assert [str(p) for p in expr.parameters] == ["x", "y"]
    assert len(expr.body.statements) == 1
    assert str(expr.body.statements[0]) == "(x + y)"


@pytest.mark.parametrize(
    "source,expected",
    [
        ("fn() {};", []),
        ("fn(x) {};", ["x"]),
        ("fn(x, y, z) {};", ["x", "y", "z"]),
        ("fn(x, x) {};", ["x", "x"]),
    ],
)  # type: ignore[misc]
def test_function_parameters(source: str, expected: list[str]) -> None:
    expr = single_expression(source)
    assert isinstance(expr, FunctionLiteral)
    assert [p.name for p in expr.parameters] == expected


def test_call_expression() -> None:
    expr = single_expression("add(1, 2 * 3, 4 + 5);")
    assert isinstance(expr, Call)
    assert expr.function == Identifier("add")
    assert [str(a) for a in expr.arguments] == ["1", "(2 * 3)", "(4 + 5)"]


def test_call_without_arguments() -> None:
    assert single_expression("f()") == Call(Identifier("f"), [])


def test_call_on_function_literal() -> None:
    expr = single_expression("fn(x) { x }(5)")
    assert isinstance(expr, Call)
    assert isinstance(expr.function, FunctionLiteral)
    assert expr.arguments == [IntegerLiteral(5)]


def test_let_bound_function() -> None:
    program = parse_checked("let add = fn(a, b) { return a + b; }; add(1, 2);")
    assert str(program) == "let add = fn(a, b) { return (a + b) }; add(1, 2)"


# Errors


@pytest.mark.parametrize(
    "source,expected",
    [
        ("let x 5;", ["expected next token to be Assign, got Int instead"]),
        ("let = 10;", ["expected next token to be Ident, got Assign instead"]),
        ("let 838383;", ["expected next token to be Ident, got Int instead"]),
        ("(1 + 2", ["expected next token to be RParen, got Eof instead"]),
        ("if x { y }", ["expected next token to be LParen, got Ident instead"]),
        ("if (x { y }", ["expected next token to be RParen, got LBrace instead"]),
        ("if (x) y", ["expected next token to be LBrace, got Ident instead"]),
        ("if (x) { y } else z", ["expected next token to be LBrace, got Ident instead"]),
        ("fn x", ["expected next token to be LParen, got Ident instead"]),
        ("fn(x, 1) { x }", ["expected next token to be Ident, got Int instead"]),
        ("fn(x,) { x }", ["expected next token to be Ident, got RParen instead"]),
        ("fn(x y) { x }", ["expected next token to be RParen, got Ident instead"]),
        ("fn(x) x", ["expected next token to be LBrace, got Ident instead"]),
        ("add(1, 2", ["expected next token to be RParen, got Eof instead"]),
        (
            "99999999999999999999",
            ["could not parse 99999999999999999999 as integer"],
        ),
        (
            "let big = 9223372036854775808;",
            ["could not parse 9223372036854775808 as integer"],
        ),
    ],
)  # type: ignore[misc]
def test_parser_errors(source: str, expected: list[str]) -> None:
    _, errors = parse_with_errors(source)
    assert errors == expected


def test_let_missing_assign_yields_no_let() -> None:
    program, errors = parse_with_errors("let x 5;")
    assert len(errors) == 1
    assert "Assign" in errors[0] and "Int" in errors[0]
    assert not any(isinstance(s, Let) for s in program.statements)


def test_no_resynchronization_after_error() -> None:
    # parsing resumes right after the failed `if`, not at the next statement
    program, errors = parse_with_errors("if x { y }")
    assert len(errors) == 1
    assert str(program) == "x; y"


def test_tokens_without_prefix_rule_are_dropped_silently() -> None:
    program, errors = parse_with_errors(") ; }")
    assert errors == []
    assert program.statements == []


def test_illegal_tokens_produce_no_statement() -> None:
    program, errors = parse_with_errors("@; 5")
    assert errors == []
    assert program.statements == [ExpressionStatement(IntegerLiteral(5))]


def test_errors_accumulate_across_statements() -> None:
    _, errors = parse_with_errors("let x 5; let 6; let y = 7;")
    assert errors == [
        "expected next token to be Assign, got Int instead",
        "expected next token to be Ident, got Int instead",
    ]


def test_strict_parse_raises() -> None:
    with pytest.raises(ParserError) as excinfo:
        parse("let x 5;")
    assert excinfo.value.errors == [
        "expected next token to be Assign, got Int instead"
    ]
    assert isinstance(excinfo.value, SyntaxError)


def test_lenient_parse_returns_partial_program() -> None:
    program, errors = parse("let x 5; let y = 2;", strict=False)
    assert str(program) == "5; let y = 2"
    assert errors == ["expected next token to be Assign, got Int instead"]


def test_lenient_parse_clean_source_has_no_errors() -> None:
    program, errors = parse("let y = 2;", strict=False)
    assert errors == []
    assert program == parse("let y = 2;")


def test_check_errors_passes_when_clean() -> None:
    parser = Parser.from_source("1 + 1")
    parser.parse_program()
    parser.check_errors()


def test_deep_nesting_parses() -> None:
    depth = 50
    program = parse_checked("(" * depth + "1" + ")" * depth)
    assert program.statements == [ExpressionStatement(IntegerLiteral(1))]


# Properties

identifiers = st.from_regex(r"[a-z_]{1,6}", fullmatch=True).filter(
    lambda s: s not in keywords
)
integers = st.integers(min_value=0, max_value=2**63 - 1)


@given(name=identifiers, value=integers)  # type: ignore[misc]
def test_let_statement_property(name: str, value: int) -> None:
    program = parse_checked(f"let {name} = {value};")
    assert len(program.statements) == 1
    stmt = program.statements[0]
    assert isinstance(stmt, Let)
    assert str(stmt.name) == name
    assert stmt.value == IntegerLiteral(value)


def _extend(children: st.SearchStrategy[str]) -> st.SearchStrategy[str]:
    infix_ops = st.sampled_from(["+", "-", "*", "/", "<", ">", "==", "!="])
    return st.one_of(
        st.tuples(st.sampled_from(["!", "-"]), children).map(lambda t: t[0] + t[1]),
        st.tuples(children, infix_ops, children).map(lambda t: " ".join(t)),
        children.map(lambda c: f"({c})"),
        st.tuples(identifiers, st.lists(children, max_size=3)).map(
            lambda t: f"{t[0]}({', '.join(t[1])})"
        ),
        st.tuples(children, children, children).map(
            lambda t: f"if ({t[0]}) {{ {t[1]} }} else {{ {t[2]} }}"
        ),
        st.tuples(st.lists(identifiers, max_size=3), children).map(
            lambda t: f"fn({', '.join(t[0])}) {{ {t[1]} }}"
        ),
    )


expressions = st.recursive(
    st.one_of(identifiers, integers.map(str), st.sampled_from(["true", "false"])),
    _extend,
    max_leaves=12,
)

statements = st.one_of(
    expressions,
    st.tuples(identifiers, expressions).map(lambda t: f"let {t[0]} = {t[1]}"),
    expressions.map(lambda e: f"return {e}"),
)


@settings(max_examples=200, suppress_health_check=[HealthCheck.too_slow])  # type: ignore[misc]
@given(st.lists(statements, min_size=1, max_size=4))  # type: ignore[misc]
def test_rendering_is_a_fixed_point(stmts: list[str]) -> None:
    source = "; ".join(stmts)
    program = parse_checked(source)
    rendered = str(program)

    reparsed = parse_checked(rendered)
    assert reparsed == program
    assert str(reparsed) == rendered
