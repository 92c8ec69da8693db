"""
Gibbon Language Parser

Parses a stream of Gibbon tokens into an abstract syntax tree (AST).

This module implements an operator-precedence ("Pratt") parser. Statements are
parsed by straight recursive descent; expressions are parsed by precedence
climbing, where each token kind maps to a prefix rule, an infix rule, or both,
and an infix operator is only consumed while it binds tighter than the
precedence the current call was entered with.

Supported Constructs
--------------------
- Statements:
    * ``let <ident> = <expr>;``
    * ``return <expr>;``
    * Expression statements (``<expr>;``)
    * Blocks (``{ ... }``) as the bodies of ``if`` and ``fn``
  Trailing semicolons are optional.

- Expressions:
    * Identifiers, integer and boolean literals
    * Prefix ``!`` and ``-``
    * Infix ``+ - * / < > == !=`` (left-associative)
    * Grouping with parentheses
    * ``if (<cond>) { ... } else { ... }``
    * ``fn(<params>) { ... }``
    * Calls ``<expr>(<args>)``

Precedence (lowest to highest)
------------------------------
LOWEST < EQUALITY (``== !=``) < COMPARISON (``< >``) < SUM (``+ -``)
< PRODUCT (``* /``) < PREFIX (``-x !x``) < CALL (``f(x)``)

Parser Behavior
---------------
- Only one token of lookahead (``peek_token``) beyond ``current_token`` is used.
- Grammar errors never raise: a message is appended to ``Parser.errors`` and
  the construct being built is abandoned. Parsing resumes from wherever the
  token cursor stands, so one malformed construct may produce follow-up
  errors.
- Callers must check ``errors`` before trusting the returned Program, or use
  ``check_errors()`` / ``parse(..., strict=True)`` to get a ``ParserError``.

Entry Points
------------
- ``Parser.parse_program()``: parse all input into a Program.
- ``parse()``: tokenize and parse a source string in one call.
"""

from __future__ import annotations

from collections.abc import Callable

from gibbon.gibbon_ast import (
    Block,
    BooleanLiteral,
    Call,
    Expression,
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
    Statement,
)
from gibbon.gibbon_constants import Kind, Precedence, infix_operators, precedence_of
from gibbon.gibbon_lexer import CharacterStream, Lexer

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

PrefixRule = Callable[[], "Expression | None"]
InfixRule = Callable[["Expression"], "Expression | None"]


class ParserError(SyntaxError):
    """Raised in strict mode when parsing recorded one or more errors.

    Attributes:
        errors (list[str]): The messages collected by the parser, in order.
    """

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__("\n".join(self.errors))


class Parser:
    """
    Gibbon Parser Class

    Owns a Lexer and pulls tokens from it one at a time, keeping the token
    under examination in ``current_token`` and the next one in ``peek_token``.

    Attributes
    ----------
    lexer : Lexer
        The token source, driven exclusively by this parser.
    errors : list[str]
        Messages for every grammar error seen so far.
    current_token : Token
        The token being parsed.
    peek_token : Token
        One token of lookahead.
    prefix_rules : dict[Kind, PrefixRule]
        Rules for tokens that can start an expression.
    infix_rules : dict[Kind, InfixRule]
        Rules for tokens that continue an expression given its left side.
    """

    def __init__(self, lexer: Lexer) -> None:
        self.lexer = lexer
        self.errors: list[str] = []

        self.current_token = lexer.next_token()
        self.peek_token = lexer.next_token()

        self.prefix_rules: dict[Kind, PrefixRule] = {
            Kind.IDENT: self.parse_identifier,
            Kind.INT: self.parse_integer_literal,
            Kind.TRUE: self.parse_boolean_literal,
            Kind.FALSE: self.parse_boolean_literal,
            Kind.BANG: self.parse_prefix_expression,
            Kind.MINUS: self.parse_prefix_expression,
            Kind.LPAREN: self.parse_grouped_expression,
            Kind.IF: self.parse_if_expression,
            Kind.FUNCTION: self.parse_function_literal,
        }

        self.infix_rules: dict[Kind, InfixRule] = {
            kind: self.parse_infix_expression for kind in infix_operators
        }
        self.infix_rules[Kind.LPAREN] = self.parse_call_expression

    @classmethod
    def from_source(cls, source: str) -> Parser:
        return cls(Lexer(CharacterStream(source)))

    # Token cursor

    def next_token(self) -> None:
        self.current_token = self.peek_token
        self.peek_token = self.lexer.next_token()

    def current_is(self, kind: Kind) -> bool:
        return self.current_token.kind is kind

    def peek_is(self, kind: Kind) -> bool:
        return self.peek_token.kind is kind

    def expect_peek(self, kind: Kind) -> bool:
        """Advance if the next token is ``kind``; otherwise record a peek error."""
        if self.peek_is(kind):
            self.next_token()
            return True
        self.peek_error(kind)
        return False

    def peek_error(self, kind: Kind) -> None:
        self.errors.append(
            f"expected next token to be {kind}, got {self.peek_token.kind} instead"
        )

    def current_precedence(self) -> Precedence:
        return precedence_of(self.current_token.kind)

    def peek_precedence(self) -> Precedence:
        return precedence_of(self.peek_token.kind)

    def check_errors(self) -> None:
        if self.errors:
            raise ParserError(self.errors)

    # Statements

    def parse_program(self) -> Program:
        """Parse statements until end of input and return the Program root."""
        program = Program()
        while not self.current_is(Kind.EOF):
            stmt = self.parse_statement()
            if stmt is not None:
                program.statements.append(stmt)
            self.next_token()
        return program

    def parse_statement(self) -> Statement | None:
        if self.current_is(Kind.LET):
            return self.parse_let_statement()
        if self.current_is(Kind.RETURN):
            return self.parse_return_statement()
        return self.parse_expression_statement()

    def parse_let_statement(self) -> Let | None:
        if not self.expect_peek(Kind.IDENT):
            return None
        name = Identifier(self.current_token.literal)

        if not self.expect_peek(Kind.ASSIGN):
            return None
        self.next_token()

        value = self.parse_expression(Precedence.LOWEST)
        if value is None:
            return None

        if self.peek_is(Kind.SEMICOLON):
            self.next_token()
        return Let(name, value)

    def parse_return_statement(self) -> Return | None:
        self.next_token()

        value = self.parse_expression(Precedence.LOWEST)
        if value is None:
            return None

        if self.peek_is(Kind.SEMICOLON):
            self.next_token()
        return Return(value)

    def parse_expression_statement(self) -> ExpressionStatement | None:
        value = self.parse_expression(Precedence.LOWEST)
        if value is None:
            return None

        if self.peek_is(Kind.SEMICOLON):
            self.next_token()
        return ExpressionStatement(value)

    def parse_block(self) -> Block:
        """Parse a ``{}``-enclosed block; ``}`` (or Eof) is current on return."""
        block = Block()
        self.next_token()

        while not self.current_is(Kind.RBRACE) and not self.current_is(Kind.EOF):
            stmt = self.parse_statement()
            if stmt is not None:
                block.statements.append(stmt)
            self.next_token()
        return block

    # Expressions

    def parse_expression(self, precedence: Precedence) -> Expression | None:
        """Parse an expression whose operators all bind tighter than ``precedence``."""
        prefix = self.prefix_rules.get(self.current_token.kind)
        if prefix is None:
            return None
        left = prefix()
        if left is None:
            return None

        while not self.peek_is(Kind.SEMICOLON) and precedence < self.peek_precedence():
            infix = self.infix_rules.get(self.peek_token.kind)
            if infix is None:
                return left
            self.next_token()
            left = infix(left)
            if left is None:
                return None
        return left

    def parse_identifier(self) -> Identifier:
        return Identifier(self.current_token.literal)

    def parse_integer_literal(self) -> IntegerLiteral | None:
        literal = self.current_token.literal
        try:
            value = int(literal)
        except ValueError:
            value = None
        if value is None or not INT64_MIN <= value <= INT64_MAX:
            self.errors.append(f"could not parse {literal} as integer")
            return None
        return IntegerLiteral(value)

    def parse_boolean_literal(self) -> BooleanLiteral:
        return BooleanLiteral(self.current_is(Kind.TRUE))

    def parse_prefix_expression(self) -> Prefix | None:
        operator = self.current_token.literal
        self.next_token()
        right = self.parse_expression(Precedence.PREFIX)
        if right is None:
            return None
        return Prefix(operator, right)

    def parse_infix_expression(self, left: Expression) -> Infix | None:
        operator = self.current_token.literal
        precedence = self.current_precedence()
        self.next_token()
        # same-level operators stop the right operand: left associativity
        right = self.parse_expression(precedence)
        if right is None:
            return None
        return Infix(left, operator, right)

    def parse_grouped_expression(self) -> Expression | None:
        self.next_token()
        expr = self.parse_expression(Precedence.LOWEST)
        if expr is None:
            return None
        if not self.expect_peek(Kind.RPAREN):
            return None
        return expr

    def parse_if_expression(self) -> If | None:
        if not self.expect_peek(Kind.LPAREN):
            return None
        self.next_token()

        condition = self.parse_expression(Precedence.LOWEST)
        if condition is None:
            return None

        if not self.expect_peek(Kind.RPAREN):
            return None
        if not self.expect_peek(Kind.LBRACE):
            return None
        consequence = self.parse_block()

        alternative = None
        if self.peek_is(Kind.ELSE):
            self.next_token()
            if not self.expect_peek(Kind.LBRACE):
                return None
            alternative = self.parse_block()

        return If(condition, consequence, alternative)

    def parse_function_literal(self) -> FunctionLiteral | None:
        if not self.expect_peek(Kind.LPAREN):
            return None

        parameters = self.parse_function_parameters()
        if parameters is None:
            return None

        if not self.expect_peek(Kind.LBRACE):
            return None
        body = self.parse_block()

        return FunctionLiteral(parameters, body)

    def parse_function_parameters(self) -> list[Identifier] | None:
        parameters: list[Identifier] = []

        if self.peek_is(Kind.RPAREN):
            self.next_token()
            return parameters

        if not self.expect_peek(Kind.IDENT):
            return None
        parameters.append(Identifier(self.current_token.literal))

        while self.peek_is(Kind.COMMA):
            self.next_token()
            if not self.expect_peek(Kind.IDENT):
                return None
            parameters.append(Identifier(self.current_token.literal))

        if not self.expect_peek(Kind.RPAREN):
            return None
        return parameters

    def parse_call_expression(self, function: Expression) -> Call | None:
        arguments = self.parse_call_arguments()
        if arguments is None:
            return None
        return Call(function, arguments)

    def parse_call_arguments(self) -> list[Expression] | None:
        arguments: list[Expression] = []

        if self.peek_is(Kind.RPAREN):
            self.next_token()
            return arguments

        self.next_token()
        arg = self.parse_expression(Precedence.LOWEST)
        if arg is None:
            return None
        arguments.append(arg)

        while self.peek_is(Kind.COMMA):
            self.next_token()
            self.next_token()
            arg = self.parse_expression(Precedence.LOWEST)
            if arg is None:
                return None
            arguments.append(arg)

        if not self.expect_peek(Kind.RPAREN):
            return None
        return arguments


def parse(source: str, strict: bool = True) -> Program | tuple[Program, list[str]]:
    """Tokenize and parse ``source``.

    In strict mode any recorded error raises ``ParserError`` and the Program
    is returned on success. Otherwise ``(program, errors)`` is returned; the
    program may be incomplete whenever ``errors`` is non-empty.
    """
    parser = Parser.from_source(source)
    program = parser.parse_program()
    if strict:
        parser.check_errors()
        return program
    return program, parser.errors


__all__ = ["Parser", "ParserError", "parse"]
