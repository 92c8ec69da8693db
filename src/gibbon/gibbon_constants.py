"""
Token categories and lookup tables shared by the Gibbon lexer and parser.

Exports:
    - Kind: closed enumeration of token categories
    - token_hashmap: fixed symbol text -> Kind
    - keywords: keyword text -> Kind
    - lookup_ident(): classify an identifier-shaped lexeme
    - Precedence / precedences / precedence_of(): operator binding powers
"""

from enum import Enum, IntEnum


class Kind(Enum):
    """Lexical category of a token.

    The value of each member is the name used in parser error messages,
    e.g. ``expected next token to be Ident, got Eof instead``.
    """

    ILLEGAL = "Illegal"
    EOF = "Eof"

    # Identifiers + literals
    IDENT = "Ident"
    INT = "Int"

    # Operators
    ASSIGN = "Assign"
    PLUS = "Plus"
    MINUS = "Minus"
    ASTERIX = "Asterix"
    SLASH = "Slash"
    BANG = "Bang"
    LT = "Lt"
    GT = "Gt"
    EQ = "Eq"
    NE = "Ne"

    # Delimiters
    COMMA = "Comma"
    SEMICOLON = "SemiColon"
    LPAREN = "LParen"
    RPAREN = "RParen"
    LBRACE = "LBrace"
    RBRACE = "RBrace"

    # Keywords
    FUNCTION = "Function"
    LET = "Let"
    TRUE = "True"
    FALSE = "False"
    IF = "If"
    ELSE = "Else"
    RETURN = "Return"

    def __str__(self) -> str:
        return self.value


token_hashmap: dict[str, Kind] = {
    "==": Kind.EQ,
    "!=": Kind.NE,
    "=": Kind.ASSIGN,
    "+": Kind.PLUS,
    "-": Kind.MINUS,
    "*": Kind.ASTERIX,
    "/": Kind.SLASH,
    "!": Kind.BANG,
    "<": Kind.LT,
    ">": Kind.GT,
    ",": Kind.COMMA,
    ";": Kind.SEMICOLON,
    "(": Kind.LPAREN,
    ")": Kind.RPAREN,
    "{": Kind.LBRACE,
    "}": Kind.RBRACE,
}

keywords: dict[str, Kind] = {
    "fn": Kind.FUNCTION,
    "let": Kind.LET,
    "true": Kind.TRUE,
    "false": Kind.FALSE,
    "if": Kind.IF,
    "else": Kind.ELSE,
    "return": Kind.RETURN,
}


def lookup_ident(literal: str) -> Kind:
    """Return the keyword kind for ``literal``, or ``Kind.IDENT``."""
    return keywords.get(literal, Kind.IDENT)


class Precedence(IntEnum):
    LOWEST = 0
    EQUALITY = 1
    COMPARISON = 2
    SUM = 3
    PRODUCT = 4
    PREFIX = 5
    CALL = 6


precedences: dict[Kind, Precedence] = {
    Kind.EQ: Precedence.EQUALITY,
    Kind.NE: Precedence.EQUALITY,
    Kind.LT: Precedence.COMPARISON,
    Kind.GT: Precedence.COMPARISON,
    Kind.PLUS: Precedence.SUM,
    Kind.MINUS: Precedence.SUM,
    Kind.ASTERIX: Precedence.PRODUCT,
    Kind.SLASH: Precedence.PRODUCT,
    Kind.LPAREN: Precedence.CALL,
}

infix_operators: frozenset[Kind] = frozenset(
    kind for kind, prec in precedences.items() if prec != Precedence.CALL
)


def precedence_of(kind: Kind) -> Precedence:
    return precedences.get(kind, Precedence.LOWEST)


__all__ = [
    "Kind",
    "Precedence",
    "infix_operators",
    "keywords",
    "lookup_ident",
    "precedence_of",
    "precedences",
    "token_hashmap",
]
