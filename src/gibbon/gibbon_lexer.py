"""
Lexical analyzer for the Gibbon expression language.

This module converts raw source text into a stream of tokens:

Classes:
    CharacterStream: Cursor over the characters of a source string.
    Token: A single token made of a category (``Kind``) and its literal text.
    Lexer: Converts a CharacterStream into a sequence of tokens.

Features:
    - Skips spaces, tabs, newlines and carriage returns
    - Longest-match recognition of operators (``==`` and ``!=`` before ``=`` and ``!``)
    - Recognizes:
        * Identifiers (``[A-Za-z_]+``) and keywords
        * Integer literals (``[0-9]+``)
        * Operators and delimiters
    - Unknown characters become ``Illegal`` tokens with an empty literal

Example:
    >>> lexer = Lexer(CharacterStream("let x = 5;"))
    >>> lexer.next_token()
    Token(Let, 'let')

Exports:
    - CharacterStream
    - Token
    - Lexer
    - tokenize
"""

from collections.abc import Iterator
from typing import Any

from gibbon.gibbon_constants import Kind, lookup_ident, token_hashmap

WHITESPACE = " \t\r\n"
IDENT_CHARS = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ_")
DIGITS = frozenset("0123456789")

# longest key in token_hashmap
MAX_OPERATOR_LEN = max(len(sym) for sym in token_hashmap)


class CharacterStream:
    """
    A utility for reading characters from a string source.

    Attributes:
        source (str): The input source string.
        position (int): Index of the next character to be read.
    """

    def __init__(self, source: str, position: int = 0):
        self.source = source
        self.position = position

    def next(self) -> str:
        """
        Consumes and returns the next character in the stream.

        Raises:
            EOFError: If reading past the end of the source.
        """
        if self.position >= len(self.source):
            raise EOFError(
                f"Attempted to read past end of source at position=<{self.position}>"
            )
        char = self.source[self.position]
        self.position += 1
        return char

    def peek(self, offset: int = 0) -> str:
        """
        Returns the character at the given offset from the current position without advancing.

        Returns:
            str: The character at the offset, or an empty string if out of bounds.
        """
        index = self.position + offset
        if index < 0 or index >= len(self.source):
            return ""
        return self.source[index]

    def current(self) -> str | None:
        return self.source[self.position] if self.position < len(self.source) else None

    def end_of_file(self) -> bool:
        return self.position >= len(self.source)


class Token:
    """Represents a single lexical token.

    Tokens are plain values: two tokens with the same kind and literal are
    interchangeable.

    Attributes:
        kind (Kind): The token category.
        literal (str): The source text of the token.
    """

    __slots__ = ("kind", "literal")

    def __init__(self, kind: Kind, literal: str):
        self.kind = kind
        self.literal = literal

    def __repr__(self) -> str:
        return f"Token({self.kind}, {self.literal!r})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Token)
            and self.kind == other.kind
            and self.literal == other.literal
        )

    def __hash__(self) -> int:
        return hash((self.kind, self.literal))


class Lexer:
    """Lexical analyzer for Gibbon source.

    ``next_token()`` hands out one token per call and keeps returning the
    ``Eof`` token once the input is exhausted. Iterating over a Lexer yields
    the same tokens but stops at end of input instead.

    Attributes:
        stream (CharacterStream): The source stream to tokenize.
    """

    def __init__(self, stream: CharacterStream) -> None:
        self.stream = stream

    @classmethod
    def from_source(cls, source: str) -> "Lexer":
        return cls(CharacterStream(source))

    def __iter__(self) -> Iterator[Token]:
        while True:
            tok = self.next_token()
            if tok.kind is Kind.EOF:
                return
            yield tok

    def peek(self) -> str:
        return self.stream.peek()

    def advance(self) -> str:
        return self.stream.next()

    def skip_whitespace(self) -> None:
        while not self.stream.end_of_file() and self.peek() in WHITESPACE:
            self.advance()

    def match_operator(self) -> Token | None:
        """Attempts to match the longest valid operator from the current position.

        Returns:
            Token | None: A Token if a match is found, otherwise None.
        """
        max_token = None
        candidate = ""

        for i in range(MAX_OPERATOR_LEN):
            ch = self.stream.peek(i)
            if ch == "":
                break
            candidate += ch
            if candidate in token_hashmap:
                max_token = candidate

        if max_token:
            for _ in range(len(max_token)):
                self.advance()
            return Token(token_hashmap[max_token], max_token)

        return None

    def read_while(self, allowed: frozenset[str]) -> str:
        text = ""
        while not self.stream.end_of_file() and self.peek() in allowed:
            text += self.advance()
        return text

    def next_token(self) -> Token:
        """Consumes and returns the next Token from the stream."""
        self.skip_whitespace()

        if self.stream.end_of_file():
            return Token(Kind.EOF, "")

        # 1. Operators and delimiters
        token = self.match_operator()
        if token:
            return token

        ch = self.peek()

        # 2. Identifier or keyword
        if ch in IDENT_CHARS:
            ident = self.read_while(IDENT_CHARS)
            return Token(lookup_ident(ident), ident)

        # 3. Integer
        if ch in DIGITS:
            return Token(Kind.INT, self.read_while(DIGITS))

        # 4. Unknown character, the offending text is not kept
        self.advance()
        return Token(Kind.ILLEGAL, "")


def tokenize(source: str) -> list[Token]:
    """Tokenize ``source`` completely, without the trailing ``Eof`` token."""
    return list(Lexer.from_source(source))


__all__ = ["CharacterStream", "Lexer", "Token", "tokenize"]
