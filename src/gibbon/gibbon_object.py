"""
Runtime value model for Gibbon programs.

These are the values an evaluator produces from a parsed Program: integers,
booleans and null. Each exposes its ``kind()`` and an ``inspect()`` string
used when echoing results.

No evaluator is wired up yet: the REPL and CLI stop at parsing, so nothing
else in the package imports this module. It is exercised by
``tests/test_object.py`` only.
"""

from enum import Enum
from typing import Any


class ObjectKind(Enum):
    INTEGER = "INTEGER"
    BOOLEAN = "BOOLEAN"
    NULL = "NULL"


class Object:
    """Base class for runtime values."""

    def kind(self) -> ObjectKind:
        raise NotImplementedError

    def inspect(self) -> str:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.inspect()})"


class Integer(Object):
    def __init__(self, value: int):
        self.value = value

    def kind(self) -> ObjectKind:
        return ObjectKind.INTEGER

    def inspect(self) -> str:
        return str(self.value)

    def __eq__(self, other: Any) -> bool:
        return isinstance(other, Integer) and self.value == other.value

    def __hash__(self) -> int:
        return hash((ObjectKind.INTEGER, self.value))


class Boolean(Object):
    def __init__(self, value: bool):
        self.value = value

    def kind(self) -> ObjectKind:
        return ObjectKind.BOOLEAN

    def inspect(self) -> str:
        return "true" if self.value else "false"

    def __eq__(self, other: Any) -> bool:
        return isinstance(other, Boolean) and self.value == other.value

    def __hash__(self) -> int:
        return hash((ObjectKind.BOOLEAN, self.value))


class Null(Object):
    def kind(self) -> ObjectKind:
        return ObjectKind.NULL

    def inspect(self) -> str:
        return "null"

    def __eq__(self, other: Any) -> bool:
        return isinstance(other, Null)

    def __hash__(self) -> int:
        return hash(ObjectKind.NULL)


__all__ = ["Boolean", "Integer", "Null", "Object", "ObjectKind"]
