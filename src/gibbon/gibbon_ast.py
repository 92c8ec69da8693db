"""
Defines the abstract syntax tree (AST) for the Gibbon expression language.

The tree is a closed set of node classes, one per syntactic form:

Expressions:
    Identifier, IntegerLiteral, BooleanLiteral, Prefix, Infix, If,
    FunctionLiteral, Call

Statements:
    Let, Return, ExpressionStatement, Block

Root:
    Program

Every node exclusively owns its children; the tree is built once by the
parser and never shared or mutated afterward.

Each node provides:
    kind (str): Tag naming the variant (e.g. "infix", "let").
    __str__(): Canonical rendering. Prefix and infix expressions are always
        fully parenthesized, so rendering a Program and parsing the result
        again yields the same tree.
    __eq__(): Structural equality.
    to_dict(): Nested plain-dict form suitable for JSON output.

Example:
    >>> str(Infix(Identifier("a"), "+", IntegerLiteral(1)))
    '(a + 1)'
"""

from typing import Any, ClassVar, TypedDict, Union


class ASTDict(TypedDict, total=False):
    """
    Serialized form of a node, as produced by ``Node.to_dict()``.

    Only ``kind`` is always present; the remaining keys depend on the variant.
    """

    kind: str
    name: str
    value: Any
    operator: str
    left: "ASTDict"
    right: "ASTDict"
    condition: "ASTDict"
    consequence: "ASTDict"
    alternative: "ASTDict | None"
    parameters: list["ASTDict"]
    body: "ASTDict"
    function: "ASTDict"
    arguments: list["ASTDict"]
    statements: list["ASTDict"]


def _serialize(value: Any) -> Any:
    if isinstance(value, Node):
        return value.to_dict()
    if isinstance(value, list):
        return [_serialize(v) for v in value]
    return value


class Node:
    """Base class for all AST nodes.

    Subclasses declare their tag in ``kind`` and their child slots in
    ``_fields``; equality, ``repr`` and serialization are driven by those.
    """

    kind: ClassVar[str] = "node"
    _fields: ClassVar[tuple[str, ...]] = ()

    def __repr__(self) -> str:
        parts = ", ".join(f"{name}={getattr(self, name)!r}" for name in self._fields)
        return f"{type(self).__name__}({parts})"

    def __eq__(self, other: Any) -> bool:
        if type(self) is not type(other):
            return False
        return all(getattr(self, f) == getattr(other, f) for f in self._fields)

    def to_dict(self) -> ASTDict:
        data: dict[str, Any] = {"kind": self.kind}
        for name in self._fields:
            data[name] = _serialize(getattr(self, name))
        return data  # type: ignore[return-value]


# Expressions


class Identifier(Node):
    kind = "identifier"
    _fields = ("name",)

    def __init__(self, name: str):
        self.name = name

    def __str__(self) -> str:
        return self.name


class IntegerLiteral(Node):
    kind = "integer"
    _fields = ("value",)

    def __init__(self, value: int):
        self.value = value

    def __str__(self) -> str:
        return str(self.value)


class BooleanLiteral(Node):
    kind = "boolean"
    _fields = ("value",)

    def __init__(self, value: bool):
        self.value = value

    def __str__(self) -> str:
        return "true" if self.value else "false"


class Prefix(Node):
    """Unary ``!`` or ``-`` applied to ``right``."""

    kind = "prefix"
    _fields = ("operator", "right")

    def __init__(self, operator: str, right: "Expression"):
        self.operator = operator
        self.right = right

    def __str__(self) -> str:
        return f"({self.operator}{self.right})"


class Infix(Node):
    """Binary arithmetic, comparison or equality operation."""

    kind = "infix"
    _fields = ("left", "operator", "right")

    def __init__(self, left: "Expression", operator: str, right: "Expression"):
        self.left = left
        self.operator = operator
        self.right = right

    def __str__(self) -> str:
        return f"({self.left} {self.operator} {self.right})"


class If(Node):
    """Conditional expression; ``alternative`` is None unless ``else`` was written."""

    kind = "if"
    _fields = ("condition", "consequence", "alternative")

    def __init__(
        self,
        condition: "Expression",
        consequence: "Block",
        alternative: "Block | None" = None,
    ):
        self.condition = condition
        self.consequence = consequence
        self.alternative = alternative

    def __str__(self) -> str:
        text = f"if ({self.condition}) {self.consequence}"
        if self.alternative is not None:
            text += f" else {self.alternative}"
        return text


class FunctionLiteral(Node):
    kind = "function"
    _fields = ("parameters", "body")

    def __init__(self, parameters: list[Identifier], body: "Block"):
        self.parameters = parameters
        self.body = body

    def __str__(self) -> str:
        params = ", ".join(str(p) for p in self.parameters)
        return f"fn({params}) {self.body}"


class Call(Node):
    kind = "call"
    _fields = ("function", "arguments")

    def __init__(self, function: "Expression", arguments: list["Expression"]):
        self.function = function
        self.arguments = arguments

    def __str__(self) -> str:
        args = ", ".join(str(a) for a in self.arguments)
        return f"{self.function}({args})"


# Statements


class Let(Node):
    kind = "let"
    _fields = ("name", "value")

    def __init__(self, name: Identifier, value: "Expression"):
        self.name = name
        self.value = value

    def __str__(self) -> str:
        return f"let {self.name} = {self.value}"


class Return(Node):
    kind = "return"
    _fields = ("value",)

    def __init__(self, value: "Expression"):
        self.value = value

    def __str__(self) -> str:
        return f"return {self.value}"


class ExpressionStatement(Node):
    kind = "expression"
    _fields = ("value",)

    def __init__(self, value: "Expression"):
        self.value = value

    def __str__(self) -> str:
        return str(self.value)


class Block(Node):
    """Brace-delimited statement sequence used as an if-branch or function body."""

    kind = "block"
    _fields = ("statements",)

    def __init__(self, statements: list["Statement"] | None = None):
        self.statements: list["Statement"] = statements or []

    def __str__(self) -> str:
        if not self.statements:
            return "{ }"
        return "{ " + "; ".join(str(s) for s in self.statements) + " }"


class Program(Node):
    """Root of the tree: the top-level statements of one parse."""

    kind = "program"
    _fields = ("statements",)

    def __init__(self, statements: list["Statement"] | None = None):
        self.statements: list["Statement"] = statements or []

    def __str__(self) -> str:
        return "; ".join(str(s) for s in self.statements)


Expression = Union[
    Identifier, IntegerLiteral, BooleanLiteral, Prefix, Infix, If, FunctionLiteral, Call
]
Statement = Union[Let, Return, ExpressionStatement, Block]


__all__ = [
    "ASTDict",
    "Block",
    "BooleanLiteral",
    "Call",
    "Expression",
    "ExpressionStatement",
    "FunctionLiteral",
    "Identifier",
    "If",
    "Infix",
    "IntegerLiteral",
    "Let",
    "Node",
    "Prefix",
    "Program",
    "Return",
    "Statement",
]
