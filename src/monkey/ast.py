"""
Abstract Syntax Tree (AST) node definitions.

Every node keeps the token it was parsed from and renders a canonical text
form through str(). Prefix, infix and index expressions are fully
parenthesized, so str() of a parsed expression shows exactly how the parser
grouped it:

    str(parse("-a * b").program) == "((-a) * b)"

Optional fields are None when the parser could not produce the
sub-expression; they render as empty text and the evaluator reports them.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple
from abc import ABC, abstractmethod

from .tokens import Token


# =============================================================================
# Base Classes
# =============================================================================

class Node(ABC):
    """Base class for all AST nodes."""

    token: Token

    def token_literal(self) -> str:
        return self.token.literal

    @abstractmethod
    def __str__(self) -> str:
        ...


class Statement(Node):
    """Base class for all statements."""
    pass


class Expression(Node):
    """Base class for all expressions."""
    pass


def _text(node: Optional[Node]) -> str:
    return str(node) if node is not None else ""


# =============================================================================
# Expression Nodes
# =============================================================================

@dataclass
class Identifier(Expression):
    """A variable or function name reference."""
    token: Token
    value: str

    def __str__(self) -> str:
        return self.value


@dataclass
class IntegerLiteral(Expression):
    token: Token
    value: int

    def __str__(self) -> str:
        return self.token.literal


@dataclass
class StringLiteral(Expression):
    token: Token
    value: str

    def __str__(self) -> str:
        return f'"{self.value}"'


@dataclass
class BooleanLiteral(Expression):
    token: Token
    value: bool

    def __str__(self) -> str:
        return self.token.literal


@dataclass
class PrefixExpression(Expression):
    """A unary operation (e.g., !ok, -n)."""
    token: Token
    operator: str
    right: Optional[Expression] = None

    def __str__(self) -> str:
        return f"({self.operator}{_text(self.right)})"


@dataclass
class InfixExpression(Expression):
    """A binary operation (e.g., a + b, x == y)."""
    token: Token
    left: Expression
    operator: str
    right: Optional[Expression] = None

    def __str__(self) -> str:
        return f"({self.left} {self.operator} {_text(self.right)})"


@dataclass
class IfExpression(Expression):
    """An if-else expression (returns a value)."""
    token: Token
    condition: Expression
    consequence: "BlockStatement"
    alternative: Optional["BlockStatement"] = None

    def __str__(self) -> str:
        text = f"if{self.condition} {self.consequence}"
        if self.alternative is not None:
            text += f"else {self.alternative}"
        return text


@dataclass
class FunctionLiteral(Expression):
    """A function literal: fn(x, y) { x + y }."""
    token: Token
    parameters: List[Identifier]
    body: "BlockStatement"

    def __str__(self) -> str:
        params = ", ".join(str(p) for p in self.parameters)
        return f"{self.token_literal()} ({params}) {self.body}"


@dataclass
class CallExpression(Expression):
    """A call: <expression>(<arguments>). The token is the '('."""
    token: Token
    function: Expression
    arguments: List[Expression] = field(default_factory=list)

    def __str__(self) -> str:
        args = ", ".join(str(a) for a in self.arguments)
        return f"{self.function}({args})"


@dataclass
class ArrayLiteral(Expression):
    token: Token
    elements: List[Expression] = field(default_factory=list)

    def __str__(self) -> str:
        return "[" + ", ".join(str(e) for e in self.elements) + "]"


@dataclass
class IndexExpression(Expression):
    """Index access: <left>[<index>]. The token is the '['."""
    token: Token
    left: Expression
    index: Expression

    def __str__(self) -> str:
        return f"({self.left}[{self.index}])"


@dataclass
class HashLiteral(Expression):
    """A hash literal. Pairs keep their source order."""
    token: Token
    pairs: List[Tuple[Expression, Expression]] = field(default_factory=list)

    def __str__(self) -> str:
        items = ", ".join(f"{key}: {value}" for key, value in self.pairs)
        return "{" + items + "}"


# =============================================================================
# Statement Nodes
# =============================================================================

@dataclass
class LetStatement(Statement):
    """let <name> = <value>;"""
    token: Token
    name: Identifier
    value: Optional[Expression] = None

    def __str__(self) -> str:
        return f"{self.token_literal()} {self.name} = {_text(self.value)};"


@dataclass
class ReturnStatement(Statement):
    """return [<value>];"""
    token: Token
    value: Optional[Expression] = None

    def __str__(self) -> str:
        return f"{self.token_literal()} {_text(self.value)};"


@dataclass
class ExpressionStatement(Statement):
    """An expression used as a statement."""
    token: Token
    expression: Optional[Expression] = None

    def __str__(self) -> str:
        return _text(self.expression)


@dataclass
class BlockStatement(Statement):
    """A brace-delimited block. The token is the '{'."""
    token: Token
    statements: List[Statement] = field(default_factory=list)

    def __str__(self) -> str:
        return "".join(str(s) for s in self.statements)


@dataclass
class Program(Node):
    """The root node of every parse."""
    statements: List[Statement] = field(default_factory=list)

    def token_literal(self) -> str:
        if self.statements:
            return self.statements[0].token_literal()
        return ""

    def __str__(self) -> str:
        return "".join(str(s) for s in self.statements)
