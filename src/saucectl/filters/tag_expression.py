"""Cucumber tag expressions.

Parses the boolean tag syntax used by Cucumber (``@smoke and not @slow``)
into an evaluatable tree. Supports ``and``, ``or``, ``not``, parentheses and
``\\`` escapes for parentheses, backslashes and whitespace inside tag names.
Precedence is ``not`` > ``and`` > ``or``; binary operators associate left.

See https://cucumber.io/docs/cucumber/api/#tag-expressions
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Collection


class TagExpressionError(ValueError):
    """The tag expression is malformed."""

    def __init__(self, expression: str, reason: str) -> None:
        self.expression = expression
        self.reason = reason
        super().__init__(
            f'Tag expression "{expression}" could not be parsed because of syntax error: {reason}'
        )


# ── Expression tree ──────────────────────────────────────────────


class Evaluatable(ABC):
    """A parsed tag expression."""

    @abstractmethod
    def evaluate(self, tags: Collection[str]) -> bool:
        """Return ``True`` when *tags* satisfy the expression."""


@dataclass(frozen=True)
class Literal(Evaluatable):
    name: str

    def evaluate(self, tags: Collection[str]) -> bool:
        return self.name in tags

    def __str__(self) -> str:
        escaped = self.name.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")
        return escaped.replace(" ", "\\ ")


@dataclass(frozen=True)
class And(Evaluatable):
    left: Evaluatable
    right: Evaluatable

    def evaluate(self, tags: Collection[str]) -> bool:
        return self.left.evaluate(tags) and self.right.evaluate(tags)

    def __str__(self) -> str:
        return f"( {self.left} and {self.right} )"


@dataclass(frozen=True)
class Or(Evaluatable):
    left: Evaluatable
    right: Evaluatable

    def evaluate(self, tags: Collection[str]) -> bool:
        return self.left.evaluate(tags) or self.right.evaluate(tags)

    def __str__(self) -> str:
        return f"( {self.left} or {self.right} )"


@dataclass(frozen=True)
class Not(Evaluatable):
    operand: Evaluatable

    def evaluate(self, tags: Collection[str]) -> bool:
        return not self.operand.evaluate(tags)

    def __str__(self) -> str:
        return f"not ( {self.operand} )"


class TrueExpression(Evaluatable):
    """Result of parsing an empty expression. Matches any tag set."""

    def evaluate(self, tags: Collection[str]) -> bool:
        return True

    def __str__(self) -> str:
        return "true"


# ── Parser ───────────────────────────────────────────────────────


class _Kind(Enum):
    OPERAND = "operand"
    OPERATOR = "operator"


_ESCAPE = "\\"
_OPEN = "("
_CLOSE = ")"

_BINARY = {"or": 0, "and": 1}
_UNARY = {"not": 2}
_BINARY_ARITY = 2


@dataclass(frozen=True)
class _Token:
    value: str
    is_paren: bool = False


def parse(expression: str) -> Evaluatable:
    """Parse *expression* into an :class:`Evaluatable`.

    Raises:
        TagExpressionError: If the expression is malformed.
    """
    tokens = _tokenize(expression)
    if not tokens:
        return TrueExpression()

    operators: list[_Token] = []
    operands: list[Evaluatable] = []
    expected = _Kind.OPERAND

    def check(kind: _Kind) -> None:
        if expected is not kind:
            raise TagExpressionError(expression, f"Expected {expected.value}.")

    def reduce(op: _Token) -> None:
        if op.value in _UNARY:
            if not operands:
                raise TagExpressionError(expression, f'Missing operand for "{op.value}".')
            operands.append(Not(operands.pop()))
            return
        if len(operands) < _BINARY_ARITY:
            raise TagExpressionError(expression, f'Missing operand for "{op.value}".')
        right = operands.pop()
        left = operands.pop()
        operands.append(And(left, right) if op.value == "and" else Or(left, right))

    for token in tokens:
        if token.is_paren and token.value == _OPEN:
            check(_Kind.OPERAND)
            operators.append(token)
        elif token.is_paren:
            check(_Kind.OPERATOR)
            while operators and not operators[-1].is_paren:
                reduce(operators.pop())
            if not operators:
                raise TagExpressionError(expression, 'Unmatched ")".')
            operators.pop()
            expected = _Kind.OPERATOR
        elif token.value in _UNARY:
            check(_Kind.OPERAND)
            operators.append(token)
        elif token.value in _BINARY:
            check(_Kind.OPERATOR)
            precedence = _BINARY[token.value]
            while (
                operators
                and not operators[-1].is_paren
                and precedence <= _precedence(operators[-1])
            ):
                reduce(operators.pop())
            operators.append(token)
            expected = _Kind.OPERAND
        else:
            check(_Kind.OPERAND)
            operands.append(Literal(token.value))
            expected = _Kind.OPERATOR

    if expected is _Kind.OPERAND:
        raise TagExpressionError(expression, "Expected operand.")

    while operators:
        op = operators.pop()
        if op.is_paren:
            raise TagExpressionError(expression, 'Unmatched "(".')
        reduce(op)

    if len(operands) != 1:
        raise TagExpressionError(expression, "Expected a single expression.")
    return operands[0]


def _precedence(token: _Token) -> int:
    return _UNARY.get(token.value, _BINARY.get(token.value, -1))


def _tokenize(expression: str) -> list[_Token]:
    tokens: list[_Token] = []
    current: list[str] = []
    escaped = False

    def flush() -> None:
        if current:
            tokens.append(_Token("".join(current)))
            current.clear()

    for ch in expression:
        if escaped:
            if ch not in (_OPEN, _CLOSE, _ESCAPE) and not ch.isspace():
                raise TagExpressionError(expression, f'Illegal escape before "{ch}".')
            current.append(ch)
            escaped = False
        elif ch == _ESCAPE:
            escaped = True
        elif ch in (_OPEN, _CLOSE):
            flush()
            tokens.append(_Token(ch, is_paren=True))
        elif ch.isspace():
            flush()
        else:
            current.append(ch)

    if escaped:
        raise TagExpressionError(expression, "Trailing escape character.")
    flush()
    return tokens
