"""Composable string predicates used by the grep dialects."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


class Expression(ABC):
    """A parsed filter expression evaluated against one input string."""

    @abstractmethod
    def eval(self, value: str) -> bool:
        """Return ``True`` when *value* satisfies the expression."""


@dataclass(frozen=True)
class Partial(Expression):
    """Substring match, optionally inverted."""

    query: str
    invert: bool = False

    def eval(self, value: str) -> bool:
        found = self.query in value
        return not found if self.invert else found


@dataclass(frozen=True)
class Exact(Expression):
    """Whole-token match against a whitespace separated list, optionally inverted."""

    query: str
    invert: bool = False

    def eval(self, value: str) -> bool:
        found = self.query in value.split()
        return not found if self.invert else found


@dataclass(frozen=True)
class Any(Expression):
    """Matches when at least one child matches. An empty ``Any`` matches nothing."""

    expressions: tuple[Expression, ...] = ()

    def eval(self, value: str) -> bool:
        return any(e.eval(value) for e in self.expressions)


@dataclass(frozen=True)
class All(Expression):
    """Matches when every child matches. An empty ``All`` matches everything."""

    expressions: tuple[Expression, ...] = ()

    def eval(self, value: str) -> bool:
        return all(e.eval(value) for e in self.expressions)
