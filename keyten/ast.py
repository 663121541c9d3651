"""Syntax tree of the language."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from keyten.values import Kind


@dataclass(frozen=True)
class Span:
    """Byte range into the original source."""

    start: int = 0
    end: int = 0

    @staticmethod
    def merge(a: Span, b: Span) -> Span:
        return Span(min(a.start, b.start), max(a.end, b.end))


class OpId(Enum):
    """Verb identifiers, valued by their source glyph."""

    PLUS = "+"
    MINUS = "-"
    TIMES = "*"
    DIV = "%"
    BANG = "!"
    AT = "@"
    HASH = "#"
    COMMA = ","
    EQ = "="
    LT = "<"
    GT = ">"
    TILDE = "~"
    AMP = "&"
    PIPE = "|"
    UNDERSCORE = "_"
    DOLLAR = "$"
    CARET = "^"
    QUESTION = "?"
    DOT = "."


@dataclass(frozen=True)
class AtomLit:
    """A literal atom: its kind and stored value (null and infinity as sentinels)."""

    atom_kind: Kind
    value: Any

    def kind(self) -> Kind:
        return self.atom_kind


class AdvId(Enum):
    """Adverbs."""

    OVER = "/"
    SCAN = "\\"
    EACH = "'"
    EACH_PRIOR = "':"


@dataclass
class AtomExpr:
    lit: AtomLit
    span: Span = field(default_factory=Span)


@dataclass
class VecExpr:
    kind: Kind
    items: list[AtomLit]
    span: Span = field(default_factory=Span)


@dataclass
class ListExpr:
    items: list[Expr]
    span: Span = field(default_factory=Span)


@dataclass
class NameExpr:
    sym: int
    span: Span = field(default_factory=Span)


@dataclass
class AssignExpr:
    name: int
    value: Expr
    span: Span = field(default_factory=Span)


@dataclass
class DyadExpr:
    verb: OpId
    lhs: Expr
    rhs: Expr
    span: Span = field(default_factory=Span)


@dataclass
class MonadExpr:
    verb: OpId
    arg: Expr
    span: Span = field(default_factory=Span)


@dataclass
class AdverbExpr:
    adv: AdvId
    verb: OpId
    arg: Expr
    span: Span = field(default_factory=Span)


@dataclass
class SeqExpr:
    """Statements separated by ``;``; evaluates to the last one."""

    items: list[Expr]
    span: Span = field(default_factory=Span)


@dataclass
class CondExpr:
    """``$[c;t;e]``."""

    cond: Expr
    then_branch: Expr
    else_branch: Expr
    span: Span = field(default_factory=Span)


@dataclass
class LambdaExpr:
    """``{[x;y]body}`` or ``{body}``."""

    params: list[int]
    body: Expr
    span: Span = field(default_factory=Span)


@dataclass
class ApplyExpr:
    """``func[a;b;c]``."""

    func: Expr
    args: list[Expr]
    span: Span = field(default_factory=Span)


@dataclass(frozen=True)
class LambdaInner:
    """Parameters and body held by a lambda value."""

    params: tuple[int, ...]
    body: Expr


Expr = Union[
    AtomExpr,
    VecExpr,
    ListExpr,
    NameExpr,
    AssignExpr,
    DyadExpr,
    MonadExpr,
    AdverbExpr,
    SeqExpr,
    CondExpr,
    LambdaExpr,
    ApplyExpr,
]