"""Compile expression and statement source into evaluable objects."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from liquidtpl.expressions.errors import (
    ExpressionSyntaxError,
    FilterError,
    InterpreterError,
    UndefinedFilter,
)
from liquidtpl.expressions.lexer import LexToken, TokenKind, tokenize
from liquidtpl.expressions.operations import (
    contains,
    equal,
    index_value,
    is_truthy,
    less,
    make_range,
    property_value,
)

# These prefixes match the lexer's statement tokens.
ASSIGN_STATEMENT_SELECTOR = "%assign "
CYCLE_STATEMENT_SELECTOR = "{%cycle "
LOOP_STATEMENT_SELECTOR = "%loop "
WHEN_STATEMENT_SELECTOR = "{%when "

_DEFAULT_COLS = 2**31 - 1

Evaluator = Callable[[Any], Any]


class Expression:
    """A compiled expression, evaluated against a context."""

    __slots__ = ("_evaluator",)

    def __init__(self, evaluator: Evaluator) -> None:
        self._evaluator = evaluator

    def evaluate(self, ctx: Any) -> Any:
        """Evaluate the expression in ``ctx``."""
        return self._evaluator(ctx)


@dataclass(frozen=True)
class Closure:
    """An expression together with the context it is evaluated in."""

    expr: Expression
    context: Any

    def bind(self, name: str, value: Any) -> "Closure":
        """Return a closure whose context also binds ``name`` to ``value``."""
        ctx = self.context.clone()
        ctx.set(name, value)
        return Closure(self.expr, ctx)

    def evaluate(self) -> Any:
        """Evaluate the expression in the closure's context."""
        return self.expr.evaluate(self.context)


@dataclass
class Assignment:
    """A parsed ``{% assign %}`` statement."""

    variable: str
    value_fn: Expression


@dataclass
class Cycle:
    """A parsed ``{% cycle %}`` statement."""

    group: str
    values: list[str]


@dataclass
class Loop:
    """A parsed ``{% for %}`` loop header."""

    variable: str
    expr: Expression
    limit: Optional[int] = None
    offset: int = 0
    reversed: bool = False
    cols: int = _DEFAULT_COLS


@dataclass
class When:
    """A parsed ``{% when %}`` clause."""

    exprs: list[Expression] = field(default_factory=list)


@dataclass
class Statement:
    """The result of parsing a statement; only the parsed kind is set."""

    assignment: Optional[Assignment] = None
    cycle: Optional[Cycle] = None
    loop: Optional[Loop] = None
    when: Optional[When] = None
    value: Optional[Expression] = None


class _Failure(Exception):
    """The token stream does not match the grammar."""


def _quote(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


def _constant_fn(value: Any) -> Evaluator:
    return lambda ctx: value


def _variable_fn(name: str) -> Evaluator:
    return lambda ctx: ctx.get(name)


def _property_fn(obj_fn: Evaluator, name: str) -> Evaluator:
    return lambda ctx: property_value(obj_fn(ctx), name)


def _index_fn(seq_fn: Evaluator, index_fn: Evaluator) -> Evaluator:
    return lambda ctx: index_value(seq_fn(ctx), index_fn(ctx))


def _range_fn(start_fn: Evaluator, end_fn: Evaluator) -> Evaluator:
    return lambda ctx: make_range(start_fn(ctx), end_fn(ctx))


def _binary_fn(op: Callable[[Any, Any], bool], fa: Evaluator, fb: Evaluator) -> Evaluator:
    return lambda ctx: op(fa(ctx), fb(ctx))


def _and_fn(fa: Evaluator, fb: Evaluator) -> Evaluator:
    return lambda ctx: is_truthy(fa(ctx)) and is_truthy(fb(ctx))


def _or_fn(fa: Evaluator, fb: Evaluator) -> Evaluator:
    return lambda ctx: is_truthy(fa(ctx)) or is_truthy(fb(ctx))


_PASSTHROUGH = (UndefinedFilter, FilterError, InterpreterError, ExpressionSyntaxError)


def _filter_fn(receiver: Evaluator, name: str, params: list[Evaluator]) -> Evaluator:
    def apply(ctx: Any) -> Any:
        try:
            return ctx.apply_filter(name, receiver, params)
        except _PASSTHROUGH:
            raise
        except Exception as exc:
            raise FilterError(name, exc) from exc

    return apply


_COMPARISONS: dict[TokenKind, Callable[[Any, Any], bool]] = {
    TokenKind.EQ: equal,
    TokenKind.NEQ: lambda a, b: not equal(a, b),
    TokenKind.GE: lambda a, b: less(b, a) or equal(a, b),
    TokenKind.LE: lambda a, b: less(a, b) or equal(a, b),
    TokenKind.CONTAINS: contains,
}

_CHAR_COMPARISONS: dict[str, Callable[[Any, Any], bool]] = {
    "<": less,
    ">": lambda a, b: less(b, a),
}


class _Parser:
    def __init__(self, source: str) -> None:
        self.tokens: list[LexToken] = list(tokenize(source))
        self.pos = 0

    def peek(self, offset: int = 0) -> Optional[LexToken]:
        index = self.pos + offset
        return self.tokens[index] if index < len(self.tokens) else None

    def advance(self) -> LexToken:
        token = self.peek()
        if token is None:
            raise _Failure()
        self.pos += 1
        return token

    def at_kind(self, kind: TokenKind, offset: int = 0) -> bool:
        token = self.peek(offset)
        return token is not None and token.kind is kind

    def at_char(self, char: str, offset: int = 0) -> bool:
        token = self.peek(offset)
        return token is not None and token.kind is TokenKind.CHAR and token.value == char

    def take(self, kind: TokenKind) -> LexToken:
        if not self.at_kind(kind):
            raise _Failure()
        return self.advance()

    def take_char(self, char: str) -> None:
        if not self.at_char(char):
            raise _Failure()
        self.advance()

    # statements

    def start(self) -> Statement:
        statement = Statement()
        if self.at_kind(TokenKind.ASSIGN):
            self.advance()
            name = self.take(TokenKind.IDENTIFIER).value
            self.take_char("=")
            statement.assignment = Assignment(name, Expression(self.filtered()))
        elif self.at_kind(TokenKind.CYCLE):
            self.advance()
            statement.cycle = self.cycle()
        elif self.at_kind(TokenKind.LOOP):
            self.advance()
            statement.loop = self.loop()
        elif self.at_kind(TokenKind.WHEN):
            self.advance()
            statement.when = self.when()
        else:
            statement.value = Expression(self.cond())
        self.take_char(";")
        if self.peek() is not None:
            raise _Failure()
        return statement

    def string(self) -> str:
        token = self.take(TokenKind.LITERAL)
        if not isinstance(token.value, str):
            raise ExpressionSyntaxError(f"expected a string for {token.value!r}")
        return token.value

    def string_list(self) -> list[str]:
        items = []
        while self.at_char(","):
            self.advance()
            items.append(self.string())
        return items

    def cycle(self) -> Cycle:
        first = self.string()
        if self.at_char(":"):
            self.advance()
            head = self.string()
            return Cycle(first, [head, *self.string_list()])
        return Cycle("", [first, *self.string_list()])

    def when(self) -> When:
        exprs = [Expression(self.expr())]
        while self.at_char(","):
            self.advance()
            exprs.append(Expression(self.expr()))
        return When(exprs)

    def loop(self) -> Loop:
        name = self.take(TokenKind.IDENTIFIER).value
        self.take(TokenKind.IN)
        loop = Loop(name, Expression(self.loop_expr()))
        self.loop_modifiers(loop)
        return loop

    def loop_expr(self) -> Evaluator:
        is_range = (
            self.at_char("(")
            and (self.at_kind(TokenKind.LITERAL, 1) or self.at_kind(TokenKind.IDENTIFIER, 1))
            and self.at_kind(TokenKind.DOTDOT, 2)
        )
        if not is_range:
            return self.filtered()
        self.advance()
        start = self.range_end()
        self.take(TokenKind.DOTDOT)
        end = self.range_end()
        self.take_char(")")
        return _range_fn(start, end)

    def range_end(self) -> Evaluator:
        token = self.advance()
        if token.kind is TokenKind.LITERAL:
            return _constant_fn(token.value)
        if token.kind is TokenKind.IDENTIFIER:
            return _variable_fn(token.value)
        raise _Failure()

    def loop_modifiers(self, loop: Loop) -> None:
        while True:
            token = self.peek()
            if token is None:
                return
            if token.kind is TokenKind.IDENTIFIER:
                self.advance()
                if token.value != "reversed":
                    raise ExpressionSyntaxError(f"undefined loop modifier {_quote(token.value)}")
                loop.reversed = True
            elif token.kind is TokenKind.KEYWORD:
                self.advance()
                self.loop_keyword(loop, token.value)
            else:
                return

    def loop_keyword(self, loop: Loop, name: str) -> None:
        token = self.advance()
        if token.kind not in (TokenKind.LITERAL, TokenKind.IDENTIFIER):
            raise _Failure()
        value = token.value if token.kind is TokenKind.LITERAL else None
        if name not in ("cols", "limit", "offset"):
            raise ExpressionSyntaxError(f"undefined loop modifier {_quote(name)}")
        if not isinstance(value, int) or isinstance(value, bool):
            raise ExpressionSyntaxError(f"loop {name} must be an integer")
        if name == "cols":
            loop.cols = value
        elif name == "limit":
            loop.limit = value
        else:
            loop.offset = value

    # expressions

    def cond(self) -> Evaluator:
        result = self.rel()
        while self.at_kind(TokenKind.AND) or self.at_kind(TokenKind.OR):
            op = self.advance().kind
            right = self.rel()
            result = _and_fn(result, right) if op is TokenKind.AND else _or_fn(result, right)
        return result

    def comparison(self) -> Optional[Callable[[Any, Any], bool]]:
        token = self.peek()
        if token is None:
            return None
        if token.kind is TokenKind.CHAR:
            return _CHAR_COMPARISONS.get(token.value)
        return _COMPARISONS.get(token.kind)

    def rel(self) -> Evaluator:
        left = self.expr()
        op = self.comparison()
        if op is None:
            return self.filters(left)
        self.advance()
        return _binary_fn(op, left, self.expr())

    def filtered(self) -> Evaluator:
        return self.filters(self.expr())

    def filters(self, result: Evaluator) -> Evaluator:
        while self.at_char("|"):
            self.advance()
            token = self.advance()
            if token.kind is TokenKind.IDENTIFIER:
                result = _filter_fn(result, token.value, [])
            elif token.kind is TokenKind.KEYWORD:
                params = [self.expr()]
                while self.at_char(","):
                    self.advance()
                    params.append(self.expr())
                result = _filter_fn(result, token.value, params)
            else:
                raise _Failure()
        return result

    def expr(self) -> Evaluator:
        token = self.advance()
        if token.kind is TokenKind.LITERAL:
            result = _constant_fn(token.value)
        elif token.kind is TokenKind.IDENTIFIER:
            result = _variable_fn(token.value)
        elif token.kind is TokenKind.CHAR and token.value == "(":
            result = self.cond()
            self.take_char(")")
        else:
            raise _Failure()
        while True:
            if self.at_kind(TokenKind.PROPERTY):
                result = _property_fn(result, self.advance().value)
            elif self.at_char("["):
                self.advance()
                index = self.cond()
                self.take_char("]")
                result = _index_fn(result, index)
            else:
                return result


def _parse(source: str) -> Statement:
    try:
        return _Parser(source + ";").start()
    except _Failure:
        raise ExpressionSyntaxError(f"syntax error in {_quote(source)}") from None


def parse(source: str) -> Expression:
    """Parse an expression string; raise :class:`ExpressionSyntaxError` if it is invalid."""
    statement = _parse(source)
    if statement.value is None:
        raise ExpressionSyntaxError(f"syntax error in {_quote(source)}")
    return statement.value


def parse_statement(selector: str, source: str) -> Statement:
    """Parse ``source`` as the statement kind named by ``selector``."""
    return _parse(selector + source)


def evaluate_string(source: str, ctx: Any) -> Any:
    """Parse ``source`` and evaluate it in ``ctx``."""
    return parse(source).evaluate(ctx)


def constant(value: Any) -> Expression:
    """Return an expression that always evaluates to ``value``."""
    return Expression(_constant_fn(value))


def negate(expr: Expression) -> Expression:
    """Return an expression that is true when ``expr`` is nil or false."""

    def evaluate(ctx: Any) -> bool:
        value = expr.evaluate(ctx)
        return value is None or value is False

    return Expression(evaluate)