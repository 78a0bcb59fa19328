"""Tokenizer for the expression language."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from typing import Any, Iterator


class TokenKind(enum.Enum):
    """The kinds of token produced by :func:`tokenize`."""

    LITERAL = "literal"
    IDENTIFIER = "identifier"
    KEYWORD = "keyword"
    PROPERTY = "property"
    ASSIGN = "assign"
    CYCLE = "cycle"
    LOOP = "loop"
    WHEN = "when"
    EQ = "=="
    NEQ = "!="
    GE = ">="
    LE = "<="
    IN = "in"
    AND = "and"
    OR = "or"
    CONTAINS = "contains"
    DOTDOT = ".."
    CHAR = "char"


@dataclass(frozen=True)
class LexToken:
    """A token: its kind, its value, its source text and its offset."""

    kind: TokenKind
    value: Any
    text: str
    pos: int


_IDENT = r"[A-Za-z_][A-Za-z0-9_-]*\??"
_WORD = re.compile(rf"({_IDENT})(:?)")
_PROPERTY = re.compile(rf"\.({_IDENT})")
_NUMBER = re.compile(r"-?[0-9]+(\.[0-9]+)?")
_STRING = re.compile(r"\"[^\"]*\"|'[^']*'")
_SPACE = re.compile(r"[ \t\n\v\f\r]+")

_FIXED = (
    ("%assign ", TokenKind.ASSIGN),
    ("{%cycle ", TokenKind.CYCLE),
    ("%loop ", TokenKind.LOOP),
    ("{%when ", TokenKind.WHEN),
    ("==", TokenKind.EQ),
    ("!=", TokenKind.NEQ),
    (">=", TokenKind.GE),
    ("<=", TokenKind.LE),
    ("..", TokenKind.DOTDOT),
)

_CONSTANTS = {"true": True, "false": False, "nil": None}
_RESERVED = {
    "and": TokenKind.AND,
    "or": TokenKind.OR,
    "contains": TokenKind.CONTAINS,
    "in": TokenKind.IN,
}


def _next_token(source: str, pos: int) -> LexToken:
    for text, kind in _FIXED:
        if source.startswith(text, pos):
            return LexToken(kind, None, text, pos)
    if m := _STRING.match(source, pos):
        text = m.group()
        return LexToken(TokenKind.LITERAL, text[1:-1], text, pos)
    if m := _NUMBER.match(source, pos):
        text = m.group()
        value = float(text) if m.group(1) else int(text)
        return LexToken(TokenKind.LITERAL, value, text, pos)
    if m := _PROPERTY.match(source, pos):
        return LexToken(TokenKind.PROPERTY, m.group(1), m.group(), pos)
    if m := _WORD.match(source, pos):
        name, colon = m.groups()
        text = m.group()
        if colon:
            return LexToken(TokenKind.KEYWORD, name, text, pos)
        if name in _CONSTANTS:
            return LexToken(TokenKind.LITERAL, _CONSTANTS[name], text, pos)
        if name in _RESERVED:
            return LexToken(_RESERVED[name], None, text, pos)
        return LexToken(TokenKind.IDENTIFIER, name, text, pos)
    char = source[pos]
    return LexToken(TokenKind.CHAR, char, char, pos)


def tokenize(source: str) -> Iterator[LexToken]:
    """Yield the tokens of an expression source string, skipping whitespace."""
    pos = 0
    end = len(source)
    while pos < end:
        space = _SPACE.match(source, pos)
        if space:
            pos = space.end()
            continue
        token = _next_token(source, pos)
        yield token
        pos += len(token.text)