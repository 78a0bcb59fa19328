"""Tokens produced by the template scanner, and their source locations."""

from __future__ import annotations

import enum
import json
from dataclasses import dataclass, field


def _quote(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


class TokenType(enum.Enum):
    """The kind of a template token."""

    TEXT = "TextTokenType"
    TAG = "TagTokenType"
    OBJ = "ObjTokenType"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class SourceLoc:
    """A source location: a file system path and a line number."""

    pathname: str = ""
    line_no: int = 0

    def is_zero(self) -> bool:
        """Return true if neither a path nor a line number is set."""
        return self.pathname == "" and self.line_no == 0

    def __str__(self) -> str:
        if self.pathname:
            return f"{self.pathname}:{self.line_no}"
        return f"line {self.line_no}"


@dataclass(frozen=True)
class Token:
    """An object ``{{ a.b }}``, a tag ``{% if a > b %}``, or a span of text.

    ``name`` is the tag name of a tag, ``args`` the tag arguments or the object
    expression, and ``source`` the whole token including its delimiters.
    """

    type: TokenType
    source_loc: SourceLoc = field(default_factory=SourceLoc)
    name: str = ""
    args: str = ""
    source: str = ""
    trim_left: bool = False
    trim_right: bool = False

    def __str__(self) -> str:
        if self.type is TokenType.TAG:
            return f"{self.type}{{Tag:{_quote(self.name)}, Args:{_quote(self.args)}}}"
        if self.type is TokenType.OBJ:
            return f"{self.type}{{{_quote(self.args)}}}"
        return f"{self.type}{{{_quote(self.source)}}}"