"""Break template source into text, tag and object tokens."""

from __future__ import annotations

import functools
import re
from dataclasses import replace
from typing import Optional, Sequence

from liquidtpl.parsing.tokens import SourceLoc, Token, TokenType

DEFAULT_DELIMS = ("{{", "}}", "{%", "%}")

_SPACE = r"[\t\n\f\r ]"
_WORD = r"[0-9A-Za-z_]"


@functools.lru_cache(maxsize=32)
def _token_matcher(delims: tuple[str, str, str, str]) -> re.Pattern[str]:
    obj_left, obj_right, tag_left, tag_right = (re.escape(d) for d in delims)
    # Tag arguments must not contain anything that looks like the tag's end;
    # e.g. for "%}" the exclusion is "[^%]|%[^}]".
    exclusion = "|".join(
        re.escape(delims[3][:i]) + "[^" + re.escape(ch) + "]"
        for i, ch in enumerate(delims[3])
    )
    return re.compile(
        f"{obj_left}-?{_SPACE}*(.+?){_SPACE}*-?{obj_right}"
        f"|{tag_left}-?{_SPACE}*({_WORD}+)(?:{_SPACE}+((?:{exclusion})+?))?{_SPACE}*-?{tag_right}"
    )


def _resolve_delims(delims: Optional[Sequence[str]]) -> tuple[str, str, str, str]:
    if delims is None or len(delims) != 4:
        return DEFAULT_DELIMS
    left_obj, right_obj, left_tag, right_tag = (
        given or default for given, default in zip(delims, DEFAULT_DELIMS)
    )
    return left_obj, right_obj, left_tag, right_tag


def scan(
    data: str,
    loc: Optional[SourceLoc] = None,
    delims: Optional[Sequence[str]] = None,
) -> list[Token]:
    """Break ``data`` into tokens, tracking line numbers from ``loc``."""
    loc = SourceLoc() if loc is None else loc
    resolved = _resolve_delims(delims)
    obj_left, obj_right, tag_left, tag_right = resolved
    tokens: list[Token] = []
    pos = 0
    for m in _token_matcher(resolved).finditer(data):
        start, end = m.span()
        if pos < start:
            text = data[pos:start]
            tokens.append(Token(TokenType.TEXT, loc, source=text))
            loc = replace(loc, line_no=loc.line_no + text.count("\n"))
        source = m.group()
        if m.group(1) is not None:
            tokens.append(
                Token(
                    TokenType.OBJ,
                    loc,
                    args=m.group(1),
                    source=source,
                    trim_left=source[len(obj_left)] == "-",
                    trim_right=source[-len(obj_right) - 1] == "-",
                )
            )
        else:
            tokens.append(
                Token(
                    TokenType.TAG,
                    loc,
                    name=m.group(2),
                    args=m.group(3) or "",
                    source=source,
                    trim_left=source[len(tag_left)] == "-",
                    trim_right=source[-len(tag_right) - 1] == "-",
                )
            )
        loc = replace(loc, line_no=loc.line_no + source.count("\n"))
        pos = end
    if pos < len(data):
        tokens.append(Token(TokenType.TEXT, loc, source=data[pos:]))
    return tokens