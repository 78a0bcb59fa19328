"""Abstract syntax tree nodes and the grammar interface the parser uses."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Protocol, Union, runtime_checkable

from liquidtpl.expressions.compiler import Expression
from liquidtpl.parsing.tokens import SourceLoc, Token


@runtime_checkable
class BlockSyntax(Protocol):
    """Syntax information about a block tag."""

    def is_block(self) -> bool: ...

    def can_have_parent(self, parent: "BlockSyntax") -> bool: ...

    def is_block_end(self) -> bool: ...

    def is_block_start(self) -> bool: ...

    def is_clause(self) -> bool: ...

    def parent_tags(self) -> list[str]: ...

    def requires_parent(self) -> bool: ...

    def tag_name(self) -> str: ...


@runtime_checkable
class Grammar(Protocol):
    """Supplies block syntax by tag name; ``None`` for tags that are not blocks."""

    def block_syntax(self, name: str) -> Optional[BlockSyntax]: ...


@dataclass
class _TokenNode:
    token: Token

    @property
    def source_loc(self) -> SourceLoc:
        return self.token.source_loc

    @property
    def source(self) -> str:
        return self.token.source

    @property
    def name(self) -> str:
        return self.token.name

    @property
    def args(self) -> str:
        return self.token.args


class _SourcelessNode:
    @property
    def source_loc(self) -> SourceLoc:
        raise RuntimeError("unexpected call on sourceless node")

    @property
    def source(self) -> str:
        raise RuntimeError("unexpected call on sourceless node")


@dataclass
class ASTBlock(_TokenNode):
    """A ``{% tag %}…{% endtag %}`` block; ``clauses`` holds e.g. else and elsif."""

    syntax: Optional[BlockSyntax] = None
    body: list["ASTNode"] = field(default_factory=list)
    clauses: list["ASTBlock"] = field(default_factory=list)


@dataclass
class ASTRaw(_SourcelessNode):
    """The text between the start and end of a raw tag."""

    slices: list[str] = field(default_factory=list)


@dataclass
class ASTTag(_TokenNode):
    """A tag that is not a block start or end."""


@dataclass
class ASTText(_TokenNode):
    """A span of text, rendered verbatim."""


@dataclass
class ASTObject(_TokenNode):
    """An ``{{ object }}`` with its compiled expression."""

    expr: Optional[Expression] = None


@dataclass
class ASTSeq(_SourcelessNode):
    """A sequence of nodes."""

    children: list["ASTNode"] = field(default_factory=list)


ASTNode = Union[ASTBlock, ASTRaw, ASTTag, ASTText, ASTObject, ASTSeq]