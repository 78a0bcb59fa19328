# liquidtpl

Building blocks for Liquid templates:

- an **expression language**: the part inside `{{ … }}` and the arguments of
  tags such as `{% assign %}`, `{% cycle %}`, `{% for %}` and `{% when %}`;
- a **template scanner** that breaks template source into text, tag and
  object tokens, with line numbers and custom delimiters;
- **syntax tree node types** and the grammar interfaces a tree builder uses;
- the **standard Liquid filters** (`upcase`, `split`, `join`, `date`,
  `truncate`, `sort`, `map`, `default`, and the rest).

## Installation

```
pip install liquidtpl
```

To run the test suite:

```
pip install "liquidtpl[test]"
pytest
```

## Evaluating expressions

```python
from liquidtpl.expressions.compiler import evaluate_string, parse
from liquidtpl.expressions.context import Config, Context
from liquidtpl.filters.standard import add_standard_filters

config = Config()
add_standard_filters(config)
ctx = Context({"page": {"title": "Introduction"}, "n": 3}, config)

evaluate_string("page.title | upcase", ctx)               # "INTRODUCTION"
evaluate_string('"a/b/c" | split: "/" | join: "-"', ctx)  # "a-b-c"
evaluate_string("n > 2 and true", ctx)                    # True

expr = parse("n | plus: 2")
expr.evaluate(ctx)                                        # 5.0
```

Errors live in `liquidtpl.expressions.errors`:

- `ExpressionSyntaxError` for a syntax error;
- `UndefinedFilter` for an unknown filter name;
- `FilterError` wraps an exception raised inside a filter;
- `CallParityError` when a filter gets the wrong number of arguments;
- `InterpreterError` when a value cannot be converted as required.

`Context.clone`, `get` and `set` manage variable bindings; `get` passes values
through `to_liquid`. `constant(value)` and `negate(expr)` build simple
expressions directly.

## Custom filters

A filter is any callable taking the piped value first and its arguments after
it. Parameters annotated `str`, `int`, `float`, `bool` or `list` have their
arguments converted; a parameter annotated `Closure` receives the argument
parsed as an expression, which can be bound and evaluated later.

```python
config.add_filter("has_prefix", lambda s, prefix: s.startswith(prefix))
evaluate_string('page.title | has_prefix: "Intro"', ctx)  # True
```

`Config.add_safe_filter()` registers a `safe` filter that wraps its input in a
`SafeValue`.

## Statements

Tag arguments are parsed with `parse_statement` and one of the selector
constants; the returned `Statement` holds an `Assignment`, `Cycle`, `Loop` or
`When`:

```python
from liquidtpl.expressions.compiler import (
    LOOP_STATEMENT_SELECTOR,
    parse_statement,
)

stmt = parse_statement(LOOP_STATEMENT_SELECTOR, "x in array reversed offset: 2 limit: 3")
stmt.loop.variable, stmt.loop.reversed, stmt.loop.offset, stmt.loop.limit
# ("x", True, 2, 3)
```

The tokens of an expression are available from
`liquidtpl.expressions.lexer.tokenize`.

## Scanning templates

```python
from liquidtpl.parsing.scanner import scan
from liquidtpl.parsing.tokens import SourceLoc

tokens = scan("pre{% tag args %}mid{{ object }}post", SourceLoc(), None)
[str(t) for t in tokens]
# ['TextTokenType{"pre"}', 'TagTokenType{Tag:"tag", Args:"args"}',
#  'TextTokenType{"mid"}', 'ObjTokenType{"object"}', 'TextTokenType{"post"}']
```

Custom delimiters are given as four strings: object left, object right, tag
left, tag right; an empty string stands for the default. Each `Token` records
its `SourceLoc`, and whether `{{-`/`-}}` or `{%-`/`-%}` asked for whitespace
trimming.

`liquidtpl.parsing.nodes` defines the syntax tree node types (`ASTSeq`,
`ASTBlock`, `ASTTag`, `ASTText`, `ASTObject`, `ASTRaw`) and the `Grammar` and
`BlockSyntax` protocols.

## Drops

An object that should appear to templates as some other value subclasses
`Drop` (from `liquidtpl.drops`) and implements `to_liquid`; `from_drop`
performs the conversion, and also honours any object with a `to_liquid`
method.

## What this package does not do

It does not build a syntax tree from tokens, and it has no template engine:
there are no tags such as `if` or `for`, no rendering of templates to text,
no `include` and no command-line tool. It provides the expression language,
the scanner, the node types and the filters that such an engine would use.