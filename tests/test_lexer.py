import pytest

from liquidtpl.expressions.lexer import LexToken, TokenKind, tokenize


def lex(source):
    return list(tokenize(source))


def test_identifier_operator_literal():
    ts = lex("abc > 123")
    assert len(ts) == 3
    assert ts[0].kind is TokenKind.IDENTIFIER
    assert ts[0].value == "abc"
    assert ts[1].kind is TokenKind.CHAR
    assert ts[1].value == ">"
    assert ts[2].kind is TokenKind.LITERAL
    assert ts[2].value == 123


@pytest.mark.parametrize("source", ["forage", "orange", "falsehood"])
def test_reserved_words_are_not_prefixes(source):
    ts = lex(source)
    assert len(ts) == 1
    assert ts[0].kind is TokenKind.IDENTIFIER
    assert ts[0].value == source


def test_property_with_dash():
    ts = lex("a.b-c")
    assert len(ts) == 2
    assert ts[1].kind is TokenKind.PROPERTY
    assert ts[1].value == "b-c"


def test_literals():
    ts = lex("true false nil 2 2.3 \"abc\" 'abc'")
    assert len(ts) == 7
    assert all(t.kind is TokenKind.LITERAL for t in ts)
    assert ts[0].value is True
    assert ts[1].value is False
    assert ts[2].value is None
    assert ts[3].value == 2 and isinstance(ts[3].value, int)
    assert ts[4].value == 2.3
    assert ts[5].value == "abc"
    assert ts[6].value == "abc"


def test_identifiers():
    ts = lex("abc ab_c ab-c abc?")
    assert len(ts) == 4
    assert all(t.kind is TokenKind.IDENTIFIER for t in ts)
    assert [t.value for t in ts] == ["abc", "ab_c", "ab-c", "abc?"]


def test_cycle_selector():
    ts = lex("{%cycle 'a', 'b'")
    assert len(ts) == 4
    assert ts[0].kind is TokenKind.CYCLE


def test_loop_selector_with_range():
    ts = lex("%loop i in (3 .. 5)")
    assert len(ts) == 8
    assert [t.kind for t in ts] == [
        TokenKind.LOOP,
        TokenKind.IDENTIFIER,
        TokenKind.IN,
        TokenKind.CHAR,
        TokenKind.LITERAL,
        TokenKind.DOTDOT,
        TokenKind.LITERAL,
        TokenKind.CHAR,
    ]


@pytest.mark.parametrize(
    "source, kind",
    [
        ("%assign ", TokenKind.ASSIGN),
        ("%loop ", TokenKind.LOOP),
        ("{%when ", TokenKind.WHEN),
        ("==", TokenKind.EQ),
        ("!=", TokenKind.NEQ),
        (">=", TokenKind.GE),
        ("<=", TokenKind.LE),
        ("and", TokenKind.AND),
        ("or", TokenKind.OR),
        ("contains", TokenKind.CONTAINS),
        ("in", TokenKind.IN),
        ("..", TokenKind.DOTDOT),
    ],
)
def test_fixed_tokens(source, kind):
    ts = lex(source)
    assert len(ts) == 1
    assert ts[0].kind is kind
    assert ts[0].text == source


def test_keyword_strips_colon():
    ts = lex("limit: 3")
    assert ts[0].kind is TokenKind.KEYWORD
    assert ts[0].value == "limit"
    assert ts[1].value == 3


def test_negative_numbers():
    ts = lex("-5 -2.5")
    assert [t.value for t in ts] == [-5, -2.5]


def test_unterminated_string_is_a_char():
    ts = lex('"abc')
    assert ts[0].kind is TokenKind.CHAR
    assert ts[0].value == '"'
    assert ts[1].kind is TokenKind.IDENTIFIER


def test_filter_pipeline():
    ts = lex("x | add: y")
    assert [t.kind for t in ts] == [
        TokenKind.IDENTIFIER,
        TokenKind.CHAR,
        TokenKind.KEYWORD,
        TokenKind.IDENTIFIER,
    ]


def test_positions_and_text():
    ts = lex("a  == b")
    assert ts[1] == LexToken(TokenKind.EQ, None, "==", 3)
    assert ts[2].pos == 6


def test_empty_and_blank_sources():
    assert lex("") == []
    assert lex(" \t\n") == []