import pytest

from liquidtpl.parsing.scanner import scan
from liquidtpl.parsing.tokens import SourceLoc, TokenType

CUSTOM = ["OBJECT@LEFT", "OBJECT#RIGHT", "TAG*LEFT", "TAG!RIGHT"]


def _fmt(tokens):
    return "[" + " ".join(str(t) for t in tokens) + "]"


def test_scan_text():
    tokens = scan("12")
    assert len(tokens) == 1
    assert tokens[0].type is TokenType.TEXT
    assert tokens[0].source == "12"


@pytest.mark.parametrize("src", ["{{obj}}", "{{ obj }}"])
def test_scan_object(src):
    tokens = scan(src)
    assert len(tokens) == 1
    assert tokens[0].type is TokenType.OBJ
    assert tokens[0].args == "obj"


@pytest.mark.parametrize("src", ["{%tag args%}", "{% tag args %}"])
def test_scan_tag(src):
    tokens = scan(src)
    assert len(tokens) == 1
    assert tokens[0].type is TokenType.TAG
    assert tokens[0].name == "tag"
    assert tokens[0].args == "args"


def test_scan_sequence():
    tokens = scan("pre{% tag args %}mid{{ object }}post")
    assert _fmt(tokens) == (
        '[TextTokenType{"pre"} TagTokenType{Tag:"tag", Args:"args"} '
        'TextTokenType{"mid"} ObjTokenType{"object"} TextTokenType{"post"}]'
    )


@pytest.mark.parametrize(
    "src, count",
    [
        ("{% tag arg %}", 1),
        ("{% tag arg %}{% tag %}", 2),
        ("{% tag arg %}{% tag arg %}{% tag %}", 3),
        ("{% tag %}{% tag %}", 2),
        ("{% tag arg %}{% tag arg %}{% tag %}{% tag %}", 4),
        ("{{ expr }}", 1),
        ("{{ expr arg }}", 1),
        ("{{ expr }}{{ expr }}", 2),
        ("{{ expr arg }}{{ expr arg }}", 2),
    ],
)
def test_scan_counts(src, count):
    assert len(scan(src)) == count


@pytest.mark.parametrize(
    "src, expect, left, right",
    [
        ("{{ expr }}", "expr", False, False),
        ("{{- expr }}", "expr", True, False),
        ("{{ expr -}}", "expr", False, True),
        ("{% tag arg %}", "tag", False, False),
        ("{%- tag arg %}", "tag", True, False),
        ("{% tag arg -%}", "tag", False, True),
    ],
)
def test_scan_whitespace_control(src, expect, left, right):
    tokens = scan(src)
    assert len(tokens) == 1
    tok = tokens[0]
    if expect == "tag":
        assert tok.name == "tag"
        assert tok.args == "arg"
    else:
        assert tok.args == "expr"
    assert tok.trim_left is left
    assert tok.trim_right is right


def test_scan_custom_delims_basic():
    tokens = scan("12", SourceLoc(), CUSTOM)
    assert len(tokens) == 1
    assert tokens[0].type is TokenType.TEXT
    assert tokens[0].source == "12"

    for src in ("OBJECT@LEFTobjOBJECT#RIGHT", "OBJECT@LEFT obj OBJECT#RIGHT"):
        tokens = scan(src, SourceLoc(), CUSTOM)
        assert len(tokens) == 1
        assert tokens[0].type is TokenType.OBJ
        assert tokens[0].args == "obj"

    for src in ("TAG*LEFTtag argsTAG!RIGHT", "TAG*LEFT tag args TAG!RIGHT"):
        tokens = scan(src, SourceLoc(), CUSTOM)
        assert len(tokens) == 1
        assert tokens[0].type is TokenType.TAG
        assert tokens[0].name == "tag"
        assert tokens[0].args == "args"


def test_scan_custom_delims_sequence():
    tokens = scan(
        "preTAG*LEFT tag args TAG!RIGHTmidOBJECT@LEFT object OBJECT#RIGHTpost",
        SourceLoc(),
        CUSTOM,
    )
    assert _fmt(tokens) == (
        '[TextTokenType{"pre"} TagTokenType{Tag:"tag", Args:"args"} '
        'TextTokenType{"mid"} ObjTokenType{"object"} TextTokenType{"post"}]'
    )


@pytest.mark.parametrize(
    "src, count",
    [
        ("TAG*LEFT tag arg TAG!RIGHT", 1),
        ("TAG*LEFT tag arg TAG!RIGHTTAG*LEFT tag TAG!RIGHT", 2),
        ("TAG*LEFT tag arg TAG!RIGHTTAG*LEFT tag arg TAG!RIGHTTAG*LEFT tag TAG!RIGHT", 3),
        ("TAG*LEFT tag TAG!RIGHTTAG*LEFT tag TAG!RIGHT", 2),
        (
            "TAG*LEFT tag arg TAG!RIGHTTAG*LEFT tag arg TAG!RIGHT"
            "TAG*LEFT tag TAG!RIGHTTAG*LEFT tag TAG!RIGHT",
            4,
        ),
        ("OBJECT@LEFT expr OBJECT#RIGHT", 1),
        ("OBJECT@LEFT expr arg OBJECT#RIGHT", 1),
        ("OBJECT@LEFT expr OBJECT#RIGHTOBJECT@LEFT expr OBJECT#RIGHT", 2),
        ("OBJECT@LEFT expr arg OBJECT#RIGHTOBJECT@LEFT expr arg OBJECT#RIGHT", 2),
    ],
)
def test_scan_custom_delims_counts(src, count):
    assert len(scan(src, SourceLoc(), CUSTOM)) == count


def test_scan_wrong_number_of_delims_uses_defaults():
    tokens = scan("{{ a }}", SourceLoc(), ["<<", ">>"])
    assert [t.type for t in tokens] == [TokenType.OBJ]
    assert tokens[0].args == "a"


def test_scan_tracks_line_numbers():
    tokens = scan("a\n{{ x }}\n{% t %}", SourceLoc("f.html", 1))
    assert [t.source_loc.line_no for t in tokens] == [1, 2, 2, 3]
    assert all(t.source_loc.pathname == "f.html" for t in tokens)


def test_scan_round_trips_source():
    src = "pre{% tag args %}mid{{ object }}post"
    assert "".join(t.source for t in scan(src)) == src