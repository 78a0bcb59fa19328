from liquidtpl.expressions.errors import (
    CallParityError,
    ExpressionSyntaxError,
    FilterError,
    InterpreterError,
    UndefinedFilter,
)


def test_interpreter_error_message():
    err = InterpreterError("bad input")
    assert str(err) == "bad input"


def test_syntax_error_message():
    err = ExpressionSyntaxError('syntax error in "a b"')
    assert str(err) == 'syntax error in "a b"'


def test_undefined_filter_names_the_filter():
    err = UndefinedFilter("nope")
    assert err.name == "nope"
    assert str(err).startswith("undefined filter")
    assert '"nope"' in str(err)


def test_undefined_filter_quotes_special_characters():
    err = UndefinedFilter('a"b')
    assert '"a\\"b"' in str(err)


def test_filter_error_keeps_cause():
    cause = ValueError("boom")
    err = FilterError("f", cause)
    assert err.filter_name == "f"
    assert err.err is cause
    assert err.__cause__ is cause
    assert "error applying filter" in str(err)
    assert '"f"' in str(err)
    assert "boom" in str(err)


def test_call_parity_error_message():
    err = CallParityError(2, 1)
    assert err.num_args == 2
    assert err.num_params == 1
    message = str(err)
    assert "wrong number of arguments" in message
    assert "given 2" in message
    assert "expected 1" in message