"""Errors raised while parsing and evaluating expressions."""

from __future__ import annotations

import json


def _quote(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


class InterpreterError(Exception):
    """An error in the input expression, found while it is interpreted."""


class ExpressionSyntaxError(Exception):
    """A syntax error in an expression."""


class UndefinedFilter(Exception):
    """The named filter is not defined."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"undefined filter {_quote(self.name)}"


class FilterError(Exception):
    """A filter raised an error when it was applied."""

    def __init__(self, filter_name: str, err: BaseException) -> None:
        super().__init__(filter_name, err)
        self.filter_name = filter_name
        self.err = err
        self.__cause__ = err

    def __str__(self) -> str:
        return f"error applying filter {_quote(self.filter_name)} ({_quote(str(self.err))})"


class CallParityError(Exception):
    """A function was called with the wrong number of arguments."""

    def __init__(self, num_args: int, num_params: int) -> None:
        super().__init__(num_args, num_params)
        self.num_args = num_args
        self.num_params = num_params

    def __str__(self) -> str:
        return (
            f"wrong number of arguments (given {self.num_args}, "
            f"expected {self.num_params})"
        )