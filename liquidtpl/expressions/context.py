"""Expression evaluation contexts and the filter dictionary."""

from __future__ import annotations

import types
import typing
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from liquidtpl.expressions.compiler import Closure, parse
from liquidtpl.expressions.errors import (
    CallParityError,
    InterpreterError,
    UndefinedFilter,
)
from liquidtpl.expressions.operations import is_truthy, to_liquid

Evaluator = Callable[[Any], Any]

_NO_ANNOTATION = object()
_CO_VARARGS = 0x04


@dataclass(frozen=True)
class SafeValue:
    """A value that output escaping leaves as it is."""

    value: Any


_NAMED_KINDS: dict[str, Any] = {
    "int": int,
    "float": float,
    "str": str,
    "bool": bool,
    "list": list,
    "Closure": Closure,
}


def _annotation_kind(annotation: Any) -> Any:
    """Reduce a parameter annotation to a type the filter caller converts to."""
    if annotation is _NO_ANNOTATION:
        return None
    if isinstance(annotation, str):
        name = annotation.strip().split("[", 1)[0].rsplit(".", 1)[-1]
        return _NAMED_KINDS.get(name)
    if annotation is Closure:
        return Closure
    if typing.get_origin(annotation) is list:
        return list
    if annotation in (int, float, str, bool, list):
        return annotation
    return None


@dataclass(frozen=True)
class _FilterSignature:
    kinds: list[Any]
    required: int
    has_varargs: bool

    @property
    def arity(self) -> int:
        return len(self.kinds)

    def kind_at(self, index: int) -> Any:
        return self.kinds[index] if index < len(self.kinds) else None


def _function_parts(fn: Callable[..., Any]) -> Optional[tuple[types.FunctionType, int]]:
    """Return the plain function behind ``fn`` and how many leading arguments are bound."""
    while isinstance(getattr(fn, "__wrapped__", None), types.FunctionType):
        fn = fn.__wrapped__
    if isinstance(fn, types.MethodType):
        func, skip = fn.__func__, 1
    elif isinstance(fn, types.FunctionType):
        func, skip = fn, 0
    else:
        call = getattr(type(fn), "__call__", None)
        if not isinstance(call, types.FunctionType):
            return None
        func, skip = call, 1
    if not isinstance(func, types.FunctionType):
        return None
    return func, skip


def _signature(fn: Callable[..., Any]) -> Optional[_FilterSignature]:
    parts = _function_parts(fn)
    if parts is None:
        return None
    func, skip = parts
    code = func.__code__
    names = code.co_varnames[: code.co_argcount][skip:]
    defaults = func.__defaults__ or ()
    required = max(0, code.co_argcount - len(defaults) - skip)
    annotations = getattr(func, "__annotations__", None) or {}
    kinds = [_annotation_kind(annotations.get(name, _NO_ANNOTATION)) for name in names]
    return _FilterSignature(kinds, required, bool(code.co_flags & _CO_VARARGS))


def _to_string(value: Any) -> str:
    if isinstance(value, str):
        return value
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode()
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return str(value)


def _convert(value: Any, kind: Any) -> Any:
    if kind is None or kind is Closure:
        return value
    if kind is str:
        return _to_string(value)
    if kind is bool:
        return is_truthy(value)
    if kind is int:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        if isinstance(value, float):
            return int(value)
        if isinstance(value, str):
            try:
                return int(value.strip())
            except ValueError:
                try:
                    return int(float(value))
                except ValueError:
                    pass
        raise InterpreterError(f"can't convert {value!r} to int")
    if kind is float:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
        if isinstance(value, str):
            try:
                return float(value)
            except ValueError:
                pass
        raise InterpreterError(f"can't convert {value!r} to float")
    if kind is list:
        if value is None:
            return []
        if isinstance(value, Mapping):
            return list(value.values())
        if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
            return list(value)
        raise InterpreterError(f"can't convert {value!r} to an array")
    return value


@dataclass
class Config:
    """The filters available to expressions."""

    filters: dict[str, Callable[..., Any]] = field(default_factory=dict)

    def add_filter(self, name: str, fn: Callable[..., Any]) -> None:
        """Register ``fn`` as the filter ``name``; it must take at least one input."""
        if not callable(fn):
            raise TypeError("a filter must be a function")
        sig = _signature(fn)
        if sig is not None and not sig.has_varargs and sig.arity < 1:
            raise ValueError("a filter function must have at least one input")
        self.filters[name] = fn

    def add_safe_filter(self) -> None:
        """Register the ``safe`` filter, unless one is already defined."""
        if "safe" in self.filters:
            return

        def safe(value: Any) -> SafeValue:
            return value if isinstance(value, SafeValue) else SafeValue(value)

        self.filters["safe"] = safe


class Context:
    """Variable bindings and filters used to evaluate an expression."""

    def __init__(
        self,
        bindings: Optional[dict[str, Any]] = None,
        config: Optional[Config] = None,
    ) -> None:
        self.bindings: dict[str, Any] = {} if bindings is None else bindings
        self.config = Config() if config is None else config

    def clone(self) -> "Context":
        """Return a context with a copy of the bindings and the same filters."""
        return Context(dict(self.bindings), self.config)

    def get(self, name: str) -> Any:
        """Return the value bound to ``name``, or nil."""
        return to_liquid(self.bindings.get(name))

    def set(self, name: str, value: Any) -> None:
        """Bind ``name`` to ``value``."""
        self.bindings[name] = value

    def apply_filter(self, name: str, receiver: Evaluator, params: list[Evaluator]) -> Any:
        """Apply the filter ``name`` to the receiver's value and the parameters' values."""
        fn = self.config.filters.get(name)
        if fn is None:
            raise UndefinedFilter(name)
        sig = _signature(fn)
        args: list[Any] = [receiver(self)]
        for index, param in enumerate(params, start=1):
            kind = sig.kind_at(index) if sig is not None else None
            if kind is Closure:
                source = param(self)
                if not isinstance(source, str):
                    raise InterpreterError(f"expected an expression string, got {source!r}")
                args.append(Closure(parse(source), self))
            else:
                args.append(param(self))
        if sig is not None:
            count = len(args)
            too_many = not sig.has_varargs and count > sig.arity
            if too_many or count < sig.required:
                raise CallParityError(count - 1, sig.arity - 1)
            args = [_convert(arg, sig.kind_at(i)) for i, arg in enumerate(args)]
        result = fn(*args)
        if isinstance(result, (bytes, bytearray)):
            return bytes(result).decode()
        return result