"""Value semantics used when evaluating expressions."""

from __future__ import annotations

import types
from collections.abc import Mapping, Sequence
from typing import Any, Callable, Optional

from liquidtpl.drops import from_drop
from liquidtpl.expressions.errors import InterpreterError

_SCALARS = (str, bytes, bytearray, int, float, complex, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def to_liquid(value: Any) -> Any:
    """Return the value that templates see for ``value``."""
    return from_drop(value)


def is_truthy(value: Any) -> bool:
    """Only nil and false are false; every other value is true."""
    value = to_liquid(value)
    return value is not None and value is not False


def equal(a: Any, b: Any) -> bool:
    """Compare two values the way the ``==`` operator does."""
    a, b = to_liquid(a), to_liquid(b)
    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a == b
    if _is_number(a) and _is_number(b):
        return a == b
    if a is None or b is None:
        return a is b
    if _is_sequence(a) and _is_sequence(b):
        return len(a) == len(b) and all(equal(x, y) for x, y in zip(a, b))
    if isinstance(a, Mapping) and isinstance(b, Mapping):
        return a.keys() == b.keys() and all(equal(a[k], b[k]) for k in a)
    try:
        return bool(a == b)
    except (TypeError, ValueError):
        return False


def less(a: Any, b: Any) -> bool:
    """Return true if ``a`` orders before ``b``; values of unlike types never do."""
    a, b = to_liquid(a), to_liquid(b)
    if _is_number(a) and _is_number(b):
        return a < b
    if isinstance(a, str) and isinstance(b, str):
        return a < b
    return False


def _as_substring(value: Any) -> str | None:
    if isinstance(value, str):
        return value
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def contains(a: Any, b: Any) -> bool:
    """Implement the ``contains`` operator for strings, arrays and maps."""
    a, b = to_liquid(a), to_liquid(b)
    if isinstance(a, str):
        substring = _as_substring(b)
        return substring is not None and substring in a
    if _is_sequence(a):
        return any(equal(item, b) for item in a)
    if isinstance(a, Mapping):
        try:
            return b in a
        except TypeError:
            return False
    return False


def _required_arguments(fn: Callable[..., Any]) -> Optional[int]:
    """Count the arguments a call of ``fn`` must supply, or None if unknown."""
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
    code = func.__code__
    positional = code.co_argcount - len(func.__defaults__ or ())
    keyword_only = code.co_kwonlyargcount - len(func.__kwdefaults__ or {})
    return max(0, positional - skip) + keyword_only


def _resolve_attribute(attr: Any) -> Any:
    if not callable(attr) or isinstance(attr, type):
        return attr
    required = _required_arguments(attr)
    if required is None:
        try:
            return attr()
        except TypeError:
            return None
    if required:
        return None
    return attr()


def property_value(obj: Any, name: Any) -> Any:
    """Look up ``obj.name``; missing properties are nil."""
    obj = to_liquid(obj)
    if obj is None:
        return None
    if isinstance(obj, Mapping):
        try:
            if name in obj:
                return obj[name]
        except TypeError:
            return None
        return len(obj) if name == "size" else None
    if isinstance(obj, str):
        return len(obj) if name == "size" else None
    if _is_sequence(obj):
        if name == "size":
            return len(obj)
        if name == "first":
            return obj[0] if len(obj) else None
        if name == "last":
            return obj[-1] if len(obj) else None
        return None
    if isinstance(obj, _SCALARS):
        return None
    if not isinstance(name, str) or not name or name.startswith("_"):
        return None
    try:
        attr = getattr(obj, name)
    except AttributeError:
        return None
    return _resolve_attribute(attr)


def index_value(seq: Any, index: Any) -> Any:
    """Look up ``seq[index]``; out-of-range or missing entries are nil."""
    seq, index = to_liquid(seq), to_liquid(index)
    if seq is None:
        return None
    if isinstance(seq, Mapping):
        try:
            return seq.get(index)
        except TypeError:
            return None
    if isinstance(seq, str):
        return None
    if _is_sequence(seq):
        if not _is_number(index):
            return None
        position = int(index)
        if position < 0:
            position += len(seq)
        if 0 <= position < len(seq):
            return seq[position]
        return None
    if isinstance(index, str):
        return property_value(seq, index)
    return None


def to_int(value: Any) -> int:
    """Return ``value`` as an integer, or raise if it is not one."""
    value = to_liquid(value)
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    raise InterpreterError(f"can't convert {value!r} to int")


def make_range(start: Any, end: Any) -> range:
    """Return the inclusive integer range ``start..end``."""
    return range(to_int(start), to_int(end) + 1)