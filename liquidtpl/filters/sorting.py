"""The sort and sort_natural filters."""

from __future__ import annotations

import functools
from collections.abc import Mapping
from typing import Any

from liquidtpl.expressions.operations import less, property_value


def _compare(a: Any, b: Any) -> int:
    if a is None:
        return 0 if b is None else -1
    if b is None:
        return 1
    if less(a, b):
        return -1
    if less(b, a):
        return 1
    return 0


def _key_string(key: Any) -> str:
    if isinstance(key, bool):
        return "true" if key else "false"
    return str(key)


def sort_filter(array: list, key=None) -> list:
    """Return a sorted copy of ``array``, optionally ordered by the property ``key``.

    Nil values, or items whose property is nil, come first.
    """
    if key is None:
        return sorted(array, key=functools.cmp_to_key(_compare))
    name = _key_string(key)
    return sorted(
        array,
        key=functools.cmp_to_key(
            lambda a, b: _compare(property_value(a, name), property_value(b, name))
        ),
    )


def sort_natural_filter(array: list, key=None) -> list:
    """Return a copy of ``array`` sorted case-insensitively.

    With ``key``, items are ordered by that entry of each map; items that are
    not maps, or whose entry is not a string, sort as the empty string.
    """
    result = list(array)
    if not result:
        return result
    if key is not None:

        def entry(item: Any) -> str:
            if not isinstance(item, Mapping):
                return ""
            try:
                value = item.get(key)
            except TypeError:
                return ""
            return value.lower() if isinstance(value, str) else ""

        return sorted(result, key=entry)
    if isinstance(result[0], str):
        return sorted(result, key=lambda s: s.upper())
    return result