"""Objects that present themselves to templates as another value."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class Drop(ABC):
    """An object that templates see as the value of its ``to_liquid`` method."""

    @abstractmethod
    def to_liquid(self) -> Any:
        """Return the value that templates see in place of this object."""


def from_drop(obj: Any) -> Any:
    """Return ``obj.to_liquid()`` if the object provides it, else the object itself."""
    if isinstance(obj, Drop):
        return obj.to_liquid()
    if isinstance(obj, type):
        return obj
    method = getattr(obj, "to_liquid", None)
    if callable(method):
        return method()
    return obj