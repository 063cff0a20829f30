r"""Decoder containers receiving decoded response bodies.

The caller attaches a result container and a reason container to a
request before executing it. The executor decodes the body of a
successful response into the first one and the body of an error
response into the second one.
"""

from __future__ import annotations

__all__ = ["Container"]

from typing import TYPE_CHECKING, Any, Generic, TypeVar

if TYPE_CHECKING:
    from collections.abc import Callable

T = TypeVar("T")


class Container(Generic[T]):
    r"""Destination of a decoded JSON payload.

    Args:
        factory: Optional callable converting the JSON payload (dict,
            list, str, number, bool or None) to the caller's shape. It
            should raise ``KeyError``, ``TypeError`` or ``ValueError`` if
            the payload does not fit. Defaults to keeping the payload.

    Example:
        ```pycon
        >>> from arestrava.containers import Container
        >>> container = Container()
        >>> container.filled
        False
        >>> container.decode({"error": "invalid"})
        {'error': 'invalid'}
        >>> container.value
        {'error': 'invalid'}
        >>> Container(factory=len).decode([1, 2, 3])
        3

        ```
    """

    def __init__(self, factory: Callable[[Any], T] | None = None) -> None:
        self._factory = factory
        self.value: T | None = None
        self.filled = False

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(value={self.value!r}, filled={self.filled})"

    def decode(self, payload: Any) -> T:
        """Convert the payload and store it.

        Args:
            payload: The JSON-decoded body.

        Returns:
            The stored value.
        """
        value = payload if self._factory is None else self._factory(payload)
        self.value = value
        self.filled = True
        return value

    def empty_copy(self) -> Container[T]:
        """Return an unfilled container sharing this container's factory."""
        return self.__class__(self._factory)

    def fill(self, value: T) -> None:
        """Store an already converted value, bypassing the factory.

        Args:
            value: The value to store.
        """
        self.value = value
        self.filled = True
