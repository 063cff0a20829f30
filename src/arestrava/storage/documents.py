r"""Loosely-typed documents with typed accessors.

Documents exchanged with a document store are mappings from string keys
to scalars, lists and sub-mappings. ``Document`` wraps such a mapping
and exposes accessors that return the ``MISSING`` sentinel when a key
is absent or holds a value of another type, instead of silently
defaulting.
"""

from __future__ import annotations

__all__ = ["MISSING", "Document", "Missing"]

from collections.abc import Iterator, Mapping
from typing import Any

from arestrava.exceptions import DocumentFieldError


class Missing:
    """Type of the ``MISSING`` sentinel."""

    _instance: Missing | None = None

    def __new__(cls) -> Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = Missing()


class Document(Mapping[str, Any]):
    r"""Read-only document with typed accessors.

    Args:
        data: The raw document. Defaults to an empty document.

    Example:
        ```pycon
        >>> from arestrava.storage import MISSING, Document
        >>> doc = Document({"athlete_id": 7, "name": "Ada", "tags": ["run"]})
        >>> doc.get_int("athlete_id")
        7
        >>> doc.get_str("athlete_id") is MISSING
        True
        >>> doc.get_str("unknown") is MISSING
        True
        >>> doc.require_str("name")
        'Ada'

        ```
    """

    def __init__(self, data: Mapping[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = dict(data or {})

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}({self._data!r})"

    def to_dict(self) -> dict[str, Any]:
        return dict(self._data)

    def get_str(self, key: str) -> str | Missing:
        value = self._data.get(key, MISSING)
        return value if isinstance(value, str) else MISSING

    def get_int(self, key: str) -> int | Missing:
        value = self._data.get(key, MISSING)
        # bool is a subclass of int but never a valid integer field
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        return MISSING

    def get_float(self, key: str) -> float | Missing:
        """Return the value as a float; integers are widened."""
        value = self._data.get(key, MISSING)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
        return MISSING

    def get_bool(self, key: str) -> bool | Missing:
        value = self._data.get(key, MISSING)
        return value if isinstance(value, bool) else MISSING

    def get_list(self, key: str) -> list[Any] | Missing:
        value = self._data.get(key, MISSING)
        return list(value) if isinstance(value, (list, tuple)) else MISSING

    def get_document(self, key: str) -> Document | Missing:
        value = self._data.get(key, MISSING)
        return Document(value) if isinstance(value, Mapping) else MISSING

    def get_optional(self, key: str, expected: str, default: Any = None) -> Any:
        r"""Return an optional field, checking its type when present.

        Args:
            key: The name of the field.
            expected: The accessor suffix naming the type: ``"str"``,
                ``"int"``, ``"float"``, ``"bool"``, ``"list"`` or
                ``"document"``.
            default: Returned when the field is absent or null.

        Returns:
            The typed value, or ``default``.

        Raises:
            DocumentFieldError: If the field is present with another
                type.

        Example:
            ```pycon
            >>> from arestrava.storage import Document
            >>> doc = Document({"distance": 12, "city": None})
            >>> doc.get_optional("distance", "float", 0.0)
            12.0
            >>> doc.get_optional("city", "str") is None
            True
            >>> Document({"distance": "abc"}).get_optional("distance", "float", 0.0)
            Traceback (most recent call last):
            ...
            arestrava.exceptions.DocumentFieldError: document field 'distance' is missing or is not a float

            ```
        """
        if self._data.get(key) is None:
            return default
        return self._require(getattr(self, f"get_{expected}")(key), key, expected)

    def require_str(self, key: str) -> str:
        return self._require(self.get_str(key), key, "str")

    def require_int(self, key: str) -> int:
        return self._require(self.get_int(key), key, "int")

    def require_float(self, key: str) -> float:
        return self._require(self.get_float(key), key, "float")

    def require_document(self, key: str) -> Document:
        return self._require(self.get_document(key), key, "document")

    @staticmethod
    def _require(value: Any, key: str, expected: str) -> Any:
        if value is MISSING:
            raise DocumentFieldError(key=key, expected=expected)
        return value
