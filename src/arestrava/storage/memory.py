r"""Document store protocol and an in-memory implementation."""

from __future__ import annotations

__all__ = ["DocumentStore", "InMemoryDocumentStore", "generate_id"]

import logging
import secrets
import string
from typing import TYPE_CHECKING, Any, Protocol

from arestrava.exceptions import DocumentCollisionError
from arestrava.storage.documents import Document

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

logger: logging.Logger = logging.getLogger(__name__)

_ID_ALPHABET = string.ascii_letters + string.digits


def generate_id(prefix: str = "", length: int = 15) -> str:
    r"""Generate a random identifier.

    Args:
        prefix: Prepended to the random part, for example ``"USR_"``.
        length: The number of random alphanumeric characters.

    Returns:
        The identifier.

    Example:
        ```pycon
        >>> from arestrava.storage import generate_id
        >>> new_id = generate_id("USR_", 15)
        >>> new_id.startswith("USR_"), len(new_id)
        (True, 19)

        ```
    """
    return prefix + "".join(secrets.choice(_ID_ALPHABET) for _ in range(length))


class DocumentStore(Protocol):
    """Generic CRUD interface of a document store."""

    def find_one(self, collection: str, filter: Mapping[str, Any]) -> Document | None:  # noqa: A002
        """Return the first document matching the filter, or None."""

    def find_many(self, collection: str, filter: Mapping[str, Any]) -> list[Document]:  # noqa: A002
        """Return every document matching the filter."""

    def insert_one(self, collection: str, document: Mapping[str, Any]) -> str:
        """Insert a document and return its ``_id``.

        Raises:
            DocumentCollisionError: If the ``_id`` is already taken.
        """

    def insert_many(self, collection: str, documents: Sequence[Mapping[str, Any]]) -> list[str]:
        """Insert documents and return their ``_id`` values, in order.

        Raises:
            DocumentCollisionError: If any ``_id`` is already taken.
        """

    def upsert(
        self, collection: str, filter: Mapping[str, Any], fields: Mapping[str, Any]  # noqa: A002
    ) -> int:
        """Update the fields of the matching documents, or insert a new
        document made of the filter and the fields if none matches.

        Returns:
            The number of documents modified or inserted.
        """

    def delete(self, collection: str, filter: Mapping[str, Any]) -> int:  # noqa: A002
        """Delete the matching documents and return how many were
        deleted."""


class InMemoryDocumentStore:
    r"""Document store keeping the collections in process memory.

    A filter matches a document when every filter key is present in the
    document with an equal value. ``_id`` is unique within a collection;
    inserted documents without one get a generated id.

    Example:
        ```pycon
        >>> from arestrava.storage import InMemoryDocumentStore
        >>> store = InMemoryDocumentStore()
        >>> store.upsert("users", {"user_id": "usr-1"}, {"expires_at": 10})
        1
        >>> store.find_one("users", {"user_id": "usr-1"}).get_int("expires_at")
        10

        ```
    """

    def __init__(self) -> None:
        self._collections: dict[str, list[dict[str, Any]]] = {}

    def find_one(self, collection: str, filter: Mapping[str, Any]) -> Document | None:  # noqa: A002
        for document in self._collections.get(collection, []):
            if _matches(document, filter):
                return Document(document)
        return None

    def find_many(self, collection: str, filter: Mapping[str, Any]) -> list[Document]:  # noqa: A002
        return [
            Document(document)
            for document in self._collections.get(collection, [])
            if _matches(document, filter)
        ]

    def insert_one(self, collection: str, document: Mapping[str, Any]) -> str:
        return self.insert_many(collection, [document])[0]

    def insert_many(self, collection: str, documents: Sequence[Mapping[str, Any]]) -> list[str]:
        existing = self._collections.setdefault(collection, [])
        taken = {document["_id"] for document in existing if "_id" in document}
        new_documents = []
        for document in documents:
            new_document = dict(document)
            new_document.setdefault("_id", generate_id())
            if new_document["_id"] in taken:
                logger.debug(f"duplicate _id {new_document['_id']!r} in {collection}")
                raise DocumentCollisionError(collection)
            taken.add(new_document["_id"])
            new_documents.append(new_document)
        existing.extend(new_documents)
        logger.debug(f"inserted {len(new_documents)} document(s) in {collection}")
        return [document["_id"] for document in new_documents]

    def upsert(
        self, collection: str, filter: Mapping[str, Any], fields: Mapping[str, Any]  # noqa: A002
    ) -> int:
        documents = self._collections.setdefault(collection, [])
        matched = [document for document in documents if _matches(document, filter)]
        for document in matched:
            document.update(fields)
        if matched:
            logger.debug(f"updated {len(matched)} document(s) in {collection}")
            return len(matched)
        documents.append({**filter, **fields})
        logger.debug(f"inserted 1 document in {collection}")
        return 1

    def delete(self, collection: str, filter: Mapping[str, Any]) -> int:  # noqa: A002
        documents = self._collections.get(collection, [])
        kept = [document for document in documents if not _matches(document, filter)]
        self._collections[collection] = kept
        return len(documents) - len(kept)


def _matches(document: Mapping[str, Any], filter: Mapping[str, Any]) -> bool:  # noqa: A002
    return all(key in document and document[key] == value for key, value in filter.items())
