r"""Token snapshots and their persistence."""

from __future__ import annotations

__all__ = ["DocumentTokenManager", "TokenManager", "Tokens"]

import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

from arestrava.storage.documents import Document

if TYPE_CHECKING:
    from collections.abc import Mapping

    from arestrava.context import CallContext
    from arestrava.storage.memory import DocumentStore


@dataclass(frozen=True)
class Tokens:
    r"""Snapshot of the credential state of one subject.

    Attributes:
        access_token: The bearer token sent with domain calls.
        refresh_token: The token exchanged for a new snapshot.
        expires_at: Expiry of the access token, in epoch seconds.

    Example:
        ```pycon
        >>> from arestrava.tokens import Tokens
        >>> tokens = Tokens(access_token="a", refresh_token="r", expires_at=100)
        >>> tokens.is_expired(now=99)
        False
        >>> tokens.is_expired(now=101)
        True

        ```
    """

    access_token: str = ""
    refresh_token: str = ""
    expires_at: int = 0

    def is_expired(self, now: float | None = None) -> bool:
        """Return whether the access token expired before ``now``.

        Args:
            now: The current time in epoch seconds. Defaults to
                ``time.time()``.
        """
        if now is None:
            now = time.time()
        return self.expires_at < now

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> Tokens:
        """Create a snapshot from an OAuth token endpoint payload.

        Raises:
            DocumentFieldError: If a field is missing or has the wrong
                type.
        """
        return cls.from_document(Document(payload))

    @classmethod
    def from_document(cls, document: Document) -> Tokens:
        """Create a snapshot from a stored document.

        Raises:
            DocumentFieldError: If a field is missing or has the wrong
                type.
        """
        return cls(
            access_token=document.require_str("access_token"),
            refresh_token=document.require_str("refresh_token"),
            expires_at=document.require_int("expires_at"),
        )

    def to_document(self) -> dict[str, Any]:
        return {
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
            "expires_at": self.expires_at,
        }


class TokenManager(Protocol):
    """Persists refreshed token snapshots."""

    def persist(self, context: CallContext, subject_id: str, tokens: Tokens) -> None:
        """Store the tokens of the subject.

        Raises:
            Exception: Any failure of the backing store.
        """


class DocumentTokenManager:
    r"""Token manager storing one document per subject in a document
    store.

    Args:
        store: The document store.
        collection: The name of the collection holding the tokens.
        id_field: The document field identifying the subject.

    Example:
        ```pycon
        >>> from arestrava.context import CallContext
        >>> from arestrava.storage import InMemoryDocumentStore
        >>> from arestrava.tokens import DocumentTokenManager, Tokens
        >>> manager = DocumentTokenManager(InMemoryDocumentStore())
        >>> manager.persist(CallContext(), "usr-1", Tokens("a", "r", 100))
        >>> manager.load("usr-1")
        Tokens(access_token='a', refresh_token='r', expires_at=100)

        ```
    """

    def __init__(
        self, store: DocumentStore, collection: str = "users", id_field: str = "user_id"
    ) -> None:
        self._store = store
        self._collection = collection
        self._id_field = id_field

    def persist(self, context: CallContext, subject_id: str, tokens: Tokens) -> None:
        self._store.upsert(self._collection, {self._id_field: subject_id}, tokens.to_document())
        context.logger.debug(f"stored tokens of {subject_id} in {self._collection}")

    def load(self, subject_id: str) -> Tokens | None:
        """Return the stored tokens of the subject, or None if the
        subject has no document.

        Raises:
            DocumentFieldError: If the stored document is malformed.
        """
        document = self._store.find_one(self._collection, {self._id_field: subject_id})
        if document is None:
            return None
        return Tokens.from_document(document)
