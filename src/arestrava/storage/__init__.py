r"""Document storage used to persist token snapshots."""

from __future__ import annotations

__all__ = [
    "MISSING",
    "Document",
    "DocumentStore",
    "InMemoryDocumentStore",
    "Missing",
    "generate_id",
]

from arestrava.storage.documents import MISSING, Document, Missing
from arestrava.storage.memory import DocumentStore, InMemoryDocumentStore, generate_id
