from __future__ import annotations

import pytest

from arestrava.exceptions import DocumentCollisionError
from arestrava.storage import Document, InMemoryDocumentStore, generate_id


@pytest.fixture
def store() -> InMemoryDocumentStore:
    store = InMemoryDocumentStore()
    store.upsert("users", {"user_id": "usr-1"}, {"access_token": "a1", "expires_at": 10})
    store.upsert("users", {"user_id": "usr-2"}, {"access_token": "a2", "expires_at": 20})
    return store


###########################################
#     Tests for InMemoryDocumentStore     #
###########################################


def test_find_one(store: InMemoryDocumentStore) -> None:
    document = store.find_one("users", {"user_id": "usr-2"})
    assert isinstance(document, Document)
    assert document.to_dict() == {"user_id": "usr-2", "access_token": "a2", "expires_at": 20}


def test_find_one_no_match(store: InMemoryDocumentStore) -> None:
    assert store.find_one("users", {"user_id": "usr-3"}) is None


def test_find_one_unknown_collection(store: InMemoryDocumentStore) -> None:
    assert store.find_one("athletes", {"user_id": "usr-1"}) is None


def test_find_one_empty_filter_matches_first(store: InMemoryDocumentStore) -> None:
    assert store.find_one("users", {}).get_str("user_id") == "usr-1"


def test_upsert_updates_existing(store: InMemoryDocumentStore) -> None:
    assert store.upsert("users", {"user_id": "usr-1"}, {"access_token": "b1"}) == 1
    document = store.find_one("users", {"user_id": "usr-1"})
    assert document.get_str("access_token") == "b1"
    assert document.get_int("expires_at") == 10


def test_upsert_inserts_missing() -> None:
    store = InMemoryDocumentStore()
    assert store.upsert("users", {"user_id": "usr-9"}, {"expires_at": 5}) == 1
    assert store.find_one("users", {"user_id": "usr-9"}).to_dict() == {
        "user_id": "usr-9",
        "expires_at": 5,
    }


def test_upsert_updates_every_match(store: InMemoryDocumentStore) -> None:
    assert store.upsert("users", {}, {"scope": "read"}) == 2
    assert store.find_one("users", {"user_id": "usr-2"}).get_str("scope") == "read"


def test_delete(store: InMemoryDocumentStore) -> None:
    assert store.delete("users", {"user_id": "usr-1"}) == 1
    assert store.find_one("users", {"user_id": "usr-1"}) is None
    assert store.find_one("users", {"user_id": "usr-2"}) is not None


def test_delete_no_match(store: InMemoryDocumentStore) -> None:
    assert store.delete("users", {"user_id": "usr-3"}) == 0
    assert store.delete("athletes", {}) == 0


def test_find_many(store: InMemoryDocumentStore) -> None:
    documents = store.find_many("users", {})
    assert [document.get_str("user_id") for document in documents] == ["usr-1", "usr-2"]


def test_find_many_filters(store: InMemoryDocumentStore) -> None:
    documents = store.find_many("users", {"expires_at": 20})
    assert [document.get_str("user_id") for document in documents] == ["usr-2"]


def test_find_many_unknown_collection(store: InMemoryDocumentStore) -> None:
    assert store.find_many("athletes", {}) == []


def test_insert_one_keeps_given_id() -> None:
    store = InMemoryDocumentStore()
    assert store.insert_one("athletes", {"_id": "ATH_1", "firstname": "Ada"}) == "ATH_1"
    assert store.find_one("athletes", {"_id": "ATH_1"}).get_str("firstname") == "Ada"


def test_insert_one_generates_id() -> None:
    store = InMemoryDocumentStore()
    document = {"firstname": "Ada"}
    new_id = store.insert_one("athletes", document)
    assert len(new_id) == 15
    assert store.find_one("athletes", {"_id": new_id}) is not None
    assert "_id" not in document


def test_insert_one_collision() -> None:
    store = InMemoryDocumentStore()
    store.insert_one("athletes", {"_id": "ATH_1"})
    with pytest.raises(DocumentCollisionError, match=r"collision inserting into athletes"):
        store.insert_one("athletes", {"_id": "ATH_1"})
    assert len(store.find_many("athletes", {})) == 1


def test_insert_many() -> None:
    store = InMemoryDocumentStore()
    ids = store.insert_many("athletes", [{"_id": "ATH_1"}, {"_id": "ATH_2"}])
    assert ids == ["ATH_1", "ATH_2"]
    assert len(store.find_many("athletes", {})) == 2


def test_insert_many_collision_inserts_nothing() -> None:
    store = InMemoryDocumentStore()
    store.insert_one("athletes", {"_id": "ATH_1"})
    with pytest.raises(DocumentCollisionError):
        store.insert_many("athletes", [{"_id": "ATH_2"}, {"_id": "ATH_1"}])
    assert store.find_one("athletes", {"_id": "ATH_2"}) is None


def test_insert_many_duplicate_within_batch() -> None:
    store = InMemoryDocumentStore()
    with pytest.raises(DocumentCollisionError):
        store.insert_many("athletes", [{"_id": "ATH_1"}, {"_id": "ATH_1"}])
    assert store.find_many("athletes", {}) == []


#################################
#     Tests for generate_id     #
#################################


def test_generate_id() -> None:
    new_id = generate_id("USR_", 15)
    assert new_id.startswith("USR_")
    assert len(new_id) == 19
    assert new_id[4:].isalnum()


def test_generate_id_default() -> None:
    assert len(generate_id()) == 15
    assert generate_id() != generate_id()
