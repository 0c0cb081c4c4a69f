"""
Tests for the document store and the record repository.
"""
import pytest
from bson.errors import InvalidBSON
from pymongo.errors import ServerSelectionTimeoutError

from core.exceptions import DatabaseConnectionError, InsertError, QueryError
from repositories import DocumentStore, RecordRepository
from repositories import base as store_module

from fakes import (
    FakeClient,
    FakeCursor,
    InMemoryCollection,
    RecordingMongoClient,
    UnreachableMongoClient,
)


# =============================================================================
# INSERT
# =============================================================================

def test_insert_returns_id(repository, memory_collection):
    result = repository.insert({"full_name": "Ana Silva", "email": "", "cpf": ""})
    assert result.ok
    assert result.inserted_id == str(memory_collection.documents[0]["_id"])


def test_insert_does_not_mutate_callers_document(repository):
    document = {"systolic_pressure": "120", "diastolic_pressure": "80"}
    repository.insert(document)
    assert "_id" not in document


def test_insert_failure_is_returned_not_raised(failing_store):
    result = RecordRepository(store=failing_store).insert({"full_name": "Ana"})
    assert not result.ok
    assert result.inserted_id is None
    assert isinstance(result.error, InsertError)
    assert result.error.context["operation"] == "insert"
    assert "No servers available" in result.error.context["reason"]


# =============================================================================
# FIND
# =============================================================================

def test_find_all_in_insertion_order(repository):
    for value in ("110", "120", "130"):
        repository.insert({"systolic_pressure": value, "diastolic_pressure": "80"})

    result = repository.find_all()
    assert result.ok
    assert [d["systolic_pressure"] for d in result.documents] == ["110", "120", "130"]
    assert len(result) == repository.count() == 3


def test_find_all_failure_is_returned_not_raised(failing_store):
    result = RecordRepository(store=failing_store).find_all()
    assert not result.ok
    assert result.documents == []
    assert isinstance(result.error, QueryError)


def test_find_all_keeps_documents_read_before_failure():
    class FlakyCollection(InMemoryCollection):
        def find(self, filter=None):
            return FakeCursor([dict(d) for d in self.documents], fail_after=2)

    collection = FlakyCollection()
    for name in ("Ana", "Bruno", "Carla"):
        collection.insert_one({"full_name": name})
    repository = RecordRepository(store=DocumentStore(client=FakeClient(), collection=collection))

    result = repository.find_all()
    assert [d["full_name"] for d in result.documents] == ["Ana", "Bruno"]
    assert isinstance(result.error, QueryError)


def test_find_all_undecodable_document_is_returned_not_raised():
    class CorruptCollection(InMemoryCollection):
        def find(self, filter=None):
            return FakeCursor(
                [dict(d) for d in self.documents],
                fail_after=1,
                error=InvalidBSON("objsize too large"),
            )

    collection = CorruptCollection()
    for name in ("Ana", "Bruno"):
        collection.insert_one({"full_name": name})
    repository = RecordRepository(store=DocumentStore(client=FakeClient(), collection=collection))

    result = repository.find_all()
    assert not result.ok
    assert [d["full_name"] for d in result.documents] == ["Ana"]
    assert isinstance(result.error, QueryError)
    assert "objsize too large" in result.error.context["reason"]


# =============================================================================
# DOCUMENT STORE
# =============================================================================

@pytest.fixture
def recording_client(monkeypatch):
    RecordingMongoClient.instances = []
    monkeypatch.setattr(store_module, "MongoClient", RecordingMongoClient)
    return RecordingMongoClient


def test_connect_passes_credentials_when_username_set(recording_client):
    store = DocumentStore.connect(
        "mongodb://db.example:27017", username="clinic", password="secret",
        database="petri_dish", collection="patients",
    )
    client = recording_client.instances[0]
    assert client.uri == "mongodb://db.example:27017"
    assert client.options["username"] == "clinic"
    assert client.options["password"] == "secret"
    assert client.options["serverSelectionTimeoutMS"] == 5000
    assert client.commands == ["ping"]
    assert isinstance(store.collection, InMemoryCollection)


def test_connect_without_username_sends_no_credentials(recording_client):
    DocumentStore.connect("mongodb://db.example:27017")
    client = recording_client.instances[0]
    assert "username" not in client.options
    assert "password" not in client.options


def test_connect_failure_raises_connection_error(monkeypatch):
    UnreachableMongoClient.instances = []
    monkeypatch.setattr(store_module, "MongoClient", UnreachableMongoClient)

    with pytest.raises(DatabaseConnectionError) as exc_info:
        DocumentStore.connect("mongodb://db.example:27017", database="petri_dish", collection="patients")

    assert exc_info.value.status_code == 503
    assert exc_info.value.context["database"] == "petri_dish"
    assert UnreachableMongoClient.instances[0].closed


def test_ping_and_close():
    client = FakeClient()
    store = DocumentStore(client=client, collection=InMemoryCollection())
    store.ping()
    assert client.commands == ["ping"]
    store.close()
    assert client.closed


def test_ping_raises_when_unreachable(failing_store):
    with pytest.raises(ServerSelectionTimeoutError):
        failing_store.ping()


def test_collection_name_prefers_full_name(store):
    assert store.collection_name == "petri_dish.patients"
